import django_filters
from django.db.models import Q
from .models import Donor


class DonorSearchFilter(django_filters.FilterSet):
    location = django_filters.CharFilter(field_name='location', lookup_expr='icontains')
    bloodGroup = django_filters.ChoiceFilter(field_name='blood_group', choices=Donor.BLOOD_GROUP_CHOICES)
    includeUnavailable = django_filters.BooleanFilter(method='filter_include_unavailable')

    class Meta:
        model = Donor
        fields = ['location']

    def __init__(self, data=None, *args, **kwargs):
        # A missing includeUnavailable means false
        if data is not None and not data.get('includeUnavailable'):
            data = data.copy()
            data['includeUnavailable'] = 'false'
        super().__init__(data, *args, **kwargs)

    def filter_include_unavailable(self, queryset, name, value):
        return queryset if value else queryset.available()


class AdminDonorFilter(django_filters.FilterSet):
    query = django_filters.CharFilter(method='filter_query')
    bloodGroup = django_filters.ChoiceFilter(field_name='blood_group', choices=Donor.BLOOD_GROUP_CHOICES)
    status = django_filters.ChoiceFilter(choices=Donor.STATUS_CHOICES)
    location = django_filters.CharFilter(lookup_expr='icontains')

    class Meta:
        model = Donor
        fields = ['status', 'location']

    def filter_query(self, queryset, name, value):
        """Free-text match on name, email and phone number"""
        return queryset.filter(
            Q(name__icontains=value) |
            Q(user__email__icontains=value) |
            Q(user__phone_number__icontains=value)
        )
