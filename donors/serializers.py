from django.db import transaction
from rest_framework import serializers
from accounts.models import User
from . import availability
from .models import Donor


class DonorListSerializer(serializers.ModelSerializer):
    # Mobile client addresses records by _id
    _id = serializers.IntegerField(source='id', read_only=True)
    bloodGroup = serializers.CharField(source='blood_group', read_only=True)
    phoneNumber = serializers.CharField(source='phone_number', read_only=True)
    avgRating = serializers.FloatField(source='avg_rating', read_only=True)
    ratingCount = serializers.IntegerField(source='rating_count', read_only=True)
    nextAvailableAt = serializers.DateTimeField(source='next_available_at', read_only=True)
    isAvailable = serializers.SerializerMethodField()

    class Meta:
        model = Donor
        fields = ('id', '_id', 'name', 'bloodGroup', 'location', 'phoneNumber', 'verified',
                  'avgRating', 'ratingCount', 'nextAvailableAt', 'isAvailable')

    def get_isAvailable(self, obj):
        return availability.is_available(obj, self.context.get('now'))


class DonorDetailSerializer(DonorListSerializer):
    email = serializers.CharField(read_only=True)
    totalDonations = serializers.IntegerField(source='total_donations', read_only=True)
    lastDonationAt = serializers.DateTimeField(source='last_donation_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta(DonorListSerializer.Meta):
        fields = DonorListSerializer.Meta.fields + (
            'email', 'status', 'totalDonations', 'lastDonationAt', 'createdAt')


class AdminDonorSerializer(DonorDetailSerializer):
    statusReason = serializers.CharField(source='status_reason', read_only=True)
    verificationNotes = serializers.CharField(source='verification_notes', read_only=True)

    class Meta(DonorDetailSerializer.Meta):
        fields = DonorDetailSerializer.Meta.fields + ('statusReason', 'verificationNotes')


class DonorUpdateSerializer(serializers.Serializer):
    """Partial update of a donor profile and the contact fields kept on its user"""
    name = serializers.CharField(max_length=200, required=False)
    location = serializers.CharField(max_length=200, required=False)
    phoneNumber = serializers.CharField(max_length=20, required=False)
    email = serializers.EmailField(required=False)
    bloodGroup = serializers.ChoiceField(choices=Donor.BLOOD_GROUP_CHOICES, required=False)

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exclude(pk=self.instance.user_id).exists():
            raise serializers.ValidationError('An account with this email already exists.')
        return value

    def validate_phoneNumber(self, value):
        value = value.strip()
        if User.objects.filter(phone_number=value).exclude(pk=self.instance.user_id).exists():
            raise serializers.ValidationError('An account with this phone number already exists.')
        return value

    @transaction.atomic
    def update(self, instance, validated_data):
        donor_fields = {'name': 'name', 'location': 'location', 'bloodGroup': 'blood_group'}
        for key, field in donor_fields.items():
            if key in validated_data:
                setattr(instance, field, validated_data[key])
        instance.save()

        user = instance.user
        if 'phoneNumber' in validated_data:
            user.phone_number = validated_data['phoneNumber']
        if 'email' in validated_data:
            user.email = validated_data['email']
            user.username = validated_data['email']
        user.save()
        return instance


class DonorProfileUpdateSerializer(DonorUpdateSerializer):
    """Fields a donor may change on their own profile"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields.pop('email')
        self.fields.pop('bloodGroup')
