from django.contrib import admin
from .models import Donor


@admin.register(Donor)
class DonorAdmin(admin.ModelAdmin):
    list_display = ('name', 'blood_group', 'location', 'verified', 'status', 'next_available_at', 'rating_count')
    list_filter = ('blood_group', 'verified', 'status')
    search_fields = ('name', 'user__email', 'user__phone_number', 'location')
    list_editable = ('verified', 'status')
    readonly_fields = ('rating_sum', 'rating_count', 'total_donations', 'last_donation_at')
