from django.contrib import admin
from .models import BloodRequest


@admin.register(BloodRequest)
class BloodRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'requester', 'donor', 'status', 'rating', 'created_at', 'updated_at')
    list_filter = ('status', 'created_at')
    search_fields = ('requester__name', 'donor__name', 'note')
    readonly_fields = ('requester', 'donor', 'status', 'note', 'rating', 'created_at', 'updated_at')

    def has_add_permission(self, request):
        return False  # Requests are created through the API only

    def has_delete_permission(self, request, obj=None):
        return False  # Donation history is never deleted
