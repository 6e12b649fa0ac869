from django.contrib import admin
from .models import LogEntry


@admin.register(LogEntry)
class LogEntryAdmin(admin.ModelAdmin):
    list_display = ('timestamp', 'level', 'logger_name', 'method', 'request_path', 'status_code', 'user_id')
    list_filter = ('level', 'logger_name', 'timestamp')
    search_fields = ('message', 'request_path')
    readonly_fields = ('timestamp',)
    list_per_page = 50

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return True
