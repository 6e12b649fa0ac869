from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone
from datetime import timedelta
from logs.models import LogEntry


class Command(BaseCommand):
    help = 'Delete log entries older than the retention window'

    def add_arguments(self, parser):
        parser.add_argument(
            '--days',
            type=int,
            default=settings.LOG_RETENTION_DAYS,
            help=f'Delete logs older than this many days (default: {settings.LOG_RETENTION_DAYS})'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only report how many entries would be deleted'
        )

    def handle(self, *args, **options):
        days = options['days']
        cutoff_date = timezone.now() - timedelta(days=days)
        old_entries = LogEntry.objects.filter(timestamp__lt=cutoff_date)

        if options['dry_run']:
            self.stdout.write(f"{old_entries.count()} log entries older than {days} days would be deleted")
            return

        deleted_count, _ = old_entries.delete()

        self.stdout.write(
            self.style.SUCCESS(f"Deleted {deleted_count} log entries older than {days} days")
        )
