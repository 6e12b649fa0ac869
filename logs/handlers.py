import logging
from django.db import connection


class DatabaseLogHandler(logging.Handler):
    """Persist log records as LogEntry rows."""

    def emit(self, record):
        try:
            # Nothing to write to before the first query opens a connection
            if connection.connection is None:
                return

            from .models import LogEntry

            LogEntry.objects.create(
                level=record.levelname,
                logger_name=record.name[:100],
                message=self.format(record),
                user_id=getattr(record, 'user_id', None),
                ip_address=getattr(record, 'ip_address', None),
                method=getattr(record, 'method', ''),
                request_path=getattr(record, 'request_path', '')[:500],
                status_code=getattr(record, 'status_code', None),
            )
        except Exception:
            self.handleError(record)
