import logging

logger = logging.getLogger(__name__)


def get_client_ip(request):
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


class LoggingMiddleware:
    """Log one line per API request, after DRF has resolved the user."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if request.path.startswith('/api/'):
            user = getattr(request, 'user', None)
            user_id = user.id if user is not None and user.is_authenticated else None
            user_info = f"user_id:{user_id}" if user_id else "anonymous"
            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                f"{request.method} {request.path} - {response.status_code} - {user_info}",
                extra={
                    'user_id': user_id,
                    'ip_address': get_client_ip(request),
                    'method': request.method,
                    'request_path': request.path,
                    'status_code': response.status_code,
                }
            )
        return response
