import logging

from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """Render DRF errors as ``{message, code}`` like the rest of the API."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    code = getattr(exc, 'default_code', 'error')
    if isinstance(data, dict) and 'detail' in data:
        message = str(data['detail'])
        code = getattr(data['detail'], 'code', code)
        response.data = {'message': message, 'code': code}
    else:
        # Field validation errors keep their per-field details
        response.data = {'message': 'Invalid request', 'code': code, 'details': data}

    logger.warning(f"API error {response.status_code} on {context['request'].path}: {response.data['message']}")
    return response
