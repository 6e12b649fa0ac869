from rest_framework import status


class RequestLifecycleError(Exception):
    """Caller-correctable failure of a blood request operation."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = 'error'
    default_message = 'Request could not be processed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_response_data(self):
        return {'message': self.message, 'code': self.code}


class NotFound(RequestLifecycleError):
    status_code = status.HTTP_404_NOT_FOUND
    code = 'not_found'
    default_message = 'Request not found'


class Forbidden(RequestLifecycleError):
    status_code = status.HTTP_403_FORBIDDEN
    code = 'forbidden'
    default_message = 'You are not allowed to act on this request'


class InvalidState(RequestLifecycleError):
    status_code = status.HTTP_409_CONFLICT
    code = 'invalid_state'
    default_message = 'Request is no longer pending'


class InvalidRating(RequestLifecycleError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = 'invalid_rating'
    default_message = 'Rating must be an integer between 1 and 5'


class DonorUnavailable(RequestLifecycleError):
    status_code = status.HTTP_409_CONFLICT
    code = 'donor_unavailable'
    default_message = 'Donor is not available for new requests yet'


class DonorSuspended(RequestLifecycleError):
    status_code = status.HTTP_409_CONFLICT
    code = 'donor_suspended'
    default_message = 'Donor account is suspended'


class InvalidTarget(RequestLifecycleError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = 'invalid_target'
    default_message = 'You cannot send a blood request to yourself'
