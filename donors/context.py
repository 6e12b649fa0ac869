from .models import Donor


def get_request_donor(request):
    """Donor profile of the authenticated user, resolved once per request.

    Raises ``Donor.DoesNotExist`` for accounts without a donor profile.
    """
    cached = getattr(request, '_donor', None)
    if cached is not None:
        return cached
    donor = Donor.objects.select_related('user').get(user=request.user)
    request._donor = donor
    return donor
