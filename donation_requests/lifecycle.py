"""Blood request state machine.

A request starts ``pending`` and leaves it exactly once, into a terminal
state. Every transition is a conditional UPDATE keyed on the pending status,
so of two racing transitions only one changes the row and the other gets
``InvalidState``.

``create`` reads the donor's availability before inserting; a completion that
lands between the two is tolerated and the new request simply stays pending.
"""
import logging

from django.db import transaction
from django.utils import timezone

from donors import availability
from donors.models import Donor
from donors.ratings import record_rating
from .exceptions import (
    NotFound, Forbidden, InvalidState, InvalidRating,
    DonorUnavailable, DonorSuspended, InvalidTarget,
)
from .models import BloodRequest

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def create(requester_id, donor_id, note=None, now=None):
    if requester_id == donor_id:
        raise InvalidTarget()

    now = now or timezone.now()

    if not Donor.objects.filter(pk=requester_id).exists():
        raise NotFound('Requester not found')
    try:
        donor = Donor.objects.get(pk=donor_id)
    except Donor.DoesNotExist:
        raise NotFound('Donor not found')

    if not availability.is_available(donor, now):
        raise DonorUnavailable(
            f"Donor is not available for new requests until {donor.next_available_at.isoformat()}"
        )
    if donor.status != 'active':
        raise DonorSuspended()

    blood_request = BloodRequest.objects.create(
        requester_id=requester_id,
        donor=donor,
        note=note or '',
    )
    logger.info(f"Blood request {blood_request.id} created: donor {requester_id} -> donor {donor_id}")
    return blood_request


def reject(request_id, acting_donor_id, note=None, now=None):
    blood_request = _load_request(request_id)
    if blood_request.donor_id != acting_donor_id:
        raise Forbidden('Only the requested donor can reject this request')

    blood_request = _transition(blood_request, BloodRequest.STATUS_REJECTED, now, note=note)
    logger.info(f"Blood request {request_id} rejected by donor {acting_donor_id}")
    return blood_request


def cancel(request_id, acting_requester_id, note=None, now=None):
    blood_request = _load_request(request_id)
    if blood_request.requester_id != acting_requester_id:
        raise Forbidden('Only the requester can cancel this request')

    blood_request = _transition(blood_request, BloodRequest.STATUS_CANCELLED, now, note=note)
    logger.info(f"Blood request {request_id} cancelled by requester {acting_requester_id}")
    return blood_request


def complete(request_id, acting_requester_id, rating=None, now=None):
    """Mark a donation as done, rate the donor and start their cooldown.

    The status write, the rating aggregate and the donor's cooldown commit
    together or not at all.
    """
    blood_request = _load_request(request_id)
    if blood_request.requester_id != acting_requester_id:
        raise Forbidden('Only the requester can complete this request')
    if not blood_request.is_pending:
        raise InvalidState()
    validate_rating(rating)

    now = now or timezone.now()
    with transaction.atomic():
        blood_request = _transition(blood_request, BloodRequest.STATUS_COMPLETED, now, rating=rating)
        if rating is not None:
            record_rating(blood_request.donor_id, rating)
        availability.on_donation_completed(blood_request.donor_id, now)

    logger.info(f"Blood request {request_id} completed with rating {rating}")
    return blood_request


def validate_rating(rating):
    if rating is None:
        return
    # bool is an int subclass and never a valid rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRating()
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRating()


def _load_request(request_id):
    try:
        return BloodRequest.objects.select_related('requester', 'donor').get(pk=request_id)
    except BloodRequest.DoesNotExist:
        raise NotFound()


def _transition(blood_request, new_status, now=None, note=None, rating=None):
    if not blood_request.is_pending:
        raise InvalidState()

    changes = {'status': new_status, 'updated_at': now or timezone.now()}
    if note is not None:
        changes['note'] = note
    if rating is not None:
        changes['rating'] = rating

    updated = BloodRequest.objects.filter(
        pk=blood_request.pk,
        status=BloodRequest.STATUS_PENDING,
    ).update(**changes)
    if not updated:
        logger.warning(f"Blood request {blood_request.pk} lost a race to another transition")
        raise InvalidState()

    blood_request.refresh_from_db()
    return blood_request
