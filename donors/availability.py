"""Cooldown gate between completed donations.

A donor whose ``next_available_at`` lies in the future cannot receive new
blood requests. The window is the ``DONATION_COOLDOWN`` setting, given as
``relativedelta`` keyword arguments so it can be expressed in days or months.
"""
import logging

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.db.models import F
from django.utils import timezone

from .models import Donor

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN = {'days': 90}


def cooldown():
    return relativedelta(**getattr(settings, 'DONATION_COOLDOWN', DEFAULT_COOLDOWN))


def next_available_after(completed_at):
    return completed_at + cooldown()


def is_available(donor, now=None):
    """True iff the donor has no cooldown or it has already expired at ``now``.

    ``donor`` is a loaded ``Donor`` or its primary key.
    """
    if not isinstance(donor, Donor):
        donor = Donor.objects.only('next_available_at').get(pk=donor)
    return donor.is_available_at(now)


def on_donation_completed(donor_id, completed_at):
    """Start the donor's cooldown and bump their donation counters.

    Runs as one UPDATE so concurrent completions for the same donor never lose
    a counter increment. Returns the new ``next_available_at``.
    """
    next_available_at = next_available_after(completed_at)
    Donor.objects.filter(pk=donor_id).update(
        next_available_at=next_available_at,
        last_donation_at=completed_at,
        total_donations=F('total_donations') + 1,
        updated_at=timezone.now(),
    )
    logger.info(f"Donor {donor_id} unavailable until {next_available_at.isoformat()}")
    return next_available_at
