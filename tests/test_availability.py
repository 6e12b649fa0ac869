from datetime import timedelta

from dateutil.relativedelta import relativedelta
from django.utils import timezone

from donors import availability
from donors.models import Donor


def test_donor_without_cooldown_is_available(donor):
    assert availability.is_available(donor.id)
    assert donor.is_available_at(timezone.now())


def test_cooldown_blocks_until_it_expires(donor):
    completed_at = timezone.now()

    next_available_at = availability.on_donation_completed(donor.id, completed_at)

    assert next_available_at == completed_at + timedelta(days=90)
    assert not availability.is_available(donor.id, now=completed_at + timedelta(seconds=1))
    assert not availability.is_available(donor.id, now=next_available_at - timedelta(seconds=1))
    assert availability.is_available(donor.id, now=next_available_at)
    assert availability.is_available(donor.id, now=next_available_at + timedelta(days=1))


def test_completion_bumps_donation_counters(donor):
    completed_at = timezone.now()

    availability.on_donation_completed(donor.id, completed_at)
    availability.on_donation_completed(donor.id, completed_at)

    donor.refresh_from_db()
    assert donor.total_donations == 2
    assert donor.last_donation_at == completed_at


def test_cooldown_follows_settings(settings, donor):
    settings.DONATION_COOLDOWN = {'months': 3}
    completed_at = timezone.now()

    next_available_at = availability.on_donation_completed(donor.id, completed_at)

    assert next_available_at == completed_at + relativedelta(months=3)


def test_available_queryset_skips_cooling_and_suspended(make_donor):
    now = timezone.now()
    ready = make_donor(name='Ready')
    expired = make_donor(name='Expired', next_available_at=now - timedelta(days=1))
    make_donor(name='Cooling', next_available_at=now + timedelta(days=1))
    make_donor(name='Suspended', status='suspended')

    names = set(Donor.objects.available(now).values_list('name', flat=True))

    assert names == {ready.name, expired.name}


def test_gate_accepts_loaded_donor(donor):
    now = timezone.now()
    donor.next_available_at = now + timedelta(days=3)

    # Unsaved cooldown is read from the instance, not the database
    assert not availability.is_available(donor, now)
    assert availability.is_available(donor.id, now)
    assert availability.is_available(donor, now + timedelta(days=3))
