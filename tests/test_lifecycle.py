import threading
from datetime import timedelta
from unittest import mock

import pytest
from django.db import connection
from django.utils import timezone

from donation_requests import lifecycle
from donation_requests.exceptions import (
    NotFound, Forbidden, InvalidState, InvalidRating,
    DonorUnavailable, DonorSuspended, InvalidTarget,
)
from donation_requests.models import BloodRequest


@pytest.fixture
def pending(requester, donor):
    return lifecycle.create(requester.id, donor.id, note='Surgery on Friday')


def test_create_starts_pending(requester, donor):
    blood_request = lifecycle.create(requester.id, donor.id, note='Urgent')

    assert blood_request.status == BloodRequest.STATUS_PENDING
    assert blood_request.requester_id == requester.id
    assert blood_request.donor_id == donor.id
    assert blood_request.note == 'Urgent'
    assert blood_request.rating is None


@pytest.mark.parametrize('donor_id', [1, 7, 12345])
def test_create_self_request_is_invalid_target(db, donor_id):
    with pytest.raises(InvalidTarget):
        lifecycle.create(donor_id, donor_id)


def test_create_self_request_for_real_donor(donor):
    with pytest.raises(InvalidTarget):
        lifecycle.create(donor.id, donor.id)
    assert not BloodRequest.objects.exists()


def test_create_unknown_donor(requester):
    with pytest.raises(NotFound):
        lifecycle.create(requester.id, requester.id + 1000)


def test_create_rejected_while_donor_cooling_down(requester, donor):
    now = timezone.now()
    donor.next_available_at = now + timedelta(days=10)
    donor.save()

    with pytest.raises(DonorUnavailable):
        lifecycle.create(requester.id, donor.id, now=now)


def test_create_allowed_once_cooldown_expired(requester, donor):
    now = timezone.now()
    donor.next_available_at = now - timedelta(minutes=1)
    donor.save()

    assert lifecycle.create(requester.id, donor.id, now=now).is_pending


def test_create_rejected_for_suspended_donor(requester, donor):
    donor.status = 'suspended'
    donor.save()

    with pytest.raises(DonorSuspended):
        lifecycle.create(requester.id, donor.id)


def test_reject_by_donor_stores_note_and_stamps_update(pending, donor):
    later = pending.updated_at + timedelta(hours=1)

    rejected = lifecycle.reject(pending.id, donor.id, note='busy', now=later)

    assert rejected.status == BloodRequest.STATUS_REJECTED
    assert rejected.note == 'busy'
    assert rejected.updated_at == later


def test_reject_without_note_keeps_original_note(pending, donor):
    rejected = lifecycle.reject(pending.id, donor.id)
    assert rejected.note == 'Surgery on Friday'


def test_reject_by_requester_is_forbidden(pending, requester):
    with pytest.raises(Forbidden):
        lifecycle.reject(pending.id, requester.id)
    pending.refresh_from_db()
    assert pending.is_pending


def test_cancel_by_donor_is_forbidden(pending, donor):
    with pytest.raises(Forbidden):
        lifecycle.cancel(pending.id, donor.id)


def test_complete_by_donor_is_forbidden(pending, donor):
    with pytest.raises(Forbidden):
        lifecycle.complete(pending.id, donor.id, rating=5)


def test_unknown_request_is_not_found(requester):
    for operation in (lifecycle.reject, lifecycle.cancel, lifecycle.complete):
        with pytest.raises(NotFound):
            operation(999999, requester.id)


def test_cancel_by_requester(pending, requester):
    cancelled = lifecycle.cancel(pending.id, requester.id, note='Found blood elsewhere')

    assert cancelled.status == BloodRequest.STATUS_CANCELLED
    assert cancelled.note == 'Found blood elsewhere'


def test_reject_then_cancel_is_invalid_state(requester, donor):
    blood_request = lifecycle.create(requester.id, donor.id)
    assert blood_request.status == BloodRequest.STATUS_PENDING

    lifecycle.reject(blood_request.id, donor.id, note='busy')

    with pytest.raises(InvalidState):
        lifecycle.cancel(blood_request.id, requester.id)

    blood_request.refresh_from_db()
    assert blood_request.status == BloodRequest.STATUS_REJECTED
    assert blood_request.note == 'busy'


@pytest.mark.parametrize('first', ['reject', 'cancel', 'complete'])
def test_terminal_states_refuse_every_transition(pending, requester, donor, first):
    {
        'reject': lambda: lifecycle.reject(pending.id, donor.id),
        'cancel': lambda: lifecycle.cancel(pending.id, requester.id),
        'complete': lambda: lifecycle.complete(pending.id, requester.id, rating=3),
    }[first]()
    pending.refresh_from_db()
    terminal_status = pending.status

    with pytest.raises(InvalidState):
        lifecycle.reject(pending.id, donor.id)
    with pytest.raises(InvalidState):
        lifecycle.cancel(pending.id, requester.id)
    with pytest.raises(InvalidState):
        lifecycle.complete(pending.id, requester.id, rating=5)

    pending.refresh_from_db()
    assert pending.status == terminal_status


def test_losing_a_race_reports_invalid_state(pending, requester, donor):
    # The cancel below reads the request while it is still pending
    stale = BloodRequest.objects.get(pk=pending.pk)
    lifecycle.reject(pending.id, donor.id, note='busy')

    with mock.patch.object(lifecycle, '_load_request', return_value=stale):
        with pytest.raises(InvalidState):
            lifecycle.cancel(pending.id, requester.id)

    pending.refresh_from_db()
    assert pending.status == BloodRequest.STATUS_REJECTED


def test_losing_a_completion_race_leaves_donor_untouched(pending, requester, donor):
    stale = BloodRequest.objects.get(pk=pending.pk)
    lifecycle.cancel(pending.id, requester.id)

    with mock.patch.object(lifecycle, '_load_request', return_value=stale):
        with pytest.raises(InvalidState):
            lifecycle.complete(pending.id, requester.id, rating=5)

    donor.refresh_from_db()
    assert donor.rating_count == 0
    assert donor.next_available_at is None
    assert donor.total_donations == 0


@pytest.mark.parametrize('rating', [0, 6, -1, 10])
def test_complete_rejects_out_of_range_rating(pending, requester, rating):
    with pytest.raises(InvalidRating):
        lifecycle.complete(pending.id, requester.id, rating=rating)

    pending.refresh_from_db()
    assert pending.is_pending


@pytest.mark.parametrize('rating', [True, 4.5, '4'])
def test_complete_rejects_non_integer_rating(pending, requester, rating):
    with pytest.raises(InvalidRating):
        lifecycle.complete(pending.id, requester.id, rating=rating)


@pytest.mark.parametrize('rating', [1, 2, 3, 4, 5])
def test_complete_accepts_ratings_one_to_five(pending, requester, donor, rating):
    completed = lifecycle.complete(pending.id, requester.id, rating=rating)

    assert completed.status == BloodRequest.STATUS_COMPLETED
    assert completed.rating == rating
    donor.refresh_from_db()
    assert donor.rating_count == 1
    assert donor.avg_rating == rating


def test_complete_updates_running_average(requester, donor):
    donor.rating_sum = 5
    donor.rating_count = 1
    donor.save()
    blood_request = lifecycle.create(requester.id, donor.id)

    lifecycle.complete(blood_request.id, requester.id, rating=4)

    donor.refresh_from_db()
    assert donor.avg_rating == 4.5
    assert donor.rating_count == 2


def test_complete_starts_cooldown(pending, requester, donor):
    completed_at = timezone.now()

    lifecycle.complete(pending.id, requester.id, now=completed_at)

    donor.refresh_from_db()
    assert donor.next_available_at == completed_at + timedelta(days=90)
    assert donor.last_donation_at == completed_at
    assert donor.total_donations == 1
    # No rating given, aggregate untouched
    assert donor.rating_count == 0
    assert donor.avg_rating is None


def test_completed_donor_cannot_receive_new_requests(make_donor, requester, donor):
    first = lifecycle.create(requester.id, donor.id)
    lifecycle.complete(first.id, requester.id, rating=5)

    other = make_donor(name='Omar Other')
    with pytest.raises(DonorUnavailable):
        lifecycle.create(other.id, donor.id)


@pytest.mark.django_db(transaction=True)
def test_concurrent_reject_and_cancel_one_wins(requester, donor):
    blood_request = lifecycle.create(requester.id, donor.id)
    barrier = threading.Barrier(2)
    results = []

    def run(operation, actor_id):
        try:
            barrier.wait()
            operation(blood_request.id, actor_id)
            results.append('ok')
        except InvalidState:
            results.append('invalid')
        finally:
            connection.close()

    threads = [
        threading.Thread(target=run, args=(lifecycle.reject, donor.id)),
        threading.Thread(target=run, args=(lifecycle.cancel, requester.id)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(results) == ['invalid', 'ok']
    blood_request.refresh_from_db()
    assert blood_request.status in (BloodRequest.STATUS_REJECTED, BloodRequest.STATUS_CANCELLED)
