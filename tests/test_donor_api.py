from datetime import timedelta

import pytest
from django.utils import timezone


@pytest.fixture
def searcher(make_donor):
    return make_donor(name='Sara Searcher', location='Lahore')


@pytest.fixture
def searcher_client(client_for, searcher):
    return client_for(searcher.user)


def test_profile_get(client_for, donor):
    response = client_for(donor.user).get('/api/donor/profile')

    assert response.status_code == 200
    body = response.json()
    assert body['name'] == donor.name
    assert body['email'] == donor.user.email
    assert body['bloodGroup'] == 'A+'
    assert body['status'] == 'active'
    assert body['isAvailable'] is True
    assert body['avgRating'] is None


def test_profile_update(client_for, donor):
    response = client_for(donor.user).put('/api/donor/profile', {
        'name': 'Daniyal K.',
        'location': 'Islamabad',
        'phoneNumber': '+923111111111',
    })

    assert response.status_code == 200
    donor.refresh_from_db()
    donor.user.refresh_from_db()
    assert donor.name == 'Daniyal K.'
    assert donor.location == 'Islamabad'
    assert donor.user.phone_number == '+923111111111'


def test_profile_update_ignores_blood_group(client_for, donor):
    client_for(donor.user).put('/api/donor/profile', {'bloodGroup': 'O-'})

    donor.refresh_from_db()
    assert donor.blood_group == 'A+'


def test_profile_update_rejects_taken_phone(client_for, donor, make_donor):
    other = make_donor()

    response = client_for(donor.user).put('/api/donor/profile', {'phoneNumber': other.user.phone_number})

    assert response.status_code == 400


def test_profile_for_account_without_donor(client_for, admin_user):
    assert client_for(admin_user).get('/api/donor/profile').status_code == 404


def test_search_by_location_and_blood_group(searcher_client, make_donor):
    match = make_donor(name='Match', blood_group='A+', location='Lahore Cantt')
    make_donor(name='Wrong group', blood_group='B-', location='Lahore')
    make_donor(name='Wrong city', blood_group='A+', location='Multan')

    response = searcher_client.get('/api/donor/search', {'location': 'lahore', 'bloodGroup': 'A+'})

    assert response.status_code == 200
    assert [d['id'] for d in response.json()] == [match.id]


def test_search_excludes_self_suspended_and_cooling(searcher_client, make_donor):
    visible = make_donor(name='Visible')
    make_donor(name='Suspended', status='suspended')
    cooling = make_donor(name='Cooling', next_available_at=timezone.now() + timedelta(days=20))

    names = [d['name'] for d in searcher_client.get('/api/donor/search', {'location': 'Lahore'}).json()]
    assert names == [visible.name]

    response = searcher_client.get('/api/donor/search', {'location': 'Lahore', 'includeUnavailable': 'true'})
    results = {d['name']: d for d in response.json()}
    assert set(results) == {visible.name, cooling.name}
    assert results[cooling.name]['isAvailable'] is False
    assert results[cooling.name]['nextAvailableAt'] is not None


def test_search_reports_rating(searcher_client, make_donor):
    make_donor(name='Rated', rating_sum=9, rating_count=2)

    result = searcher_client.get('/api/donor/search', {'location': 'Lahore'}).json()[0]

    assert result['avgRating'] == 4.5
    assert result['ratingCount'] == 2


def test_search_with_unknown_blood_group(searcher_client):
    response = searcher_client.get('/api/donor/search', {'bloodGroup': 'C+'})
    assert response.status_code == 400


def test_profile_carries_client_id(client_for, donor):
    body = client_for(donor.user).get('/api/donor/profile').json()
    assert body['_id'] == donor.id


def test_search_explicit_include_unavailable_false(searcher_client, make_donor):
    visible = make_donor(name='Visible')
    make_donor(name='Cooling', next_available_at=timezone.now() + timedelta(days=20))

    response = searcher_client.get('/api/donor/search', {'location': 'Lahore', 'includeUnavailable': 'false'})

    assert [d['name'] for d in response.json()] == [visible.name]
