import itertools

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import User
from donors.models import Donor

PASSWORD = 'Bl00d-Donor-Pass!'


@pytest.fixture
def make_donor(db):
    sequence = itertools.count(1)

    def _make_donor(name=None, blood_group='O+', location='Lahore', **fields):
        n = next(sequence)
        user = User.objects.create_user(
            username=f'donor{n}@example.com',
            email=f'donor{n}@example.com',
            password=PASSWORD,
            phone_number=f'+923000000{n:03d}',
        )
        return Donor.objects.create(
            user=user,
            name=name or f'Donor {n}',
            blood_group=blood_group,
            location=location,
            **fields
        )

    return _make_donor


@pytest.fixture
def requester(make_donor):
    return make_donor(name='Rania Requester', blood_group='B+')


@pytest.fixture
def donor(make_donor):
    return make_donor(name='Daniyal Donor', blood_group='A+', location='Karachi')


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username='admin',
        email='admin@example.com',
        password=PASSWORD,
        user_type='admin',
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def _client_for(user):
        client = APIClient()
        token = RefreshToken.for_user(user).access_token
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        return client

    return _client_for
