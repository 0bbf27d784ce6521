"""Fixtures shared by the groups and orders test suites."""

import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.services import create_group


def auth_client(user):
    """Return an API client authenticated as ``user``."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def amy(db):
    """Create and return the group creator."""
    return User.objects.create_user(username='amy', password='TestPass123!', name='Amy')


@pytest.fixture
def bob(db):
    """Create and return a member."""
    return User.objects.create_user(username='bob', password='TestPass123!', name='Bob')


@pytest.fixture
def sam(db):
    """Create and return a member."""
    return User.objects.create_user(username='sam', password='TestPass123!', name='Sam')


@pytest.fixture
def outsider(db):
    """Create and return a user not in any group."""
    return User.objects.create_user(username='david', password='TestPass123!', name='David')


@pytest.fixture
def window():
    start = timezone.now()
    return start, start + timedelta(hours=2)


@pytest.fixture
def kfc(amy, bob, sam, window):
    """KFC group run by Amy with Bob and Sam invited and Amy's order paid."""
    start, end = window
    return create_group(
        creator=amy,
        title='KFC',
        start_time=start,
        end_time=end,
        products=[
            {'name': 'Hamburger', 'price': 100},
            {'name': 'Fries', 'price': 40},
        ],
        invited_user_ids=[bob.id, sam.id],
        initial_order=[
            {'name': 'Hamburger', 'quantity': 1},
            {'name': 'Fries', 'quantity': 4},
        ],
    )


@pytest.fixture
def amy_client(amy):
    return auth_client(amy)


@pytest.fixture
def bob_client(bob):
    return auth_client(bob)


@pytest.fixture
def outsider_client(outsider):
    return auth_client(outsider)
