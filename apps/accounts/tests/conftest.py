import pytest
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        username='amy',
        password='TestPass123!',
        name='Amy',
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        username='bob',
        password='OtherPass123!',
        name='Bob',
    )


@pytest.fixture
def third_user(db):
    """Create and return a third user."""
    return User.objects.create_user(
        username='sam',
        password='TestPass123!',
        name='Samantha',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        username='ghost',
        password='TestPass123!',
        name='Ghost',
        is_active=False,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client
