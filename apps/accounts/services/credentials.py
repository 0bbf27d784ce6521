"""
Credential services: account registration and login.

Both operate on the username handle. Login failures never reveal whether
the handle exists; unknown handles and wrong passwords get the same error
and take comparable time.
"""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import (
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
)

User = get_user_model()

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


@transaction.atomic
def register_user(
    *,
    username: str,
    password: str,
    name: str
) -> User:
    """
    Register a new user.

    Args:
        username: Unique handle used to log in
        password: User's password (will be hashed)
        name: Display name shown to other members

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the username is taken or fields are missing
    """
    if not username or not password or not name:
        raise UserRegistrationError("Username, password and name are required")

    if User.objects.filter(username=username).exists():
        raise UserRegistrationError("Username already exists")

    try:
        user = User.objects.create_user(
            username=username,
            password=password,
            name=name
        )
    except IntegrityError:
        # Concurrent registration with the same handle
        raise UserRegistrationError("Username already exists")

    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return user


@transaction.atomic
def authenticate_user(*, username: str, password: str) -> User:
    """
    Check a username/password pair and stamp ``last_login``.

    The user row is locked while ``last_login`` is written. For an unknown
    handle the password is still hashed once so the failure costs about as
    much as a wrong password.

    Raises:
        InvalidCredentialsError: Unknown handle or wrong password
        InactiveAccountError: Correct password on a deactivated account
    """
    user = User.objects.select_for_update().filter(username=username).first()

    if user is None:
        User().set_password(password)
        logger.warning("Login failed for unknown username %r", username)
        raise InvalidCredentialsError(INVALID_CREDENTIALS)

    if not user.check_password(password):
        logger.warning("Login failed for user %s: wrong password", user.id)
        raise InvalidCredentialsError(INVALID_CREDENTIALS)

    if not user.is_active:
        logger.warning("Login refused for deactivated user %s", user.id)
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    logger.info("User %s logged in", user.id)
    return user
