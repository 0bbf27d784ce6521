"""
Friend management service.

Friendship is symmetric and stored as two directed edges. Friends are only
used to suggest invite candidates; they do not restrict who can be invited.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import Friendship

from .exceptions import (
    UserNotFoundError,
    InvalidFriendRequestError,
    AlreadyFriendsError,
)

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def add_friend(*, user: User, friend_id: int) -> User:
    """
    Make two users friends.

    Both directions (user -> friend, friend -> user) are created in the
    same transaction.

    Args:
        user: User sending the request
        friend_id: ID of the user to befriend

    Returns:
        The befriended User

    Raises:
        InvalidFriendRequestError: If friend_id is missing or equals user's id
        UserNotFoundError: If the target user doesn't exist
        AlreadyFriendsError: If they are already friends
    """
    if not friend_id:
        raise InvalidFriendRequestError("friend_id is required")

    if friend_id == user.id:
        raise InvalidFriendRequestError("Cannot add self as friend")

    try:
        friend = User.objects.get(id=friend_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {friend_id} not found")

    if Friendship.objects.filter(from_user=user, to_user=friend).exists():
        raise AlreadyFriendsError("Already friends")

    try:
        Friendship.objects.bulk_create([
            Friendship(from_user=user, to_user=friend),
            Friendship(from_user=friend, to_user=user),
        ])
    except IntegrityError:
        # The other side added us concurrently
        raise AlreadyFriendsError("Already friends")

    logger.info("Users %s and %s are now friends", user.id, friend.id)
    return friend


def get_friends(*, user: User) -> QuerySet:
    """
    Get a user's friends.

    Args:
        user: User whose friends to list

    Returns:
        QuerySet of User instances ordered by display name
    """
    return (
        User.objects
        .filter(friend_of__from_user=user)
        .order_by('name', 'username')
    )
