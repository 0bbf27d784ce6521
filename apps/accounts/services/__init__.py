"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    InvalidSearchQueryError,
    InvalidFriendRequestError,
    AlreadyFriendsError,
)
from .credentials import register_user, authenticate_user
from .user_directory import search_users
from .friend_management import add_friend, get_friends

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UserNotFoundError',
    'InvalidSearchQueryError',
    'InvalidFriendRequestError',
    'AlreadyFriendsError',
    # Services
    'register_user',
    'authenticate_user',
    'search_users',
    'add_friend',
    'get_friends',
]
