"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError):
    """Raised when user registration fails."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class InvalidSearchQueryError(AccountsServiceError):
    """Raised when a user search is attempted without a query."""
    pass


class InvalidFriendRequestError(AccountsServiceError):
    """Raised when a friend request is malformed (missing id, self-friending)."""
    pass


class AlreadyFriendsError(AccountsServiceError):
    """Raised when the two users are already friends."""
    pass
