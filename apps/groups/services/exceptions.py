"""
Domain-specific exceptions for groups app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class GroupsServiceError(Exception):
    """Base exception for all groups service errors."""
    pass


class GroupNotFoundError(GroupsServiceError):
    """Raised when a group does not exist."""
    pass


class InsufficientPermissionsError(GroupsServiceError):
    """Raised when a user other than the creator attempts a creator-only action."""
    pass


class InvalidGroupDataError(GroupsServiceError):
    """Raised when group fields, menu entries or invitees are invalid."""
    pass


class InvalidGroupStatusError(InvalidGroupDataError):
    """Raised when a status is not OPEN or CLOSED."""
    pass


class GroupConflictError(GroupsServiceError):
    """Base for operations blocked by the current state of the group."""
    pass


class ProductInUseError(GroupConflictError):
    """Raised when removing a menu product that a member has ordered."""

    def __init__(self, item_name):
        self.item_name = item_name
        super().__init__(
            f'Cannot delete item "{item_name}" because it has been ordered by a member.'
        )


class UnpaidOrdersError(GroupConflictError):
    """Raised when deleting a group while some member has not paid."""
    pass
