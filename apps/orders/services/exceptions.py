"""
Domain-specific exceptions for orders app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class OrdersServiceError(Exception):
    """Base exception for all orders service errors."""
    pass


class GroupNotFoundError(OrdersServiceError):
    """Raised when the group an order targets does not exist."""
    pass


class OrderNotFoundError(OrdersServiceError):
    """Raised when an order does not exist."""
    pass


class GroupAccessDeniedError(OrdersServiceError):
    """Raised when the user is neither the group creator nor a member."""
    pass


class InsufficientPermissionsError(OrdersServiceError):
    """Raised when a creator-only action is attempted by someone else."""
    pass


class GroupClosedError(OrdersServiceError):
    """Raised when an order is submitted to a closed group."""
    pass


class InvalidOrderItemError(OrdersServiceError):
    """Raised when a submitted line item is malformed."""
    pass


class InvalidPaymentStatusError(OrdersServiceError):
    """Raised when a payment status is not PAID or UNPAID."""
    pass
