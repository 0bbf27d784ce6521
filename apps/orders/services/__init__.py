"""
Orders app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and row locks.
"""

from .exceptions import (
    OrdersServiceError,
    GroupNotFoundError,
    OrderNotFoundError,
    GroupAccessDeniedError,
    InsufficientPermissionsError,
    GroupClosedError,
    InvalidOrderItemError,
    InvalidPaymentStatusError,
)

from .aggregation import (
    calculate_order_total,
    build_items_summary,
    calculate_order_stats,
    build_order_detail,
    build_group_overview,
    group_overview_queryset,
)

from .item_resolution import (
    resolve_order_items,
    replace_order_items,
)

from .order_management import (
    update_order,
    get_group_summary,
)

from .payment_status import (
    update_payment_status,
)


__all__ = [
    # Exceptions
    'OrdersServiceError',
    'GroupNotFoundError',
    'OrderNotFoundError',
    'GroupAccessDeniedError',
    'InsufficientPermissionsError',
    'GroupClosedError',
    'InvalidOrderItemError',
    'InvalidPaymentStatusError',

    # Aggregation
    'calculate_order_total',
    'build_items_summary',
    'calculate_order_stats',
    'build_order_detail',
    'build_group_overview',
    'group_overview_queryset',

    # Item resolution
    'resolve_order_items',
    'replace_order_items',

    # Order management
    'update_order',
    'get_group_summary',

    # Payment status
    'update_payment_status',
]
