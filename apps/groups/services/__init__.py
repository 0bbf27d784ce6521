"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    GroupsServiceError,
    GroupNotFoundError,
    InsufficientPermissionsError,
    InvalidGroupDataError,
    InvalidGroupStatusError,
    GroupConflictError,
    ProductInUseError,
    UnpaidOrdersError,
)

from .group_management import (
    create_group,
    get_group_by_id,
    update_group,
    delete_group,
    update_group_status,
    get_dashboard_groups,
)

from .membership_sync import (
    resolve_invitees,
    sync_members,
)

from .menu_sync import (
    clean_product_entry,
    sync_menu,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'GroupNotFoundError',
    'InsufficientPermissionsError',
    'InvalidGroupDataError',
    'InvalidGroupStatusError',
    'GroupConflictError',
    'ProductInUseError',
    'UnpaidOrdersError',

    # Group management
    'create_group',
    'get_group_by_id',
    'update_group',
    'delete_group',
    'update_group_status',
    'get_dashboard_groups',

    # Membership sync
    'resolve_invitees',
    'sync_members',

    # Menu sync
    'clean_product_entry',
    'sync_menu',
]
