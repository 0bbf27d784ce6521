"""
Group management service.

Handles the group lifecycle: creation with menu and invitees, editing,
status changes, deletion and the per-user dashboard.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from django.db import transaction
from django.db.models import Q

from apps.accounts.models import User
from apps.groups.models import Group, GroupStatus, Product
from apps.orders.models import Order, OrderItem, PaymentStatus
from apps.orders.services import (
    InvalidOrderItemError,
    build_group_overview,
    group_overview_queryset,
    replace_order_items,
    resolve_order_items,
)

from .exceptions import (
    GroupNotFoundError,
    InsufficientPermissionsError,
    InvalidGroupDataError,
    InvalidGroupStatusError,
    UnpaidOrdersError,
)
from .membership_sync import resolve_invitees, sync_members
from .menu_sync import clean_product_entry, sync_menu

logger = logging.getLogger(__name__)


def _validate_group_fields(*, title: str, start_time: datetime, end_time: datetime) -> str:
    title = (title or '').strip()
    if not title or start_time is None or end_time is None:
        raise InvalidGroupDataError("Missing required fields")
    if end_time < start_time:
        raise InvalidGroupDataError("End time must not be before start time")
    return title


def _get_locked_group(*, group_id: int, user: User) -> Group:
    try:
        group = Group.objects.select_for_update().get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_creator(user):
        raise InsufficientPermissionsError("Only the group creator can modify this group")

    return group


@transaction.atomic
def create_group(
    *,
    creator: User,
    title: str,
    start_time: datetime,
    end_time: datetime,
    products: Optional[Iterable[dict]] = None,
    invited_user_ids: Optional[Iterable[int]] = None,
    initial_order: Optional[Iterable[dict]] = None
) -> Group:
    """
    Create a new OPEN group with its menu, invitees and the creator's order.

    This is a multi-step operation wrapped in a transaction:
    1. Validate fields, menu entries and invitees
    2. Create the group and its products
    3. Create the creator's order from ``initial_order``, marked PAID
    4. Create an empty order for each invited user

    Initial order items are matched to the new menu by name and take the
    menu's name and price; unmatched ones become custom items.

    Args:
        creator: User creating the group
        title: Group title
        start_time: Ordering window start
        end_time: Ordering window end (not before start)
        products: Menu entries as {name, price}
        invited_user_ids: Users to invite; duplicates and the creator are ignored
        initial_order: Creator's items as {name, price?, quantity}

    Returns:
        Created Group instance

    Raises:
        InvalidGroupDataError: On missing fields, bad menu entries,
            unknown invitees or malformed initial order items
    """
    title = _validate_group_fields(title=title, start_time=start_time, end_time=end_time)
    entries = [clean_product_entry(entry) for entry in products or []]
    invitees = resolve_invitees(user_ids=invited_user_ids, exclude=creator)

    group = Group.objects.create(
        title=title,
        start_time=start_time,
        end_time=end_time,
        status=GroupStatus.OPEN,
        creator=creator,
    )

    Product.objects.bulk_create([
        Product(group=group, name=entry['name'], price=entry['price'])
        for entry in entries
    ])

    # Ids cannot refer to a menu that did not exist yet
    items = [
        {key: value for key, value in item.items() if key != 'product_id'}
        for item in initial_order or []
    ]
    try:
        resolved_items = resolve_order_items(products=group.products.all(), items=items)
    except InvalidOrderItemError as e:
        raise InvalidGroupDataError(str(e))

    creator_order = Order.objects.create(
        group=group,
        user=creator,
        payment_status=PaymentStatus.PAID,
    )
    replace_order_items(order=creator_order, resolved_items=resolved_items)

    if invitees:
        Order.objects.bulk_create([
            Order(group=group, user_id=uid) for uid in sorted(invitees)
        ])

    logger.info(
        "Group %s created by user %s with %d product(s) and %d invitee(s)",
        group.id, creator.id, len(entries), len(invitees)
    )
    return group


def get_group_by_id(*, group_id: int) -> Group:
    """
    Get a group by ID with creator, products and orders prefetched.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return group_overview_queryset().get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


@transaction.atomic
def update_group(
    *,
    group_id: int,
    user: User,
    title: str,
    start_time: datetime,
    end_time: datetime,
    products: Optional[Iterable[dict]] = None,
    invited_user_ids: Optional[Iterable[int]] = None
) -> List[Product]:
    """
    Edit a group's details, members and menu (creator only).

    Uses select_for_update so concurrent edits of one group serialize.
    Membership sync runs before the menu sync; a menu conflict rolls the
    whole edit back, including the title, dates and member changes.

    Args:
        group_id: ID of the group
        user: User performing the update (must be the creator)
        title: New title
        start_time: New window start
        end_time: New window end
        products: Full menu as {id?, name, price}; None leaves the menu as is
        invited_user_ids: Desired invitees; the creator always stays a member

    Returns:
        The group's products after the update

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not the creator
        InvalidGroupDataError: On invalid fields, menu entries or invitees
        ProductInUseError: If a removed product has been ordered
    """
    group = _get_locked_group(group_id=group_id, user=user)

    group.title = _validate_group_fields(
        title=title, start_time=start_time, end_time=end_time
    )
    group.start_time = start_time
    group.end_time = end_time
    group.save(update_fields=['title', 'start_time', 'end_time', 'updated_at'])

    sync_members(group=group, invited_user_ids=invited_user_ids or [])

    if products is None:
        return list(group.products.order_by('id'))

    return sync_menu(group=group, products=products)


@transaction.atomic
def delete_group(*, group_id: int, user: User) -> None:
    """
    Delete a group and everything it owns (creator only).

    Blocked while any member's order is UNPAID.

    Args:
        group_id: ID of the group
        user: User requesting deletion (must be the creator)

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not the creator
        UnpaidOrdersError: If some order is still UNPAID
    """
    group = _get_locked_group(group_id=group_id, user=user)

    if group.orders.filter(payment_status=PaymentStatus.UNPAID).exists():
        logger.warning("Refused to delete group %s: unpaid orders remain", group.id)
        raise UnpaidOrdersError("Cannot delete group: Some members have not paid.")

    OrderItem.objects.filter(order__group=group).delete()
    group.orders.all().delete()
    group.products.all().delete()
    group.delete()

    logger.info("Group %s deleted by user %s", group_id, user.id)


@transaction.atomic
def update_group_status(*, group_id: int, user: User, status: str) -> Group:
    """
    Open or close a group for order changes (creator only).

    Raises:
        InvalidGroupStatusError: If status is not OPEN or CLOSED
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not the creator
    """
    if status not in GroupStatus.values:
        raise InvalidGroupStatusError("Invalid status")

    group = _get_locked_group(group_id=group_id, user=user)
    group.status = status
    group.save(update_fields=['status', 'updated_at'])

    logger.info("Group %s status set to %s", group.id, status)
    return group


def get_dashboard_groups(*, user: User) -> List[dict]:
    """
    Every group the user created or holds an order in, most recent first.

    Each entry is the group overview for this user (see
    ``apps.orders.services.build_group_overview``).
    """
    groups = (
        group_overview_queryset()
        .filter(Q(creator=user) | Q(orders__user=user))
        .distinct()
        .order_by('-created_at', '-id')
    )
    return [build_group_overview(group, user) for group in groups]
