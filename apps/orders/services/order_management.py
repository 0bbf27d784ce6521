"""
Order management service.

Handles member order submission and the group summary view.
"""

import logging
from typing import List

from django.db import transaction, IntegrityError

from apps.accounts.models import User
from apps.groups.models import Group, GroupStatus
from apps.orders.models import Order

from .aggregation import build_order_detail, build_group_overview, group_overview_queryset
from .item_resolution import resolve_order_items, replace_order_items
from .exceptions import (
    GroupNotFoundError,
    GroupAccessDeniedError,
    GroupClosedError,
)

logger = logging.getLogger(__name__)


def get_accessible_group(*, group_id: int, user: User, queryset=None) -> Group:
    """
    Load a group the user may see: its creator or a member with an order.

    Raises:
        GroupNotFoundError: If group doesn't exist
        GroupAccessDeniedError: If user is neither creator nor member
    """
    queryset = queryset if queryset is not None else Group.objects.all()
    try:
        group = queryset.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.can_access(user):
        raise GroupAccessDeniedError("Access denied to this group")

    return group


def _get_or_create_locked_order(*, group: Group, user: User) -> Order:
    try:
        with transaction.atomic():
            order, _ = Order.objects.get_or_create(group=group, user=user)
    except IntegrityError:
        # Created concurrently by another request
        order = Order.objects.get(group=group, user=user)

    return Order.objects.select_for_update().get(pk=order.pk)


@transaction.atomic
def update_order(*, user: User, group_id: int, items: List[dict]) -> dict:
    """
    Replace the user's order in a group with the submitted items.

    This operation:
    1. Locks the group row, checks the user may access it and that it is OPEN
    2. Resolves every item against the current menu
    3. Finds or creates the user's order and locks it
    4. Deletes all existing line items and inserts the new set
    5. Touches the order's updated_at

    Submitting the same list twice leaves the same line items stored.

    Args:
        user: Member submitting the order
        group_id: ID of the group
        items: List of {product_id?, name?, price?, quantity}

    Returns:
        Order detail dict: id, items, total, items_summary,
        payment_status, updated_at

    Raises:
        GroupNotFoundError: If group doesn't exist
        GroupAccessDeniedError: If user is neither creator nor member
        GroupClosedError: If the group is CLOSED
        InvalidOrderItemError: If an item is malformed
    """
    # Serializes with group edits, member removal and status changes
    group = get_accessible_group(
        group_id=group_id,
        user=user,
        queryset=Group.objects.select_for_update()
    )

    if group.status == GroupStatus.CLOSED:
        logger.warning("User %s tried to update an order in closed group %s", user.id, group.id)
        raise GroupClosedError("Group is closed. Cannot update order.")

    resolved_items = resolve_order_items(products=group.products.all(), items=items)

    order = _get_or_create_locked_order(group=group, user=user)
    replace_order_items(order=order, resolved_items=resolved_items)
    order.save(update_fields=['updated_at'])

    logger.info(
        "Order %s in group %s replaced with %d item(s)",
        order.id, group.id, len(resolved_items)
    )
    return build_order_detail(order)


def get_group_summary(*, user: User, group_id: int) -> dict:
    """
    Full summary of a group for one of its participants.

    Returns the group overview (metadata, products, participants, totals,
    per-item statistics, the viewer's own order, is_creator) plus
    ``all_orders`` with every member's items, total and payment status.

    Args:
        user: Viewer (creator or member)
        group_id: ID of the group

    Returns:
        Summary dict (see ``build_group_overview``)

    Raises:
        GroupNotFoundError: If group doesn't exist
        GroupAccessDeniedError: If user is neither creator nor member
    """
    group = get_accessible_group(
        group_id=group_id,
        user=user,
        queryset=group_overview_queryset()
    )
    return build_group_overview(group, user, include_all_orders=True)
