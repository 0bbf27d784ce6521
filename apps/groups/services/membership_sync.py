"""
Membership sync service.

A group's members are exactly the users holding an Order in it. Syncing
reconciles that set of orders against the desired set of invitees.
"""

import logging
from typing import Iterable, Set

from django.db import transaction

from apps.accounts.models import User
from apps.groups.models import Group
from apps.orders.models import Order, OrderItem

from .exceptions import InvalidGroupDataError

logger = logging.getLogger(__name__)


def resolve_invitees(*, user_ids: Iterable[int], exclude: User = None) -> Set[int]:
    """
    Deduplicate invited ids and check that each user exists.

    Args:
        user_ids: Invited user IDs (duplicates allowed)
        exclude: Optional user to drop from the set (the creator)

    Returns:
        Set of existing user IDs

    Raises:
        InvalidGroupDataError: If any id does not belong to a user
    """
    target = set(user_ids or [])
    if exclude is not None:
        target.discard(exclude.id)

    found = set(User.objects.filter(id__in=target).values_list('id', flat=True))
    missing = sorted(target - found)
    if missing:
        raise InvalidGroupDataError(f"Invited users not found: {missing}")

    return target


@transaction.atomic
def sync_members(*, group: Group, invited_user_ids: Iterable[int]) -> dict:
    """
    Reconcile the group's orders against the invited users.

    Target members are the invited users plus the creator. Missing members
    get an empty order; members outside the target lose their order and
    all its line items. The creator's order is never removed.

    Args:
        group: Group to sync (should be locked by the caller)
        invited_user_ids: Desired invitees; duplicates collapse

    Returns:
        Dictionary with:
        - added: sorted list of user IDs that received an order
        - removed: sorted list of user IDs whose order was deleted

    Raises:
        InvalidGroupDataError: If an invited user does not exist
    """
    target = resolve_invitees(user_ids=invited_user_ids)
    target.add(group.creator_id)

    existing = set(group.orders.values_list('user_id', flat=True))

    to_add = sorted(target - existing)
    to_remove = sorted(
        uid for uid in existing
        if uid not in target and uid != group.creator_id
    )

    if to_add:
        Order.objects.bulk_create([
            Order(group=group, user_id=uid) for uid in to_add
        ])

    if to_remove:
        order_ids = list(
            Order.objects
            .filter(group=group, user_id__in=to_remove)
            .values_list('id', flat=True)
        )
        OrderItem.objects.filter(order_id__in=order_ids).delete()
        Order.objects.filter(id__in=order_ids).delete()

    if to_add or to_remove:
        logger.info(
            "Group %s membership synced: added=%s removed=%s",
            group.id, to_add, to_remove
        )

    return {'added': to_add, 'removed': to_remove}
