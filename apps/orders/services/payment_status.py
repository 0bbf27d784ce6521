"""Payment status service - creator-controlled PAID/UNPAID flag per order."""

import logging

from django.db import transaction

from apps.accounts.models import User
from apps.orders.models import Order, PaymentStatus

from .exceptions import (
    OrderNotFoundError,
    InsufficientPermissionsError,
    InvalidPaymentStatusError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def update_payment_status(*, order_id: int, user: User, status: str) -> Order:
    """
    Mark a member's order as PAID or UNPAID (group creator only).

    This is a manual bookkeeping flag; no money moves. Group deletion is
    blocked while any order in the group is UNPAID.

    Args:
        order_id: ID of the order
        user: User performing the update (must be the group creator)
        status: 'PAID' or 'UNPAID'

    Returns:
        Updated Order instance

    Raises:
        InvalidPaymentStatusError: If status is not PAID or UNPAID
        OrderNotFoundError: If order doesn't exist
        InsufficientPermissionsError: If user is not the group creator
    """
    if status not in PaymentStatus.values:
        raise InvalidPaymentStatusError("Invalid status. Must be PAID or UNPAID.")

    try:
        order = (
            Order.objects
            .select_for_update(of=('self',))
            .select_related('group')
            .get(id=order_id)
        )
    except Order.DoesNotExist:
        raise OrderNotFoundError("Order not found")

    if order.group.creator_id != user.id:
        raise InsufficientPermissionsError("Only group creator can update payment status")

    order.payment_status = status
    order.save(update_fields=['payment_status'])

    logger.info("Order %s in group %s marked %s", order.id, order.group_id, status)
    return order
