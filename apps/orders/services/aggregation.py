"""
Order aggregation - totals, summaries and per-item statistics.

All amounts are integers in the smallest currency unit, so every total here
is an exact sum of price * quantity products.
"""

from typing import Iterable, List, Optional

from django.db.models import Prefetch

from apps.accounts.models import User
from apps.groups.models import Group
from apps.orders.models import Order, OrderItem


def calculate_order_total(items: Iterable[OrderItem]) -> int:
    """Sum of price * quantity over the given line items."""
    return sum(item.price * item.quantity for item in items)


def build_items_summary(items: Iterable[OrderItem]) -> str:
    """Render items as ``"<name>*<quantity>, <name>*<quantity>"``."""
    return ', '.join(f"{item.name}*{item.quantity}" for item in items)


def calculate_order_stats(orders: Iterable[Order]) -> List[dict]:
    """
    Group every line item across orders by name.

    For each distinct name, sums quantity and quantity * price.
    Names keep the order in which they first appear.

    Example:
        >>> calculate_order_stats([amy_order, sam_order])
        [{'name': 'Fries', 'quantity': 5, 'total_price': 200}, ...]
    """
    stats = {}
    for order in orders:
        for item in order.items.all():
            entry = stats.setdefault(
                item.name,
                {'name': item.name, 'quantity': 0, 'total_price': 0}
            )
            entry['quantity'] += item.quantity
            entry['total_price'] += item.quantity * item.price
    return list(stats.values())


def build_order_detail(order: Order) -> dict:
    """Items, total and summary string for one order."""
    items = list(order.items.all())
    return {
        'id': order.id,
        'items': items,
        'total': calculate_order_total(items),
        'items_summary': build_items_summary(items),
        'payment_status': order.payment_status,
        'updated_at': order.updated_at,
    }


def group_overview_queryset():
    """Groups with creator, products, orders, order users and items prefetched."""
    return (
        Group.objects
        .select_related('creator')
        .prefetch_related(
            'products',
            Prefetch(
                'orders',
                queryset=(
                    Order.objects
                    .select_related('user')
                    .prefetch_related('items')
                    .order_by('created_at', 'id')
                )
            ),
        )
    )


def build_group_overview(
    group: Group,
    user: User,
    *,
    include_all_orders: bool = False
) -> dict:
    """
    Derive the aggregate view of a group for one viewer.

    Expects ``group`` to come from :func:`group_overview_queryset` so the
    traversal below does not hit the database per order.

    Args:
        group: Group with prefetched relations
        user: Viewer; determines ``my_order`` and ``is_creator``
        include_all_orders: Also list every member's order

    Returns:
        Dictionary with:
        - id, title, start_time, end_time, status, created_at
        - creator: {id, name}
        - products: list of Product
        - participants: distinct member display names
        - invites: [{user_id, name}] one per member order
        - total_group_amount: int
        - order_stats: [{name, quantity, total_price}]
        - my_order: order detail dict or None
        - is_creator: bool
        - all_orders (optional): per-member order details with user info
    """
    orders = list(group.orders.all())

    participants = []
    invites = []
    all_orders = []
    total_group_amount = 0
    my_order: Optional[dict] = None

    for order in orders:
        display_name = order.user.get_display_name()
        if display_name not in participants:
            participants.append(display_name)
        invites.append({'user_id': order.user_id, 'name': display_name})

        detail = build_order_detail(order)
        total_group_amount += detail['total']

        if order.user_id == user.id:
            my_order = detail

        if include_all_orders:
            all_orders.append({
                **detail,
                'user_id': order.user_id,
                'user': {'id': order.user_id, 'name': display_name},
            })

    overview = {
        'id': group.id,
        'title': group.title,
        'start_time': group.start_time,
        'end_time': group.end_time,
        'status': group.status,
        'created_at': group.created_at,
        'creator': {
            'id': group.creator_id,
            'name': group.creator.get_display_name(),
        },
        'products': list(group.products.all()),
        'participants': participants,
        'invites': invites,
        'total_group_amount': total_group_amount,
        'order_stats': calculate_order_stats(orders),
        'my_order': my_order,
        'is_creator': group.creator_id == user.id,
    }

    if include_all_orders:
        overview['all_orders'] = all_orders

    return overview
