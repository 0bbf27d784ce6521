"""
Service layer unit tests for orders app.

Tests cover:
- Order replacement and item resolution against the menu
- Access and closed-group rules
- Group summary aggregation
- Payment status updates
"""

import pytest
from unittest.mock import patch

from apps.groups.models import GroupStatus
from apps.orders.models import Order, OrderItem, PaymentStatus
from apps.orders.services import (
    update_order,
    get_group_summary,
    update_payment_status,
    calculate_order_total,
    build_items_summary,
    calculate_order_stats,
)
from apps.orders.services.exceptions import (
    GroupNotFoundError,
    OrderNotFoundError,
    GroupAccessDeniedError,
    InsufficientPermissionsError,
    GroupClosedError,
    InvalidOrderItemError,
    InvalidPaymentStatusError,
)


def stored_items(group, user):
    order = Order.objects.get(group=group, user=user)
    return [
        (item.name, item.price, item.quantity, item.product_id)
        for item in order.items.order_by('id')
    ]


# =============================================================================
# Aggregation Tests
# =============================================================================

class TestAggregation:
    """Pure helpers in aggregation.py."""

    def test_total_and_summary(self):
        items = [
            OrderItem(name='Hamburger', price=100, quantity=1),
            OrderItem(name='Fries', price=40, quantity=4),
        ]

        assert calculate_order_total(items) == 260
        assert build_items_summary(items) == 'Hamburger*1, Fries*4'

    def test_empty_order(self):
        assert calculate_order_total([]) == 0
        assert build_items_summary([]) == ''


@pytest.mark.django_db
class TestOrderStats:

    def test_stats_grouped_by_name_in_first_seen_order(self, kfc, bob):
        update_order(
            user=bob,
            group_id=kfc.id,
            items=[
                {'name': 'Cola', 'price': 25, 'quantity': 2},
                {'name': 'Fries', 'quantity': 1},
            ],
        )
        orders = kfc.orders.prefetch_related('items').order_by('created_at', 'id')

        stats = calculate_order_stats(orders)

        assert stats == [
            {'name': 'Hamburger', 'quantity': 1, 'total_price': 100},
            {'name': 'Fries', 'quantity': 5, 'total_price': 200},
            {'name': 'Cola', 'quantity': 2, 'total_price': 50},
        ]


# =============================================================================
# Update Order Tests
# =============================================================================

@pytest.mark.django_db
class TestUpdateOrder:
    """Tests for order_management.update_order."""

    def test_match_by_name_snapshots_menu(self, kfc, bob):
        fries = kfc.products.get(name='Fries')

        result = update_order(
            user=bob,
            group_id=kfc.id,
            items=[{'name': 'Fries', 'price': 1, 'quantity': 3}],
        )

        assert stored_items(kfc, bob) == [('Fries', 40, 3, fries.id)]
        assert result['total'] == 120
        assert result['items_summary'] == 'Fries*3'

    def test_match_by_product_id(self, kfc, bob):
        hamburger = kfc.products.get(name='Hamburger')

        update_order(
            user=bob,
            group_id=kfc.id,
            items=[{'product_id': hamburger.id, 'name': 'whatever', 'quantity': 2}],
        )

        assert stored_items(kfc, bob) == [('Hamburger', 100, 2, hamburger.id)]

    def test_custom_item(self, kfc, bob):
        update_order(
            user=bob,
            group_id=kfc.id,
            items=[{'name': 'Egg tart', 'price': 35, 'quantity': 2}],
        )

        assert stored_items(kfc, bob) == [('Egg tart', 35, 2, None)]

    def test_custom_item_needs_price(self, kfc, bob):
        with pytest.raises(InvalidOrderItemError):
            update_order(user=bob, group_id=kfc.id, items=[{'name': 'Egg tart', 'quantity': 1}])

    @pytest.mark.parametrize('quantity', [0, -1, 1.5, True, 'two'])
    def test_invalid_quantity(self, kfc, bob, quantity):
        with pytest.raises(InvalidOrderItemError):
            update_order(
                user=bob,
                group_id=kfc.id,
                items=[{'name': 'Fries', 'quantity': quantity}],
            )

    def test_item_needs_name_or_product(self, kfc, bob):
        with pytest.raises(InvalidOrderItemError):
            update_order(user=bob, group_id=kfc.id, items=[{'quantity': 1, 'price': 10}])

    def test_replaces_previous_items(self, kfc, amy):
        update_order(user=amy, group_id=kfc.id, items=[{'name': 'Fries', 'quantity': 1}])

        assert [name for name, *_ in stored_items(kfc, amy)] == ['Fries']

    def test_same_submission_twice_is_stable(self, kfc, bob):
        items = [
            {'name': 'Hamburger', 'quantity': 1},
            {'name': 'Cola', 'price': 25, 'quantity': 2},
        ]

        update_order(user=bob, group_id=kfc.id, items=items)
        first = stored_items(kfc, bob)
        update_order(user=bob, group_id=kfc.id, items=items)

        assert stored_items(kfc, bob) == first
        assert OrderItem.objects.filter(order__user=bob).count() == 2

    def test_empty_items_clears_order(self, kfc, amy):
        result = update_order(user=amy, group_id=kfc.id, items=[])

        assert result['total'] == 0
        assert stored_items(kfc, amy) == []

    def test_touches_updated_at(self, kfc, bob):
        order = Order.objects.get(group=kfc, user=bob)
        before = order.updated_at

        update_order(user=bob, group_id=kfc.id, items=[{'name': 'Fries', 'quantity': 1}])

        order.refresh_from_db()
        assert order.updated_at > before

    def test_closed_group_rejected(self, kfc, amy):
        kfc.status = GroupStatus.CLOSED
        kfc.save()
        before = stored_items(kfc, amy)

        with pytest.raises(GroupClosedError) as exc_info:
            update_order(user=amy, group_id=kfc.id, items=[{'name': 'Fries', 'quantity': 9}])

        assert str(exc_info.value) == 'Group is closed. Cannot update order.'
        assert stored_items(kfc, amy) == before

    def test_outsider_denied(self, kfc, outsider):
        with pytest.raises(GroupAccessDeniedError):
            update_order(user=outsider, group_id=kfc.id, items=[{'name': 'Fries', 'quantity': 1}])
        assert not Order.objects.filter(user=outsider).exists()

    def test_locks_group_row(self, kfc, bob):
        """Order replacement takes the same group lock as edits and status changes."""
        from apps.orders.services import order_management

        with patch.object(
            order_management,
            'get_accessible_group',
            wraps=order_management.get_accessible_group
        ) as loader:
            update_order(user=bob, group_id=kfc.id, items=[{'name': 'Fries', 'quantity': 1}])

        queryset = loader.call_args.kwargs['queryset']
        assert queryset.query.select_for_update is True

    def test_removed_member_cannot_recreate_order(self, kfc, amy, bob, sam):
        from apps.groups.services import sync_members

        sync_members(group=kfc, invited_user_ids=[bob.id])

        with pytest.raises(GroupAccessDeniedError):
            update_order(user=sam, group_id=kfc.id, items=[{'name': 'Fries', 'quantity': 1}])
        assert not Order.objects.filter(group=kfc, user=sam).exists()

    def test_group_not_found(self, outsider):
        with pytest.raises(GroupNotFoundError):
            update_order(user=outsider, group_id=31337, items=[])

    def test_creator_without_order_can_submit(self, kfc, amy):
        Order.objects.filter(group=kfc, user=amy).delete()

        update_order(user=amy, group_id=kfc.id, items=[{'name': 'Hamburger', 'quantity': 1}])

        assert Order.objects.filter(group=kfc, user=amy).count() == 1


# =============================================================================
# Group Summary Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupSummary:
    """Tests for order_management.get_group_summary."""

    def test_summary_for_member(self, kfc, amy, bob, sam):
        update_order(user=sam, group_id=kfc.id, items=[{'name': 'Fries', 'quantity': 1}])

        summary = get_group_summary(user=bob, group_id=kfc.id)

        assert summary['is_creator'] is False
        assert summary['creator'] == {'id': amy.id, 'name': 'Amy'}
        assert summary['total_group_amount'] == 300
        assert sum(s['total_price'] for s in summary['order_stats']) == 300
        assert [o['user']['name'] for o in summary['all_orders']] == ['Amy', 'Bob', 'Sam']
        assert summary['all_orders'][0]['payment_status'] == PaymentStatus.PAID
        assert summary['my_order']['items'] == []

    def test_summary_outsider_denied(self, kfc, outsider):
        with pytest.raises(GroupAccessDeniedError):
            get_group_summary(user=outsider, group_id=kfc.id)

    def test_summary_not_found(self, amy):
        with pytest.raises(GroupNotFoundError):
            get_group_summary(user=amy, group_id=8080)


# =============================================================================
# Payment Status Tests
# =============================================================================

@pytest.mark.django_db
class TestPaymentStatus:
    """Tests for payment_status.update_payment_status."""

    def test_creator_marks_paid(self, kfc, amy, bob):
        order = Order.objects.get(group=kfc, user=bob)

        updated = update_payment_status(order_id=order.id, user=amy, status='PAID')

        assert updated.payment_status == PaymentStatus.PAID
        order.refresh_from_db()
        assert order.is_paid

    def test_creator_marks_unpaid(self, kfc, amy):
        order = Order.objects.get(group=kfc, user=amy)

        update_payment_status(order_id=order.id, user=amy, status='UNPAID')

        order.refresh_from_db()
        assert order.payment_status == PaymentStatus.UNPAID

    def test_invalid_status(self, kfc, amy, bob):
        order = Order.objects.get(group=kfc, user=bob)

        with pytest.raises(InvalidPaymentStatusError):
            update_payment_status(order_id=order.id, user=amy, status='REFUNDED')

    def test_member_cannot_mark_own_order(self, kfc, bob):
        order = Order.objects.get(group=kfc, user=bob)

        with pytest.raises(InsufficientPermissionsError):
            update_payment_status(order_id=order.id, user=bob, status='PAID')
        order.refresh_from_db()
        assert order.payment_status == PaymentStatus.UNPAID

    def test_order_not_found(self, amy):
        with pytest.raises(OrderNotFoundError):
            update_payment_status(order_id=55555, user=amy, status='PAID')
