"""
Service layer unit tests for groups app.

Tests cover:
- Group creation with menu, invitees and initial order
- Membership sync on update
- Menu sync: edits propagating into order items, in-use protection
- Deletion and status rules
- Dashboard aggregation
"""

import pytest
from datetime import timedelta

from apps.groups.models import Group, GroupStatus, Product
from apps.orders.models import Order, OrderItem, PaymentStatus
from apps.orders.services import update_order
from apps.groups.services import (
    create_group,
    get_group_by_id,
    update_group,
    delete_group,
    update_group_status,
    get_dashboard_groups,
)
from apps.groups.services.exceptions import (
    GroupNotFoundError,
    InsufficientPermissionsError,
    InvalidGroupDataError,
    InvalidGroupStatusError,
    GroupConflictError,
    ProductInUseError,
    UnpaidOrdersError,
)


def menu_of(group):
    return [
        {'id': p.id, 'name': p.name, 'price': p.price}
        for p in group.products.order_by('id')
    ]


def edit(group, user, *, products=None, invited_user_ids=None, title=None):
    return update_group(
        group_id=group.id,
        user=user,
        title=title or group.title,
        start_time=group.start_time,
        end_time=group.end_time,
        products=products,
        invited_user_ids=invited_user_ids,
    )


def order_of(group, user):
    return Order.objects.get(group=group, user=user)


# =============================================================================
# Group Creation Tests
# =============================================================================

@pytest.mark.django_db
class TestCreateGroup:
    """Tests for group_management.create_group."""

    def test_create_group_success(self, kfc, amy, bob, sam):
        assert kfc.status == GroupStatus.OPEN
        assert kfc.creator == amy
        assert [p.name for p in kfc.products.order_by('id')] == ['Hamburger', 'Fries']
        assert set(kfc.orders.values_list('user_id', flat=True)) == {amy.id, bob.id, sam.id}

    def test_creator_order_is_paid_and_prefilled(self, kfc, amy):
        order = order_of(kfc, amy)

        assert order.payment_status == PaymentStatus.PAID
        items = list(order.items.order_by('id'))
        assert [(i.name, i.price, i.quantity) for i in items] == [
            ('Hamburger', 100, 1),
            ('Fries', 40, 4),
        ]
        assert all(item.product is not None for item in items)

    def test_invitee_orders_are_empty_and_unpaid(self, kfc, bob):
        order = order_of(kfc, bob)

        assert order.payment_status == PaymentStatus.UNPAID
        assert order.items.count() == 0

    def test_invited_ids_are_deduplicated_and_creator_ignored(self, amy, bob, window):
        start, end = window
        group = create_group(
            creator=amy,
            title='Lunch',
            start_time=start,
            end_time=end,
            invited_user_ids=[bob.id, bob.id, amy.id],
        )

        assert group.orders.filter(user=bob).count() == 1
        assert group.orders.filter(user=amy).count() == 1

    def test_initial_order_custom_item(self, amy, window):
        start, end = window
        group = create_group(
            creator=amy,
            title='Tea',
            start_time=start,
            end_time=end,
            products=[{'name': 'Green tea', 'price': 35}],
            initial_order=[{'name': 'Milk tea', 'price': 50, 'quantity': 2}],
        )

        item = order_of(group, amy).items.get()
        assert item.name == 'Milk tea'
        assert item.price == 50
        assert item.product is None

    def test_initial_order_custom_item_needs_price(self, amy, window):
        start, end = window
        with pytest.raises(InvalidGroupDataError):
            create_group(
                creator=amy,
                title='Tea',
                start_time=start,
                end_time=end,
                initial_order=[{'name': 'Mystery', 'quantity': 1}],
            )
        assert not Group.objects.exists()

    def test_missing_title(self, amy, window):
        start, end = window
        with pytest.raises(InvalidGroupDataError):
            create_group(creator=amy, title='  ', start_time=start, end_time=end)

    def test_end_before_start(self, amy, window):
        start, end = window
        with pytest.raises(InvalidGroupDataError):
            create_group(creator=amy, title='Late', start_time=end, end_time=start)

    def test_negative_product_price(self, amy, window):
        start, end = window
        with pytest.raises(InvalidGroupDataError):
            create_group(
                creator=amy,
                title='Cheap',
                start_time=start,
                end_time=end,
                products=[{'name': 'Refund', 'price': -5}],
            )

    def test_unknown_invitee(self, amy, window):
        start, end = window
        with pytest.raises(InvalidGroupDataError):
            create_group(
                creator=amy,
                title='Ghosts',
                start_time=start,
                end_time=end,
                invited_user_ids=[424242],
            )
        assert not Group.objects.exists()

    def test_get_group_by_id_not_found(self, db):
        with pytest.raises(GroupNotFoundError):
            get_group_by_id(group_id=999)


# =============================================================================
# Group Update / Membership Sync Tests
# =============================================================================

@pytest.mark.django_db
class TestUpdateGroupMembership:
    """Tests for update_group membership reconciliation."""

    def test_update_fields(self, kfc, amy, bob, sam):
        new_end = kfc.end_time + timedelta(hours=1)
        update_group(
            group_id=kfc.id,
            user=amy,
            title='KFC Friday',
            start_time=kfc.start_time,
            end_time=new_end,
            invited_user_ids=[bob.id, sam.id],
        )

        kfc.refresh_from_db()
        assert kfc.title == 'KFC Friday'
        assert kfc.end_time == new_end

    def test_removed_member_loses_order_and_items(self, kfc, amy, bob, sam):
        update_order(user=sam, group_id=kfc.id, items=[{'name': 'Fries', 'quantity': 1}])

        edit(kfc, amy, invited_user_ids=[bob.id])

        assert not Order.objects.filter(group=kfc, user=sam).exists()
        assert not OrderItem.objects.filter(name='Fries', order__user=sam).exists()
        assert Order.objects.filter(group=kfc, user=bob).exists()

    def test_new_member_gets_empty_order(self, kfc, amy, bob, sam, outsider):
        edit(kfc, amy, invited_user_ids=[bob.id, sam.id, outsider.id, outsider.id])

        order = order_of(kfc, outsider)
        assert order.items.count() == 0
        assert order.payment_status == PaymentStatus.UNPAID

    def test_creator_never_removed(self, kfc, amy):
        edit(kfc, amy, invited_user_ids=[])

        assert list(kfc.orders.values_list('user_id', flat=True)) == [amy.id]
        assert order_of(kfc, amy).items.count() == 2

    def test_unknown_invitee(self, kfc, amy):
        with pytest.raises(InvalidGroupDataError):
            edit(kfc, amy, invited_user_ids=[999999])

    def test_non_creator_forbidden(self, kfc, bob):
        with pytest.raises(InsufficientPermissionsError):
            edit(kfc, bob, invited_user_ids=[])

    def test_not_found(self, amy):
        with pytest.raises(GroupNotFoundError):
            update_group(
                group_id=12345,
                user=amy,
                title='x',
                start_time=None,
                end_time=None,
            )

    def test_products_none_leaves_menu(self, kfc, amy, bob, sam):
        before = menu_of(kfc)

        result = edit(kfc, amy, invited_user_ids=[bob.id, sam.id], products=None)

        assert menu_of(kfc) == before
        assert [p.id for p in result] == [p['id'] for p in before]


# =============================================================================
# Menu Sync Tests
# =============================================================================

@pytest.mark.django_db
class TestMenuSync:
    """Tests for menu edits propagating into order items."""

    def test_rename_and_reprice_propagates(self, kfc, amy, bob, sam):
        products = menu_of(kfc)
        products[1].update(name='Chips', price=45)

        result = edit(kfc, amy, products=products, invited_user_ids=[bob.id, sam.id])

        assert [p.name for p in result] == ['Hamburger', 'Chips']
        fries_item = order_of(kfc, amy).items.get(product_id=products[1]['id'])
        assert (fries_item.name, fries_item.price, fries_item.quantity) == ('Chips', 45, 4)

    def test_legacy_item_updated_and_linked(self, kfc, amy, bob, sam):
        legacy = OrderItem.objects.create(
            order=order_of(kfc, bob), product=None, name='Fries', price=40, quantity=2
        )
        products = menu_of(kfc)
        products[1]['price'] = 42

        edit(kfc, amy, products=products, invited_user_ids=[bob.id, sam.id])

        legacy.refresh_from_db()
        assert legacy.price == 42
        assert legacy.product_id == products[1]['id']

    def test_custom_item_with_other_name_untouched(self, kfc, amy, bob, sam):
        custom = OrderItem.objects.create(
            order=order_of(kfc, bob), product=None, name='Cola', price=30, quantity=1
        )
        products = menu_of(kfc)
        products[1].update(name='Chips', price=45)

        edit(kfc, amy, products=products, invited_user_ids=[bob.id, sam.id])

        custom.refresh_from_db()
        assert (custom.name, custom.price, custom.product_id) == ('Cola', 30, None)

    def test_add_and_remove_unordered_product(self, kfc, amy, bob, sam):
        edit(
            kfc, amy,
            products=menu_of(kfc) + [{'name': 'Coke', 'price': 30}],
            invited_user_ids=[bob.id, sam.id],
        )
        assert kfc.products.filter(name='Coke').exists()

        products = [p for p in menu_of(kfc) if p['name'] != 'Coke']
        result = edit(kfc, amy, products=products, invited_user_ids=[bob.id, sam.id])

        assert [p.name for p in result] == ['Hamburger', 'Fries']

    def test_remove_ordered_product_fails_and_rolls_back(self, kfc, amy, bob, sam):
        before = menu_of(kfc)
        hamburger = kfc.products.get(name='Hamburger')
        # Renames Hamburger and drops Fries in one request
        products = [{'id': hamburger.id, 'name': 'Big Burger', 'price': 120}]

        with pytest.raises(ProductInUseError) as exc_info:
            edit(
                kfc, amy,
                title='Renamed',
                products=products,
                invited_user_ids=[bob.id],
            )

        assert str(exc_info.value) == (
            'Cannot delete item "Fries" because it has been ordered by a member.'
        )
        assert isinstance(exc_info.value, GroupConflictError)
        kfc.refresh_from_db()
        assert kfc.title == 'KFC'
        assert menu_of(kfc) == before
        assert Order.objects.filter(group=kfc, user=sam).exists()
        hamburger.refresh_from_db()
        assert (hamburger.name, hamburger.price) == ('Hamburger', 100)
        linked = order_of(kfc, amy).items.get(product=hamburger)
        assert (linked.name, linked.price, linked.quantity) == ('Hamburger', 100, 1)

    def test_remove_product_ordered_by_legacy_name_fails(self, kfc, amy, bob, sam):
        edit(
            kfc, amy,
            products=menu_of(kfc) + [{'name': 'Cola', 'price': 30}],
            invited_user_ids=[bob.id, sam.id],
        )
        OrderItem.objects.create(
            order=order_of(kfc, bob), product=None, name='Cola', price=30, quantity=1
        )
        products = [p for p in menu_of(kfc) if p['name'] != 'Cola']

        with pytest.raises(ProductInUseError):
            edit(kfc, amy, products=products, invited_user_ids=[bob.id, sam.id])

        assert kfc.products.filter(name='Cola').exists()

    def test_foreign_product_id_rejected(self, kfc, amy, bob, sam, window):
        start, end = window
        other = create_group(
            creator=amy, title='Other', start_time=start, end_time=end,
            products=[{'name': 'Pizza', 'price': 200}],
        )
        foreign = menu_of(other)[0]

        with pytest.raises(InvalidGroupDataError):
            edit(kfc, amy, products=menu_of(kfc) + [foreign], invited_user_ids=[bob.id, sam.id])

    def test_duplicate_product_id_rejected(self, kfc, amy, bob, sam):
        products = menu_of(kfc)

        with pytest.raises(InvalidGroupDataError):
            edit(kfc, amy, products=products + [products[0]], invited_user_ids=[bob.id, sam.id])


# =============================================================================
# Delete / Status Tests
# =============================================================================

@pytest.mark.django_db
class TestDeleteGroup:
    """Tests for group_management.delete_group."""

    def test_unpaid_members_block_delete(self, kfc, amy):
        with pytest.raises(UnpaidOrdersError) as exc_info:
            delete_group(group_id=kfc.id, user=amy)

        assert str(exc_info.value) == "Cannot delete group: Some members have not paid."
        assert Group.objects.filter(id=kfc.id).exists()

    def test_delete_when_all_paid(self, kfc, amy):
        kfc.orders.update(payment_status=PaymentStatus.PAID)

        delete_group(group_id=kfc.id, user=amy)

        assert not Group.objects.filter(id=kfc.id).exists()
        assert not Product.objects.exists()
        assert not Order.objects.exists()
        assert not OrderItem.objects.exists()

    def test_non_creator_forbidden(self, kfc, bob):
        kfc.orders.update(payment_status=PaymentStatus.PAID)

        with pytest.raises(InsufficientPermissionsError):
            delete_group(group_id=kfc.id, user=bob)

    def test_not_found(self, amy):
        with pytest.raises(GroupNotFoundError):
            delete_group(group_id=777, user=amy)


@pytest.mark.django_db
class TestUpdateGroupStatus:
    """Tests for group_management.update_group_status."""

    def test_close_group(self, kfc, amy):
        group = update_group_status(group_id=kfc.id, user=amy, status='CLOSED')

        assert group.status == GroupStatus.CLOSED
        kfc.refresh_from_db()
        assert not kfc.is_open

    def test_invalid_status(self, kfc, amy):
        with pytest.raises(InvalidGroupStatusError):
            update_group_status(group_id=kfc.id, user=amy, status='ARCHIVED')

    def test_non_creator_forbidden(self, kfc, bob):
        with pytest.raises(InsufficientPermissionsError):
            update_group_status(group_id=kfc.id, user=bob, status='CLOSED')


# =============================================================================
# Dashboard Tests
# =============================================================================

@pytest.mark.django_db
class TestDashboard:
    """Tests for group_management.get_dashboard_groups."""

    def test_creator_dashboard(self, kfc, amy):
        [entry] = get_dashboard_groups(user=amy)

        assert entry['id'] == kfc.id
        assert entry['is_creator'] is True
        assert entry['creator'] == {'id': amy.id, 'name': 'Amy'}
        assert entry['participants'] == ['Amy', 'Bob', 'Sam']
        assert entry['total_group_amount'] == 260
        assert entry['my_order']['items_summary'] == 'Hamburger*1, Fries*4'
        assert entry['my_order']['total'] == 260

    def test_member_dashboard(self, kfc, bob):
        [entry] = get_dashboard_groups(user=bob)

        assert entry['is_creator'] is False
        assert entry['my_order']['total'] == 0
        assert entry['my_order']['payment_status'] == PaymentStatus.UNPAID

    def test_outsider_sees_nothing(self, kfc, outsider):
        assert get_dashboard_groups(user=outsider) == []

    def test_most_recent_first(self, kfc, amy, window):
        start, end = window
        newer = create_group(creator=amy, title='Newer', start_time=start, end_time=end)

        assert [g['id'] for g in get_dashboard_groups(user=amy)] == [newer.id, kfc.id]

    def test_stats_sum_to_group_total(self, kfc, amy, bob):
        update_order(
            user=bob,
            group_id=kfc.id,
            items=[
                {'name': 'Hamburger', 'quantity': 2},
                {'name': 'Cola', 'price': 30, 'quantity': 1},
            ],
        )

        entry = next(g for g in get_dashboard_groups(user=amy) if g['id'] == kfc.id)

        assert entry['total_group_amount'] == 490
        assert sum(s['total_price'] for s in entry['order_stats']) == 490
        stats = {s['name']: (s['quantity'], s['total_price']) for s in entry['order_stats']}
        assert stats == {
            'Hamburger': (3, 300),
            'Fries': (4, 160),
            'Cola': (1, 30),
        }
