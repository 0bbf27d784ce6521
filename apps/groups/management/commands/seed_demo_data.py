"""
Management command to create demo data for trying out the API.

Usage:
    python manage.py seed_demo_data [--clear]

This creates:
- 4 users (amy, bob, david, sam), password "password"
- "KFC" group run by Amy with orders from everyone
- "Burger King" group run by Bob with Amy as a member
"""

from datetime import datetime

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User, Friendship
from apps.groups.models import Group, Product, GroupStatus
from apps.orders.models import Order, OrderItem, PaymentStatus


DEMO_PASSWORD = 'password'

KFC_MENU = [
    ('Hamburger', 100),
    ('Fries', 40),
    ('nugget', 50),
    ('coke', 30),
    ('Chicken', 150),
]

BURGER_KING_MENU = [
    ('Whopper', 150),
    ('Hamburger', 45),
    ('Fries', 40),
    ('nugget', 50),
    ('coke', 30),
]


class Command(BaseCommand):
    help = 'Create demo users, groups and orders'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating the demo data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating demo data...')

        users = self.create_users()
        self.create_kfc(users)
        self.create_burger_king(users)

        self.stdout.write(self.style.SUCCESS('Demo data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts (password "password"):')
        for username in users:
            self.stdout.write(f'  {username}')

    def clear_data(self):
        """Clear all data from the database."""
        OrderItem.objects.all().delete()
        Order.objects.all().delete()
        Product.objects.all().delete()
        Group.objects.all().delete()
        Friendship.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()

    def create_users(self):
        users = {}
        for username, name in [('amy', 'Amy'), ('bob', 'Bob'), ('david', 'David'), ('sam', 'Sam')]:
            user, created = User.objects.get_or_create(username=username, defaults={'name': name})
            if created:
                user.set_password(DEMO_PASSWORD)
                user.save(update_fields=['password'])
            users[username] = user

        # Amy and Bob are friends
        for a, b in [(users['amy'], users['bob']), (users['bob'], users['amy'])]:
            Friendship.objects.get_or_create(from_user=a, to_user=b)

        self.stdout.write(f'  Created {len(users)} users')
        return users

    def _make_group(self, *, title, creator, start, end, menu):
        group = Group.objects.create(
            title=title,
            creator=creator,
            start_time=timezone.make_aware(start),
            end_time=timezone.make_aware(end),
            status=GroupStatus.OPEN,
        )
        products = {
            name: Product.objects.create(group=group, name=name, price=price)
            for name, price in menu
        }
        return group, products

    def _add_order(self, *, group, user, products, items, payment_status=PaymentStatus.UNPAID):
        order = Order.objects.create(group=group, user=user, payment_status=payment_status)
        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                product=products[name],
                name=name,
                price=products[name].price,
                quantity=quantity,
            )
            for name, quantity in items
        ])
        return order

    def create_kfc(self, users):
        group, products = self._make_group(
            title='KFC',
            creator=users['amy'],
            start=datetime(2025, 12, 24, 15, 0),
            end=datetime(2025, 12, 24, 17, 0),
            menu=KFC_MENU,
        )
        self._add_order(
            group=group,
            user=users['amy'],
            products=products,
            items=[('Hamburger', 1), ('Fries', 4), ('nugget', 6), ('coke', 1)],
            payment_status=PaymentStatus.PAID,
        )
        self._add_order(group=group, user=users['bob'], products=products, items=[('Chicken', 2)])
        self._add_order(group=group, user=users['david'], products=products, items=[])
        self._add_order(group=group, user=users['sam'], products=products, items=[('Fries', 1)])
        self.stdout.write(f'  Created group "{group.title}"')

    def create_burger_king(self, users):
        group, products = self._make_group(
            title='Burger King',
            creator=users['bob'],
            start=datetime(2025, 12, 25, 14, 0),
            end=datetime(2025, 12, 25, 16, 0),
            menu=BURGER_KING_MENU,
        )
        self._add_order(group=group, user=users['amy'], products=products, items=[('Whopper', 1)])
        self._add_order(
            group=group,
            user=users['bob'],
            products=products,
            items=[('Hamburger', 5), ('Fries', 3), ('nugget', 8), ('coke', 2)],
            payment_status=PaymentStatus.PAID,
        )
        self.stdout.write(f'  Created group "{group.title}"')
