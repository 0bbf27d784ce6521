# ==========================================
# apps/groups/models.py
# ==========================================

from django.db import models


class GroupStatus(models.TextChoices):
    OPEN = 'OPEN', 'Open'
    CLOSED = 'CLOSED', 'Closed'


class Group(models.Model):
    """Time-boxed collective order with a creator, a menu and member orders."""

    title = models.CharField(max_length=200)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    status = models.CharField(max_length=10, choices=GroupStatus.choices, default=GroupStatus.OPEN)
    creator = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='created_groups')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'groups'
        indexes = [
            models.Index(fields=['creator', 'created_at'], name='groups_creator_3c1e0b_idx'),
            models.Index(fields=['status'], name='groups_status_9a4d52_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    @property
    def is_open(self):
        return self.status == GroupStatus.OPEN

    def is_creator(self, user):
        return self.creator_id == user.id

    def has_member(self, user):
        return self.orders.filter(user=user).exists()

    def can_access(self, user):
        """Creator or anyone holding an order in the group."""
        return self.is_creator(user) or self.has_member(user)


class Product(models.Model):
    """Menu entry offered within one group. Price is in the smallest currency unit."""

    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='products')
    name = models.CharField(max_length=200)
    price = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'group_products'
        indexes = [
            models.Index(fields=['group', 'name'], name='group_produ_group_i_5b7e21_idx'),
        ]
        ordering = ['id']

    def __str__(self):
        return f"{self.name} ({self.price})"
