from django.core.validators import MinValueValidator
from django.db import models


class PaymentStatus(models.TextChoices):
    UNPAID = 'UNPAID', 'Unpaid'
    PAID = 'PAID', 'Paid'


class Order(models.Model):
    """One member's participation in a group: their line items and payment flag."""

    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='orders')
    group = models.ForeignKey('groups.Group', on_delete=models.CASCADE, related_name='orders')
    payment_status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        unique_together = [['group', 'user']]
        indexes = [
            models.Index(fields=['group', 'payment_status'], name='orders_group_i_7d3f8a_idx'),
            models.Index(fields=['user', 'created_at'], name='orders_user_id_2b6c14_idx'),
        ]
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.user.get_display_name()} in {self.group.title} ({self.payment_status})"

    @property
    def is_paid(self):
        return self.payment_status == PaymentStatus.PAID


class OrderItem(models.Model):
    """
    Snapshot of a (name, price, quantity) line at submission time.

    The optional product link lets menu edits be propagated; unlinked items
    are either custom entries or legacy rows matched by name.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(
        'groups.Product',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )
    name = models.CharField(max_length=200)
    price = models.PositiveIntegerField()
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    class Meta:
        db_table = 'order_items'
        indexes = [
            models.Index(fields=['order'], name='order_items_order_i_4e9a0c_idx'),
            models.Index(fields=['product'], name='order_items_product_8f1b36_idx'),
            models.Index(fields=['name'], name='order_items_name_c52d07_idx'),
        ]
        ordering = ['id']

    def __str__(self):
        return f"{self.name}*{self.quantity}"

    @property
    def line_total(self):
        return self.price * self.quantity
