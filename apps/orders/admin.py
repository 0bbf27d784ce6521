from django.contrib import admin
from apps.orders.models import Order, OrderItem, PaymentStatus


class OrderItemInline(admin.TabularInline):
    """Inline admin for order line items."""
    model = OrderItem
    extra = 0
    fields = ['product', 'name', 'price', 'quantity']
    raw_id_fields = ['product']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for member orders."""

    list_display = ['id', 'group', 'user', 'payment_status', 'get_total', 'updated_at']
    list_filter = ['payment_status', 'updated_at']
    search_fields = ['group__title', 'user__username', 'user__name']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [OrderItemInline]
    ordering = ['-updated_at']

    def get_total(self, obj):
        """Sum of line totals."""
        return sum(item.line_total for item in obj.items.all())
    get_total.short_description = 'Total'

    actions = ['mark_as_paid', 'mark_as_unpaid']

    def mark_as_paid(self, request, queryset):
        updated = queryset.update(payment_status=PaymentStatus.PAID)
        self.message_user(request, f"Marked {updated} orders as paid")
    mark_as_paid.short_description = "Mark selected orders as paid"

    def mark_as_unpaid(self, request, queryset):
        updated = queryset.update(payment_status=PaymentStatus.UNPAID)
        self.message_user(request, f"Marked {updated} orders as unpaid")
    mark_as_unpaid.short_description = "Mark selected orders as unpaid"

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('group', 'user').prefetch_related('items')
