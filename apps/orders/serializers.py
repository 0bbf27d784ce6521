from rest_framework import serializers

from apps.orders.models import OrderItem, PaymentStatus


class OrderItemSerializer(serializers.ModelSerializer):
    """Stored line item with its snapshot name and price."""

    product_id = serializers.IntegerField(read_only=True, allow_null=True)
    line_total = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'product_id', 'name', 'price', 'quantity', 'line_total']
        read_only_fields = fields


class OrderItemInputSerializer(serializers.Serializer):
    """
    Submitted line item.

    A menu item is identified by ``product_id`` or its exact ``name``;
    anything else is a custom item and must carry a ``price``.
    """

    product_id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(required=False, allow_blank=True, max_length=200)
    price = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    quantity = serializers.IntegerField(min_value=1)

    def validate(self, attrs):
        if attrs.get('product_id') is None and not (attrs.get('name') or '').strip():
            raise serializers.ValidationError("Each item needs a name or a product_id")
        return attrs


class OrderSubmitSerializer(serializers.Serializer):
    """Replace the caller's order in a group."""

    group_id = serializers.IntegerField(min_value=1)
    items = OrderItemInputSerializer(many=True)


class PaymentStatusSerializer(serializers.Serializer):
    """Serializer for setting an order's payment status."""

    status = serializers.ChoiceField(
        choices=PaymentStatus.choices,
        error_messages={'invalid_choice': 'Invalid status. Must be PAID or UNPAID.'}
    )


class OrderDetailSerializer(serializers.Serializer):
    """One member's order with totals."""

    id = serializers.IntegerField()
    items = OrderItemSerializer(many=True)
    total = serializers.IntegerField()
    items_summary = serializers.CharField()
    payment_status = serializers.CharField()
    updated_at = serializers.DateTimeField()


class OrderUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()


class MemberOrderSerializer(OrderDetailSerializer):
    """Order detail plus the member it belongs to."""

    user_id = serializers.IntegerField()
    user = OrderUserSerializer()


class OrderStatSerializer(serializers.Serializer):
    """Per-item totals across every order in a group."""

    name = serializers.CharField()
    quantity = serializers.IntegerField()
    total_price = serializers.IntegerField()
