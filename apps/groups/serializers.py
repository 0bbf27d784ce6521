from rest_framework import serializers

from .models import Product, GroupStatus
from apps.orders.serializers import (
    OrderItemInputSerializer,
    OrderDetailSerializer,
    OrderUserSerializer,
    MemberOrderSerializer,
    OrderStatSerializer,
)


class ProductSerializer(serializers.ModelSerializer):
    """Menu entry as stored."""

    class Meta:
        model = Product
        fields = ['id', 'name', 'price']
        read_only_fields = fields


class ProductInputSerializer(serializers.Serializer):
    """Menu entry in a create or update request. Omit ``id`` to add a new product."""

    id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(max_length=200)
    price = serializers.IntegerField(min_value=0)


class GroupTimesMixin:
    """Reject windows that end before they start."""

    def validate(self, attrs):
        if attrs['end_time'] < attrs['start_time']:
            raise serializers.ValidationError(
                {'end_time': 'End time must not be before start time.'}
            )
        return attrs


class GroupCreateSerializer(GroupTimesMixin, serializers.Serializer):
    """Serializer for creating groups."""

    title = serializers.CharField(max_length=200)
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    products = ProductInputSerializer(many=True, required=False, default=list)
    invited_user_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        required=False,
        default=list
    )
    initial_order = OrderItemInputSerializer(many=True, required=False, default=list)


class GroupUpdateSerializer(GroupTimesMixin, serializers.Serializer):
    """
    Serializer for editing groups.

    ``products`` is the full desired menu; leave it out to keep the menu
    unchanged. ``invited_user_ids`` is the full desired member list.
    """

    title = serializers.CharField(max_length=200)
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    products = ProductInputSerializer(many=True, required=False)
    invited_user_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        required=False,
        default=list
    )


class GroupStatusSerializer(serializers.Serializer):
    """Serializer for opening or closing a group."""

    status = serializers.ChoiceField(
        choices=GroupStatus.choices,
        error_messages={'invalid_choice': 'Invalid status'}
    )


class InviteSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    name = serializers.CharField()


class GroupOverviewSerializer(serializers.Serializer):
    """Dashboard entry: group metadata with derived totals for the viewer."""

    id = serializers.IntegerField()
    title = serializers.CharField()
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()
    creator = OrderUserSerializer()
    products = ProductSerializer(many=True)
    participants = serializers.ListField(child=serializers.CharField())
    invites = InviteSerializer(many=True)
    total_group_amount = serializers.IntegerField()
    order_stats = OrderStatSerializer(many=True)
    my_order = OrderDetailSerializer(allow_null=True)
    is_creator = serializers.BooleanField()


class GroupSummarySerializer(GroupOverviewSerializer):
    """Overview plus every member's order."""

    all_orders = MemberOrderSerializer(many=True)
