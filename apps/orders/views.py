from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.groups.serializers import GroupSummarySerializer
from .serializers import (
    OrderSubmitSerializer,
    OrderDetailSerializer,
    PaymentStatusSerializer,
)
from .services import (
    update_order,
    get_group_summary,
    update_payment_status,
    GroupNotFoundError,
    OrderNotFoundError,
    GroupAccessDeniedError,
    InsufficientPermissionsError,
    GroupClosedError,
    InvalidOrderItemError,
    InvalidPaymentStatusError,
)


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class OrderUpdateResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    order = OrderDetailSerializer()


class PaymentStatusResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    payment_status = serializers.CharField()


@extend_schema(
    request=OrderSubmitSerializer,
    responses={
        200: OrderUpdateResponseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Replace the current user's order in a group.",
    tags=['orders'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def submit_order(request):
    """Create or replace the caller's order."""
    serializer = OrderSubmitSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        order = update_order(
            user=request.user,
            group_id=serializer.validated_data['group_id'],
            items=serializer.validated_data['items']
        )
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except GroupAccessDeniedError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except (GroupClosedError, InvalidOrderItemError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Order updated successfully',
        'order': OrderDetailSerializer(order).data,
    })


@extend_schema(
    responses={
        200: GroupSummarySerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Group summary with every member's order and per-item totals.",
    tags=['orders'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def group_summary(request, group_id):
    """Get the order summary of a group."""
    try:
        summary = get_group_summary(user=request.user, group_id=group_id)
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except GroupAccessDeniedError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(GroupSummarySerializer(summary).data)


@extend_schema(
    request=PaymentStatusSerializer,
    responses={
        200: PaymentStatusResponseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Mark a member's order as PAID or UNPAID (group creator only).",
    tags=['orders'],
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def payment_status(request, order_id):
    """Update an order's payment status."""
    serializer = PaymentStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'error': 'Invalid status. Must be PAID or UNPAID.'},
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        order = update_payment_status(
            order_id=order_id,
            user=request.user,
            status=serializer.validated_data['status']
        )
    except InvalidPaymentStatusError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except OrderNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Payment status updated',
        'payment_status': order.payment_status,
    })
