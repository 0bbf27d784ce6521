from rest_framework import viewsets, status, serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    ProductSerializer,
    GroupCreateSerializer,
    GroupUpdateSerializer,
    GroupStatusSerializer,
    GroupOverviewSerializer,
)

from apps.groups.services import (
    create_group,
    get_group_by_id,
    update_group,
    delete_group,
    update_group_status,
    get_dashboard_groups,
    # Exceptions
    GroupNotFoundError,
    InsufficientPermissionsError,
    InvalidGroupDataError,
    GroupConflictError,
)
from apps.orders.services import build_group_overview


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class GroupUpdateResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    products = ProductSerializer(many=True)


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class GroupStatusResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    id = serializers.IntegerField()
    status = serializers.CharField()


def _error(exc, code):
    return Response({'error': str(exc)}, status=code)


class GroupViewSet(viewsets.ViewSet):
    """
    ViewSet for group lifecycle operations.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Dashboard of groups the user created or joined
    create: Create a group with menu, invitees and the creator's order
    update: Edit title, dates, members and menu (creator only)
    destroy: Delete a fully paid group (creator only)
    status: Open or close the group (creator only)
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    @extend_schema(responses={200: GroupOverviewSerializer(many=True)}, tags=['groups'])
    def list(self, request):
        """Get the dashboard of the user's groups."""
        groups = get_dashboard_groups(user=request.user)
        return Response(GroupOverviewSerializer(groups, many=True).data)

    @extend_schema(
        request=GroupCreateSerializer,
        responses={201: GroupOverviewSerializer, 400: ErrorResponseSerializer},
        tags=['groups'],
    )
    def create(self, request):
        """Create a new group."""
        serializer = GroupCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            group = create_group(creator=request.user, **serializer.validated_data)
        except InvalidGroupDataError as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        overview = build_group_overview(get_group_by_id(group_id=group.id), request.user)
        return Response(
            GroupOverviewSerializer(overview).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(
        request=GroupUpdateSerializer,
        responses={
            200: GroupUpdateResponseSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=['groups'],
    )
    def update(self, request, pk=None):
        """Update a group (creator only)."""
        serializer = GroupUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            products = update_group(
                group_id=pk,
                user=request.user,
                **serializer.validated_data
            )
        except GroupNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return _error(e, status.HTTP_403_FORBIDDEN)
        except (InvalidGroupDataError, GroupConflictError) as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        return Response({
            'message': 'Group updated successfully',
            'products': ProductSerializer(products, many=True).data,
        })

    @extend_schema(
        responses={
            200: MessageResponseSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=['groups'],
    )
    def destroy(self, request, pk=None):
        """Delete a group (creator only, all orders paid)."""
        try:
            delete_group(group_id=pk, user=request.user)
        except GroupNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return _error(e, status.HTTP_403_FORBIDDEN)
        except GroupConflictError as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        return Response({'message': 'Group deleted successfully'})

    @extend_schema(
        request=GroupStatusSerializer,
        responses={
            200: GroupStatusResponseSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=['groups'],
    )
    @action(detail=True, methods=['put'], url_path='status')
    def set_status(self, request, pk=None):
        """Open or close a group (creator only)."""
        serializer = GroupStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'error': 'Invalid status'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            group = update_group_status(
                group_id=pk,
                user=request.user,
                status=serializer.validated_data['status']
            )
        except GroupNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return _error(e, status.HTTP_403_FORBIDDEN)
        except InvalidGroupDataError as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        return Response({
            'message': 'Group status updated',
            'id': group.id,
            'status': group.status,
        })
