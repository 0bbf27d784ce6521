from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    UserSerializer,
    UserMinimalSerializer,
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSearchSerializer,
    AddFriendSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    search_users,
    add_friend,
    get_friends,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    InvalidSearchQueryError,
    InvalidFriendRequestError,
    AlreadyFriendsError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _token_pair(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new user account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = register_user(**serializer.validated_data)
    except UserRegistrationError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response({
        'message': 'User registered successfully',
        'user': UserSerializer(user).data,
        'tokens': _token_pair(user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with username and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with username and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': _token_pair(user),
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    parameters=[OpenApiParameter('q', str, description='Username, name, or exact user id')],
    responses={
        200: UserMinimalSerializer(many=True),
        400: ErrorResponseSerializer,
    },
    description="Search users by username, display name, or id.",
    tags=['users'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def search(request):
    """Search other users to invite or befriend."""
    params = UserSearchSerializer(data=request.query_params)
    if not params.is_valid():
        return Response(
            {'error': 'Query parameter "q" is required'},
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        users = search_users(user=request.user, query=params.validated_data['q'])
    except InvalidSearchQueryError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(UserMinimalSerializer(users, many=True).data)


@extend_schema(
    methods=['GET'],
    responses={200: UserMinimalSerializer(many=True)},
    description="List the current user's friends.",
    tags=['users'],
)
@extend_schema(
    methods=['POST'],
    request=AddFriendSerializer,
    responses={
        201: MessageResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Add a friend. The relation is symmetric.",
    tags=['users'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def friends(request):
    """List friends or add a new one."""
    if request.method == 'GET':
        return Response(UserMinimalSerializer(get_friends(user=request.user), many=True).data)

    serializer = AddFriendSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'friend_id is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        add_friend(user=request.user, friend_id=serializer.validated_data['friend_id'])
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (InvalidFriendRequestError, AlreadyFriendsError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(
        {'message': 'Friend added successfully'},
        status=status.HTTP_201_CREATED
    )
