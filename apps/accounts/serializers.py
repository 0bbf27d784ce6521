from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'name',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for search results and friend lists."""

    class Meta:
        model = User
        fields = ['id', 'username', 'name']
        read_only_fields = fields


class UserRegistrationSerializer(serializers.Serializer):
    """Serializer for user registration."""

    username = serializers.CharField(max_length=150, required=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    name = serializers.CharField(max_length=100, required=True)


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    username = serializers.CharField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class UserSearchSerializer(serializers.Serializer):
    """Query parameters for user search."""

    q = serializers.CharField(required=True, allow_blank=False)


class AddFriendSerializer(serializers.Serializer):
    """Serializer for adding a friend."""

    friend_id = serializers.IntegerField(required=True, min_value=1)
