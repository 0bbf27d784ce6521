from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models


class UserManager(BaseUserManager):
    """Custom user manager for username-based authentication."""

    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError('Username is required')

        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(username, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """User identified by a unique handle, shown to others by display name."""

    username = models.CharField(max_length=150, unique=True, db_index=True)
    name = models.CharField(max_length=100, blank=True)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)

    objects = UserManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['name'], name='users_name_8e9b1c_idx'),
            models.Index(fields=['created_at'], name='users_created_4f2a7d_idx'),
        ]

    def __str__(self):
        return self.username

    def get_display_name(self):
        """Return display name or username."""
        return self.name or self.username

    def is_friend_of(self, other):
        return self.friendships.filter(to_user=other).exists()


class Friendship(models.Model):
    """
    One direction of a friend relation.

    Friendship is symmetric: every A -> B edge has a matching B -> A edge,
    and both are written in the same transaction.
    """

    from_user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='friendships')
    to_user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='friend_of')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'friendships'
        unique_together = [['from_user', 'to_user']]
        ordering = ['created_at']

    def __str__(self):
        return f"{self.from_user.username} -> {self.to_user.username}"
