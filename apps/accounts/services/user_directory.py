"""User search service - finding people to invite or befriend."""

from typing import List

from django.contrib.auth import get_user_model
from django.db.models import Q

from .exceptions import InvalidSearchQueryError

User = get_user_model()


def search_users(*, user: User, query: str, limit: int = 10) -> List[User]:
    """
    Search users by handle, display name, or exact id.

    This operation:
    1. Matches username or name case-insensitively (substring)
    2. Excludes the requesting user
    3. If the query is numeric and a user has exactly that id,
       puts that user first (without duplicating them)

    Args:
        user: User performing the search (excluded from results)
        query: Search string
        limit: Maximum number of substring matches

    Returns:
        List of User instances

    Raises:
        InvalidSearchQueryError: If query is empty
    """
    query = (query or '').strip()
    if not query:
        raise InvalidSearchQueryError('Query parameter "q" is required')

    users = list(
        User.objects
        .filter(Q(username__icontains=query) | Q(name__icontains=query))
        .exclude(id=user.id)
        .order_by('username')[:limit]
    )

    if query.isdigit():
        id_match = User.objects.filter(id=int(query)).exclude(id=user.id).first()
        if id_match and id_match not in users:
            users.insert(0, id_match)

    return users
