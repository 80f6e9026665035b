"""Repository for recipient directory queries."""

from datetime import datetime

from core.models import User


class UserRepository:
    """Repository for encapsulating user database queries.

    Provides a clean interface for the directory lookups the notification
    engine needs: channel addresses and campaign audience matching.
    """

    @staticmethod
    def get_user(user_id: str) -> User | None:
        """Look up one user, returning None when the directory has no entry."""
        return User.objects.filter(user_id=user_id).first()

    @staticmethod
    def match(
        roles: list[str] | None = None,
        tags: list[str] | None = None,
        locations: list[str] | None = None,
        last_active_after: datetime | None = None,
    ) -> list[str]:
        """Return IDs of active users matching every given criterion.

        Roles, locations and last activity are filtered in SQL. Tags live in a
        JSON list, so the tag filter (any overlap) runs over the narrowed rows.
        Entries of a user's tag list that are not strings never match.

        Args:
            roles: Accept users holding any of these roles
            tags: Accept users carrying at least one of these tags
            locations: Accept users in any of these locations
            last_active_after: Accept users active after this instant

        Returns:
            Matching user IDs ordered by ID.

        Example:
            >>> UserRepository.match(roles=["mentor"], tags=["python"])
            ['u1', 'u7']
        """
        queryset = User.objects.filter(is_active=True)
        if roles:
            queryset = queryset.filter(role__in=roles)
        if locations:
            queryset = queryset.filter(location__in=locations)
        if last_active_after:
            queryset = queryset.filter(last_active_at__gt=last_active_after)

        rows = queryset.order_by("user_id").values_list("user_id", "tags")
        if not tags:
            return [user_id for user_id, _ in rows]

        wanted = set(tags)
        return [
            user_id
            for user_id, user_tags in rows
            if any(
                tag in wanted for tag in (user_tags or []) if isinstance(tag, str)
            )
        ]
