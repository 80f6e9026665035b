"""Repository for notification records.

Every mutation of a channel status, engagement flag or bookkeeping flag is a
conditional ``UPDATE ... WHERE`` whose row count tells the caller whether it
won the race.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import F, Q, QuerySet

from core.enums import DeliveryChannel, DeliveryStatus
from core.exceptions import NotificationNotFoundError
from core.models import Notification


class NotificationRepository:
    """Encapsulates notification queries and compare-and-set updates."""

    @staticmethod
    @contextmanager
    def write_batch() -> Iterator[None]:
        """Group several writes so they commit or roll back together.

        Example:
            >>> with NotificationRepository.write_batch():
            ...     NotificationRepository.delete_by_ids(ids)
        """
        with transaction.atomic():
            yield

    @staticmethod
    def get(notification_id: UUID | str) -> Notification:
        """Fetch a notification by ID.

        Raises:
            NotificationNotFoundError: If no such notification exists.
        """
        try:
            return Notification.objects.get(notification_id=notification_id)
        except (Notification.DoesNotExist, DjangoValidationError) as e:
            raise NotificationNotFoundError(str(notification_id)) from e

    @staticmethod
    def create(**fields: Any) -> Notification:
        """Insert a notification."""
        return Notification.objects.create(**fields)

    @staticmethod
    def update_fields(notification_id: UUID | str, **fields: Any) -> int:
        """Unconditionally update plain fields and return the row count."""
        return Notification.objects.filter(notification_id=notification_id).update(
            **fields
        )

    @staticmethod
    def merge_retry_channels(
        notification_id: UUID | str,
        settled: list[DeliveryChannel],
        awaiting: list[DeliveryChannel],
        **fields: Any,
    ) -> list[str]:
        """Update ``retry_channels`` without losing other passes' entries.

        ``settled`` channels leave the list and ``awaiting`` channels join
        it; anything else already waiting for a retry round stays. The row
        is locked while the list is rewritten.

        Args:
            notification_id: Notification to update
            settled: Channels attempted in this pass that need no retry
            awaiting: Channels attempted in this pass that need a retry
            **fields: Other fields written in the same update

        Returns:
            The stored retry channel list.
        """
        with transaction.atomic():
            current = (
                Notification.objects.select_for_update()
                .filter(notification_id=notification_id)
                .values_list("retry_channels", flat=True)
                .first()
            )
            dropped = {channel.value for channel in settled}
            merged = [value for value in current or [] if value not in dropped]
            merged += [ch.value for ch in awaiting if ch.value not in merged]
            Notification.objects.filter(notification_id=notification_id).update(
                retry_channels=merged, **fields
            )
        return merged

    @staticmethod
    def delete(notification_id: UUID | str) -> bool:
        """Delete one notification. Returns False if it did not exist."""
        deleted, _ = Notification.objects.filter(
            notification_id=notification_id
        ).delete()
        return deleted > 0

    @staticmethod
    def transition_channel(
        notification_id: UUID | str,
        channel: DeliveryChannel,
        from_statuses: tuple[DeliveryStatus, ...],
        to_status: DeliveryStatus,
        now: datetime,
        **extra: Any,
    ) -> bool:
        """Move one channel's status forward if it is still in ``from_statuses``.

        Args:
            notification_id: Notification to update
            channel: Channel whose status column is updated
            from_statuses: Statuses the channel must currently hold
            to_status: New status
            now: Timestamp written to ``updated_at``
            **extra: Additional fields written in the same statement

        Returns:
            True if this call performed the transition.
        """
        field = channel.status_field
        updated = Notification.objects.filter(
            notification_id=notification_id,
            **{f"{field}__in": [status.value for status in from_statuses]},
        ).update(**{field: to_status.value}, updated_at=now, **extra)
        return updated == 1

    @staticmethod
    def set_flag(
        notification_id: UUID | str,
        flag: str,
        now: datetime,
        **extra: Any,
    ) -> bool:
        """Set ``read``, ``clicked`` or ``dismissed`` and its timestamp once.

        Returns:
            True if the flag was unset before this call.
        """
        updated = Notification.objects.filter(
            notification_id=notification_id, **{flag: False}
        ).update(**{flag: True, f"{flag}_at": now}, updated_at=now, **extra)
        return updated == 1

    @staticmethod
    def mark_all_read(recipient_id: str, now: datetime) -> int:
        """Mark every unread notification of a recipient as read."""
        with NotificationRepository.write_batch():
            return Notification.objects.filter(
                recipient_id=recipient_id, read=False
            ).update(read=True, read_at=now, updated_at=now)

    @staticmethod
    def set_delivered_at(notification_id: UUID | str, now: datetime) -> bool:
        """Record the first delivery. Returns True only for the first caller."""
        updated = Notification.objects.filter(
            notification_id=notification_id, delivered_at__isnull=True
        ).update(delivered_at=now, updated_at=now)
        return updated == 1

    @staticmethod
    def claim_outcome(notification_id: UUID | str) -> bool:
        """Claim the right to settle this notification's campaign counters."""
        updated = Notification.objects.filter(
            notification_id=notification_id, outcome_recorded=False
        ).update(outcome_recorded=True)
        return updated == 1

    @staticmethod
    def claim_retry_round(
        notification_id: UUID | str, expected_count: int, now: datetime
    ) -> bool:
        """Advance ``retry_count`` by one if no other worker already did."""
        updated = Notification.objects.filter(
            notification_id=notification_id, retry_count=expected_count
        ).update(
            retry_count=F("retry_count") + 1,
            last_retry_at=now,
            updated_at=now,
        )
        return updated == 1

    @staticmethod
    def list_for_recipient(
        recipient_id: str,
        limit: int,
        offset: int,
        filters: dict[str, Any] | None = None,
    ) -> tuple[list[Notification], int, int]:
        """Return one page of a recipient's notifications.

        Args:
            recipient_id: Owner of the notifications
            limit: Page size
            offset: Number of rows skipped
            filters: Optional ``type``, ``read``, ``priority``, ``category``,
                ``start_date`` and ``end_date``

        Returns:
            Tuple of (page, total matching the filters, unread count).
        """
        base = Notification.objects.filter(recipient_id=recipient_id)
        queryset = NotificationRepository._apply_filters(base, filters or {})
        total = queryset.count()
        unread = base.filter(read=False).count()
        page = list(queryset.order_by("-created_at")[offset : offset + limit])
        return page, total, unread

    @staticmethod
    def _apply_filters(
        queryset: QuerySet[Notification], filters: dict[str, Any]
    ) -> QuerySet[Notification]:
        if filters.get("type"):
            queryset = queryset.filter(type=filters["type"])
        if filters.get("read") is not None:
            queryset = queryset.filter(read=filters["read"])
        if filters.get("priority"):
            queryset = queryset.filter(priority=filters["priority"])
        if filters.get("category"):
            queryset = queryset.filter(category=filters["category"])
        if filters.get("start_date"):
            queryset = queryset.filter(created_at__gte=filters["start_date"])
        if filters.get("end_date"):
            queryset = queryset.filter(created_at__lte=filters["end_date"])
        return queryset

    @staticmethod
    def expired_ids(now: datetime, limit: int) -> list[UUID]:
        """IDs of notifications whose ``expires_at`` lies before ``now``."""
        return list(
            Notification.objects.filter(expires_at__lt=now)
            .order_by("expires_at")
            .values_list("notification_id", flat=True)[:limit]
        )

    @staticmethod
    def delete_by_ids(ids: list[UUID]) -> int:
        """Delete the given notifications and return how many were removed."""
        deleted, _ = Notification.objects.filter(notification_id__in=ids).delete()
        return deleted

    @staticmethod
    def due_for_redispatch(now: datetime, limit: int) -> list[Notification]:
        """Deferred notifications whose hold has expired and still have work."""
        pending = DeliveryStatus.PENDING.value
        has_pending = Q()
        for channel in DeliveryChannel:
            has_pending |= Q(**{channel.status_field: pending})
        return list(
            Notification.objects.filter(deferred_until__lte=now)
            .filter(has_pending)
            .order_by("deferred_until")[:limit]
        )

    @staticmethod
    def for_statistics(
        recipient_id: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> QuerySet[Notification]:
        """Notifications falling in a statistics window."""
        queryset = Notification.objects.all()
        if recipient_id:
            queryset = queryset.filter(recipient_id=recipient_id)
        if start_date:
            queryset = queryset.filter(created_at__gte=start_date)
        if end_date:
            queryset = queryset.filter(created_at__lte=end_date)
        return queryset
