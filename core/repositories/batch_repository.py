"""Repository for campaign batches."""

from datetime import datetime
from typing import Any
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import F

from core.enums import BatchStatus
from core.exceptions import BatchNotFoundError
from core.models import NotificationBatch


class NotificationBatchRepository:
    """Encapsulates batch lookups, state transitions and progress counters.

    State changes are compare-and-set updates keyed on the allowed source
    states, and counters move only through ``F()`` expressions so parallel
    workers never lose an increment.
    """

    @staticmethod
    def get(batch_id: UUID | str) -> NotificationBatch:
        """Fetch a batch by ID.

        Raises:
            BatchNotFoundError: If no such batch exists.
        """
        try:
            return NotificationBatch.objects.select_related("template").get(
                batch_id=batch_id
            )
        except (NotificationBatch.DoesNotExist, DjangoValidationError) as e:
            raise BatchNotFoundError(str(batch_id)) from e

    @staticmethod
    def create(**fields: Any) -> NotificationBatch:
        """Insert a batch."""
        return NotificationBatch.objects.create(**fields)

    @staticmethod
    def current_status(batch_id: UUID | str) -> BatchStatus:
        """Read the batch status straight from the database."""
        status = (
            NotificationBatch.objects.filter(batch_id=batch_id)
            .values_list("status", flat=True)
            .first()
        )
        if status is None:
            raise BatchNotFoundError(str(batch_id))
        return BatchStatus(status)

    @staticmethod
    def transition(
        batch_id: UUID | str,
        target: BatchStatus,
        now: datetime,
        **extra: Any,
    ) -> bool:
        """Move a batch into ``target`` if its current state allows it.

        Args:
            batch_id: Batch to update
            target: Requested state
            now: Timestamp written to ``updated_at``
            **extra: Additional fields written in the same statement

        Returns:
            True if this call performed the transition.
        """
        sources = [status.value for status in target.allowed_sources()]
        updated = NotificationBatch.objects.filter(
            batch_id=batch_id, status__in=sources
        ).update(status=target.value, updated_at=now, **extra)
        return updated == 1

    @staticmethod
    def increment_progress(batch_id: UUID | str, **deltas: int) -> None:
        """Atomically add to progress counters.

        Example:
            >>> NotificationBatchRepository.increment_progress(
            ...     batch_id, sent=1, pending=-1
            ... )
        """
        updates = {
            f"progress_{name}": F(f"progress_{name}") + delta
            for name, delta in deltas.items()
            if delta
        }
        if updates:
            NotificationBatch.objects.filter(batch_id=batch_id).update(**updates)

    @staticmethod
    def due_scheduled(now: datetime) -> list[NotificationBatch]:
        """Scheduled batches whose start time has arrived."""
        return list(
            NotificationBatch.objects.filter(
                status=BatchStatus.SCHEDULED.value,
                scheduled_for__lte=now,
            ).order_by("scheduled_for")
        )
