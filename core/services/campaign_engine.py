"""Campaign engine: expands a batch audience and drives it through dispatch.

A run expands the audience, moves the batch to ``sending`` and processes
recipients in chunks of ``batch_size``. Every recipient gets one
notification from the batch template, dispatched with the batch's gating
toggles. Between chunks the engine sleeps ``delay_between_batches`` seconds
in short slices and stops early if the batch was cancelled meanwhile.
"""

import time
from collections.abc import Callable, Iterator
from datetime import datetime
from uuid import UUID

from django.utils import timezone

import django_rq
import structlog
from pydantic import ValidationError as PydanticValidationError

from core.config.engine import engine_setting
from core.constants import PACING_SLICE_SECONDS
from core.enums import BatchStatus
from core.exceptions import ExpansionError, InvalidTransitionError
from core.models import NotificationBatch
from core.repositories.batch_repository import NotificationBatchRepository
from core.repositories.notification_repository import NotificationRepository
from core.repositories.user_repository import UserRepository
from core.schemas.batch import BatchCreate, CampaignProgress, TargetCriteria
from core.services.dispatcher import DeliveryDispatcher, dispatcher
from core.services.notification_factory import (
    NotificationFactory,
    notification_factory,
)
from core.services.template_store import TemplateStore, template_store

logger = structlog.get_logger(__name__)

RUN_CAMPAIGN_JOB = "core.jobs.campaign_jobs.run_campaign_job"


def chunked(items: list[str], size: int) -> list[list[str]]:
    """Split ``items`` into consecutive chunks of at most ``size``.

    Example:
        >>> chunked(["a", "b", "c", "d", "e"], 2)
        [['a', 'b'], ['c', 'd'], ['e']]
    """
    return [items[start : start + size] for start in range(0, len(items), size)]


class CampaignEngine:
    """Creates, schedules, runs and cancels campaign batches.

    Args:
        factory: Builds one notification per recipient.
        delivery: Dispatches each notification.
        store: Template store used to validate batch templates.
        clock: Callable returning the current aware datetime.
        sleep: Blocking sleep used for inter-chunk pacing.
    """

    def __init__(
        self,
        factory: NotificationFactory | None = None,
        delivery: DeliveryDispatcher | None = None,
        store: TemplateStore | None = None,
        clock: Callable[[], datetime] = timezone.now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize campaign engine."""
        self.factory = factory or notification_factory
        self.delivery = delivery or dispatcher
        self.store = store or template_store
        self.clock = clock
        self.sleep = sleep

    def create_batch(self, definition: BatchCreate) -> NotificationBatch:
        """Store a batch definition.

        A future ``scheduled_for`` creates the batch ``scheduled`` and
        registers a run with the rq scheduler at that time; otherwise the
        batch starts as ``draft``.

        Raises:
            TemplateNotFoundError: If the batch template does not exist.
        """
        template = self.store.get(definition.template_id)
        now = self.clock()
        scheduled = (
            definition.scheduled_for is not None and definition.scheduled_for > now
        )

        batch = NotificationBatchRepository.create(
            name=definition.name,
            template=template,
            target_users=definition.target_users,
            target_criteria=(
                definition.target_criteria.model_dump(mode="json", exclude_none=True)
                if definition.target_criteria
                else {}
            ),
            placeholders=definition.placeholders,
            custom_data=definition.custom_data,
            status=(BatchStatus.SCHEDULED if scheduled else BatchStatus.DRAFT).value,
            scheduled_for=definition.scheduled_for,
            respect_quiet_hours=definition.respect_quiet_hours,
            respect_preferences=definition.respect_preferences,
            max_retries=definition.max_retries,
            batch_size=definition.batch_size or engine_setting("DEFAULT_BATCH_SIZE"),
            delay_between_batches=definition.delay_between_batches,
            created_by=definition.created_by or "",
            created_at=now,
            updated_at=now,
        )

        if scheduled:
            scheduler = django_rq.get_scheduler(engine_setting("CAMPAIGN_QUEUE_NAME"))
            scheduler.enqueue_at(
                definition.scheduled_for, RUN_CAMPAIGN_JOB, str(batch.batch_id)
            )

        logger.info(
            "batch_created",
            batch_id=str(batch.batch_id),
            template_id=template.template_id,
            status=batch.status,
            scheduled_for=(
                definition.scheduled_for.isoformat() if scheduled else None
            ),
        )
        return batch

    def start_batch(self, batch_id: UUID | str) -> NotificationBatch:
        """Enqueue an immediate run of a draft or scheduled batch.

        Raises:
            BatchNotFoundError: If the batch does not exist.
            InvalidTransitionError: If the batch can no longer start.
        """
        batch = NotificationBatchRepository.get(batch_id)
        if batch.batch_status not in BatchStatus.SENDING.allowed_sources():
            raise InvalidTransitionError(
                batch.batch_id, batch.status, BatchStatus.SENDING.value
            )
        queue = django_rq.get_queue(engine_setting("CAMPAIGN_QUEUE_NAME"))
        queue.enqueue(RUN_CAMPAIGN_JOB, str(batch.batch_id))
        logger.info("batch_start_requested", batch_id=str(batch.batch_id))
        return batch

    def cancel_batch(self, batch_id: UUID | str) -> NotificationBatch:
        """Cancel a draft, scheduled or sending batch.

        A sending batch finishes its in-flight chunk and starts no more.

        Raises:
            BatchNotFoundError: If the batch does not exist.
            InvalidTransitionError: If the batch is already terminal.
        """
        now = self.clock()
        if not NotificationBatchRepository.transition(
            batch_id, BatchStatus.CANCELLED, now, completed_at=now
        ):
            current = NotificationBatchRepository.current_status(batch_id)
            raise InvalidTransitionError(
                batch_id, current.value, BatchStatus.CANCELLED.value
            )
        logger.info("batch_cancelled", batch_id=str(batch_id))
        return NotificationBatchRepository.get(batch_id)

    def start_due_batches(self) -> int:
        """Enqueue runs for scheduled batches whose time has come.

        Returns:
            Number of batches enqueued.
        """
        due = NotificationBatchRepository.due_scheduled(self.clock())
        queue = django_rq.get_queue(engine_setting("CAMPAIGN_QUEUE_NAME"))
        for batch in due:
            queue.enqueue(RUN_CAMPAIGN_JOB, str(batch.batch_id))
        if due:
            logger.info("due_batches_enqueued", count=len(due))
        return len(due)

    def expand(self, batch: NotificationBatch) -> list[str]:
        """Resolve the batch audience.

        Explicit ``target_users`` come first, followed by directory matches
        for ``target_criteria``; duplicates keep their first position.

        Raises:
            ExpansionError: If the criteria are malformed or nobody matches.
        """
        if not isinstance(batch.target_users, list):
            raise ExpansionError("target_users must be a list of user IDs")
        try:
            criteria = TargetCriteria.model_validate(batch.target_criteria or {})
        except PydanticValidationError as e:
            raise ExpansionError(f"Invalid target criteria: {e}") from e

        recipients = [str(user_id) for user_id in batch.target_users if user_id]
        if not criteria.is_empty():
            recipients += UserRepository.match(
                roles=criteria.roles,
                tags=criteria.tags,
                locations=criteria.locations,
                last_active_after=criteria.last_active_after,
            )

        audience = list(dict.fromkeys(recipients))
        if not audience:
            raise ExpansionError("Batch audience is empty")
        return audience

    def run(self, batch_id: UUID | str) -> NotificationBatch:
        """Run a batch to completion and return its final state.

        Expansion failures leave the batch ``failed`` and are not raised.

        Raises:
            BatchNotFoundError: If the batch does not exist.
            InvalidTransitionError: If the batch cannot start sending.
        """
        try:
            for _ in self.iter_run(batch_id):
                pass
        except ExpansionError:
            # Already recorded on the batch as failed
            pass
        return NotificationBatchRepository.get(batch_id)

    def iter_run(self, batch_id: UUID | str) -> Iterator[CampaignProgress]:
        """Run a batch, yielding progress after expansion and every chunk.

        Raises:
            BatchNotFoundError: If the batch does not exist.
            InvalidTransitionError: If the batch cannot start sending.
            ExpansionError: If the audience cannot be resolved; the batch is
                marked ``failed`` first.
        """
        batch = NotificationBatchRepository.get(batch_id)
        if batch.batch_status not in BatchStatus.SENDING.allowed_sources():
            raise InvalidTransitionError(
                batch.batch_id, batch.status, BatchStatus.SENDING.value
            )

        try:
            recipients = self.expand(batch)
        except ExpansionError as e:
            now = self.clock()
            NotificationBatchRepository.transition(
                batch.batch_id,
                BatchStatus.FAILED,
                now,
                error_message=str(e),
                completed_at=now,
            )
            logger.error(
                "batch_expansion_failed", batch_id=str(batch.batch_id), error=str(e)
            )
            raise

        total = len(recipients)
        now = self.clock()
        if not NotificationBatchRepository.transition(
            batch.batch_id,
            BatchStatus.SENDING,
            now,
            progress_total=total,
            progress_pending=total,
            progress_sent=0,
            progress_failed=0,
            progress_delivered=0,
            started_at=now,
        ):
            current = NotificationBatchRepository.current_status(batch.batch_id)
            raise InvalidTransitionError(
                batch.batch_id, current.value, BatchStatus.SENDING.value
            )

        chunks = chunked(recipients, max(batch.batch_size, 1))
        logger.info(
            "batch_sending_started",
            batch_id=str(batch.batch_id),
            total=total,
            chunk_count=len(chunks),
        )
        yield self._progress(batch.batch_id, 0, len(chunks), 0)

        cancelled = False
        for index, chunk in enumerate(chunks, start=1):
            paced = index == 1 or self._pace(
                batch.batch_id, batch.delay_between_batches
            )
            if not paced or self._is_cancelled(batch.batch_id):
                cancelled = True
                break

            for recipient_id in chunk:
                self._send_to(batch, recipient_id)

            logger.info(
                "batch_chunk_processed",
                batch_id=str(batch.batch_id),
                chunk_index=index,
                chunk_size=len(chunk),
            )
            yield self._progress(batch.batch_id, index, len(chunks), len(chunk))

        now = self.clock()
        if cancelled or not NotificationBatchRepository.transition(
            batch.batch_id, BatchStatus.COMPLETED, now, completed_at=now
        ):
            logger.info("batch_stopped_cancelled", batch_id=str(batch.batch_id))
        else:
            logger.info("batch_completed", batch_id=str(batch.batch_id), total=total)

        yield self._progress(batch.batch_id, len(chunks), len(chunks), 0)

    def _send_to(self, batch: NotificationBatch, recipient_id: str) -> None:
        """Create and dispatch one recipient's notification.

        Errors are counted as a failed recipient and never stop the chunk.
        """
        notification = None
        try:
            notification = self.factory.create_from_template(
                batch.template_id,
                recipient_id,
                placeholders=batch.placeholders,
                custom_data=batch.custom_data,
                batch=batch,
                max_retries=batch.max_retries,
            )
            self.delivery.dispatch(
                notification,
                respect_quiet_hours=batch.respect_quiet_hours,
                respect_preferences=batch.respect_preferences,
            )
        except Exception:
            logger.exception(
                "batch_recipient_failed",
                batch_id=str(batch.batch_id),
                recipient_id=recipient_id,
            )
            if notification is not None and not NotificationRepository.claim_outcome(
                notification.notification_id
            ):
                return
            NotificationBatchRepository.increment_progress(
                batch.batch_id, failed=1, pending=-1
            )

    def _pace(self, batch_id: UUID, seconds: int) -> bool:
        """Sleep between chunks. Returns False if the batch was cancelled."""
        remaining = float(seconds)
        while remaining > 0:
            if self._is_cancelled(batch_id):
                return False
            step = min(PACING_SLICE_SECONDS, remaining)
            self.sleep(step)
            remaining -= step
        return True

    @staticmethod
    def _is_cancelled(batch_id: UUID) -> bool:
        return (
            NotificationBatchRepository.current_status(batch_id)
            == BatchStatus.CANCELLED
        )

    @staticmethod
    def _progress(
        batch_id: UUID, chunk_index: int, chunk_count: int, chunk_size: int
    ) -> CampaignProgress:
        batch = NotificationBatchRepository.get(batch_id)
        return CampaignProgress(
            batch_id=batch.batch_id,
            status=batch.status,
            total=batch.progress_total,
            sent=batch.progress_sent,
            delivered=batch.progress_delivered,
            failed=batch.progress_failed,
            pending=batch.progress_pending,
            chunk_index=chunk_index,
            chunk_count=chunk_count,
            chunk_size=chunk_size,
        )


campaign_engine = CampaignEngine()
