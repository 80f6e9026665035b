"""Notification service: the inbound API of the notification engine.

Request handlers call this facade; it validates ownership, delegates to the
factory, dispatcher, campaign engine, preference resolver and statistics
aggregator, and queues dispatch work on rq so requests return quickly.
"""

from datetime import datetime
from uuid import UUID

from django.utils import timezone

import django_rq
import structlog

from core.config.engine import engine_setting
from core.exceptions import NotificationNotFoundError, ValidationError
from core.models import (
    Notification,
    NotificationBatch,
    NotificationPreference,
    NotificationTemplate,
)
from core.repositories.batch_repository import NotificationBatchRepository
from core.repositories.notification_repository import NotificationRepository
from core.schemas.batch import BatchCreate
from core.schemas.notification import (
    NotificationCreate,
    NotificationDetail,
    NotificationFilters,
    NotificationUpdateRequest,
    TemplateNotificationRequest,
    UserNotificationListResponse,
)
from core.schemas.preference import PreferenceUpdate
from core.schemas.stats import NotificationStats
from core.schemas.template import TemplateCreate
from core.services.campaign_engine import CampaignEngine, campaign_engine
from core.services.dispatcher import DeliveryDispatcher, dispatcher
from core.services.notification_factory import (
    NotificationFactory,
    notification_factory,
)
from core.services.preference_resolver import PreferenceResolver, preference_resolver
from core.services.statistics import StatisticsAggregator, statistics_aggregator
from core.services.template_store import TemplateStore, template_store

logger = structlog.get_logger(__name__)

DISPATCH_JOB = "core.jobs.delivery_jobs.dispatch_notification_job"


class NotificationService:
    """Service for creating, querying and updating notifications.

    Provides the high-level API used by the HTTP layer. Delivery is queued
    on the configured rq queue unless the caller opts out.
    """

    def __init__(
        self,
        factory: NotificationFactory | None = None,
        delivery: DeliveryDispatcher | None = None,
        campaigns: CampaignEngine | None = None,
        preferences: PreferenceResolver | None = None,
        statistics: StatisticsAggregator | None = None,
        templates: TemplateStore | None = None,
    ) -> None:
        """Initialize notification service."""
        self.factory = factory or notification_factory
        self.delivery = delivery or dispatcher
        self.campaigns = campaigns or campaign_engine
        self.preferences = preferences or preference_resolver
        self.statistics = statistics or statistics_aggregator
        self.templates = templates or template_store

    def queue_dispatch(self, notification: Notification) -> None:
        """Queue a dispatch pass for a notification.

        Args:
            notification: Notification to deliver.
        """
        queue = django_rq.get_queue(engine_setting("QUEUE_NAME"))
        queue.enqueue(DISPATCH_JOB, str(notification.notification_id))
        logger.info(
            "notification_queued",
            notification_id=str(notification.notification_id),
        )

    def create_notification(self, data: NotificationCreate) -> Notification:
        """Create a notification from explicit content.

        Args:
            data: Validated notification content and targeting.

        Returns:
            The stored notification.
        """
        notification = self.factory.create(data)
        if data.dispatch:
            self.queue_dispatch(notification)
        return notification

    def create_from_template(
        self, request: TemplateNotificationRequest
    ) -> Notification:
        """Render a template for one recipient and queue its delivery.

        Raises:
            TemplateNotFoundError: If the template does not exist.
        """
        notification = self.factory.create_from_template(
            request.template_id,
            request.recipient_id,
            placeholders=request.placeholders,
            custom_data=request.custom_data,
            locale=request.locale,
            source_user_id=request.source_user_id,
            related_entity_id=request.related_entity_id,
            related_entity_type=request.related_entity_type,
        )
        if request.dispatch:
            self.queue_dispatch(notification)
        return notification

    def get_notification(
        self, notification_id: UUID | str, recipient_id: str | None = None
    ) -> Notification:
        """Get a notification by ID.

        Args:
            notification_id: Notification ID.
            recipient_id: When given, the notification must belong to this
                recipient; other recipients' notifications are reported as
                missing.

        Raises:
            NotificationNotFoundError: If not found or owned by someone else.
        """
        notification = NotificationRepository.get(notification_id)
        if recipient_id is not None and notification.recipient_id != recipient_id:
            logger.warning(
                "notification_access_denied",
                notification_id=str(notification_id),
                recipient_id=recipient_id,
            )
            raise NotificationNotFoundError(str(notification_id))
        return notification

    def update_notification(
        self,
        notification_id: UUID | str,
        changes: NotificationUpdateRequest,
        recipient_id: str | None = None,
    ) -> Notification:
        """Apply a partial update to editable fields.

        Raises:
            NotificationNotFoundError: If not found or owned by someone else.
            ValidationError: If no field was provided.
        """
        notification = self.get_notification(notification_id, recipient_id)
        fields = changes.model_dump(exclude_unset=True)
        if not fields:
            raise ValidationError("No fields to update")

        NotificationRepository.update_fields(
            notification.notification_id, **fields, updated_at=timezone.now()
        )
        logger.info(
            "notification_updated",
            notification_id=str(notification.notification_id),
            fields=sorted(fields),
        )
        notification.refresh_from_db()
        return notification

    def delete_notification(
        self, notification_id: UUID | str, recipient_id: str | None = None
    ) -> None:
        """Delete a notification.

        Raises:
            NotificationNotFoundError: If not found or owned by someone else.
        """
        notification = self.get_notification(notification_id, recipient_id)
        NotificationRepository.delete(notification.notification_id)
        logger.info(
            "notification_deleted",
            notification_id=str(notification.notification_id),
        )

    def get_user_notifications(
        self, recipient_id: str, filters: NotificationFilters
    ) -> UserNotificationListResponse:
        """Page through a recipient's notifications.

        Returns:
            The page, the total matching the filters and the unread count.
        """
        page, total, unread = NotificationRepository.list_for_recipient(
            recipient_id,
            limit=filters.limit,
            offset=filters.offset,
            filters=filters.as_query(),
        )
        return UserNotificationListResponse(
            notifications=[NotificationDetail.model_validate(n) for n in page],
            total_count=total,
            unread_count=unread,
            limit=filters.limit,
            offset=filters.offset,
        )

    def mark_as_read(
        self, notification_id: UUID | str, recipient_id: str | None = None
    ) -> Notification:
        """Mark a notification as read (idempotent)."""
        self.get_notification(notification_id, recipient_id)
        return self.delivery.mark_as_read(notification_id)

    def mark_as_clicked(
        self,
        notification_id: UUID | str,
        action_taken: str | None = None,
        recipient_id: str | None = None,
    ) -> Notification:
        """Mark a notification as clicked (idempotent)."""
        self.get_notification(notification_id, recipient_id)
        return self.delivery.mark_as_clicked(notification_id, action_taken)

    def mark_as_dismissed(
        self, notification_id: UUID | str, recipient_id: str | None = None
    ) -> Notification:
        """Mark a notification as dismissed (idempotent)."""
        self.get_notification(notification_id, recipient_id)
        return self.delivery.mark_as_dismissed(notification_id)

    def mark_all_as_read(self, recipient_id: str) -> int:
        """Mark all of a recipient's notifications as read."""
        return self.delivery.mark_all_as_read(recipient_id)

    def acknowledge_delivery(
        self, notification_id: UUID | str, channel: str
    ) -> Notification:
        """Apply a provider delivery receipt.

        Raises:
            ValidationError: If the channel is unknown.
        """
        try:
            return self.delivery.acknowledge_delivery(notification_id, channel)
        except ValueError as e:
            raise ValidationError(f"Unknown channel: {channel}") from e

    def create_batch(self, definition: BatchCreate) -> NotificationBatch:
        """Create a campaign batch."""
        return self.campaigns.create_batch(definition)

    def get_batch(self, batch_id: UUID | str) -> NotificationBatch:
        """Get a campaign batch."""
        return NotificationBatchRepository.get(batch_id)

    def start_batch(self, batch_id: UUID | str) -> NotificationBatch:
        """Queue a batch run."""
        return self.campaigns.start_batch(batch_id)

    def cancel_batch(self, batch_id: UUID | str) -> NotificationBatch:
        """Cancel a batch."""
        return self.campaigns.cancel_batch(batch_id)

    def update_user_preferences(
        self, recipient_id: str, notification_type: str, changes: PreferenceUpdate
    ) -> NotificationPreference:
        """Upsert a recipient's preferences for one type."""
        return self.preferences.update(recipient_id, notification_type, changes)

    def get_user_preferences(self, recipient_id: str) -> list[NotificationPreference]:
        """All preference rows of a recipient, defaults included."""
        return self.preferences.list_for_recipient(recipient_id)

    def get_statistics(
        self,
        recipient_id: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> NotificationStats:
        """Aggregate counts over a window."""
        return self.statistics.aggregate(recipient_id, start_date, end_date)

    def create_template(self, data: TemplateCreate) -> NotificationTemplate:
        """Store a new template.

        Raises:
            ValidationError: If the template ID is already taken.
        """
        if NotificationTemplate.objects.filter(template_id=data.template_id).exists():
            raise ValidationError(f"Template {data.template_id} already exists")
        return self.templates.create(data)

    def get_template(self, template_id: str) -> NotificationTemplate:
        """Get a template by ID."""
        return self.templates.get(template_id)

    def list_templates(self, notification_type: str) -> list[NotificationTemplate]:
        """Active templates of one type."""
        return self.templates.get_by_type(notification_type)


notification_service = NotificationService()
