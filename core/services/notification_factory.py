"""Notification factory: builds Notification records.

Two entry points: rendering a stored template for one recipient, and direct
construction for system-generated notifications that bypass templating.
Both start every targeted channel in ``pending`` with all engagement flags
cleared and ``created_at == updated_at``.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from django.utils import timezone

import structlog

from core.config.engine import engine_setting
from core.enums import DeliveryChannel, DeliveryStatus
from core.models import Notification, NotificationBatch
from core.repositories.notification_repository import NotificationRepository
from core.schemas.notification import NotificationCreate
from core.services.renderer import render
from core.services.template_store import TemplateStore, template_store

logger = structlog.get_logger(__name__)


def _build_metadata(**values: Any) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


class NotificationFactory:
    """Creates notifications from templates or explicit content.

    Args:
        store: Template store used to look up templates.
        clock: Callable returning the current aware datetime.
    """

    def __init__(
        self,
        store: TemplateStore | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        """Initialize factory."""
        self.store = store or template_store
        self.clock = clock

    def create_from_template(
        self,
        template_id: str,
        recipient_id: str,
        placeholders: dict[str, Any] | None = None,
        custom_data: dict[str, Any] | None = None,
        locale: str | None = None,
        batch: NotificationBatch | None = None,
        max_retries: int | None = None,
        source_user_id: str | None = None,
        related_entity_id: str | None = None,
        related_entity_type: str | None = None,
    ) -> Notification:
        """Render a template for one recipient and store the result.

        Args:
            template_id: Template to render
            recipient_id: Recipient user ID
            placeholders: Values for ``{{placeholder}}`` tokens
            custom_data: Payload merged over the template's default data;
                custom values win on key conflicts
            locale: Optional locale for localized title and body
            batch: Campaign batch the notification belongs to
            max_retries: Overrides the template's retry limit
            source_user_id: User who triggered the notification
            related_entity_id: ID of the entity the notification is about
            related_entity_type: Type of that entity

        Returns:
            The stored notification.

        Raises:
            TemplateNotFoundError: If the template does not exist.
        """
        template = self.store.get(template_id)
        content = render(template, placeholders or {}, locale=locale)
        now = self.clock()

        expires_at = None
        if template.expiry_hours > 0:
            expires_at = now + timedelta(hours=template.expiry_hours)

        notification = NotificationRepository.create(
            recipient_id=recipient_id,
            type=template.type,
            subtype=template.subtype,
            category=template.category,
            priority=template.priority,
            channel=template.channel,
            title=content.title,
            body=content.body,
            data={**(template.default_data or {}), **(custom_data or {})},
            created_at=now,
            updated_at=now,
            expires_at=expires_at,
            batch=batch,
            max_retries=(
                max_retries if max_retries is not None else template.max_retries
            ),
            retry_delay_minutes=template.retry_delay_minutes,
            metadata=_build_metadata(
                template_id=template.template_id,
                campaign_id=str(batch.batch_id) if batch else None,
                locale=locale,
                source_user_id=source_user_id,
                related_entity_id=related_entity_id,
                related_entity_type=related_entity_type,
            ),
        )

        logger.info(
            "notification_created_from_template",
            notification_id=str(notification.notification_id),
            template_id=template_id,
            recipient_id=recipient_id,
            batch_id=str(batch.batch_id) if batch else None,
        )
        return notification

    def create(self, data: NotificationCreate) -> Notification:
        """Store a notification built from explicit content.

        Channels outside ``data.channels`` start as ``not_applicable``.
        """
        now = self.clock()
        targets = (
            {DeliveryChannel(channel) for channel in data.channels}
            if data.channels is not None
            else set(DeliveryChannel)
        )
        statuses = {
            channel.status_field: (
                DeliveryStatus.PENDING.value
                if channel in targets
                else DeliveryStatus.NOT_APPLICABLE.value
            )
            for channel in DeliveryChannel
        }

        notification = NotificationRepository.create(
            recipient_id=data.recipient_id,
            type=data.type,
            subtype=data.subtype,
            category=data.category,
            priority=data.priority,
            channel=data.channel,
            title=data.title,
            body=data.body,
            data=data.data,
            **statuses,
            created_at=now,
            updated_at=now,
            scheduled_for=data.scheduled_for,
            expires_at=data.expires_at,
            max_retries=(
                data.max_retries
                if data.max_retries is not None
                else engine_setting("DEFAULT_MAX_RETRIES")
            ),
            retry_delay_minutes=(
                data.retry_delay_minutes
                if data.retry_delay_minutes is not None
                else engine_setting("DEFAULT_RETRY_DELAY_MINUTES")
            ),
            metadata=_build_metadata(
                source_user_id=data.source_user_id,
                related_entity_id=data.related_entity_id,
                related_entity_type=data.related_entity_type,
            ),
        )

        logger.info(
            "notification_created",
            notification_id=str(notification.notification_id),
            recipient_id=data.recipient_id,
            type=notification.type,
            channels=sorted(channel.value for channel in targets),
        )
        return notification


notification_factory = NotificationFactory()
