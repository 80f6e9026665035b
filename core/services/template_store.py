"""Template store for reusable notification blueprints."""

from django.utils import timezone

import structlog

from core.exceptions import TemplateNotFoundError
from core.models import NotificationTemplate
from core.schemas.template import TemplateCreate

logger = structlog.get_logger(__name__)


class TemplateStore:
    """Looks up templates by exact id or by type.

    There is no partial matching: a template is found by its id, or it is
    one of the active templates of a type.
    """

    def get(self, template_id: str) -> NotificationTemplate:
        """Fetch a template by ID.

        Args:
            template_id: Template identifier

        Returns:
            The stored template, active or not.

        Raises:
            TemplateNotFoundError: If no template has this ID.
        """
        try:
            return NotificationTemplate.objects.get(template_id=template_id)
        except NotificationTemplate.DoesNotExist as e:
            logger.warning("template_not_found", template_id=template_id)
            raise TemplateNotFoundError(template_id) from e

    def get_by_type(self, notification_type: str) -> list[NotificationTemplate]:
        """Active templates of one type, ordered by ID."""
        return list(
            NotificationTemplate.objects.filter(
                type=notification_type, is_active=True
            ).order_by("template_id")
        )

    def create(self, data: TemplateCreate) -> NotificationTemplate:
        """Store a new template."""
        now = timezone.now()
        template = NotificationTemplate.objects.create(
            **data.model_dump(),
            created_at=now,
            updated_at=now,
        )
        logger.info(
            "template_created",
            template_id=template.template_id,
            type=template.type,
        )
        return template


template_store = TemplateStore()
