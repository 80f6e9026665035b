"""Request schema for creating a notification from a template."""

from typing import Any

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel


class TemplateNotificationRequest(BaseSchemaModel):
    """Render a stored template for one recipient and dispatch it."""

    template_id: str = Field(..., min_length=1, description="Template to render")
    recipient_id: str = Field(..., min_length=1, description="Recipient user ID")
    placeholders: dict[str, Any] = Field(
        default_factory=dict, description="Values for {{placeholder}} tokens"
    )
    custom_data: dict[str, Any] = Field(
        default_factory=dict, description="Payload merged over the template data"
    )
    locale: str | None = Field(None, description="Locale for localized text")
    source_user_id: str | None = None
    related_entity_id: str | None = None
    related_entity_type: str | None = None
    dispatch: bool = Field(True, description="Dispatch immediately after creation")
