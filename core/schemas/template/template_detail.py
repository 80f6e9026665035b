"""Schema for template details."""

from typing import Any

from core.schemas.base_schema_model import BaseSchemaModel


class TemplateDetail(BaseSchemaModel):
    """Stored template as returned by the API."""

    template_id: str
    name: str
    type: str
    subtype: str
    title: str
    body: str
    default_data: dict[str, Any]
    priority: str
    channel: str
    category: str
    allow_customization: bool
    requires_auth: bool
    max_retries: int
    retry_delay_minutes: int
    expiry_hours: int
    localization: dict[str, dict[str, str]]
    is_active: bool
