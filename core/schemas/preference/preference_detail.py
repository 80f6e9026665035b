"""Schema for stored preference rows."""

from datetime import time

from core.schemas.base_schema_model import BaseSchemaModel


class PreferenceDetail(BaseSchemaModel):
    """One recipient's preferences for one type (and optional subtype)."""

    recipient_id: str
    type: str
    subtype: str
    push_enabled: bool
    email_enabled: bool
    sms_enabled: bool
    in_app_enabled: bool
    frequency: str
    quiet_hours_enabled: bool
    quiet_hours_start: time | None = None
    quiet_hours_end: time | None = None
    timezone: str
    keywords: list[str]
