"""Request schema for updating notification preferences."""

from datetime import time
from zoneinfo import available_timezones

from pydantic import Field, field_validator

from core.enums import Frequency
from core.schemas.base_schema_model import BaseSchemaModel


class PreferenceUpdate(BaseSchemaModel):
    """Partial preference update for one notification type.

    Only fields present in the request are written.
    """

    subtype: str = Field("", description="Scope the row to one subtype")
    push_enabled: bool | None = None
    email_enabled: bool | None = None
    sms_enabled: bool | None = None
    in_app_enabled: bool | None = None
    frequency: Frequency | None = None
    quiet_hours_enabled: bool | None = None
    quiet_hours_start: time | None = None
    quiet_hours_end: time | None = None
    timezone: str | None = Field(None, description="IANA timezone name")
    keywords: list[str] | None = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str | None) -> str | None:
        """Reject timezone names unknown to the tz database."""
        if value is not None and value not in available_timezones():
            raise ValueError(f"Unknown timezone: {value}")
        return value

    def changes(self) -> dict:
        """Fields explicitly provided, excluding the subtype scope."""
        return self.model_dump(exclude_unset=True, exclude={"subtype"})
