"""Result of resolving a recipient's preferences."""

from datetime import datetime

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel
from core.schemas.preference.preference_detail import PreferenceDetail


class ResolvedPreference(BaseSchemaModel):
    """Gating decision for one recipient and notification type.

    ``enabled_channels`` holds channel values (``push``, ``email``, ``sms``,
    ``in_app``). ``quiet_hours_end_at`` is the UTC instant the current quiet
    window closes, set only while ``quiet_now`` is true. ``next_window_at``
    is the next hourly, daily or weekly boundary for non-immediate frequencies.
    """

    enabled_channels: frozenset[str] = Field(default_factory=frozenset)
    quiet_now: bool = False
    frequency: str
    quiet_hours_end_at: datetime | None = None
    next_window_at: datetime | None = None
    timezone: str = "UTC"
    preference: PreferenceDetail | None = None
