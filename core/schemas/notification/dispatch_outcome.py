"""Result of one dispatch pass over a notification."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel


class DispatchOutcome(BaseSchemaModel):
    """Per-channel statuses after a dispatch pass.

    ``outcome`` is ``sent`` when at least one channel was accepted,
    ``failed`` when nothing is left pending and nothing was accepted,
    otherwise ``pending``.
    """

    notification_id: UUID
    statuses: dict[str, str] = Field(..., description="Status keyed by channel")
    accepted: list[str] = Field(
        default_factory=list, description="Channels accepted in this pass"
    )
    outcome: str
    deferred_until: datetime | None = None
    deferred_reason: str | None = None
