"""Schema for campaign batch details."""

from datetime import datetime
from typing import Any
from uuid import UUID

from core.schemas.base_schema_model import BaseSchemaModel


class BatchDetail(BaseSchemaModel):
    """Batch definition, status and progress counters."""

    batch_id: UUID
    name: str
    template_id: str
    target_users: list[str]
    target_criteria: dict[str, Any]
    status: str
    scheduled_for: datetime | None = None
    progress_total: int
    progress_sent: int
    progress_delivered: int
    progress_failed: int
    progress_pending: int
    respect_quiet_hours: bool
    respect_preferences: bool
    max_retries: int | None = None
    batch_size: int
    delay_between_batches: int
    created_by: str
    error_message: str
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
