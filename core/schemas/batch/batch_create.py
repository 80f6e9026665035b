"""Request schema for defining a campaign batch."""

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from core.schemas.base_schema_model import BaseSchemaModel
from core.schemas.batch.target_criteria import TargetCriteria


class BatchCreate(BaseSchemaModel):
    """Campaign definition.

    A batch with a future ``scheduled_for`` is created ``scheduled``,
    otherwise ``draft``.
    """

    name: str = Field(..., min_length=1, max_length=255)
    template_id: str = Field(..., min_length=1)
    target_users: list[str] = Field(default_factory=list)
    target_criteria: TargetCriteria | None = None
    placeholders: dict[str, Any] = Field(default_factory=dict)
    custom_data: dict[str, Any] = Field(default_factory=dict)
    scheduled_for: datetime | None = None
    respect_quiet_hours: bool = True
    respect_preferences: bool = True
    max_retries: int | None = Field(None, ge=0, le=10)
    batch_size: int | None = Field(None, ge=1, le=1000)
    delay_between_batches: int = Field(0, ge=0, le=3600, description="Seconds")
    created_by: str | None = None

    @model_validator(mode="after")
    def require_audience(self) -> "BatchCreate":
        """A batch needs explicit recipients or criteria to expand."""
        if not self.target_users and (
            self.target_criteria is None or self.target_criteria.is_empty()
        ):
            raise ValueError("Either target_users or target_criteria is required")
        return self
