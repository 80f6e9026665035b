"""Audience filter for campaign batches."""

from datetime import datetime

from pydantic import ConfigDict

from core.enums import UserRole
from core.schemas.base_schema_model import BaseSchemaModel


class TargetCriteria(BaseSchemaModel):
    """Directory filter selecting campaign recipients.

    Every given criterion must match. Unknown keys are rejected so a typo
    cannot silently widen the audience.
    """

    model_config = ConfigDict(extra="forbid")

    roles: list[UserRole] | None = None
    tags: list[str] | None = None
    locations: list[str] | None = None
    last_active_after: datetime | None = None

    def is_empty(self) -> bool:
        """Whether no criterion is set."""
        return not (self.roles or self.tags or self.locations or self.last_active_after)
