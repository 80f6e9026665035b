"""Progress snapshot emitted while a campaign runs."""

from uuid import UUID

from core.schemas.base_schema_model import BaseSchemaModel


class CampaignProgress(BaseSchemaModel):
    """Counters after expansion (chunk 0) or after a finished chunk."""

    batch_id: UUID
    status: str
    total: int
    sent: int
    delivered: int
    failed: int
    pending: int
    chunk_index: int = 0
    chunk_count: int = 0
    chunk_size: int = 0
