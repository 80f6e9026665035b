"""Campaign batch schemas."""

from core.schemas.batch.batch_create import BatchCreate
from core.schemas.batch.batch_detail import BatchDetail
from core.schemas.batch.campaign_progress import CampaignProgress
from core.schemas.batch.target_criteria import TargetCriteria

__all__ = ["BatchCreate", "BatchDetail", "CampaignProgress", "TargetCriteria"]
