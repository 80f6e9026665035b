"""Background jobs for running notification campaigns."""

import structlog

from core.exceptions import BatchNotFoundError, InvalidTransitionError
from core.logging.context import correlated_job
from core.services.campaign_engine import campaign_engine

logger = structlog.get_logger(__name__)


@correlated_job
def run_campaign_job(batch_id: str) -> str | None:
    """Run a campaign batch to completion.

    A batch that was cancelled or already started by another worker is
    skipped.

    Args:
        batch_id: UUID of the batch to run.

    Returns:
        The final batch status, or None if the run was skipped.
    """
    try:
        batch = campaign_engine.run(batch_id)
    except BatchNotFoundError:
        logger.error("campaign_batch_not_found", batch_id=batch_id)
        return None
    except InvalidTransitionError as e:
        logger.warning(
            "campaign_run_skipped",
            batch_id=batch_id,
            current_status=e.current,
        )
        return None

    logger.info("campaign_run_finished", batch_id=batch_id, status=batch.status)
    return batch.status


@correlated_job
def start_due_campaigns_job() -> int:
    """Queue every scheduled batch whose start time has passed."""
    return campaign_engine.start_due_batches()
