"""Periodic maintenance jobs: expiry sweeps and statistics snapshots."""

import structlog

from core.config.engine import engine_setting
from core.logging.context import correlated_job
from core.services.expiry_sweeper import expiry_sweeper
from core.services.statistics import statistics_aggregator

logger = structlog.get_logger(__name__)


@correlated_job
def sweep_expired_notifications_job(limit: int | None = None) -> int:
    """Purge expired notifications.

    Args:
        limit: Maximum rows to delete; defaults to the ``SWEEP_LIMIT`` setting.

    Returns:
        Number of notifications deleted.
    """
    return expiry_sweeper.sweep(limit or engine_setting("SWEEP_LIMIT"))


@correlated_job
def record_stats_snapshot_job(
    recipient_id: str | None = None, period: str = "day"
) -> str:
    """Store a statistics snapshot for one recipient or the whole system.

    Returns:
        ID of the stored snapshot row.
    """
    snapshot = statistics_aggregator.snapshot(recipient_id, period)
    return str(snapshot.pk)
