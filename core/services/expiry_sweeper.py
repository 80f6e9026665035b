"""Expiry sweeper: purges notifications past ``expires_at``."""

from collections.abc import Callable
from datetime import datetime

from django.db import DatabaseError
from django.utils import timezone

import structlog

from core.constants import DEFAULT_EXPIRED_SWEEP_LIMIT
from core.repositories.notification_repository import NotificationRepository

logger = structlog.get_logger(__name__)


class ExpirySweeper:
    """Deletes expired notifications in bounded batches.

    Notifications without ``expires_at`` are never touched.
    """

    def __init__(self, clock: Callable[[], datetime] = timezone.now) -> None:
        """Initialize sweeper with an injectable clock."""
        self.clock = clock

    def sweep(self, limit: int = DEFAULT_EXPIRED_SWEEP_LIMIT) -> int:
        """Delete up to ``limit`` notifications whose ``expires_at`` has passed.

        The deletions commit as one atomic write. Database errors are logged
        and reported as zero purged rows.

        Returns:
            Number of notifications deleted.
        """
        now = self.clock()
        try:
            with NotificationRepository.write_batch():
                ids = NotificationRepository.expired_ids(now, limit)
                if not ids:
                    return 0
                deleted = NotificationRepository.delete_by_ids(ids)
        except DatabaseError as e:
            logger.error("expired_notification_sweep_failed", error=str(e))
            return 0

        logger.info("expired_notifications_purged", count=deleted, limit=limit)
        return deleted


expiry_sweeper = ExpirySweeper()
