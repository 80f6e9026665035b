"""Statistics aggregator for notification engagement and delivery."""

from collections.abc import Callable
from datetime import datetime, timedelta

from django.db import DatabaseError
from django.db.models import Count, Q
from django.utils import timezone

import structlog

from core.enums import DeliveryChannel, DeliveryStatus, StatsPeriod
from core.models import NotificationStatsSnapshot
from core.repositories.notification_repository import NotificationRepository
from core.schemas.stats import NotificationStats

logger = structlog.get_logger(__name__)

PERIOD_LENGTHS = {
    StatsPeriod.DAY: timedelta(days=1),
    StatsPeriod.WEEK: timedelta(weeks=1),
    StatsPeriod.MONTH: timedelta(days=30),
}


class StatisticsAggregator:
    """Read-side fold over notifications.

    Every count is computed with SQL aggregation, so calls are safe while
    writers are active. Failures are logged and yield an empty result.
    """

    def __init__(self, clock: Callable[[], datetime] = timezone.now) -> None:
        """Initialize aggregator with an injectable clock."""
        self.clock = clock

    def aggregate(
        self,
        recipient_id: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> NotificationStats:
        """Count notifications in a window.

        Args:
            recipient_id: Restrict to one recipient; None for global stats
            start_date: Inclusive lower bound on ``created_at``
            end_date: Inclusive upper bound on ``created_at``

        Returns:
            Totals, engagement counts and breakdowns by type, channel status
            and priority.
        """
        empty = NotificationStats(
            recipient_id=recipient_id, start_date=start_date, end_date=end_date
        )
        try:
            queryset = NotificationRepository.for_statistics(
                recipient_id, start_date, end_date
            )
            totals = queryset.aggregate(
                total=Count("notification_id"),
                read=Count("notification_id", filter=Q(read=True)),
                clicked=Count("notification_id", filter=Q(clicked=True)),
                dismissed=Count("notification_id", filter=Q(dismissed=True)),
            )
            by_type = self._group_counts(queryset, "type")
            by_priority = self._group_counts(queryset, "priority")
            by_channel = {
                channel.value: self._channel_counts(queryset, channel)
                for channel in DeliveryChannel
            }
        except DatabaseError as e:
            logger.error(
                "statistics_aggregation_failed",
                recipient_id=recipient_id,
                error=str(e),
            )
            return empty

        return NotificationStats(
            recipient_id=recipient_id,
            start_date=start_date,
            end_date=end_date,
            total=totals["total"],
            read=totals["read"],
            clicked=totals["clicked"],
            dismissed=totals["dismissed"],
            by_type=by_type,
            by_channel=by_channel,
            by_priority=by_priority,
        )

    @staticmethod
    def _group_counts(queryset, field: str) -> dict[str, int]:
        rows = (
            queryset.order_by().values(field).annotate(count=Count("notification_id"))
        )
        return {row[field]: row["count"] for row in rows}

    @staticmethod
    def _channel_counts(queryset, channel: DeliveryChannel) -> dict[str, int]:
        counts = {status.value: 0 for status in DeliveryStatus}
        counts.update(
            StatisticsAggregator._group_counts(queryset, channel.status_field)
        )
        return counts

    def snapshot(
        self,
        recipient_id: str | None = None,
        period: StatsPeriod | str = StatsPeriod.DAY,
    ) -> NotificationStatsSnapshot:
        """Store the aggregate for the period ending now.

        One snapshot row exists per (recipient, period, period start); a
        second call on the same day overwrites it.
        """
        period = StatsPeriod(period)
        end = self.clock()
        start = end - PERIOD_LENGTHS[period]
        stats = self.aggregate(recipient_id, start, end)

        snapshot, _ = NotificationStatsSnapshot.objects.update_or_create(
            recipient_id=recipient_id,
            period=period.value,
            period_start=start.date(),
            defaults={
                "total": stats.total,
                "read": stats.read,
                "clicked": stats.clicked,
                "dismissed": stats.dismissed,
                "by_type": stats.by_type,
                "by_channel": stats.by_channel,
                "by_priority": stats.by_priority,
                "computed_at": end,
            },
        )
        logger.info(
            "statistics_snapshot_recorded",
            recipient_id=recipient_id,
            period=period.value,
            total=stats.total,
        )
        return snapshot


statistics_aggregator = StatisticsAggregator()
