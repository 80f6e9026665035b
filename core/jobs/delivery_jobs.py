"""Background jobs for delivering notifications.

These jobs are executed by rq workers. The dispatcher enqueues
``retry_delivery_job`` with the rq scheduler after a retryable provider
failure; ``redispatch_due_notifications_job`` is run periodically to pick up
notifications whose quiet-hours, frequency or schedule hold has ended.
"""

import structlog

from core.config.engine import engine_setting
from core.exceptions import NotificationNotFoundError
from core.logging.context import correlated_job
from core.repositories.notification_repository import NotificationRepository
from core.services.dispatcher import dispatcher

logger = structlog.get_logger(__name__)


@correlated_job
def dispatch_notification_job(notification_id: str) -> str | None:
    """Run the first dispatch pass for a newly created notification.

    Args:
        notification_id: UUID of the notification to deliver.

    Returns:
        The overall outcome, or None if the notification no longer exists.
    """
    try:
        notification = NotificationRepository.get(notification_id)
    except NotificationNotFoundError:
        logger.warning(
            "dispatch_skipped_notification_gone", notification_id=notification_id
        )
        return None
    return dispatcher.dispatch(notification).outcome


@correlated_job
def retry_delivery_job(notification_id: str, expected_count: int) -> str | None:
    """Run one retry round for a notification.

    Args:
        notification_id: UUID of the notification to retry.
        expected_count: Retry count when the round was scheduled.

    Returns:
        The overall outcome, or None if the round was skipped.
    """
    outcome = dispatcher.retry(notification_id, expected_count)
    if outcome is None:
        return None
    return outcome.outcome


@correlated_job
def redispatch_due_notifications_job() -> int:
    """Dispatch every deferred notification whose hold has ended.

    Returns:
        Number of notifications dispatched.
    """
    count = dispatcher.redispatch_due(engine_setting("REDISPATCH_LIMIT"))
    logger.info("redispatch_job_completed", count=count)
    return count
