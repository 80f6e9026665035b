"""In-app inbox channel."""

from typing import Any

import structlog

from core.enums import DeliveryChannel
from core.services.channels.base import ChannelAdapter

logger = structlog.get_logger(__name__)


class InAppAdapter(ChannelAdapter):
    """Accepts every message: the stored notification is the inbox entry.

    Clients read it through GET /notifications, so there is no provider to
    call and no address to validate.
    """

    channel = DeliveryChannel.IN_APP

    def send(
        self,
        address: Any,
        title: str,
        body: str,
        payload: dict[str, Any],
    ) -> bool:
        """Accept the message for the recipient's inbox."""
        logger.debug("in_app_accepted", recipient_id=address)
        return True
