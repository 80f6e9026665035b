"""SMS through an HTTP gateway."""

from typing import Any

import structlog

from core.config.engine import engine_setting
from core.enums import DeliveryChannel
from core.services.channels.base import HttpGatewayAdapter

logger = structlog.get_logger(__name__)

SMS_MAX_LENGTH = 480


class SmsAdapter(HttpGatewayAdapter):
    """Sends the title and body as one text message."""

    channel = DeliveryChannel.SMS

    def __init__(self, gateway_url: str | None = None, api_key: str | None = None):
        """Initialize SMS adapter from engine settings unless overridden."""
        super().__init__(
            gateway_url=gateway_url or engine_setting("SMS_GATEWAY_URL"),
            api_key=(
                api_key
                if api_key is not None
                else engine_setting("SMS_GATEWAY_API_KEY")
            ),
            timeout=engine_setting("GATEWAY_TIMEOUT_SECONDS"),
        )
        self.sender_id = engine_setting("SMS_SENDER_ID")

    def send(
        self,
        address: Any,
        title: str,
        body: str,
        payload: dict[str, Any],
    ) -> bool:
        """Submit to the gateway. ``address`` is an E.164 phone number."""
        self.require_address(address)
        message = f"{title}: {body}"[:SMS_MAX_LENGTH]

        response = self._post(
            {
                "to": address,
                "from": self.sender_id,
                "message": message,
                "reference": payload.get("notification_id"),
            }
        )
        result = response.json() if response.content else {}

        logger.info(
            "sms_submitted",
            message_id=result.get("message_id"),
            length=len(message),
        )
        return result.get("status", "accepted") != "rejected"
