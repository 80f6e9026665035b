"""Push notifications through an FCM-style HTTP gateway."""

from typing import Any

import structlog

from core.config.engine import engine_setting
from core.enums import DeliveryChannel
from core.services.channels.base import HttpGatewayAdapter

logger = structlog.get_logger(__name__)


class PushAdapter(HttpGatewayAdapter):
    """Sends one push message to every device token of a recipient."""

    channel = DeliveryChannel.PUSH

    def __init__(self, gateway_url: str | None = None, api_key: str | None = None):
        """Initialize push adapter from engine settings unless overridden."""
        super().__init__(
            gateway_url=gateway_url or engine_setting("PUSH_GATEWAY_URL"),
            api_key=(
                api_key
                if api_key is not None
                else engine_setting("PUSH_GATEWAY_API_KEY")
            ),
            timeout=engine_setting("GATEWAY_TIMEOUT_SECONDS"),
        )

    def send(
        self,
        address: Any,
        title: str,
        body: str,
        payload: dict[str, Any],
    ) -> bool:
        """Submit to the gateway. ``address`` is a list of device tokens.

        Returns:
            True if at least one device token was accepted.
        """
        self.require_address(address)
        tokens = [address] if isinstance(address, str) else list(address)

        response = self._post(
            {
                "registration_ids": tokens,
                "notification": {"title": title, "body": body},
                "data": {key: str(value) for key, value in payload.items()},
            }
        )
        result = response.json() if response.content else {}
        accepted = result.get("success", len(tokens))

        logger.info(
            "push_submitted",
            token_count=len(tokens),
            accepted=accepted,
            failed=result.get("failure", 0),
        )
        return accepted > 0
