"""Base classes for channel provider adapters."""

from typing import Any

import requests
import structlog

from core.enums import DeliveryChannel
from core.exceptions import ProviderError

logger = structlog.get_logger(__name__)


class ChannelAdapter:
    """Submits one rendered message to one delivery channel's provider.

    ``send`` returns True when the provider accepted the submission and
    False when it rejected it. Failures that carry more information raise
    ``ProviderError``; its ``retryable`` flag decides whether the
    dispatcher schedules another attempt.
    """

    channel: DeliveryChannel

    def send(
        self,
        address: Any,
        title: str,
        body: str,
        payload: dict[str, Any],
    ) -> bool:
        """Submit a message.

        Args:
            address: Channel-specific destination (email address, phone
                number, device token list or recipient ID), or None when
                the recipient has none on file
            title: Rendered title
            body: Rendered body
            payload: Opaque data forwarded to the provider

        Returns:
            True if the provider accepted the message.
        """
        raise NotImplementedError

    def require_address(self, address: Any) -> None:
        """Fail permanently when the recipient has no address for this channel."""
        if not address:
            raise ProviderError(
                self.channel.value,
                "Recipient has no address for this channel",
                retryable=False,
            )


class HttpGatewayAdapter(ChannelAdapter):
    """Adapter posting JSON to an HTTP provider gateway.

    Status codes map to results: 2xx accepted; 429 and 5xx raise a
    retryable ``ProviderError``; other 4xx raise a permanent one. Timeouts
    and connection errors are retryable.
    """

    def __init__(self, gateway_url: str, api_key: str = "", timeout: int = 10):
        """Initialize gateway adapter.

        Args:
            gateway_url: Endpoint receiving message submissions
            api_key: Bearer token sent with every request
            timeout: Request timeout in seconds
        """
        self.gateway_url = gateway_url
        self.api_key = api_key
        self.timeout = timeout

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _post(self, json_data: dict[str, Any]) -> requests.Response:
        """POST to the gateway and translate transport errors.

        Raises:
            ProviderError: For 4xx/5xx responses, timeouts and connection errors.
        """
        channel = self.channel.value
        try:
            response = requests.post(
                self.gateway_url,
                json=json_data,
                headers=self._get_headers(),
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            logger.warning(
                "provider_request_timed_out",
                channel=channel,
                url=self.gateway_url,
                timeout=self.timeout,
            )
            raise ProviderError(channel, "Gateway request timed out") from e
        except requests.ConnectionError as e:
            logger.warning(
                "provider_connection_failed",
                channel=channel,
                url=self.gateway_url,
                error=str(e),
            )
            raise ProviderError(channel, f"Gateway unreachable: {e}") from e

        if response.status_code == 429 or response.status_code >= 500:
            logger.warning(
                "provider_unavailable",
                channel=channel,
                status_code=response.status_code,
            )
            raise ProviderError(
                channel, f"Gateway returned {response.status_code}", retryable=True
            )

        if response.status_code >= 400:
            logger.error(
                "provider_rejected_request",
                channel=channel,
                status_code=response.status_code,
                response_text=response.text,
            )
            raise ProviderError(
                channel,
                f"Gateway returned {response.status_code}: {response.text}",
                retryable=False,
            )

        return response
