"""Email over SMTP."""

import re
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any

from django.conf import settings
from django.utils.html import escape, linebreaks

import structlog

from core.enums import DeliveryChannel
from core.exceptions import ProviderError
from core.services.channels.base import ChannelAdapter

logger = structlog.get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


class EmailAdapter(ChannelAdapter):
    """Sends the notification as a multipart plain-text and HTML email.

    The title becomes the subject. SMTP failures are retryable; a malformed
    or missing address is not.
    """

    channel = DeliveryChannel.EMAIL

    def __init__(self) -> None:
        """Initialize email adapter with SMTP configuration."""
        self.smtp_host = settings.EMAIL_HOST
        self.smtp_port = settings.EMAIL_PORT
        self.smtp_user = settings.EMAIL_HOST_USER
        self.smtp_password = settings.EMAIL_HOST_PASSWORD
        self.use_tls = settings.EMAIL_USE_TLS
        self.from_email = settings.DEFAULT_FROM_EMAIL

    def send(
        self,
        address: Any,
        title: str,
        body: str,
        payload: dict[str, Any],
    ) -> bool:
        """Send one email to ``address``.

        Raises:
            ProviderError: If the address is invalid or SMTP fails.
        """
        self.require_address(address)
        if not EMAIL_PATTERN.match(address):
            raise ProviderError(
                self.channel.value,
                f"Invalid email address: {address}",
                retryable=False,
            )

        msg = self.build_message(address, title, body)
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                if self.use_tls:
                    server.starttls()
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("email_send_failed", subject=title, error=str(e))
            raise ProviderError(self.channel.value, str(e)) from e

        logger.info("email_sent", subject=title)
        return True

    def build_message(self, to_email: str, subject: str, body: str) -> MIMEMultipart:
        """Build the multipart message with plain-text and HTML parts."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_email
        msg["To"] = to_email
        msg.attach(MIMEText(body, "plain"))
        msg.attach(MIMEText(linebreaks(escape(body)), "html"))
        return msg
