"""
Simple SMTP mailer for Climatiseur notifications.

Delivery parameters use the same names as the credentials file's
``mail_delivery_defaults`` section.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Any

from .exceptions import DeliveryError

_LOGGER = logging.getLogger(__name__)


class Mailer:
    """Sends one message per call over SMTP."""

    def __init__(self, delivery_params: dict[str, Any]):
        """Initialize mailer.

        Args:
            delivery_params: address, port, domain, user_name, password,
                enable_starttls_auto, open_timeout
        """
        self.address = delivery_params.get("address", "localhost")
        self.port = int(delivery_params.get("port", 25))
        self.domain = delivery_params.get("domain")
        self.user_name = delivery_params.get("user_name")
        self.password = delivery_params.get("password")
        self.starttls = bool(delivery_params.get("enable_starttls_auto", True))
        self.timeout = float(delivery_params.get("open_timeout", 30))

    def deliver(self, to: str, sender: str, subject: str, body: str) -> None:
        """Send a plain-text message.

        Raises:
            DeliveryError: If the message cannot be built for this recipient,
                or the relay refuses or cannot be reached
        """
        try:
            message = EmailMessage()
            message["To"] = to
            message["From"] = sender
            message["Subject"] = subject
            message.set_content(body)

            with smtplib.SMTP(
                self.address, self.port, local_hostname=self.domain, timeout=self.timeout
            ) as smtp:
                if self.starttls:
                    smtp.ehlo()
                    if smtp.has_extn("starttls"):
                        smtp.starttls()
                        smtp.ehlo()
                if self.user_name:
                    smtp.login(self.user_name, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise DeliveryError(to, str(e))

        _LOGGER.debug(f"Delivered '{subject}' to {to}")
