from __future__ import annotations

import smtplib
from email.message import EmailMessage
from email.utils import formataddr, parseaddr
from typing import List

from loguru import logger

from matcha_watch.config import Settings
from matcha_watch.crawlers.base import Product
from matcha_watch.errors import (
    AddressError,
    MessageBuildError,
    RelayConnectError,
    SendError,
)
from matcha_watch.notifications.formatter import format_product_digest

SMTP_TIMEOUT = 30  # seconds


def parse_address(value: str, role: str) -> str:
    """Parse ``value`` into a ``Name <user@host>`` header, or raise AddressError."""
    name, address = parseaddr(value)
    local, _, domain = address.rpartition("@")
    if not local or not domain or " " in address:
        raise AddressError(f"Error parsing {role} email: {value!r}")
    return formataddr((name, address))


class EmailSender:
    """Send the product digest through an authenticated SMTP relay (implicit TLS)."""

    def __init__(self, settings: Settings):
        self.host = settings.smtp_url
        self.port = settings.smtp_port
        self.user = settings.smtp_user
        self.password = settings.smtp_password
        self.sender = settings.smtp_sender
        self.recipient = settings.smtp_recipient
        self.subject = settings.smtp_notification_subject

    def build_message(self, products: List[Product]) -> EmailMessage:
        sender = parse_address(self.sender, "sender")
        recipient = parse_address(self.recipient, "recipient")

        try:
            message = EmailMessage()
            message["From"] = sender
            message["To"] = recipient
            message["Subject"] = self.subject
            message.set_content(format_product_digest(products), subtype="html")
        except (ValueError, TypeError) as e:
            raise MessageBuildError(f"Error generating e-mail message: {e}") from e
        return message

    def send(self, products: List[Product]) -> None:
        """Send one digest email. Raises a NotifyError subclass on failure."""
        message = self.build_message(products)

        try:
            smtp = smtplib.SMTP_SSL(self.host, self.port, timeout=SMTP_TIMEOUT)
        except (OSError, smtplib.SMTPException) as e:
            raise RelayConnectError(
                f"Unable to connect to SMTP relay {self.host}:{self.port}: {e}"
            ) from e

        try:
            smtp.login(self.user, self.password)
            smtp.send_message(message)
        except smtplib.SMTPAuthenticationError as e:
            raise SendError(f"SMTP relay rejected credentials: {e}") from e
        except (OSError, smtplib.SMTPException) as e:
            raise SendError(f"Could not send email: {e}") from e
        finally:
            _quit(smtp)

        logger.info(f"Email sent to {self.recipient} with {len(products)} products")


def _quit(smtp: smtplib.SMTP) -> None:
    try:
        smtp.quit()
    except (OSError, smtplib.SMTPException) as e:
        logger.debug(f"SMTP quit failed: {e}")
        smtp.close()
