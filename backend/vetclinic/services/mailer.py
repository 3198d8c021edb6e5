"""Module: mailer."""

import logging
import smtplib
from email.message import EmailMessage

from vetclinic.core.config import Settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when a message could not be handed to the SMTP server."""


def send_email(settings: Settings, to: str, subject: str, body: str) -> None:
    if not settings.email_user or not settings.email_pass:
        logger.error("Error sending email: EMAIL_USER or EMAIL_PASS environment variables not set.")
        raise EmailDeliveryError("Email credentials are not configured")

    message = EmailMessage()
    message["From"] = f'"{settings.email_sender_name}" <{settings.email_user}>'
    message["To"] = to
    message["Subject"] = subject
    message.set_content(body)

    try:
        with smtplib.SMTP(
            settings.smtp_host,
            settings.smtp_port,
            timeout=settings.email_timeout_seconds,
        ) as server:
            server.starttls()
            server.login(settings.email_user, settings.email_pass)
            server.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Error sending email to %s: %s", to, e)
        raise EmailDeliveryError(str(e)) from e

    logger.info("Email sent to %s (subject=%r)", to, subject)
