"""
Transactional email.

Messages are sent with smtplib from FastAPI background tasks after the response has
been produced. When no SMTP host is configured the message is only logged, and
delivery failures are logged without affecting the request that triggered them.
"""

from email.message import EmailMessage
from typing import Optional
import smtplib
import logging

from marketplace.config import settings

logger = logging.getLogger(__name__)


class EmailSendError(Exception):
    """Raised by send_email when the SMTP server rejects a message."""


def build_message(to: str, subject: str, body: str) -> EmailMessage:
    message = EmailMessage()
    message["From"] = settings.mail_from
    message["To"] = to
    message["Subject"] = subject
    message.set_content(body)
    return message


def send_email(to: str, subject: str, body: str) -> None:
    """
    Deliver one plain-text message.

    Raises:
        EmailSendError: If the SMTP exchange fails
    """
    if not settings.mail_enabled:
        logger.info(f"Mail disabled, not sending '{subject}' to {to}")
        return

    message = build_message(to, subject, body)
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=10) as smtp:
            if settings.smtp_use_tls:
                smtp.starttls()
            if settings.smtp_user and settings.smtp_password:
                smtp.login(settings.smtp_user, settings.smtp_password)
            smtp.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        raise EmailSendError(str(e)) from e

    logger.info(f"Sent '{subject}' to {to}")


def send_quietly(to: Optional[str], subject: str, body: str) -> None:
    """Background task entry point: failures are logged, never raised."""
    if not to:
        return
    try:
        send_email(to, subject, body)
    except EmailSendError as e:
        logger.warning(f"Failed to send '{subject}' to {to}: {e}")


def send_welcome(to: str, name: str, user_type: str) -> None:
    body = (
        f"Hi {name},\n\n"
        f"Welcome to {settings.app_name}! Your {user_type} account is ready.\n"
        f"Sign in at {settings.site_url} to get started.\n"
    )
    send_quietly(to, f"Welcome to {settings.app_name}", body)


def send_property_confirmation(to: Optional[str], name: str, title: str, property_id: str) -> None:
    body = (
        f"Hi {name},\n\n"
        f"We received your listing \"{title}\" (ID {property_id}).\n"
        "Our team will review it shortly and you will be notified once it is approved.\n"
    )
    send_quietly(to, "Your property listing was submitted", body)


def send_property_decision(
    to: Optional[str],
    name: str,
    title: str,
    approved: bool,
    reason: Optional[str] = None
) -> None:
    if approved:
        subject = "Your property listing is live"
        detail = f"Good news: \"{title}\" has been approved and is now visible on the marketplace."
    else:
        subject = "Your property listing was not approved"
        detail = f"\"{title}\" was not approved.\nReason: {reason or 'not specified'}"

    send_quietly(to, subject, f"Hi {name},\n\n{detail}\n\n{settings.site_url}\n")
