# rentable/core/notifications.py
"""
Owner notification sink.

Fire-and-forget: a notification that cannot be delivered is logged and
dropped, never raised into the request that triggered it.
"""

import logging
import smtplib

from rentable.core.config import get_settings
from rentable.core.email_client import send_email, smtp_configured

logger = logging.getLogger(__name__)
settings = get_settings()


def notify_owner(title: str, content: str) -> bool:
    """
    Email the platform owner about a key event (new listing, rental request,
    support ticket).

    Returns:
        True if the message was handed to the SMTP server.
    """
    if not settings.OWNER_NOTIFY_EMAIL or not smtp_configured():
        logger.info("[notify] %s | %s", title, content)
        return False

    try:
        send_email(
            to_email=settings.OWNER_NOTIFY_EMAIL,
            subject=f"[Rentable] {title}",
            text_body=content,
        )
    except (smtplib.SMTPException, OSError, RuntimeError) as e:
        logger.warning("Owner notification %r failed: %s", title, e)
        return False
    return True
