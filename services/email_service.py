import logging
import uuid
from typing import List, Optional

from django.core.mail import EmailMessage
from django.conf import settings

logger = logging.getLogger(__name__)


def get_notification_recipients() -> List[str]:
    """Addresses from SALES_TEAM_EMAIL (comma separated)"""
    raw = getattr(settings, "SALES_TEAM_EMAIL", "") or ""
    return [address.strip() for address in raw.split(",") if address.strip()]


def send_notification_email(subject: str, message: str) -> Optional[str]:
    """
    Send a notification to the sales team.

    Returns:
        Message-ID string if an email was sent, None when notifications are
        disabled or sending failed
    """
    recipients = get_notification_recipients()
    if not recipients:
        logger.debug(f"Notifications disabled, skipping email: {subject}")
        return None

    try:
        message_id = f"{uuid.uuid4()}@crm.local"

        email = EmailMessage(
            subject=subject,
            body=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=recipients,
        )
        email.extra_headers["Message-ID"] = f"<{message_id}>"
        email.send(fail_silently=False)

        logger.info(f"Notification sent to {len(recipients)} recipient(s): {subject}")
        return message_id
    except Exception as e:
        logger.error(f"Error sending notification email: {e}", exc_info=True)
        return None
