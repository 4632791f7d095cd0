"""
Notification Tasks
Background email delivery over SMTP.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, Optional

from .celery_app import app
from ..api.config import get_settings

logger = logging.getLogger(__name__)


def deliver_email(to: str, subject: str, body: str, html: Optional[str] = None) -> bool:
    """
    Send one email through the configured SMTP server.

    Returns:
        False when SMTP is not configured, True once the message is handed off

    Raises:
        smtplib.SMTPException, OSError: on delivery failure
    """
    settings = get_settings()
    if not settings.smtp_host:
        logger.info(f"SMTP not configured, skipping email to {to}: {subject}")
        return False

    msg = MIMEMultipart("alternative")
    msg["From"] = settings.email_from
    msg["To"] = to
    msg["Subject"] = subject
    msg.attach(MIMEText(body, "plain"))
    if html:
        msg.attach(MIMEText(html, "html"))

    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as server:
        if settings.smtp_use_tls:
            server.starttls()
        if settings.smtp_username:
            server.login(settings.smtp_username, settings.smtp_password)
        server.send_message(msg)

    logger.info(f"Email sent to {to}: {subject}")
    return True


@app.task(bind=True, name="tasks.send_email", max_retries=3, default_retry_delay=60)
def send_email(self, to: str, subject: str, body: str, html: Optional[str] = None) -> Dict[str, Any]:
    """
    Send a transactional email.

    Retries on SMTP or network errors.

    Returns:
        Dictionary with delivery status
    """
    try:
        sent = deliver_email(to, subject, body, html)
        return {"status": "sent" if sent else "skipped", "to": to}
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Email to {to} failed: {e}")
        if self.request.called_directly or app.conf.task_always_eager:
            return {"status": "error", "to": to, "error": str(e)}
        raise self.retry(exc=e)
