"""
Notification Service
Builds account and listing emails and queues them on the Celery worker.
Queueing failures are logged and never fail the calling request.
"""

import logging
from typing import Optional

from ..config import get_settings

logger = logging.getLogger(__name__)


def queue_email(to: Optional[str], subject: str, body: str) -> bool:
    """
    Queue an email for background delivery.

    Returns:
        True if the task was queued
    """
    if not to:
        logger.warning(f"No recipient for email '{subject}', skipping")
        return False

    try:
        from ...tasks.notifications import send_email

        send_email.delay(to=to, subject=subject, body=body)
        return True
    except Exception as e:
        # Broker unavailable
        logger.warning(f"Failed to queue email '{subject}' to {to}: {e}")
        return False


def _greeting(first_name: Optional[str]) -> str:
    return f"Hi {first_name}," if first_name else "Hello,"


def notify_registration(email: str, first_name: Optional[str], user_type: str) -> bool:
    settings = get_settings()
    body = (
        f"{_greeting(first_name)}\n\n"
        f"Thanks for registering as a {user_type} on HomeHub. "
        "Your account is now under review and we will email you once it has been approved.\n\n"
        f"{settings.frontend_url}\n"
    )
    return queue_email(email, "Your HomeHub registration was received", body)


def notify_account_decision(email: str, first_name: Optional[str], approved: bool,
                            reason: Optional[str] = None) -> bool:
    settings = get_settings()
    if approved:
        subject = "Your HomeHub account has been approved"
        body = (
            f"{_greeting(first_name)}\n\n"
            "Your account has been approved. You can now log in and list properties.\n\n"
            f"{settings.frontend_url}/login\n"
        )
    else:
        subject = "Update on your HomeHub account application"
        body = (
            f"{_greeting(first_name)}\n\n"
            "Unfortunately we could not approve your account at this time.\n"
            f"Reason: {reason or 'Not specified'}\n"
        )
    return queue_email(email, subject, body)


def notify_agent_application(email: str, first_name: Optional[str], status: str,
                             note: Optional[str] = None) -> bool:
    """Email an agent applicant about a vetting decision (approved, rejected, needs_more_info)."""
    settings = get_settings()
    if status == "approved":
        subject = "Welcome to HomeHub - your agent application is approved"
        body = (
            f"{_greeting(first_name)}\n\n"
            "Your agent application has been approved. Log in to start listing properties.\n\n"
            f"{settings.frontend_url}/login\n"
        )
    elif status == "needs_more_info":
        subject = "More information needed for your HomeHub agent application"
        body = (
            f"{_greeting(first_name)}\n\n"
            "We need a little more information before we can review your application:\n\n"
            f"{note or ''}\n\n"
            f"Update your application at {settings.frontend_url}/dashboard/agent\n"
        )
    else:
        subject = "Update on your HomeHub agent application"
        body = (
            f"{_greeting(first_name)}\n\n"
            "Unfortunately we could not approve your agent application.\n"
            f"Reason: {note or 'Not specified'}\n"
        )
    return queue_email(email, subject, body)


def notify_listing_reviewed(email: Optional[str], first_name: Optional[str], title: str,
                            status: str, reason: Optional[str] = None) -> bool:
    settings = get_settings()
    if status == "active":
        subject = f"Your listing \"{title}\" is live"
        body = (
            f"{_greeting(first_name)}\n\n"
            f"Your property \"{title}\" has been approved and is now visible on HomeHub.\n\n"
            f"{settings.frontend_url}\n"
        )
    elif status == "rejected":
        subject = f"Your listing \"{title}\" needs changes"
        body = (
            f"{_greeting(first_name)}\n\n"
            f"Your property \"{title}\" was not approved.\n"
            f"Reason: {reason or 'Not specified'}\n\n"
            "Edit the listing and resubmit it for review.\n"
        )
    else:
        subject = f"Your listing \"{title}\" was updated"
        body = (
            f"{_greeting(first_name)}\n\n"
            f"An administrator changed the status of \"{title}\" to {status.replace('_', ' ')}.\n"
        )
    return queue_email(email, subject, body)
