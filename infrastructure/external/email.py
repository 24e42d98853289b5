"""Email delivery without an SMTP transport: messages are rendered and logged."""
from __future__ import annotations

from application.ports.email import EmailMessage
from core.config import settings
from core.logging_config import get_logger


logger = get_logger(__name__)


WELCOME_TEMPLATE = """\
<h1>Welcome to Event Management App!</h1>
<p>Your account has been successfully created.</p>
<p>You can now create events, RSVP to events, and receive realtime updates.</p>
"""


def build_welcome_email(to: str) -> EmailMessage:
    return EmailMessage(
        to=to,
        subject=settings.email.welcome_subject,
        html=WELCOME_TEMPLATE,
        sender=settings.email.sender,
    )


class LoggingEmailSender:
    """EmailSender that records each message in the structured log."""

    async def send(self, message: EmailMessage) -> None:
        logger.info(
            "email_sent",
            to=message.to,
            subject=message.subject,
            sender=message.sender,
            size=len(message.html),
        )
