"""Email sender adapters - SMTP delivery and console logging."""

from src.config.settings import Settings

from .client import SmtpEmailSender
from .console import ConsoleEmailSender

__all__ = ["ConsoleEmailSender", "SmtpEmailSender", "build_email_sender"]


def build_email_sender(settings: Settings) -> SmtpEmailSender | ConsoleEmailSender:
    """Create the email sender selected by settings.email_backend."""
    if settings.email_backend == "console":
        return ConsoleEmailSender()
    return SmtpEmailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        from_address=settings.mail_from,
        username=settings.smtp_username,
        password=settings.smtp_password,
        timeout=settings.smtp_timeout_seconds,
    )
