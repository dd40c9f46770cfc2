"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers messages through an SMTP relay with aiosmtplib. Port 465 uses
implicit TLS; any other port upgrades with STARTTLS when the server
offers it. Every send is bounded by a timeout and all transport failures
surface as DeliveryError.
"""

import asyncio
import logging
from email.message import EmailMessage

import aiosmtplib

from src.domain.exceptions import DeliveryError
from src.domain.ports import OutgoingEmail

logger = logging.getLogger(__name__)

_IMPLICIT_TLS_PORT = 465


class SmtpEmailSender:
    """
    Implements EmailSender protocol via aiosmtplib.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        host: str,
        port: int,
        from_address: str,
        username: str = "",
        password: str = "",
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.from_address = from_address
        self.username = username
        self.password = password
        self.timeout = timeout

    def build_message(self, message: OutgoingEmail) -> EmailMessage:
        """Build a MIME message, attaching the document if there is one."""
        mime = EmailMessage()
        mime["From"] = self.from_address
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime.set_content(message.body)

        if message.attachment is not None:
            # Parameters such as "; name=x" are dropped; add_attachment sets its own
            essence = message.attachment.mime_type.split(";", 1)[0]
            maintype, _, subtype = essence.partition("/")
            mime.add_attachment(
                message.attachment.content,
                maintype=maintype.strip().lower() or "application",
                subtype=subtype.strip().lower() or "octet-stream",
                filename=message.attachment.filename,
            )
        return mime

    async def send(self, message: OutgoingEmail) -> None:
        """
        Send a message over SMTP.

        Raises:
            DeliveryError: On SMTP errors, connection errors, or timeout
        """
        mime = self.build_message(message)
        implicit_tls = self.port == _IMPLICIT_TLS_PORT

        try:
            await asyncio.wait_for(
                aiosmtplib.send(
                    mime,
                    hostname=self.host,
                    port=self.port,
                    username=self.username or None,
                    password=self.password or None,
                    use_tls=implicit_tls,
                    start_tls=False if implicit_tls else None,
                    timeout=self.timeout,
                ),
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, TimeoutError, OSError) as e:
            logger.error("Failed to send email via SMTP to %s: %s", message.to, e)
            raise DeliveryError(f"Could not deliver email to {message.to}") from e

        logger.info("Email sent via SMTP to %s", message.to)
