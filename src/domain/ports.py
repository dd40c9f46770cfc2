"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, plus the plain data types that cross them.
Adapters implement these protocols.
"""

from dataclasses import dataclass
from typing import Protocol

DEFAULT_FILENAME = "document.pdf"
DEFAULT_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class UserRecord:
    """Stored document for one normalized email address."""

    email: str
    filename: str | None = None
    mime_type: str | None = None
    content: bytes | None = None


@dataclass(frozen=True)
class Attachment:
    """File attached to an outgoing email."""

    filename: str
    content: bytes
    mime_type: str


@dataclass(frozen=True)
class OutgoingEmail:
    """Message handed to an EmailSender."""

    to: str
    subject: str
    body: str
    attachment: Attachment | None = None


class DocumentRepository(Protocol):
    """Port interface for per-email document storage."""

    async def get_by_email(self, email: str) -> UserRecord | None:
        """
        Fetch the record stored for an email.

        Args:
            email: Normalized email address

        Returns:
            UserRecord if one exists, None otherwise
        """
        ...

    async def upsert_by_email(
        self, email: str, filename: str, mime_type: str, content: bytes
    ) -> None:
        """
        Insert or replace the document stored for an email.

        Used by the provisioning CLI, never by the request path.

        Args:
            email: Normalized email address
            filename: Attachment filename to use on delivery
            mime_type: Attachment content type
            content: Raw document bytes
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    async def send(self, message: OutgoingEmail) -> None:
        """
        Deliver a message.

        Args:
            message: Recipient, subject, body and optional attachment

        Raises:
            DeliveryError: If the message could not be delivered
        """
        ...
