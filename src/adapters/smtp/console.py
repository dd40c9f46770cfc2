"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging messages instead of delivering them.
"""

import logging

from src.domain.ports import OutgoingEmail

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For local development - codes show up in the application log.
    """

    async def send(self, message: OutgoingEmail) -> None:
        """
        Log the message (simulates email delivery).

        Attachments are summarized by name, type and size.

        Args:
            message: Message to log
        """
        logger.info("[EMAIL] To: %s Subject: %s", message.to, message.subject)
        logger.info("[EMAIL] %s", message.body)
        if message.attachment is not None:
            logger.info(
                "[EMAIL] Attachment: %s (%s, %d bytes)",
                message.attachment.filename,
                message.attachment.mime_type,
                len(message.attachment.content),
            )
