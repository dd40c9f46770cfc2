"""
Verification domain service - Two-step document delivery.

This module contains the core business logic: email a one-time code,
then, once the code is presented back, email the stored document.

Request flow
============

    request_code(email)
        validate -> normalize -> ledger.issue -> send code

    redeem_code(email, code)
        validate -> normalize -> ledger.redeem (check + consume)
                 -> repository.get_by_email -> send document

The ledger entry is consumed before the record lookup and the delivery,
so a code is single-use even when the later steps fail. An issued code is
not revoked when its delivery fails; the next request overwrites it.
"""

import logging
import re
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from .exceptions import (
    DocumentNotFound,
    InvalidOrExpiredCode,
    UserNotFound,
    ValidationError,
)
from .ledger import CODE_LENGTH, CODE_TTL, CodeLedger
from .ports import (
    DEFAULT_FILENAME,
    DEFAULT_MIME_TYPE,
    Attachment,
    DocumentRepository,
    EmailSender,
    OutgoingEmail,
)

logger = logging.getLogger(__name__)

_CODE_PATTERN = re.compile(rf"[0-9]{{{CODE_LENGTH}}}")

CODE_SUBJECT = "Your verification code"
DOCUMENT_SUBJECT = "Your requested PDF"
DOCUMENT_BODY = "Thanks! Here is your PDF."


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


def validate_email_address(email: str) -> None:
    """
    Check email address syntax. No DNS lookups are made.

    Raises:
        ValidationError: If the address is malformed
    """
    try:
        validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(str(e)) from e


def validate_code(code: str) -> None:
    """
    Check that a code is exactly six ASCII digits.

    Raises:
        ValidationError: If the code is malformed
    """
    if not _CODE_PATTERN.fullmatch(code):
        raise ValidationError(f"Code must be exactly {CODE_LENGTH} digits")


@dataclass
class VerificationService:
    """
    Domain service for code issuance and redemption.

    Collaborators are constructed once at startup and passed in.
    """

    ledger: CodeLedger
    repository: DocumentRepository
    email_sender: EmailSender

    async def request_code(self, email: str) -> str:
        """
        Issue a verification code and email it.

        Args:
            email: Recipient address (will be validated and normalized)

        Returns:
            Normalized email address

        Raises:
            ValidationError: If the email is malformed
            DeliveryError: If the code email could not be delivered
        """
        validate_email_address(email)
        normalized_email = normalize_email(email)

        code = self.ledger.issue(normalized_email)
        minutes = int(CODE_TTL.total_seconds() // 60)

        logger.info("Sending verification code to %s", normalized_email)
        await self.email_sender.send(
            OutgoingEmail(
                to=normalized_email,
                subject=CODE_SUBJECT,
                body=f"Your code is {code}. It expires in {minutes} minutes.",
            )
        )
        logger.info("Verification code sent to %s", normalized_email)
        return normalized_email

    async def redeem_code(self, email: str, code: str) -> str:
        """
        Redeem a code and email the stored document as an attachment.

        Failure reasons of the code check itself are not distinguished.

        Args:
            email: Address the code was sent to
            code: 6-digit verification code

        Returns:
            Normalized email address

        Raises:
            ValidationError: If the email or code is malformed
            InvalidOrExpiredCode: If no live matching code exists
            UserNotFound: If no record is stored for the email
            DocumentNotFound: If the record has no document
            DeliveryError: If the document email could not be delivered
        """
        validate_email_address(email)
        validate_code(code)
        normalized_email = normalize_email(email)

        if not self.ledger.redeem(normalized_email, code):
            raise InvalidOrExpiredCode(normalized_email)

        record = await self.repository.get_by_email(normalized_email)
        if record is None:
            raise UserNotFound(normalized_email)
        if not record.content:
            raise DocumentNotFound(normalized_email)

        attachment = Attachment(
            filename=record.filename or DEFAULT_FILENAME,
            content=record.content,
            mime_type=record.mime_type or DEFAULT_MIME_TYPE,
        )

        logger.info("Sending %s to %s", attachment.filename, normalized_email)
        await self.email_sender.send(
            OutgoingEmail(
                to=normalized_email,
                subject=DOCUMENT_SUBJECT,
                body=DOCUMENT_BODY,
                attachment=attachment,
            )
        )
        logger.info("Document sent to %s", normalized_email)
        return normalized_email
