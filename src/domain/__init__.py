"""
Domain layer - Pure business logic with zero framework imports.

This package contains the verification-code lifecycle and the two-step
document delivery flow. It defines its own port interfaces for
infrastructure abstraction, ensuring true hexagonal architecture decoupling.
"""

from .exceptions import (
    DeliveryError,
    DocumentNotFound,
    InvalidOrExpiredCode,
    UserNotFound,
    ValidationError,
    VerificationError,
)
from .ledger import CodeLedger, VerificationEntry
from .ports import Attachment, DocumentRepository, EmailSender, OutgoingEmail, UserRecord
from .verification import VerificationService, normalize_email

__all__ = [
    "Attachment",
    "CodeLedger",
    "DeliveryError",
    "DocumentNotFound",
    "DocumentRepository",
    "EmailSender",
    "InvalidOrExpiredCode",
    "OutgoingEmail",
    "UserNotFound",
    "UserRecord",
    "ValidationError",
    "VerificationEntry",
    "VerificationError",
    "VerificationService",
    "normalize_email",
]
