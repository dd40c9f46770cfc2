"""
Domain exceptions - Semantic error types for code verification.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The HTTP layer maps each type to a status code.
"""


class VerificationError(Exception):
    """Base class for verification domain errors."""

    pass


class ValidationError(VerificationError):
    """Malformed email address or code supplied by the client."""

    pass


class InvalidOrExpiredCode(VerificationError):
    """Code is absent, mismatched, or past its expiry."""

    pass


class UserNotFound(VerificationError):
    """No record is stored for the email."""

    pass


class DocumentNotFound(VerificationError):
    """A record exists but carries no document."""

    pass


class DeliveryError(VerificationError):
    """Mail sender failed or timed out."""

    pass
