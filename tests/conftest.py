"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock for expiry tests
- In-memory stand-ins for the document store and mail sender
- A verification service wired to those stand-ins
"""

import pytest

from src.domain.ledger import CodeLedger
from src.domain.ports import UserRecord
from src.domain.verification import VerificationService
from tests.fakes import FakeClock, InMemoryDocumentRepository, RecordingEmailSender


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger(clock: FakeClock) -> CodeLedger:
    return CodeLedger(clock=clock)


@pytest.fixture
def repository() -> InMemoryDocumentRepository:
    """Store holding one document for user@example.com."""
    repo = InMemoryDocumentRepository()
    repo.records["user@example.com"] = UserRecord(
        email="user@example.com",
        filename="report.pdf",
        mime_type="application/pdf",
        content=b"%PDF-1.4 report",
    )
    return repo


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def service(
    ledger: CodeLedger,
    repository: InMemoryDocumentRepository,
    email_sender: RecordingEmailSender,
) -> VerificationService:
    return VerificationService(ledger=ledger, repository=repository, email_sender=email_sender)
