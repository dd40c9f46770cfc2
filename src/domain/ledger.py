"""
Code ledger - In-process store of pending verification codes.

Each normalized email maps to at most one pending entry holding a
6-digit code and its expiry instant.

Slot lifecycle
==============

    Empty -> Pending      (issue)
    Pending -> Empty      (redeem/consume, regardless of what happens next)
    Pending -> Pending    (issue again: the previous code is overwritten)
    Pending -> Expired    (now > expires_at; treated as Empty by check)

Expired entries stay resident until overwritten or until purge_expired()
drops them. issue() purges on every call, so memory is bounded by the
number of emails with a live code.

The ledger is not persisted: a process restart drops every pending code.
"""

import secrets
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

CODE_TTL = timedelta(minutes=10)
CODE_LENGTH = 6

_CODE_MIN = 10 ** (CODE_LENGTH - 1)
_CODE_MAX = 10**CODE_LENGTH - 1


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class VerificationEntry:
    """A pending code and the instant it stops being accepted."""

    code: str
    expires_at: datetime


class CodeLedger:
    """
    Per-email verification codes with expiry.

    All methods are synchronous and hold an internal lock, so the ledger
    can be shared between the event loop and worker threads.
    """

    def __init__(
        self,
        ttl: timedelta = CODE_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, VerificationEntry] = {}
        self._lock = threading.Lock()

    def issue(self, email: str) -> str:
        """
        Generate a code for an email, replacing any pending one.

        Args:
            email: Normalized email address

        Returns:
            6-digit code drawn uniformly from 100000-999999
        """
        code = str(_CODE_MIN + secrets.randbelow(_CODE_MAX - _CODE_MIN + 1))
        with self._lock:
            self._purge_expired_locked()
            self._entries[email] = VerificationEntry(
                code=code, expires_at=self._clock() + self._ttl
            )
        return code

    def check(self, email: str, code: str) -> bool:
        """Return True if the email has a live entry whose code matches."""
        with self._lock:
            return self._check_locked(email, code)

    def consume(self, email: str) -> None:
        """Delete the entry for an email. No-op if absent."""
        with self._lock:
            self._entries.pop(email, None)

    def redeem(self, email: str, code: str) -> bool:
        """
        Check and consume in one step.

        Two concurrent redemptions of the same code cannot both succeed.

        Returns:
            True if the code was valid and has now been consumed
        """
        with self._lock:
            if not self._check_locked(email, code):
                return False
            del self._entries[email]
            return True

    def get(self, email: str) -> VerificationEntry | None:
        """Return the resident entry for an email, expired or not."""
        with self._lock:
            return self._entries.get(email)

    def purge_expired(self) -> int:
        """
        Drop entries past their expiry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            return self._purge_expired_locked()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _check_locked(self, email: str, code: str) -> bool:
        entry = self._entries.get(email)
        if entry is None:
            return False
        # Constant-time comparison
        if not secrets.compare_digest(entry.code.encode(), code.encode()):
            return False
        return self._clock() <= entry.expires_at

    def _purge_expired_locked(self) -> int:
        now = self._clock()
        expired = [email for email, entry in self._entries.items() if now > entry.expires_at]
        for email in expired:
            del self._entries[email]
        return len(expired)
