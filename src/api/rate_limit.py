"""
Rate limiting - Sliding-window limiter for the public endpoints.

Keyed by client IP. Suitable for single-instance deployments only; the
window state lives in process memory like the code ledger does.
"""

import asyncio
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import HTTPException, Request, status


@dataclass
class RateLimitResult:
    """Result of a rate limit check."""

    allowed: bool
    limit: int
    remaining: int
    retry_after: int  # Seconds until the oldest request leaves the window


class InMemoryRateLimiter:
    """
    Sliding-window request counter per identifier.

    Identifiers with no request left in the window are dropped, at most
    once per window from check() or on demand via cleanup_old_entries().
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: dict[str, list[float]] = {}
        self._last_cleanup = clock()
        self._lock = asyncio.Lock()

    async def check(self, identifier: str) -> RateLimitResult:
        """
        Record a request for an identifier if it fits in the window.

        Args:
            identifier: Client key, usually an IP address

        Returns:
            RateLimitResult with allowed=False once the ceiling is reached
        """
        now = self._clock()
        window_start = now - self.window_seconds

        async with self._lock:
            if now - self._last_cleanup >= self.window_seconds:
                self._prune(window_start)
                self._last_cleanup = now

            timestamps = [t for t in self._requests.get(identifier, []) if t > window_start]

            if len(timestamps) >= self.max_requests:
                if timestamps:
                    self._requests[identifier] = timestamps
                else:
                    self._requests.pop(identifier, None)
                retry_after = (
                    max(1, math.ceil(timestamps[0] + self.window_seconds - now))
                    if timestamps
                    else self.window_seconds
                )
                return RateLimitResult(
                    allowed=False,
                    limit=self.max_requests,
                    remaining=0,
                    retry_after=retry_after,
                )

            timestamps.append(now)
            self._requests[identifier] = timestamps
            return RateLimitResult(
                allowed=True,
                limit=self.max_requests,
                remaining=self.max_requests - len(timestamps),
                retry_after=0,
            )

    async def cleanup_old_entries(self) -> int:
        """
        Remove identifiers whose requests have all left the window.

        Returns:
            Number of identifiers removed
        """
        now = self._clock()
        async with self._lock:
            removed = self._prune(now - self.window_seconds)
            self._last_cleanup = now
        return removed

    def _prune(self, window_start: float) -> int:
        stale = [
            identifier
            for identifier, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for identifier in stale:
            del self._requests[identifier]
        return len(stale)

    def __len__(self) -> int:
        """Number of identifiers currently tracked."""
        return len(self._requests)

    def reset(self) -> None:
        """Forget all recorded requests."""
        self._requests.clear()


def get_client_ip(request: Request, trust_proxy_headers: bool = False) -> str:
    """
    Extract client IP from request.

    X-Forwarded-For and X-Real-IP are client-controlled, so they are read
    only when the app sits behind a proxy that overwrites them. Otherwise
    the socket peer is used.
    """
    if trust_proxy_headers:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip.strip()

    if request.client:
        return request.client.host

    return "unknown"


async def enforce_rate_limit(request: Request) -> None:
    """
    Router dependency rejecting clients over the limit with 429.

    The limiter and the proxy-trust flag are set at startup in app.state.
    """
    limiter: InMemoryRateLimiter = request.app.state.rate_limiter
    trust_proxy_headers = getattr(request.app.state, "trust_proxy_headers", False)
    result = await limiter.check(get_client_ip(request, trust_proxy_headers))
    if not result.allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests, please try again later.",
            headers={"Retry-After": str(result.retry_after)},
        )
