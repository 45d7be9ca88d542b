"""
staffboard.api.ratelimit - Rate Limiting for Auth Endpoints

In-memory sliding-window rate limiting keyed by client IP. Suitable for
single-instance deployments.

Usage:
    @router.post("/sign-in", dependencies=[Depends(limit("sign_in_limiter"))])
    async def sign_in(...): ...

The limiters themselves live on ``app.state`` (see create_app) so their
limits come from settings.
"""

import logging
import math
import time
from collections import defaultdict, deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from threading import Lock

from fastapi import HTTPException, Request, status

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Too many requests. Please wait a moment and try again."


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, retry_after: int = 60, detail: str = RATE_LIMITED_MESSAGE) -> None:
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=detail,
            headers={"Retry-After": str(retry_after)},
        )
        self.retry_after = retry_after


@dataclass
class RateLimitState:
    """Request timestamps of one key, oldest first."""

    request_times: deque[float] = field(default_factory=deque)

    def prune(self, cutoff: float) -> None:
        while self.request_times and self.request_times[0] <= cutoff:
            self.request_times.popleft()


class RateLimiter:
    """
    Sliding-window limiter keyed by client IP.

    Only accepted requests are recorded, so a client hammering a closed
    window does not extend it.

    Example:
        >>> limiter = RateLimiter(max_requests=5, window_seconds=60)
        >>> limiter.is_allowed("203.0.113.7")  # True
        >>> # ... 5 more requests ...
        >>> limiter.is_allowed("203.0.113.7")  # False
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: int = 60,
        cleanup_interval: int = 300,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.cleanup_interval = cleanup_interval
        self._states: dict[str, RateLimitState] = defaultdict(RateLimitState)
        self._lock = Lock()
        self._last_cleanup = time.time()

    def _current(self, key: str, now: float) -> RateLimitState:
        state = self._states[key]
        state.prune(now - self.window_seconds)
        return state

    def is_allowed(self, key: str) -> bool:
        """Record a request for key; False once the window is full."""
        now = time.time()

        with self._lock:
            if now - self._last_cleanup > self.cleanup_interval:
                self._cleanup(now)

            state = self._current(key, now)
            if len(state.request_times) >= self.max_requests:
                logger.warning(
                    f"Rate limit exceeded for key: {key[:20]}",
                    extra={"key_prefix": key[:20], "requests_in_window": len(state.request_times)},
                )
                return False

            state.request_times.append(now)
            return True

    def get_remaining(self, key: str) -> int:
        with self._lock:
            state = self._current(key, time.time())
            return max(0, self.max_requests - len(state.request_times))

    def get_reset_time(self, key: str) -> float:
        """Seconds until the oldest request of key leaves the window (0 if none)."""
        now = time.time()
        with self._lock:
            state = self._current(key, now)
            if not state.request_times:
                return 0
            return max(0, state.request_times[0] + self.window_seconds - now)

    def _cleanup(self, now: float) -> None:
        cutoff = now - self.window_seconds
        stale = []
        for key, state in self._states.items():
            state.prune(cutoff)
            if not state.request_times:
                stale.append(key)

        for key in stale:
            del self._states[key]
        self._last_cleanup = now

        if stale:
            logger.debug(f"Rate limiter cleanup: removed {len(stale)} stale entries")


def get_client_identifier(request: Request) -> str:
    """
    Client IP for rate limiting.

    Uses the first X-Forwarded-For hop when behind a proxy.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


def limit(limiter_name: str) -> Callable[[Request], Awaitable[None]]:
    """
    Build a dependency enforcing the limiter stored at ``app.state.<limiter_name>``.

    Raises:
        RateLimitExceeded: With Retry-After set from the limiter window
    """

    async def dependency(request: Request) -> None:
        limiter: RateLimiter | None = getattr(request.app.state, limiter_name, None)
        if limiter is None:
            return
        key = get_client_identifier(request)
        if not limiter.is_allowed(key):
            retry_after = max(1, math.ceil(limiter.get_reset_time(key)))
            raise RateLimitExceeded(retry_after=retry_after)

    return dependency


__all__ = [
    "RATE_LIMITED_MESSAGE",
    "RateLimitExceeded",
    "RateLimiter",
    "get_client_identifier",
    "limit",
]
