"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: one lock guards the entry map for check, sweep and stats.
- Windows are anchored at each caller's first request, not at wall-clock
  boundaries.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from agent_memory.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitResult,
    RateLimitStats,
)

logger = logging.getLogger(__name__)


@dataclass
class _WindowState:
    window_start: float
    window_end: float
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter using a fixed time window per identity.

    The first request from an identity opens a window of ``window_seconds``;
    up to ``limit`` requests are allowed inside it. Requests over the limit
    are rejected but still counted (capped at ``limit + 1``) so repeated
    retries stay visible in :meth:`stats`. The next request after the window
    ends opens a fresh window regardless of how many were rejected.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(
        self,
        *,
        limit: int = 10,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of allowed requests per window.
            window_seconds: Size of the fixed window in seconds.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._state_by_key: dict[str, _WindowState] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def _allowed(self, identity: str, now: float) -> RateLimitResult:
        """Count the request and build the decision. Caller holds the lock."""
        state = self._state_by_key.get(identity)

        if state is None or now >= state.window_end:
            state = _WindowState(
                window_start=now,
                window_end=now + self._window_seconds,
                count=1,
            )
            self._state_by_key[identity] = state
        else:
            state.count = min(state.count + 1, self._limit + 1)

        remaining = max(0, self._limit - state.count)
        if state.count <= self._limit:
            return RateLimitResult(
                allowed=True,
                limit=self._limit,
                remaining=remaining,
                reset_at=state.window_end,
                retry_after_seconds=None,
            )

        return RateLimitResult(
            allowed=False,
            limit=self._limit,
            remaining=remaining,
            reset_at=state.window_end,
            retry_after_seconds=max(0, int(math.ceil(state.window_end - now))),
        )

    def _fail_open(self, now: float | None) -> RateLimitResult:
        reset_at = (now or 0.0) + self._window_seconds
        return RateLimitResult(
            allowed=True,
            limit=self._limit,
            remaining=self._limit,
            reset_at=reset_at,
            retry_after_seconds=None,
        )

    def check(self, identity: str) -> RateLimitResult:
        """Count one request for ``identity`` and return the decision.

        An empty identity is a valid key: all such callers share one bucket.
        Any unexpected error is logged and the request is allowed.

        Args:
            identity: Caller identity (session id or network address).

        Returns:
            RateLimitResult with allowance decision and metadata.
        """
        now: float | None = None
        try:
            now = self._clock()
            with self._lock:
                return self._allowed(identity, now)
        except Exception as exc:
            logger.error(
                "rate_limit.check_failed",
                extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
            )
            return self._fail_open(now)

    def sweep(self) -> int:
        """Remove entries whose window has already ended.

        Holds the same lock as :meth:`check`, so an entry that is re-opened or
        incremented concurrently is never dropped.
        """
        now = self._clock()
        with self._lock:
            expired = [
                key for key, state in self._state_by_key.items() if now >= state.window_end
            ]
            for key in expired:
                del self._state_by_key[key]
            tracked = len(self._state_by_key)

        if expired:
            logger.info(
                "rate_limit.swept",
                extra={"removed": len(expired), "tracked_identities": tracked},
            )
        return len(expired)

    def stats(self) -> RateLimitStats:
        with self._lock:
            return RateLimitStats(
                tracked_identities=len(self._state_by_key),
                total_requests=sum(s.count for s in self._state_by_key.values()),
            )

    def reset(self) -> None:
        with self._lock:
            self._state_by_key.clear()
