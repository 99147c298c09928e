"""Rate limiter interfaces.

The HTTP layer depends on this abstraction (not the concrete implementation)
so the storage backend can be swapped later (e.g., Redis) with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the caller's window ends.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after_seconds: int | None


@dataclass(frozen=True)
class RateLimitStats:
    """Aggregate limiter state, free of caller identities."""

    tracked_identities: int
    total_requests: int


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def check(self, identity: str) -> RateLimitResult:
        """Count one request for ``identity`` and decide whether it may proceed.

        Implementations must not raise: internal faults fail open.
        """
        raise NotImplementedError

    @abstractmethod
    def sweep(self) -> int:
        """Drop state for identities whose window has ended.

        Returns:
            Number of entries removed.
        """
        raise NotImplementedError

    @abstractmethod
    def stats(self) -> RateLimitStats:
        raise NotImplementedError

    def reset(self) -> None:
        """Forget all tracked identities."""
