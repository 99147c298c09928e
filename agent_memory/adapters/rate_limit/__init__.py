"""Rate limiting adapters.

This package provides a small abstraction layer so the service can start with
an in-memory limiter and later migrate to Redis or another shared store
without changing the API layer.
"""

from agent_memory.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitResult,
    RateLimitStats,
)
from agent_memory.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from agent_memory.adapters.rate_limit.sweeper import RateLimitSweeper

__all__ = [
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitResult",
    "RateLimitStats",
    "RateLimitSweeper",
]
