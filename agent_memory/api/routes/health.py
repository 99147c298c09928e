from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from agent_memory.adapters.rate_limit.base import AbstractRateLimiter
from agent_memory.api.dependencies import get_rate_limiter
from agent_memory.schemas.rate_limit import RateLimitStatsResponse

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Health check endpoint.

    Returns a simple status response to verify the API is operational.
    Used by load balancers and monitoring systems to determine service health.

    Returns:
        dict: A dictionary with a single "status" key set to "ok".
    """

    return {"status": "ok"}


@router.get("/health/rate-limit", response_model=RateLimitStatsResponse)
def rate_limit_stats(
    limiter: Annotated[AbstractRateLimiter, Depends(get_rate_limiter)],
) -> RateLimitStatsResponse:
    """Aggregate rate limiter usage (no caller identities are exposed)."""

    stats = limiter.stats()
    return RateLimitStatsResponse(
        tracked_identities=stats.tracked_identities,
        total_requests=stats.total_requests,
    )
