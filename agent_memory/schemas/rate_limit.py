"""Pydantic schemas for rate limit responses."""

from pydantic import Field

from agent_memory.schemas.base import CamelModel


class RateLimitInfo(CamelModel):
    limit: int
    remaining: int
    reset_time: int = Field(..., description="Window end in epoch milliseconds.")
    retry_after: int = Field(..., description="Seconds until the window ends.")


class RateLimitErrorResponse(CamelModel):
    error: str
    success: bool = False
    rate_limit: RateLimitInfo


class RateLimitStatsResponse(CamelModel):
    tracked_identities: int
    total_requests: int
