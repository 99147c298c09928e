"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Rate limiting strategy:
- Fixed window per caller, anchored at the caller's first request.
- Caller identity is the ``X-Session-ID`` header when present, then the
  ``sessionId`` of a chat body, otherwise the client address. Known
  limitations: a client can rotate session ids to get fresh budgets, and
  callers sharing one address (NAT, proxies) share a budget when they send
  no session id.
- Fail open: a fault inside the limiter never blocks the request.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Header, Request, Response
from fastapi.responses import JSONResponse

from agent_memory.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from agent_memory.api.dependencies import get_rate_limiter
from agent_memory.core.config import settings
from agent_memory.core.logging import hash_identifier
from agent_memory.schemas.rate_limit import RateLimitErrorResponse, RateLimitInfo

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "I'm getting too many requests right now. Please try again in a moment!"


class RateLimitExceeded(Exception):
    """Raised by :func:`apply_rate_limit` when a caller is over budget."""

    def __init__(self, result: RateLimitResult) -> None:
        super().__init__(RATE_LIMIT_MESSAGE)
        self.result = result


def build_rate_limit_key(request: Request, session_id: str | None) -> str:
    """Build the namespaced limiter key for the current request.

    Args:
        request: FastAPI request.
        session_id: Caller session id (header or body), if any.

    Returns:
        str: ``session:<id>`` or ``ip:<host>`` (``ip:unknown`` without a client).
    """

    if session_id:
        return f"session:{session_id}"

    client_host = request.client.host if request.client else "unknown"
    return f"ip:{client_host}"


def _rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(int(result.reset_at)),
    }
    if not result.allowed:
        headers["Retry-After"] = str(result.retry_after_seconds or 0)
    return headers


def apply_rate_limit(
    request: Request,
    response: Response,
    limiter: AbstractRateLimiter,
    session_id: str | None,
) -> None:
    """Count one request against the caller's budget.

    Routes that learn the caller's session from the request body call this
    directly; the others go through :func:`enforce_rate_limit`.

    Args:
        request: FastAPI request.
        response: Response whose headers receive the X-RateLimit-* values.
        limiter: Application rate limiter.
        session_id: Caller session id, if any.

    Raises:
        RateLimitExceeded: When the caller exceeded the configured rate.
    """

    if not settings.app.rate_limit_enabled:
        return

    try:
        key = build_rate_limit_key(request, session_id)
        result = limiter.check(key)
        key_hash = hash_identifier(key)
        key_type = key.split(":", 1)[0]
    except Exception as exc:
        logger.error(
            "rate_limit.dependency_failed",
            extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
        )
        return

    if result.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "key_type": key_type,
                "key_hash": key_hash,
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        if settings.app.rate_limit_include_headers:
            response.headers.update(_rate_limit_headers(result))
        return

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_type": key_type,
            "key_hash": key_hash,
            "limit": result.limit,
            "remaining": result.remaining,
            "retry_after_s": result.retry_after_seconds,
        },
    )
    raise RateLimitExceeded(result)


async def enforce_rate_limit(
    request: Request,
    response: Response,
    limiter: Annotated[AbstractRateLimiter, Depends(get_rate_limiter)],
    x_session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> None:
    """FastAPI dependency enforcing rate limits.

    When enabled, counts one request against the caller's budget. If the
    caller is over budget, raises :class:`RateLimitExceeded` (rendered as 429).

    Raises:
        RateLimitExceeded: When the caller exceeded the configured rate.
    """
    apply_rate_limit(request, response, limiter, x_session_id)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render a rejected request as HTTP 429 with a retry hint."""
    result = exc.result
    retry_after = result.retry_after_seconds or 0

    body = RateLimitErrorResponse(
        error=RATE_LIMIT_MESSAGE,
        rate_limit=RateLimitInfo(
            limit=result.limit,
            remaining=result.remaining,
            reset_time=int(result.reset_at * 1000),
            retry_after=retry_after,
        ),
    )
    headers = _rate_limit_headers(result) if settings.app.rate_limit_include_headers else None
    return JSONResponse(
        status_code=429,
        content=body.model_dump(by_alias=True),
        headers=headers,
    )
