"""Background housekeeping for in-process rate limiters."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from agent_memory.adapters.rate_limit.base import AbstractRateLimiter

logger = logging.getLogger(__name__)


class RateLimitSweeper:
    """Periodically calls ``limiter.sweep()`` on the running event loop.

    Started from the application lifespan and stopped at shutdown. A failing
    sweep is logged and the loop keeps going.
    """

    def __init__(self, limiter: AbstractRateLimiter, *, interval_seconds: float = 300) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._limiter = limiter
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self._limiter.sweep()
            except Exception as exc:
                logger.error(
                    "rate_limit.sweep_failed",
                    extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
                )

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="rate-limit-sweeper")
        logger.info("rate_limit.sweeper_started", extra={"interval_s": self._interval})

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("rate_limit.sweeper_stopped")
