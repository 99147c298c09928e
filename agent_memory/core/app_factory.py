"""Application factory for FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers and the
service container) so tests can build an app around injected services.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from agent_memory.api.routes import breeding_router, chat_router, health_router, memories_router
from agent_memory.core.config import settings
from agent_memory.core.container import ServiceContainer, build_container
from agent_memory.core.exception_handlers import setup_exception_handlers
from agent_memory.core.logging import configure_logging
from agent_memory.core.middleware import request_id_middleware
from agent_memory.core.openapi import apply_openapi_customizations


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    container: ServiceContainer = app.state.container
    await container.start()
    try:
        yield
    finally:
        await container.aclose()


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        container: Pre-built services; built from settings when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.

    Raises:
        ValidationAppError: If required provider configuration is missing.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Agent Memory API",
        description=(
            "Backend for AI agents with long-term memory: stores and searches "
            "per-agent memories in a vector index, answers chat messages using "
            "recalled memories, and mixes traits of bred agents. Per-caller "
            "fixed-window rate limiting protects the LLM and vector backends."
        ),
        version="0.1.0",
        lifespan=_lifespan,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )
    app.state.container = container or build_container(settings)

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(memories_router, prefix="/v1")
    app.include_router(chat_router, prefix="/v1")
    app.include_router(breeding_router, prefix="/v1")
    app.include_router(health_router)

    # OpenAPI customizations (tags, rate limit headers)
    apply_openapi_customizations(app)

    return app
