"""Explicit construction of the service graph.

Everything with state or an external connection (rate limiter, vector store,
embedder, LLM client) is built once here at startup and handed to request
handlers through ``app.state``. Missing required configuration fails here,
before the app starts serving.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from agent_memory.adapters.embeddings.base import AbstractEmbedder
from agent_memory.adapters.embeddings.factory import create_embedder
from agent_memory.adapters.llm.base import AbstractLLMClient
from agent_memory.adapters.llm.factory import create_llm_client
from agent_memory.adapters.rate_limit.base import AbstractRateLimiter
from agent_memory.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from agent_memory.adapters.rate_limit.sweeper import RateLimitSweeper
from agent_memory.adapters.vector_store.base import AbstractVectorStore
from agent_memory.adapters.vector_store.factory import create_vector_store
from agent_memory.core.config import Settings, settings
from agent_memory.services.breeding_service import ChildRegistry
from agent_memory.services.chat_service import ChatService
from agent_memory.services.memory_service import MemoryStore

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Long-lived components shared by all requests."""

    rate_limiter: AbstractRateLimiter
    sweeper: RateLimitSweeper
    vector_store: AbstractVectorStore
    memory_store: MemoryStore
    chat_service: ChatService
    child_registry: ChildRegistry

    async def start(self) -> None:
        self.sweeper.start()

    async def aclose(self) -> None:
        """Stop background work and release client resources."""
        await self.sweeper.stop()
        self.rate_limiter.reset()
        await self.chat_service.llm.close()
        await self.memory_store.embedder.close()
        await self.vector_store.close()
        logger.info("container.closed")


def build_container(
    cfg: Settings | None = None,
    *,
    rate_limiter: AbstractRateLimiter | None = None,
    vector_store: AbstractVectorStore | None = None,
    embedder: AbstractEmbedder | None = None,
    llm: AbstractLLMClient | None = None,
    child_registry: ChildRegistry | None = None,
) -> ServiceContainer:
    """Build every service from configuration.

    Any component can be passed in pre-built (tests, alternative backends);
    the rest are created from ``cfg``.

    Raises:
        ValidationAppError: If required configuration is missing.
    """
    cfg = cfg or settings

    limiter = rate_limiter or InMemoryFixedWindowRateLimiter(
        limit=cfg.app.rate_limit_requests,
        window_seconds=cfg.app.rate_limit_window_seconds,
    )
    store_backend = vector_store or create_vector_store(cfg.vector_store)
    text_embedder = embedder or create_embedder(cfg.embedding)

    memory_store = MemoryStore(
        store_backend,
        text_embedder,
        timeout_seconds=cfg.vector_store.timeout_seconds,
    )
    chat_service = ChatService(
        llm or create_llm_client(cfg.llm),
        memory_store,
        memory_top_k=cfg.app.chat_memory_top_k,
        remember=cfg.app.chat_remember_messages,
    )

    container = ServiceContainer(
        rate_limiter=limiter,
        sweeper=RateLimitSweeper(
            limiter, interval_seconds=cfg.app.rate_limit_sweep_interval_seconds
        ),
        vector_store=store_backend,
        memory_store=memory_store,
        chat_service=chat_service,
        child_registry=child_registry or ChildRegistry(cfg.app.children_file),
    )
    logger.info(
        "container.built",
        extra={
            "vector_store": type(store_backend).__name__,
            "embedder": type(text_embedder).__name__,
            "semantic_search": text_embedder.is_semantic,
        },
    )
    return container
