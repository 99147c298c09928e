"""Factory for creating embedder instances."""

import logging

from agent_memory.adapters.embeddings.base import AbstractEmbedder
from agent_memory.adapters.embeddings.hashing import HashingEmbedder
from agent_memory.adapters.embeddings.openai_embedder import OpenAIEmbedder
from agent_memory.core.config import EmbeddingSettings, settings
from agent_memory.core.errors import ValidationAppError

logger = logging.getLogger(__name__)


def create_embedder(embedding_settings: EmbeddingSettings | None = None) -> AbstractEmbedder:
    """Instantiate the configured embedding provider.

    Args:
        embedding_settings: Optional settings; defaults to the global settings.

    Returns:
        AbstractEmbedder: Configured embedder.

    Raises:
        ValidationAppError: If provider-specific requirements are not met.
    """
    cfg = embedding_settings or settings.embedding
    provider = cfg.provider.lower()

    if provider == "openai":
        if not cfg.api_key:
            raise ValidationAppError(
                code="embedding_missing_api_key",
                message="OpenAI embedding provider requires EMBEDDING_API_KEY environment variable",
            )
        return OpenAIEmbedder(
            api_key=cfg.api_key,
            model=cfg.model,
            dimension=cfg.dimension,
            base_url=cfg.base_url,
            timeout_seconds=cfg.timeout_seconds,
        )

    if provider == "hashing":
        logger.warning(
            "embedding.non_semantic_provider",
            extra={
                "provider": provider,
                "dimension": cfg.dimension,
                "hint": "Search relevance is token overlap only; set EMBEDDING_PROVIDER=openai for semantic search",
            },
        )
        return HashingEmbedder(dimension=cfg.dimension)

    raise ValidationAppError(
        code="embedding_unknown_provider",
        message=(
            f"Unknown embedding provider: '{provider}'. Supported providers: hashing, openai"
        ),
    )
