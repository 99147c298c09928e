"""Factory for creating vector store instances."""

from agent_memory.adapters.vector_store.base import AbstractVectorStore
from agent_memory.adapters.vector_store.in_memory import InMemoryVectorStore
from agent_memory.core.config import VectorStoreSettings, settings
from agent_memory.core.errors import ValidationAppError


def create_vector_store(store_settings: VectorStoreSettings | None = None) -> AbstractVectorStore:
    """Instantiate the configured vector store backend.

    Args:
        store_settings: Optional settings; defaults to the global settings.

    Returns:
        AbstractVectorStore: Connected vector store.

    Raises:
        ValidationAppError: If provider-specific requirements are not met.
    """
    cfg = store_settings or settings.vector_store
    provider = cfg.provider.lower()

    if provider == "pinecone":
        if not cfg.api_key:
            raise ValidationAppError(
                code="vector_store_missing_api_key",
                message="Pinecone vector store requires VECTOR_STORE_API_KEY environment variable",
            )
        # Imported lazily so the SDK is only touched when Pinecone is selected
        from agent_memory.adapters.vector_store.pinecone_store import PineconeVectorStore

        return PineconeVectorStore(
            api_key=cfg.api_key,
            index_name=cfg.index_name,
            namespace=cfg.namespace,
        )

    if provider == "memory":
        return InMemoryVectorStore()

    raise ValidationAppError(
        code="vector_store_unknown_provider",
        message=(
            f"Unknown vector store provider: '{provider}'. Supported providers: memory, pinecone"
        ),
    )
