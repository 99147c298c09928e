"""Tests for provider factories (LLM, embeddings, vector store)."""

from unittest.mock import patch

import pytest

from agent_memory.adapters.embeddings import HashingEmbedder, OpenAIEmbedder, create_embedder
from agent_memory.adapters.llm import OpenAIClient, create_llm_client
from agent_memory.adapters.vector_store import InMemoryVectorStore, create_vector_store
from agent_memory.core.config import EmbeddingSettings, LLMSettings, VectorStoreSettings
from agent_memory.core.errors import ValidationAppError


class TestLLMFactory:
    def test_creates_openai_client_from_settings(self) -> None:
        cfg = LLMSettings(provider="openai", model="gpt-4o-mini", api_key="sk-test", temperature=0.2)

        client = create_llm_client(cfg)

        assert isinstance(client, OpenAIClient)
        assert client.model == "gpt-4o-mini"
        assert client.temperature == 0.2

    def test_provider_name_is_case_insensitive(self) -> None:
        cfg = LLMSettings(provider="OpenAI", model="gpt-4o-mini", api_key="sk-test")

        assert isinstance(create_llm_client(cfg), OpenAIClient)

    def test_missing_api_key_raises(self) -> None:
        cfg = LLMSettings(provider="openai", model="gpt-4o-mini", api_key=None)

        with pytest.raises(ValidationAppError) as exc_info:
            create_llm_client(cfg)

        assert exc_info.value.code == "llm_missing_api_key"

    def test_unknown_provider_raises(self) -> None:
        cfg = LLMSettings(provider="unknown", model="x", api_key="k")

        with pytest.raises(ValidationAppError) as exc_info:
            create_llm_client(cfg)

        assert exc_info.value.code == "llm_unknown_provider"


class TestEmbeddingFactory:
    def test_hashing_provider_uses_configured_dimension(self) -> None:
        embedder = create_embedder(EmbeddingSettings(provider="hashing", dimension=128))

        assert isinstance(embedder, HashingEmbedder)
        assert embedder.dimension == 128

    def test_openai_provider(self) -> None:
        embedder = create_embedder(EmbeddingSettings(provider="openai", api_key="sk-test"))

        assert isinstance(embedder, OpenAIEmbedder)
        assert embedder.dimension == 384

    def test_openai_provider_requires_api_key(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            create_embedder(EmbeddingSettings(provider="openai", api_key=None))

        assert exc_info.value.code == "embedding_missing_api_key"

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValidationAppError):
            create_embedder(EmbeddingSettings(provider="word2vec"))


class TestVectorStoreFactory:
    def test_memory_provider(self) -> None:
        store = create_vector_store(VectorStoreSettings(provider="memory"))

        assert isinstance(store, InMemoryVectorStore)

    def test_pinecone_provider_requires_api_key(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            create_vector_store(VectorStoreSettings(provider="pinecone", api_key=None))

        assert exc_info.value.code == "vector_store_missing_api_key"

    def test_pinecone_provider_connects_to_configured_index(self) -> None:
        cfg = VectorStoreSettings(
            provider="pinecone",
            api_key="pc-test",
            index_name="memories",
            namespace="staging",
        )

        with patch("agent_memory.adapters.vector_store.pinecone_store.Pinecone") as pinecone_cls:
            store = create_vector_store(cfg)

        pinecone_cls.assert_called_once_with(api_key="pc-test")
        pinecone_cls.return_value.Index.assert_called_once_with("memories")
        assert store.index_name == "memories"

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValidationAppError):
            create_vector_store(VectorStoreSettings(provider="faiss"))
