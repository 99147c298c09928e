"""Tests for MemoryStore over the in-process vector store."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from agent_memory.adapters.embeddings.hashing import HashingEmbedder
from agent_memory.adapters.vector_store.base import VectorMatch
from agent_memory.adapters.vector_store.in_memory import InMemoryVectorStore
from agent_memory.core.errors import ValidationAppError, VectorStoreAppError
from agent_memory.services.memory_service import MemoryStore, build_memory_id

NOW = 1_700_000_000.0


@pytest.fixture
def backend() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def memory_store(backend: InMemoryVectorStore) -> MemoryStore:
    return MemoryStore(backend, HashingEmbedder(dimension=64), clock=lambda: NOW)


async def _never_returns(*args, **kwargs):
    await asyncio.sleep(10)


def test_build_memory_id_is_prefixed_with_agent() -> None:
    memory_id = build_memory_id("agent_1")

    assert memory_id.startswith("agent_1-")
    assert len(memory_id) > len("agent_1-")


class TestStore:
    @pytest.mark.asyncio
    async def test_store_then_list_returns_memory(self, memory_store: MemoryStore) -> None:
        memory_id = await memory_store.store("agent_1", "I love hiking")

        records = await memory_store.list("agent_1")

        assert memory_id.startswith("agent_1-")
        assert len(records) == 1
        assert records[0].id == memory_id
        assert records[0].text == "I love hiking"
        assert records[0].agent_id == "agent_1"
        assert records[0].timestamp == int(NOW * 1000)

    @pytest.mark.asyncio
    async def test_same_text_twice_gives_distinct_ids(self, memory_store: MemoryStore) -> None:
        first = await memory_store.store("agent_1", "hello")
        second = await memory_store.store("agent_1", "hello")

        assert first != second
        assert len(await memory_store.list("agent_1")) == 2

    @pytest.mark.asyncio
    async def test_extra_metadata_cannot_override_reserved_fields(
        self, memory_store: MemoryStore
    ) -> None:
        await memory_store.store("agent_1", "likes tea", {"agent_id": "agent_2", "mood": "calm"})

        records = await memory_store.list("agent_1")

        assert len(records) == 1
        assert records[0].metadata == {"mood": "calm"}
        assert await memory_store.list("agent_2") == []

    @pytest.mark.asyncio
    async def test_backend_failure_still_returns_id(
        self, memory_store: MemoryStore, backend: InMemoryVectorStore
    ) -> None:
        backend.upsert = AsyncMock(side_effect=ConnectionError("vector store down"))

        memory_id = await memory_store.store("agent_1", "I love hiking")

        assert memory_id.startswith("agent_1-")

    @pytest.mark.asyncio
    async def test_backend_timeout_still_returns_id(self, backend: InMemoryVectorStore) -> None:
        backend.upsert = _never_returns
        memory_store = MemoryStore(backend, HashingEmbedder(dimension=64), timeout_seconds=0.01)

        memory_id = await memory_store.store("agent_1", "I love hiking")

        assert memory_id.startswith("agent_1-")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("agent_id, text", [("", "text"), ("agent_1", "   ")])
    async def test_rejects_empty_inputs(
        self, memory_store: MemoryStore, agent_id: str, text: str
    ) -> None:
        with pytest.raises(ValidationAppError):
            await memory_store.store(agent_id, text)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "metadata",
        [{"prefs": {"a": 1}}, {"tags": ["ok", 2]}, {"missing": None}],
    )
    async def test_rejects_metadata_the_index_cannot_store(
        self, memory_store: MemoryStore, backend: InMemoryVectorStore, metadata: dict
    ) -> None:
        backend.upsert = AsyncMock()

        with pytest.raises(ValidationAppError) as exc_info:
            await memory_store.store("agent_1", "I love hiking", metadata)

        assert exc_info.value.code == "invalid_metadata"
        backend.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_accepts_flat_metadata(self, memory_store: MemoryStore) -> None:
        metadata = {"mood": "calm", "score": 3, "weight": 0.5, "pinned": True, "tags": ["a", "b"]}

        await memory_store.store("agent_1", "likes tea", metadata)

        records = await memory_store.list("agent_1")
        assert records[0].metadata == metadata


class TestListAndSearch:
    @pytest.mark.asyncio
    async def test_list_only_returns_own_memories(self, memory_store: MemoryStore) -> None:
        await memory_store.store("agent_1", "likes cats")
        await memory_store.store("agent_2", "likes dogs")

        records = await memory_store.list("agent_1")

        assert [r.text for r in records] == ["likes cats"]

    @pytest.mark.asyncio
    async def test_list_respects_top_k(self, memory_store: MemoryStore) -> None:
        for i in range(5):
            await memory_store.store("agent_1", f"memory number {i}")

        assert len(await memory_store.list("agent_1", top_k=3)) == 3

    @pytest.mark.asyncio
    async def test_list_on_empty_store_is_empty(self, memory_store: MemoryStore) -> None:
        assert await memory_store.list("agent_1") == []

    @pytest.mark.asyncio
    async def test_search_ranks_shared_tokens_first(self, memory_store: MemoryStore) -> None:
        await memory_store.store("agent_1", "dinner at eight tonight")
        await memory_store.store("agent_1", "my favorite color is blue")

        records = await memory_store.search("agent_1", "favorite color blue", top_k=2)

        assert records[0].text == "my favorite color is blue"
        assert records[0].score > records[1].score

    @pytest.mark.asyncio
    async def test_backend_failure_returns_empty(
        self, memory_store: MemoryStore, backend: InMemoryVectorStore
    ) -> None:
        await memory_store.store("agent_1", "likes cats")
        backend.query = AsyncMock(side_effect=ConnectionError("vector store down"))

        assert await memory_store.list("agent_1") == []
        assert await memory_store.search("agent_1", "cats") == []

    @pytest.mark.asyncio
    async def test_embedding_failure_returns_empty(self, backend: InMemoryVectorStore) -> None:
        embedder = HashingEmbedder(dimension=64)
        embedder.embed = AsyncMock(side_effect=RuntimeError("embedding down"))
        memory_store = MemoryStore(backend, embedder)

        assert await memory_store.search("agent_1", "cats") == []

    @pytest.mark.asyncio
    async def test_foreign_matches_from_backend_are_dropped(
        self, memory_store: MemoryStore, backend: InMemoryVectorStore
    ) -> None:
        backend.query = AsyncMock(
            return_value=[
                VectorMatch(id="agent_2-x", score=0.9, metadata={"agent_id": "agent_2", "text": "secret"}),
                VectorMatch(id="agent_1-y", score=0.5, metadata={"agent_id": "agent_1", "text": "mine"}),
            ]
        )

        records = await memory_store.list("agent_1")

        assert [r.text for r in records] == ["mine"]

    @pytest.mark.asyncio
    async def test_rejects_invalid_top_k(self, memory_store: MemoryStore) -> None:
        with pytest.raises(ValidationAppError):
            await memory_store.list("agent_1", top_k=0)
        with pytest.raises(ValidationAppError):
            await memory_store.search("agent_1", "cats", top_k=0)

    @pytest.mark.asyncio
    async def test_search_rejects_empty_query(self, memory_store: MemoryStore) -> None:
        with pytest.raises(ValidationAppError):
            await memory_store.search("agent_1", "")

    def test_reports_embedder_semantics(self, memory_store: MemoryStore) -> None:
        assert memory_store.is_semantic is False


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_existing_memory(self, memory_store: MemoryStore) -> None:
        memory_id = await memory_store.store("agent_1", "likes cats")

        result = await memory_store.delete(memory_id)

        assert result.deleted is True
        assert result.id == memory_id
        assert result.text == "likes cats"
        assert result.agent_id == "agent_1"
        assert await memory_store.list("agent_1") == []

    @pytest.mark.asyncio
    async def test_delete_unknown_memory_changes_nothing(self, memory_store: MemoryStore) -> None:
        await memory_store.store("agent_1", "likes cats")

        result = await memory_store.delete("agent_1-does-not-exist")

        assert result.deleted is False
        assert len(await memory_store.list("agent_1")) == 1

    @pytest.mark.asyncio
    async def test_delete_with_wrong_owner_is_refused(self, memory_store: MemoryStore) -> None:
        memory_id = await memory_store.store("agent_1", "likes cats")

        result = await memory_store.delete(memory_id, agent_id="agent_2")

        assert result.deleted is False
        assert len(await memory_store.list("agent_1")) == 1

    @pytest.mark.asyncio
    async def test_delete_failure_raises(
        self, memory_store: MemoryStore, backend: InMemoryVectorStore
    ) -> None:
        memory_id = await memory_store.store("agent_1", "likes cats")
        backend.delete_one = AsyncMock(side_effect=ConnectionError("vector store down"))

        with pytest.raises(VectorStoreAppError) as exc_info:
            await memory_store.delete(memory_id)

        assert exc_info.value.code == "vector_store_error"
        assert exc_info.value.details["operation"] == "delete"

    @pytest.mark.asyncio
    async def test_lookup_failure_raises(
        self, memory_store: MemoryStore, backend: InMemoryVectorStore
    ) -> None:
        backend.fetch = AsyncMock(side_effect=ConnectionError("vector store down"))

        with pytest.raises(VectorStoreAppError) as exc_info:
            await memory_store.delete("agent_1-abc")

        assert exc_info.value.details["operation"] == "fetch"

    @pytest.mark.asyncio
    async def test_lookup_timeout_raises(self, backend: InMemoryVectorStore) -> None:
        backend.fetch = _never_returns
        memory_store = MemoryStore(backend, HashingEmbedder(dimension=64), timeout_seconds=0.01)

        with pytest.raises(VectorStoreAppError) as exc_info:
            await memory_store.delete("agent_1-abc")

        assert exc_info.value.code == "fetch_timeout"

    @pytest.mark.asyncio
    async def test_rejects_empty_id(self, memory_store: MemoryStore) -> None:
        with pytest.raises(ValidationAppError):
            await memory_store.delete("")


def test_rejects_non_positive_timeout() -> None:
    with pytest.raises(ValueError):
        MemoryStore(InMemoryVectorStore(), HashingEmbedder(), timeout_seconds=0)
