"""Pinecone vector store adapter."""

from __future__ import annotations

import asyncio
import functools
from typing import Any, Callable, Sequence, TypeVar

from pinecone import Pinecone

from agent_memory.adapters.vector_store.base import AbstractVectorStore, VectorMatch, VectorRecord
from agent_memory.core.errors import VectorStoreAppError

T = TypeVar("T")


class PineconeVectorStore(AbstractVectorStore):
    """Vector store backed by a hosted Pinecone index.

    Uses the official Pinecone Python SDK. SDK calls are blocking, so each one
    runs in the default thread pool; callers apply their own timeout.
    """

    def __init__(
        self,
        api_key: str,
        index_name: str,
        namespace: str | None = None,
        client: Pinecone | None = None,
    ) -> None:
        """Connect to the index.

        Args:
            api_key: Pinecone API key.
            index_name: Name of an existing index whose dimension matches the embedder.
            namespace: Optional namespace for all operations.
            client: Pre-built Pinecone client (tests).
        """
        self._client = client or Pinecone(api_key=api_key)
        self._index = self._client.Index(index_name)
        self.index_name = index_name
        self._namespace_kwargs: dict[str, Any] = {"namespace": namespace} if namespace else {}

    async def _call(self, operation: str, fn: Callable[..., T], **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                None, functools.partial(fn, **kwargs, **self._namespace_kwargs)
            )
        except Exception as exc:
            raise VectorStoreAppError(
                code="vector_store_error",
                message=f"Pinecone {operation} failed: {str(exc)}",
                details={"provider": "pinecone", "operation": operation},
            ) from exc

    async def upsert(self, records: Sequence[VectorRecord]) -> None:
        vectors = [
            {"id": r.id, "values": list(r.values), "metadata": dict(r.metadata)}
            for r in records
        ]
        await self._call("upsert", self._index.upsert, vectors=vectors)

    async def query(
        self,
        vector: Sequence[float],
        *,
        top_k: int,
        filter: dict[str, Any] | None = None,
        include_metadata: bool = True,
    ) -> list[VectorMatch]:
        pinecone_filter = (
            {key: {"$eq": value} for key, value in filter.items()} if filter else None
        )
        response = await self._call(
            "query",
            self._index.query,
            vector=list(vector),
            top_k=top_k,
            filter=pinecone_filter,
            include_metadata=include_metadata,
        )
        return [
            VectorMatch(
                id=match.id,
                score=float(match.score or 0.0),
                metadata=dict(match.metadata or {}),
            )
            for match in (response.matches or [])
        ]

    async def fetch(self, ids: Sequence[str]) -> dict[str, VectorRecord]:
        response = await self._call("fetch", self._index.fetch, ids=list(ids))
        return {
            id: VectorRecord(
                id=id,
                values=list(vector.values or []),
                metadata=dict(vector.metadata or {}),
            )
            for id, vector in (response.vectors or {}).items()
        }

    async def delete_one(self, id: str) -> None:
        await self._call("delete", self._index.delete, ids=[id])

    async def close(self) -> None:
        """Close the index's HTTP connection pool."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._index.close)
