"""Agent memory store over an external vector index.

This service turns short text snippets into vectors and keeps them per agent.
It handles:
- Id generation bound to the owning agent (``<agent_id>-<uuid>``)
- Embedding via the configured provider
- Bounded-time calls to the vector store (one attempt, no retries)
- Graceful degradation: writes and reads are best-effort, deletes are not

Failure policy:
- ``store``: failures are logged and absorbed; the generated id is returned
  so a chat turn is never blocked by memory persistence.
- ``list`` / ``search``: failures are logged and an empty list is returned.
  At this layer "no memories" and "service down" look the same.
- ``delete``: failures raise, because callers rely on a confirmed delete.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, TypeVar

from agent_memory.adapters.embeddings.base import AbstractEmbedder
from agent_memory.adapters.vector_store.base import AbstractVectorStore, VectorMatch, VectorRecord
from agent_memory.core.errors import EmbeddingAppError, ValidationAppError, VectorStoreAppError
from agent_memory.core.logging import hash_identifier

logger = logging.getLogger(__name__)

T = TypeVar("T")

ID_SEPARATOR = "-"
AGENT_ID_FIELD = "agent_id"
TEXT_FIELD = "text"
TIMESTAMP_FIELD = "timestamp"
_RESERVED_FIELDS = {AGENT_ID_FIELD, TEXT_FIELD, TIMESTAMP_FIELD}


@dataclass(frozen=True)
class MemoryRecord:
    """A memory as returned by list/search."""

    id: str
    agent_id: str
    text: str
    score: float
    timestamp: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of a delete; ``text``/``agent_id`` are set only when deleted."""

    deleted: bool
    id: str
    text: str | None = None
    agent_id: str | None = None


def build_memory_id(agent_id: str) -> str:
    """Generate a unique memory id scoped to ``agent_id``."""
    return f"{agent_id}{ID_SEPARATOR}{uuid.uuid4().hex}"


def _require(value: str, name: str) -> None:
    if not value or not value.strip():
        raise ValidationAppError(
            code=f"missing_{name}",
            message=f"{name} must be a non-empty string",
        )


def _is_storable(value: Any) -> bool:
    if isinstance(value, (str, int, float, bool)):
        return True
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _validate_metadata(metadata: dict[str, Any]) -> None:
    """Reject values the index cannot store as metadata.

    Allowed values are strings, numbers, booleans and lists of strings.
    """
    for key, value in metadata.items():
        if not _is_storable(value):
            raise ValidationAppError(
                code="invalid_metadata",
                message=(
                    f"metadata field '{key}' must be a string, number, boolean "
                    "or list of strings"
                ),
                details={"context": {"field": key, "type": type(value).__name__}},
            )


class MemoryStore:
    """Store, list, search and delete agent memories.

    Attributes:
        vector_store: Backend holding vectors and metadata.
        embedder: Provider turning text into vectors.
    """

    def __init__(
        self,
        vector_store: AbstractVectorStore,
        embedder: AbstractEmbedder,
        *,
        timeout_seconds: float = 10.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the memory store with its dependencies.

        Args:
            vector_store: Configured vector store instance.
            embedder: Configured embedder; its dimension must match the index.
            timeout_seconds: Upper bound for each external call.
            clock: Time source returning UNIX seconds (for timestamps).
        """
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        self.vector_store = vector_store
        self.embedder = embedder
        self._timeout = timeout_seconds
        self._clock = clock
        # Uniform unit vector: ranks every stored memory of an agent when listing
        dim = embedder.dimension
        self._listing_vector = [1.0 / math.sqrt(dim)] * dim

    @property
    def is_semantic(self) -> bool:
        return self.embedder.is_semantic

    async def _bounded(
        self,
        operation: str,
        call: Awaitable[T],
        *,
        error_cls: type[EmbeddingAppError] | type[VectorStoreAppError] = VectorStoreAppError,
    ) -> T:
        """Await an external call, converting a timeout into an AppError."""
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise error_cls(
                code=f"{operation}_timeout",
                message=f"{operation} did not complete within {self._timeout}s",
                details={"operation": operation},
            ) from exc

    async def _embed(self, text: str) -> list[float]:
        return await self._bounded("embed", self.embedder.embed(text), error_cls=EmbeddingAppError)

    async def store(
        self,
        agent_id: str,
        text: str,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Persist a memory for ``agent_id`` (best-effort).

        Args:
            agent_id: Owning agent identifier.
            text: Memory text; length limits are enforced by the caller.
            metadata: Optional extra fields; cannot override reserved fields.

        Returns:
            The memory id. Returned even if persistence failed.

        Raises:
            ValidationAppError: If agent_id or text is empty, or a metadata
                value is not a string, number, boolean or list of strings.
        """
        _require(agent_id, "agent_id")
        _require(text, "text")
        _validate_metadata(metadata or {})

        memory_id = build_memory_id(agent_id)
        timestamp = int(self._clock() * 1000)

        try:
            vector = await self._embed(text)
            record = VectorRecord(
                id=memory_id,
                values=vector,
                metadata={
                    **(metadata or {}),
                    AGENT_ID_FIELD: agent_id,
                    TEXT_FIELD: text,
                    TIMESTAMP_FIELD: timestamp,
                },
            )
            await self._bounded("upsert", self.vector_store.upsert([record]))
        except Exception as exc:
            logger.warning(
                "memory.store_failed",
                extra={
                    "agent_hash": hash_identifier(agent_id),
                    "memory_id": memory_id,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            return memory_id

        logger.info(
            "memory.stored",
            extra={
                "agent_hash": hash_identifier(agent_id),
                "memory_id": memory_id,
                "text_chars": len(text),
            },
        )
        return memory_id

    def _to_records(self, agent_id: str, matches: list[VectorMatch]) -> list[MemoryRecord]:
        records = []
        for match in matches:
            metadata = match.metadata or {}
            # Never hand out another agent's memory, whatever the backend returned
            if metadata.get(AGENT_ID_FIELD) != agent_id:
                continue
            timestamp = metadata.get(TIMESTAMP_FIELD)
            records.append(
                MemoryRecord(
                    id=match.id,
                    agent_id=agent_id,
                    text=str(metadata.get(TEXT_FIELD, "")),
                    score=match.score,
                    timestamp=int(timestamp) if timestamp is not None else None,
                    metadata={k: v for k, v in metadata.items() if k not in _RESERVED_FIELDS},
                )
            )
        return records

    async def _query(
        self,
        operation: str,
        agent_id: str,
        vector_call: Awaitable[list[float]] | None,
        top_k: int,
    ) -> list[MemoryRecord]:
        try:
            vector = await vector_call if vector_call is not None else self._listing_vector
            matches = await self._bounded(
                "query",
                self.vector_store.query(
                    vector,
                    top_k=top_k,
                    filter={AGENT_ID_FIELD: agent_id},
                    include_metadata=True,
                ),
            )
        except Exception as exc:
            logger.warning(
                f"memory.{operation}_failed",
                extra={
                    "agent_hash": hash_identifier(agent_id),
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            return []

        records = self._to_records(agent_id, matches)
        logger.info(
            f"memory.{operation}",
            extra={
                "agent_hash": hash_identifier(agent_id),
                "top_k": top_k,
                "returned": len(records),
            },
        )
        return records

    async def list(self, agent_id: str, top_k: int = 20) -> list[MemoryRecord]:
        """Return up to ``top_k`` memories of ``agent_id`` (empty on failure).

        Raises:
            ValidationAppError: If agent_id is empty or top_k < 1.
        """
        _require(agent_id, "agent_id")
        if top_k < 1:
            raise ValidationAppError(code="invalid_top_k", message="top_k must be >= 1")
        return await self._query("listed", agent_id, None, top_k)

    async def search(self, agent_id: str, query: str, top_k: int = 5) -> list[MemoryRecord]:
        """Return the memories of ``agent_id`` closest to ``query`` (empty on failure).

        With a non-semantic embedder the ranking reflects shared tokens only.

        Raises:
            ValidationAppError: If agent_id or query is empty, or top_k < 1.
        """
        _require(agent_id, "agent_id")
        _require(query, "query")
        if top_k < 1:
            raise ValidationAppError(code="invalid_top_k", message="top_k must be >= 1")
        return await self._query("searched", agent_id, self._embed(query), top_k)

    def _delete_error(self, operation: str, memory_id: str, exc: Exception) -> VectorStoreAppError:
        logger.error(
            "memory.delete_failed",
            extra={
                "memory_id": memory_id,
                "operation": operation,
                "error_type": type(exc).__name__,
                "error_msg": str(exc),
            },
        )
        if isinstance(exc, VectorStoreAppError):
            return exc
        return VectorStoreAppError(
            code="vector_store_error",
            message=f"{operation} failed: {str(exc)}",
            details={"operation": operation, "memory_id": memory_id},
        )

    async def delete(self, memory_id: str, agent_id: str | None = None) -> DeleteResult:
        """Delete a memory after confirming it exists.

        Args:
            memory_id: Id of the memory to delete.
            agent_id: When given, only a memory owned by this agent is deleted.

        Returns:
            DeleteResult; ``deleted`` is False when the memory does not exist
            (or belongs to another agent) and nothing was changed.

        Raises:
            ValidationAppError: If memory_id is empty.
            VectorStoreAppError: If the lookup or the deletion fails.
        """
        _require(memory_id, "memory_id")

        try:
            fetched = await self._bounded("fetch", self.vector_store.fetch([memory_id]))
        except Exception as exc:
            error = self._delete_error("fetch", memory_id, exc)
            if error is exc:
                raise
            raise error from exc
        record = fetched.get(memory_id)
        if record is None:
            logger.info("memory.delete_not_found", extra={"memory_id": memory_id})
            return DeleteResult(deleted=False, id=memory_id)

        owner = record.metadata.get(AGENT_ID_FIELD)
        if agent_id is not None and owner != agent_id:
            logger.warning(
                "memory.delete_owner_mismatch",
                extra={"memory_id": memory_id, "agent_hash": hash_identifier(agent_id)},
            )
            return DeleteResult(deleted=False, id=memory_id)

        try:
            await self._bounded("delete", self.vector_store.delete_one(memory_id))
        except Exception as exc:
            error = self._delete_error("delete", memory_id, exc)
            if error is exc:
                raise
            raise error from exc

        logger.info("memory.deleted", extra={"memory_id": memory_id})
        return DeleteResult(
            deleted=True,
            id=memory_id,
            text=record.metadata.get(TEXT_FIELD),
            agent_id=owner,
        )
