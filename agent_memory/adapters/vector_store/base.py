"""Vector store interfaces.

Services talk to the vector database only through this interface so the
hosted index (Pinecone) and the in-process index used for development and
tests are interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence


@dataclass(frozen=True)
class VectorRecord:
    """A stored vector with its metadata."""

    id: str
    values: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class VectorMatch:
    """A query hit; ``score`` is the backend's similarity (higher is closer)."""

    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


class AbstractVectorStore(ABC):
    """Interface for vector databases.

    Filters are exact-match on metadata fields: ``{"agent_id": "agent_1"}``.
    Upserts may become visible to queries with some delay.
    """

    @abstractmethod
    async def upsert(self, records: Sequence[VectorRecord]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def query(
        self,
        vector: Sequence[float],
        *,
        top_k: int,
        filter: dict[str, Any] | None = None,
        include_metadata: bool = True,
    ) -> list[VectorMatch]:
        """Return up to ``top_k`` matches ordered by descending score."""
        raise NotImplementedError

    @abstractmethod
    async def fetch(self, ids: Sequence[str]) -> dict[str, VectorRecord]:
        """Return the records that exist among ``ids``, keyed by id."""
        raise NotImplementedError

    @abstractmethod
    async def delete_one(self, id: str) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        """Release client resources (no-op by default)."""
