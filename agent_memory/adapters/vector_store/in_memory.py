"""In-process vector store.

Notes:
- Per-process and non-persistent: contents vanish on restart.
- Thread-safe: uses a lock around shared state.
- Brute-force cosine similarity; fine for development and tests, not for
  large collections.
"""

from __future__ import annotations

import math
import threading
from typing import Any, Sequence

from agent_memory.adapters.vector_store.base import AbstractVectorStore, VectorMatch, VectorRecord


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors; 0.0 when either has zero norm."""
    if len(a) != len(b):
        raise ValueError(f"vector length mismatch: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


def _matches_filter(metadata: dict[str, Any], filter: dict[str, Any] | None) -> bool:
    if not filter:
        return True
    return all(metadata.get(key) == value for key, value in filter.items())


class InMemoryVectorStore(AbstractVectorStore):
    """Dictionary-backed vector store with exact metadata filtering."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: dict[str, VectorRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    async def upsert(self, records: Sequence[VectorRecord]) -> None:
        with self._lock:
            for record in records:
                self._records[record.id] = VectorRecord(
                    id=record.id,
                    values=list(record.values),
                    metadata=dict(record.metadata),
                )

    async def query(
        self,
        vector: Sequence[float],
        *,
        top_k: int,
        filter: dict[str, Any] | None = None,
        include_metadata: bool = True,
    ) -> list[VectorMatch]:
        with self._lock:
            candidates = [r for r in self._records.values() if _matches_filter(r.metadata, filter)]

        scored = [
            VectorMatch(
                id=record.id,
                score=cosine_similarity(vector, record.values),
                metadata=dict(record.metadata) if include_metadata else {},
            )
            for record in candidates
        ]
        # Ties broken by id so ordering is stable across calls
        scored.sort(key=lambda match: (-match.score, match.id))
        return scored[:top_k]

    async def fetch(self, ids: Sequence[str]) -> dict[str, VectorRecord]:
        with self._lock:
            return {id: self._records[id] for id in ids if id in self._records}

    async def delete_one(self, id: str) -> None:
        with self._lock:
            self._records.pop(id, None)
