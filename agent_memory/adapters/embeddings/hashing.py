"""Deterministic hashing embedder.

Known limitation: this is a placeholder, not a language model. Every
whitespace-separated token is hashed into one bucket of a fixed-length
vector, so identical text always maps to the identical vector and different
text usually maps to a different one. Two texts only score as "similar" when
they share literal tokens (after lowercasing); paraphrases and synonyms score
as unrelated. Relevance scores computed against these vectors must not be
presented as semantic similarity.
"""

from __future__ import annotations

from agent_memory.adapters.embeddings.base import AbstractEmbedder

_HASH_MASK = 0xFFFFFFFF


def token_hash(token: str) -> int:
    """32-bit rolling hash (``h = h * 31 + ord(ch)``) of a token."""
    h = 0
    for ch in token:
        h = (h * 31 + ord(ch)) & _HASH_MASK
    return h


class HashingEmbedder(AbstractEmbedder):
    """Fallback embedder used when no semantic provider is configured."""

    is_semantic = False

    def __init__(self, dimension: int = 384, increment: float = 0.1) -> None:
        if dimension < 1:
            raise ValueError("dimension must be >= 1")
        if not 0 < increment < 1:
            raise ValueError("increment must be between 0 and 1")
        self._dimension = dimension
        self._increment = increment

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed_sync(self, text: str) -> list[float]:
        vector = [0.0] * self._dimension
        for token in text.lower().split():
            index = token_hash(token) % self._dimension
            # Accumulated weight wraps back to 0 at 1.0
            vector[index] = (vector[index] + self._increment) % 1.0
        return vector

    async def embed(self, text: str) -> list[float]:
        return self.embed_sync(text)
