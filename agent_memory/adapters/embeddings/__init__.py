"""Embedding adapter layer - turns text into fixed-length vectors."""

from agent_memory.adapters.embeddings.base import AbstractEmbedder
from agent_memory.adapters.embeddings.factory import create_embedder
from agent_memory.adapters.embeddings.hashing import HashingEmbedder
from agent_memory.adapters.embeddings.openai_embedder import OpenAIEmbedder

__all__ = [
    "AbstractEmbedder",
    "HashingEmbedder",
    "OpenAIEmbedder",
    "create_embedder",
]
