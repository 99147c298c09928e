"""Vector store adapter layer - abstracts over hosted and in-process indexes."""

from agent_memory.adapters.vector_store.base import AbstractVectorStore, VectorMatch, VectorRecord
from agent_memory.adapters.vector_store.factory import create_vector_store
from agent_memory.adapters.vector_store.in_memory import InMemoryVectorStore

__all__ = [
    "AbstractVectorStore",
    "InMemoryVectorStore",
    "VectorMatch",
    "VectorRecord",
    "create_vector_store",
]
