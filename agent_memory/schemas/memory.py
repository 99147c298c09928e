"""Pydantic schemas for the memory endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from agent_memory.schemas.base import CamelModel


class StoreMemoryRequest(CamelModel):
    """Request body for storing a memory."""

    agent_id: str = Field(..., min_length=1, description="Agent that owns the memory.")
    text: str = Field(..., min_length=1, description="Memory text (length capped by config).")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Optional extra fields stored alongside the memory.",
    )


class StoreMemoryResponse(CamelModel):
    id: str = Field(..., description="Memory id, prefixed with the agent id.")
    success: bool = True


class MemoryItem(CamelModel):
    """A memory as listed for an agent."""

    id: str
    text: str
    score: float = Field(..., description="Backend similarity score against the listing vector.")
    timestamp: int | None = Field(
        default=None,
        description="Creation time in epoch milliseconds.",
    )


class ListMemoriesResponse(CamelModel):
    memories: list[MemoryItem] = Field(default_factory=list)
    success: bool = True


class SearchMemoriesRequest(CamelModel):
    """Request body for a relevance search."""

    agent_id: str = Field(..., min_length=1)
    query: str = Field(..., min_length=1, description="Free-text query.")
    top_k: int | None = Field(
        default=None,
        ge=1,
        le=100,
        description="Maximum number of results (defaults from config).",
    )


class SearchResultItem(CamelModel):
    id: str
    text: str
    score: float
    relevance: float = Field(..., description="Score as a percentage, one decimal.")
    timestamp: int | None = None


class SearchMemoriesResponse(CamelModel):
    results: list[SearchResultItem] = Field(default_factory=list)
    semantic: bool = Field(
        ...,
        description=(
            "False when the deterministic hashing embedder is active: scores then "
            "reflect shared words, not meaning."
        ),
    )
    success: bool = True


class DeleteMemoryRequest(CamelModel):
    memory_id: str = Field(..., min_length=1)
    agent_id: str | None = Field(
        default=None,
        description="When set, only a memory owned by this agent is deleted.",
    )


class DeleteMemoryResponse(CamelModel):
    id: str
    deleted: bool
    success: bool = True
