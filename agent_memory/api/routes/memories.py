from typing import Annotated

from fastapi import APIRouter, Depends, Query

from agent_memory.api.dependencies import get_memory_store
from agent_memory.core.config import settings
from agent_memory.core.errors import ValidationAppError
from agent_memory.core.rate_limit import enforce_rate_limit
from agent_memory.schemas.memory import (
    DeleteMemoryRequest,
    DeleteMemoryResponse,
    ListMemoriesResponse,
    MemoryItem,
    SearchMemoriesRequest,
    SearchMemoriesResponse,
    SearchResultItem,
    StoreMemoryRequest,
    StoreMemoryResponse,
)
from agent_memory.services.memory_service import MemoryStore

router = APIRouter(tags=["Memories"], dependencies=[Depends(enforce_rate_limit)])

MemoryStoreDep = Annotated[MemoryStore, Depends(get_memory_store)]


def _ensure_max_length(value: str, max_chars: int, field: str) -> None:
    if len(value) > max_chars:
        raise ValidationAppError(
            code=f"{field}_too_long",
            message=f"{field} exceeds the maximum of {max_chars} characters",
            details={"max_value": max_chars, "actual_value": len(value)},
        )


@router.post("/memories", response_model=StoreMemoryResponse)
async def store_memory(body: StoreMemoryRequest, memory_store: MemoryStoreDep) -> StoreMemoryResponse:
    """Store a memory for an agent.

    Persistence is best-effort: if the vector store is unavailable the id is
    still returned so the caller's flow is not blocked.

    Raises:
        ValidationAppError: 400 if the text exceeds the configured length.
    """
    _ensure_max_length(body.text, settings.app.max_memory_chars, "text")
    memory_id = await memory_store.store(body.agent_id, body.text, body.metadata)
    return StoreMemoryResponse(id=memory_id)


@router.get("/memories", response_model=ListMemoriesResponse)
async def list_memories(
    memory_store: MemoryStoreDep,
    agent_id: Annotated[str, Query(alias="agentId", min_length=1)],
    top_k: Annotated[int | None, Query(alias="topK", ge=1, le=100)] = None,
) -> ListMemoriesResponse:
    """List an agent's memories. An unreachable vector store yields an empty list."""
    records = await memory_store.list(agent_id, top_k or settings.app.memory_list_top_k)
    return ListMemoriesResponse(
        memories=[
            MemoryItem(id=r.id, text=r.text, score=r.score, timestamp=r.timestamp)
            for r in records
        ]
    )


@router.post("/memories/search", response_model=SearchMemoriesResponse)
async def search_memories(
    body: SearchMemoriesRequest,
    memory_store: MemoryStoreDep,
) -> SearchMemoriesResponse:
    """Search an agent's memories by relevance to a free-text query.

    ``semantic`` tells clients whether scores reflect meaning or only shared
    words (hashing embedder).
    """
    _ensure_max_length(body.query, settings.app.max_memory_chars, "query")
    records = await memory_store.search(
        body.agent_id,
        body.query,
        body.top_k or settings.app.memory_search_top_k,
    )
    return SearchMemoriesResponse(
        results=[
            SearchResultItem(
                id=r.id,
                text=r.text,
                score=r.score,
                relevance=round(r.score * 100, 1),
                timestamp=r.timestamp,
            )
            for r in records
        ],
        semantic=memory_store.is_semantic,
    )


@router.delete("/memories", response_model=DeleteMemoryResponse)
async def delete_memory(body: DeleteMemoryRequest, memory_store: MemoryStoreDep) -> DeleteMemoryResponse:
    """Delete a memory after confirming it exists.

    Returns ``deleted: false`` for unknown ids. Vector store failures surface
    as 502 rather than being reported as success.
    """
    result = await memory_store.delete(body.memory_id, agent_id=body.agent_id)
    return DeleteMemoryResponse(id=result.id, deleted=result.deleted)
