"""Pydantic schemas for the chat endpoint."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from agent_memory.schemas.base import CamelModel


class ChatRequest(CamelModel):
    message: str = Field(..., min_length=1, description="User message (length capped by config).")
    agent_id: str | None = Field(
        default=None,
        description="Agent whose memories are recalled and extended.",
    )
    session_id: str | None = Field(default=None, description="Client conversation id.")


class ChatResponse(CamelModel):
    reply: str
    memories_used: int = Field(..., description="Number of memories injected into the prompt.")
    agent_id: str | None = None
    session_id: str = "default"
    model: str
    fallback: bool = Field(
        default=False,
        description="True when the model was unavailable and a canned reply was returned.",
    )
    timestamp: datetime
    success: bool = True
