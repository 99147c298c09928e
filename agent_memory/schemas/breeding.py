"""Pydantic schemas for the breeding endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from agent_memory.schemas.base import CamelModel


class MixTraitsRequest(CamelModel):
    parent_a: dict[str, Any] = Field(..., description="First parent's trait map.")
    parent_b: dict[str, Any] = Field(..., description="Second parent's trait map.")
    parent_a_id: str | None = None
    parent_b_id: str | None = None


class ParentIds(CamelModel):
    parent_a_id: str | None = None
    parent_b_id: str | None = None


class MixTraitsResponse(CamelModel):
    child_id: str
    child: dict[str, Any]
    parents: ParentIds
    success: bool = True


class TraitPreviewRequest(CamelModel):
    parent_a_traits: list[str] = Field(default_factory=list)
    parent_b_traits: list[str] = Field(default_factory=list)
    parent_a_breeds: int = Field(0, ge=0, description="Times parent A has already bred.")
    parent_b_breeds: int = Field(0, ge=0, description="Times parent B has already bred.")


class TraitPreviewResponse(CamelModel):
    traits: list[str]
    dominant_personality: str
    rarity_score: int = Field(..., ge=0, le=100)
    rarity: str
    success_rate: int = Field(..., ge=50, le=100, description="Estimated breeding success (%).")
