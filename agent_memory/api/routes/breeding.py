from typing import Annotated

from fastapi import APIRouter, Depends

from agent_memory.api.dependencies import get_child_registry
from agent_memory.schemas.breeding import (
    MixTraitsRequest,
    MixTraitsResponse,
    ParentIds,
    TraitPreviewRequest,
    TraitPreviewResponse,
)
from agent_memory.services.breeding_service import (
    ChildRegistry,
    calculate_rarity,
    estimate_breeding_success,
    mix_traits,
    preview_trait_mixing,
)

router = APIRouter(prefix="/breeding", tags=["Breeding"])


@router.post("/mix", response_model=MixTraitsResponse)
def mix(
    body: MixTraitsRequest,
    registry: Annotated[ChildRegistry, Depends(get_child_registry)],
) -> MixTraitsResponse:
    """Derive a child from two parents' traits and register it."""
    child = mix_traits(body.parent_a, body.parent_b)
    child_id = registry.add(child)
    return MixTraitsResponse(
        child_id=child_id,
        child=child,
        parents=ParentIds(parent_a_id=body.parent_a_id, parent_b_id=body.parent_b_id),
    )


@router.post("/preview", response_model=TraitPreviewResponse)
def preview(body: TraitPreviewRequest) -> TraitPreviewResponse:
    """Preview a child's traits, rarity and breeding success without registering it."""
    result = preview_trait_mixing(body.parent_a_traits, body.parent_b_traits)
    return TraitPreviewResponse(
        traits=result.traits,
        dominant_personality=result.dominant_personality,
        rarity_score=result.rarity_score,
        rarity=calculate_rarity(result.traits),
        success_rate=estimate_breeding_success(
            body.parent_a_traits,
            body.parent_b_traits,
            body.parent_a_breeds,
            body.parent_b_breeds,
        ),
    )
