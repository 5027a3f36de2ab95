from fastapi import APIRouter

from ..core.personas import DEFAULT_PERSONALITY_ID, get_all_personalities, get_personality
from ..types import PersonalitiesResponse, PersonalityDetail, PersonalitySummary

router = APIRouter(prefix="/api/personalities")


@router.get("", response_model=PersonalitiesResponse)
async def list_personalities() -> PersonalitiesResponse:
    """All personalities, in selector order"""
    return PersonalitiesResponse(
        personalities=[PersonalitySummary(**p.summary()) for p in get_all_personalities()],
        default=DEFAULT_PERSONALITY_ID,
    )


@router.get("/{personality_id}", response_model=PersonalityDetail)
async def personality_detail(personality_id: str) -> PersonalityDetail:
    """One personality with its full prompt; unknown ids get the default personality"""
    return PersonalityDetail(**get_personality(personality_id).model_dump())
