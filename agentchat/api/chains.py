from fastapi import APIRouter

from ..config import settings
from ..core.chains import list_chains
from ..types import ChainInfo, ChainsResponse

router = APIRouter(prefix="/api")


@router.get("/chains", response_model=ChainsResponse)
async def chains() -> ChainsResponse:
    """Supported networks and the one used when a chat names none"""
    return ChainsResponse(
        chains=[ChainInfo(**chain.to_dict()) for chain in list_chains()],
        default=settings.default_chain_id,
    )
