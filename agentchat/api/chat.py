import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from ..auth import TokenPayload, require_auth
from ..core.chat import build_chat_agent, resolve_chain, resolve_chain_id, stream_chat
from ..types import ChatRequest

router = APIRouter(prefix="/api")
_logger = logging.getLogger(__name__)


@router.post("/chat")
async def chat_endpoint(
    request: ChatRequest,
    auth: TokenPayload = Depends(require_auth),
) -> StreamingResponse:
    """Stream the assistant's reply and tool activity as Server-Sent Events."""
    chain = resolve_chain(request.chain_id)
    if chain is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported chain ID: {resolve_chain_id(request.chain_id)}",
        )

    try:
        agent = build_chat_agent(
            chain=chain,
            user_address=auth.sub,
            personality_id=request.personality_id,
        )
    except Exception as e:
        _logger.error("Error preparing chat for chain %s: %s", chain.id, e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error processing request",
        )

    return StreamingResponse(
        stream_chat(agent, request.llm_messages()),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
