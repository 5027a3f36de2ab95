from fastapi import APIRouter
from typing import Dict, Any

from ..config import settings
from ..providers.nodit import NoditProvider

router = APIRouter()


@router.get("/healthz")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint that verifies provider status"""

    provider_status: Dict[str, Dict[str, Any]] = {}

    # Data API
    if settings.has_nodit_key:
        provider_status["nodit"] = await NoditProvider().health_check()
    else:
        provider_status["nodit"] = {"status": "unavailable", "reason": "NODIT_API_KEY not set"}

    # LLM key presence only; a live call would spend tokens
    provider_status["llm"] = (
        {"status": "healthy", "provider": settings.llm_provider, "model": settings.llm_model}
        if settings.has_llm_key
        else {"status": "unavailable", "reason": "No API key for the configured LLM provider"}
    )

    provider_status["agent_wallet"] = (
        {"status": "healthy"}
        if settings.has_agent_wallet
        else {"status": "unavailable", "reason": "AGENT_PRIVATE_KEY not set; wallet tools are read-only"}
    )

    all_healthy = all(
        status["status"] in ["healthy", "unavailable"]
        for status in provider_status.values()
    )

    return {
        "status": "healthy" if all_healthy and settings.has_llm_key else "degraded",
        "providers": provider_status,
    }
