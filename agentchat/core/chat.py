"""
Chat request handling.

``build_chat_agent`` does all the per-request setup that may fail before a
response starts (prompt, toolkit, LLM client); ``stream_chat`` then relays
the agent's events as Server-Sent Events under the configured time ceiling.
"""

import asyncio
import json
import logging
from typing import Any, AsyncGenerator, Dict, List, Optional

from fastapi.encoders import jsonable_encoder

from ..config import settings
from ..providers.llm import get_llm_provider
from ..providers.llm.base import LLMMessage, LLMProvider
from .agent import ChatAgent, StreamEvent
from .agent.toolkit import create_agent_toolkit
from .chains import ChainEntry, DEFAULT_CHAIN_ID, get_chain
from .personas import build_system_prompt

_logger = logging.getLogger(__name__)


def _sse_event(payload: Dict[str, Any]) -> str:
    encoded = jsonable_encoder(payload)
    return f"data: {json.dumps(encoded, ensure_ascii=False)}\n\n"


def _sse_done() -> str:
    return "data: [DONE]\n\n"


def resolve_chain_id(chain_id: Any) -> Any:
    """The requested chain id, or the default when the request leaves it empty."""
    if chain_id in (None, "", 0):
        return settings.default_chain_id or DEFAULT_CHAIN_ID
    return chain_id


def resolve_chain(chain_id: Any) -> Optional[ChainEntry]:
    return get_chain(resolve_chain_id(chain_id))


def build_chat_agent(
    chain: ChainEntry,
    user_address: str,
    personality_id: Optional[str] = None,
    llm_provider: Optional[LLMProvider] = None,
) -> ChatAgent:
    """Assemble prompt, a fresh toolkit and the LLM client for one request."""
    system_prompt = build_system_prompt(personality_id, chain, user_address)
    toolkit = create_agent_toolkit(chain.id)
    provider = llm_provider or get_llm_provider()

    _logger.info(
        "Chat agent ready: chain=%s (%s) personality=%s tools=%d",
        chain.name,
        chain.id,
        personality_id or "default",
        len(toolkit.tool_names),
    )
    return ChatAgent(
        llm_provider=provider,
        toolkit=toolkit,
        system_prompt=system_prompt,
        max_steps=settings.chat_max_steps,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )


async def stream_chat(
    agent: ChatAgent,
    messages: List[LLMMessage],
    max_duration_seconds: Optional[float] = None,
) -> AsyncGenerator[str, None]:
    """Relay agent events as SSE lines, always ending with ``[DONE]``."""
    limit = max_duration_seconds or settings.chat_max_duration_seconds
    loop = asyncio.get_running_loop()
    deadline = loop.time() + limit
    events = agent.stream(messages)

    try:
        while True:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise asyncio.TimeoutError
            try:
                event = await asyncio.wait_for(events.__anext__(), timeout=remaining)
            except StopAsyncIteration:
                break
            if event.type == "text-delta":
                _logger.debug("Relaying text delta (%d chars)", len(event.text_delta or ""))
            else:
                _logger.info("Relaying %s event", event.type)
            yield _sse_event(event.to_payload())
    except asyncio.TimeoutError:
        _logger.warning("Chat exceeded the %.0fs limit", limit)
        yield _sse_event(StreamEvent.failure(f"Response exceeded the {limit:g}s time limit").to_payload())
    except Exception as exc:
        _logger.error("Streaming chat error: %s", exc, exc_info=True)
        yield _sse_event(StreamEvent.failure(str(exc) or exc.__class__.__name__).to_payload())
    finally:
        await events.aclose()

    yield _sse_done()
