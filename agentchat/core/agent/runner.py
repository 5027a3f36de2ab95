"""
Chat agent loop.

Each step streams one model turn. When the turn ends with tool calls, the
toolkit executes them, the results are appended to the conversation and the
next step begins. The loop ends when the model finishes without requesting
tools or the step limit is reached.
"""

import logging
from typing import TYPE_CHECKING, AsyncGenerator, Dict, List, Optional

from ...providers.llm.base import LLMMessage, LLMProvider, LLMResponse

from .events import StreamEvent

if TYPE_CHECKING:
    from .toolkit import AgentToolkit

logger = logging.getLogger(__name__)


class ChatAgent:
    def __init__(
        self,
        llm_provider: LLMProvider,
        toolkit: "AgentToolkit",
        system_prompt: str,
        max_steps: int = 5,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        self.llm_provider = llm_provider
        self.toolkit = toolkit
        self.system_prompt = system_prompt
        self.max_steps = max_steps
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def stream(self, messages: List[LLMMessage]) -> AsyncGenerator[StreamEvent, None]:
        """Run the conversation and yield events as they are produced."""
        history: List[LLMMessage] = [LLMMessage(role="system", content=self.system_prompt)]
        history.extend(msg for msg in messages if msg.role != "system")
        tools = self.toolkit.get_definitions()
        output_tokens = 0

        for step in range(1, self.max_steps + 1):
            response: Optional[LLMResponse] = None
            text_parts: List[str] = []

            async for chunk in self.llm_provider.stream_turn(
                history,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                tools=tools,
            ):
                if chunk.delta:
                    text_parts.append(chunk.delta)
                    yield StreamEvent.text(chunk.delta)
                if chunk.response is not None:
                    response = chunk.response

            if response is None:
                response = LLMResponse(content="".join(text_parts) or None, finish_reason="end_turn")
            output_tokens += response.tokens_used or 0

            if not response.tool_calls:
                logger.info(
                    "Chat finished after %d step(s): reason=%s text_length=%d",
                    step,
                    response.finish_reason,
                    len("".join(text_parts)),
                )
                yield StreamEvent.finish(response.finish_reason or "end_turn", self._usage(output_tokens, step))
                return

            names: Dict[str, str] = {}
            for tool_call in response.tool_calls:
                names[tool_call.id] = tool_call.name
                logger.info("Tool call %s: %s args=%s", tool_call.id, tool_call.name, tool_call.arguments)
                yield StreamEvent.tool_call(tool_call.id, tool_call.name, tool_call.arguments)

            results = await self.toolkit.execute_parallel(response.tool_calls)

            history.append(LLMMessage(
                role="assistant",
                content=response.content,
                tool_calls=response.tool_calls,
            ))
            for result in results:
                payload = result.result if result.error is None else {"success": False, "error": result.error}
                logger.info("Tool result %s: %s", result.tool_call_id, payload)
                yield StreamEvent.tool_result(result.tool_call_id, names.get(result.tool_call_id, ""), payload)
                history.append(LLMMessage(role="tool_result", tool_result=result))

        logger.warning("Chat stopped at the %d step limit", self.max_steps)
        yield StreamEvent.finish("max-steps", self._usage(output_tokens, self.max_steps))

    @staticmethod
    def _usage(output_tokens: int, steps: int) -> Dict[str, int]:
        return {"outputTokens": output_tokens, "steps": steps}
