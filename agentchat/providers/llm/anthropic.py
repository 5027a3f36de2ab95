from typing import List, Dict, Any, Optional, AsyncGenerator, Tuple
import time

import anthropic
from anthropic import AsyncAnthropic

from .base import (
    LLMProvider, LLMMessage, LLMResponse, LLMStreamChunk,
    LLMProviderAPIError, LLMProviderAuthError, LLMProviderRateLimitError,
    ToolDefinition, ToolCall,
)


class AnthropicProvider(LLMProvider):
    """Anthropic Claude LLM Provider implementation with native tool calling support"""

    supports_tools: bool = True

    def __init__(self, api_key: str, model: Optional[str] = None, **kwargs):
        if not model:
            raise ValueError("AnthropicProvider requires a model to be specified")

        super().__init__(api_key, model, **kwargs)

    def _setup_client(self, **kwargs) -> None:
        """Initialize the Anthropic client"""
        client = kwargs.get("client")
        if client is not None:
            self.client = client
            return
        try:
            self.client = AsyncAnthropic(api_key=self.api_key)
        except Exception as e:
            self.logger.error(f"Failed to initialize Anthropic client: {e}")
            raise LLMProviderAuthError(f"Failed to initialize Anthropic client: {e}")

    def _convert_messages(self, messages: List[LLMMessage]) -> Tuple[Optional[str], List[Dict[str, Any]]]:
        """Split out the system prompt and convert the rest to Anthropic format.

        Consecutive tool results are folded into one user turn, since every
        tool_use block must be answered in the message directly after it.
        """
        system_message = None
        converted: List[Dict[str, Any]] = []

        for msg in messages:
            if msg.role == "system":
                system_message = msg.content
                continue

            if msg.role == "tool_result" and msg.tool_result:
                block = msg.tool_result.to_anthropic_format()
                previous = converted[-1] if converted else None
                if (
                    previous
                    and previous["role"] == "user"
                    and isinstance(previous["content"], list)
                    and all(part.get("type") == "tool_result" for part in previous["content"])
                ):
                    previous["content"].append(block)
                else:
                    converted.append({"role": "user", "content": [block]})
                continue

            if msg.role == "assistant" and msg.tool_calls:
                content = []
                if msg.content:
                    content.append({"type": "text", "text": msg.content})
                for tc in msg.tool_calls:
                    content.append({
                        "type": "tool_use",
                        "id": tc.id,
                        "name": tc.name,
                        "input": tc.arguments
                    })
                converted.append({"role": "assistant", "content": content})
                continue

            converted.append({"role": msg.role, "content": msg.content or ""})

        return system_message, converted

    def _build_request(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int],
        temperature: Optional[float],
        tools: Optional[List[ToolDefinition]],
        extra: Dict[str, Any],
    ) -> Dict[str, Any]:
        system_message, anthropic_messages = self._convert_messages(messages)

        request_params: Dict[str, Any] = {
            "model": self.model,
            "messages": anthropic_messages,
            "max_tokens": max_tokens or 4000,
        }
        if system_message:
            request_params["system"] = system_message
        if temperature is not None:
            request_params["temperature"] = temperature
        if tools:
            request_params["tools"] = [t.to_anthropic_format() for t in tools]

        extra.pop("tools", None)
        request_params.update(extra)
        return request_params

    def _to_llm_response(self, message: Any, start_time: float) -> LLMResponse:
        content = ""
        tool_calls = []

        for block in message.content or []:
            block_type = getattr(block, "type", None)
            if block_type == "text":
                content += block.text
            elif block_type == "tool_use":
                tool_calls.append(ToolCall(
                    id=block.id,
                    name=block.name,
                    arguments=dict(block.input or {}),
                ))

        usage = getattr(message, "usage", None)
        return LLMResponse(
            content=content if content else None,
            tool_calls=tool_calls if tool_calls else None,
            tokens_used=usage.output_tokens if usage is not None else None,
            model=self.model,
            finish_reason=getattr(message, "stop_reason", None),
            response_time_ms=self._measure_time(start_time),
        )

    async def stream_turn(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        tools: Optional[List[ToolDefinition]] = None,
        **kwargs
    ) -> AsyncGenerator[LLMStreamChunk, None]:
        """Stream one Claude turn: text deltas first, then the assembled message"""
        start_time = time.time()
        request_params = self._build_request(messages, max_tokens, temperature, tools, kwargs)

        try:
            async with self.client.messages.stream(**request_params) as stream:
                async for text in stream.text_stream:
                    if text:
                        yield LLMStreamChunk(delta=text)
                final_message = await stream.get_final_message()
        except anthropic.AuthenticationError as e:
            await self._handle_error(LLMProviderAuthError(f"Authentication failed: {e}"), "stream_turn")
        except anthropic.RateLimitError as e:
            await self._handle_error(LLMProviderRateLimitError(f"Rate limit exceeded: {e}"), "stream_turn")
        except anthropic.APIError as e:
            await self._handle_error(LLMProviderAPIError(f"API error: {e}"), "stream_turn")

        yield LLMStreamChunk(response=self._to_llm_response(final_message, start_time))
