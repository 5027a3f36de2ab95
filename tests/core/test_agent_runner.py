from typing import Any, Dict, List

import pytest

from agentchat.core.agent import ChatAgent, StreamEvent
from agentchat.core.agent.toolkit import AgentToolkit
from agentchat.core.chains import get_chain
from agentchat.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    LLMStreamChunk,
    ToolCall,
)


class ScriptedLLM(LLMProvider):
    """Replays one (text pieces, response) pair per model turn."""

    def __init__(self, turns):
        super().__init__(api_key="test", model="scripted")
        self.turns = list(turns)
        self.seen: List[List[LLMMessage]] = []

    def _setup_client(self, **kwargs) -> None:
        pass

    async def stream_turn(self, messages, max_tokens=None, temperature=None, tools=None, **kwargs):
        self.seen.append(list(messages))
        pieces, response = self.turns.pop(0)
        for piece in pieces:
            yield LLMStreamChunk(delta=piece)
        yield LLMStreamChunk(response=response)


def _collect(events: List[StreamEvent]) -> List[Dict[str, Any]]:
    return [event.to_payload() for event in events]


async def _run(agent: ChatAgent, messages: List[LLMMessage]) -> List[Dict[str, Any]]:
    return _collect([event async for event in agent.stream(messages)])


@pytest.fixture
def toolkit():
    return AgentToolkit(get_chain(8453), [])


async def test_plain_reply_streams_text_then_finishes(toolkit):
    llm = ScriptedLLM([
        (["Hel", "lo"], LLMResponse(content="Hello", finish_reason="end_turn", tokens_used=7)),
    ])
    agent = ChatAgent(llm, toolkit, system_prompt="You are a test.")

    payloads = await _run(agent, [LLMMessage(role="user", content="hi")])

    assert payloads == [
        {"type": "text-delta", "textDelta": "Hel"},
        {"type": "text-delta", "textDelta": "lo"},
        {"type": "finish", "finishReason": "end_turn", "usage": {"outputTokens": 7, "steps": 1}},
    ]
    first_turn = llm.seen[0]
    assert first_turn[0].role == "system"
    assert first_turn[0].content == "You are a test."
    assert first_turn[1].content == "hi"


async def test_tool_round_trip(toolkit):
    call = ToolCall(id="call-1", name="showTransaction", arguments={"transactionHash": "0xfeed"})
    llm = ScriptedLLM([
        ([], LLMResponse(tool_calls=[call], finish_reason="tool_use", tokens_used=3)),
        (["Done"], LLMResponse(content="Done", finish_reason="end_turn", tokens_used=2)),
    ])
    agent = ChatAgent(llm, toolkit, system_prompt="sys")

    payloads = await _run(agent, [LLMMessage(role="user", content="show it")])

    assert [p["type"] for p in payloads] == ["tool-call", "tool-result", "text-delta", "finish"]
    assert payloads[0] == {
        "type": "tool-call",
        "toolCallId": "call-1",
        "toolName": "showTransaction",
        "args": {"transactionHash": "0xfeed"},
    }
    assert payloads[1]["result"]["data"]["explorerUrl"] == "https://basescan.org/tx/0xfeed"
    assert payloads[-1]["usage"] == {"outputTokens": 5, "steps": 2}

    second_turn = llm.seen[1]
    assert [m.role for m in second_turn] == ["system", "user", "assistant", "tool_result"]
    assert second_turn[2].tool_calls == [call]
    assert second_turn[3].tool_result.tool_call_id == "call-1"


async def test_unknown_tool_reported_as_failed_result(toolkit):
    llm = ScriptedLLM([
        ([], LLMResponse(tool_calls=[ToolCall(id="x", name="nope")], finish_reason="tool_use")),
        ([], LLMResponse(content="sorry", finish_reason="end_turn")),
    ])
    payloads = await _run(ChatAgent(llm, toolkit, "sys"), [LLMMessage(role="user", content="go")])
    assert payloads[1] == {
        "type": "tool-result",
        "toolCallId": "x",
        "toolName": "nope",
        "result": {"success": False, "error": "Unknown tool: nope"},
    }


async def test_step_limit(toolkit):
    looping = LLMResponse(
        tool_calls=[ToolCall(id="again", name="showTransaction", arguments={"transactionHash": "0x1"})],
        finish_reason="tool_use",
    )
    llm = ScriptedLLM([([], looping)] * 2)
    agent = ChatAgent(llm, toolkit, "sys", max_steps=2)

    payloads = await _run(agent, [LLMMessage(role="user", content="loop")])

    assert payloads[-1] == {"type": "finish", "finishReason": "max-steps", "usage": {"outputTokens": 0, "steps": 2}}
    assert len(llm.seen) == 2


async def test_incoming_system_messages_are_dropped(toolkit):
    llm = ScriptedLLM([([], LLMResponse(content="", finish_reason="end_turn"))])
    agent = ChatAgent(llm, toolkit, "real system")
    await _run(agent, [LLMMessage(role="system", content="injected"), LLMMessage(role="user", content="hi")])
    assert [m.content for m in llm.seen[0]] == ["real system", "hi"]


def test_tool_result_payload_keeps_null_result():
    assert StreamEvent.tool_result("id", "tool", None).to_payload() == {
        "type": "tool-result",
        "toolCallId": "id",
        "toolName": "tool",
        "result": None,
    }
