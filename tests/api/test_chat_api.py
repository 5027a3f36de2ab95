import json

from fastapi.testclient import TestClient

from agentchat.core.agent import StreamEvent
from agentchat.main import app

client = TestClient(app)

CHAT_BODY = {"messages": [{"role": "user", "content": "What's in my wallet?"}]}


class FakeAgent:
    def __init__(self):
        self.messages = None

    async def stream(self, messages):
        self.messages = messages
        yield StreamEvent.text("Checking")
        yield StreamEvent.tool_call("c1", "get_wallet_details", {})
        yield StreamEvent.tool_result("c1", "get_wallet_details", {"success": True, "data": {"address": "0x1"}})
        yield StreamEvent.finish("end_turn", {"outputTokens": 3, "steps": 2})


def _events(text):
    lines = [line for line in text.split("\n\n") if line]
    assert lines[-1] == "data: [DONE]"
    return [json.loads(line[len("data: "):]) for line in lines[:-1]]


def test_requires_token():
    response = client.post("/api/chat", json=CHAT_BODY)
    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized"


def test_rejects_garbage_token():
    response = client.post("/api/chat", json=CHAT_BODY, headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


def test_unsupported_chain_never_builds_agent(monkeypatch, auth_headers):
    def fail(**kwargs):
        raise AssertionError("agent must not be built")

    monkeypatch.setattr("agentchat.api.chat.build_chat_agent", fail)
    response = client.post("/api/chat", json={**CHAT_BODY, "chainId": 999999}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Unsupported chain ID: 999999"


def test_setup_failure_is_500(monkeypatch, auth_headers):
    def fail(**kwargs):
        raise ValueError("No API key configured for provider: anthropic")

    monkeypatch.setattr("agentchat.api.chat.build_chat_agent", fail)
    response = client.post("/api/chat", json=CHAT_BODY, headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["detail"] == "Error processing request"


def test_streams_agent_events(monkeypatch, auth_headers):
    agent = FakeAgent()
    captured = {}

    def build(**kwargs):
        captured.update(kwargs)
        return agent

    monkeypatch.setattr("agentchat.api.chat.build_chat_agent", build)
    response = client.post(
        "/api/chat",
        json={**CHAT_BODY, "chainId": "8453", "personalityId": "rambo"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    events = _events(response.text)
    assert [e["type"] for e in events] == ["text-delta", "tool-call", "tool-result", "finish"]
    assert events[2]["result"]["data"] == {"address": "0x1"}

    assert captured["chain"].id == 8453
    assert captured["personality_id"] == "rambo"
    assert captured["user_address"] == "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"
    assert [m.content for m in agent.messages] == ["What's in my wallet?"]


def test_missing_chain_uses_default(monkeypatch, auth_headers):
    captured = {}

    def build(**kwargs):
        captured.update(kwargs)
        return FakeAgent()

    monkeypatch.setattr("agentchat.api.chat.build_chat_agent", build)
    response = client.post("/api/chat", json=CHAT_BODY, headers=auth_headers)

    assert response.status_code == 200
    assert captured["chain"].id == 84532


def test_content_parts_are_flattened(monkeypatch, auth_headers):
    agent = FakeAgent()
    monkeypatch.setattr("agentchat.api.chat.build_chat_agent", lambda **kwargs: agent)
    body = {
        "messages": [
            {"role": "system", "content": "ignored"},
            {"role": "user", "content": [{"type": "text", "text": "Hello "}, {"type": "text", "text": "there"}]},
            {"role": "assistant", "content": ""},
        ]
    }
    response = client.post("/api/chat", json=body, headers=auth_headers)

    assert response.status_code == 200
    assert [(m.role, m.content) for m in agent.messages] == [("user", "Hello there")]
