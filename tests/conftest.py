import os

# Settings are read once at import; keep test runs independent of the host env
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ["NODIT_API_KEY"] = ""
os.environ["AGENT_PRIVATE_KEY"] = ""
os.environ.pop("CONTRACTS_FILE", None)
os.environ.pop("NODIT_KEY", None)

import pytest  # noqa: E402

from agentchat.auth.service import AuthService, NonceStore  # noqa: E402

TEST_WALLET = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"


@pytest.fixture
def auth_service():
    return AuthService(secret="test-secret", nonce_store=NonceStore(ttl_minutes=10))


@pytest.fixture
def auth_headers(auth_service, monkeypatch):
    """Bearer header for a session signed with the app's auth service."""
    from agentchat.auth import service as service_module

    monkeypatch.setattr(service_module, "_auth_service", auth_service)
    token, _ = auth_service._generate_access_token(TEST_WALLET, "session-1", 84532)
    return {"Authorization": f"Bearer {token}"}
