import json

import httpx
import pytest

from agentchat.providers.nodit import DataApiConfigError, NoditProvider


class Recorder:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = payload if payload is not None else {"items": []}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)


def _provider(recorder: Recorder) -> NoditProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return NoditProvider(api_key="nodit-test-key", base_url="https://nodit.test/v1", client=client)


def _action(provider: NoditProvider, name: str):
    return next(action for action in provider.get_actions() if action.name == name)


def test_missing_key_raises():
    with pytest.raises(DataApiConfigError, match="NODIT_API_KEY is required"):
        NoditProvider(api_key="")


def test_supports_every_chain():
    provider = NoditProvider(api_key="k")
    assert provider.supports_network(1)
    assert provider.supports_network(999999)


async def test_token_transfers_request_shape():
    recorder = Recorder(payload={"items": [{"transactionHash": "0x1"}]})
    result = await _action(_provider(recorder), "getTokenTransfersByAccount").invoke({
        "network": "ethereum",
        "chainType": "mainnet",
        "accountAddress": "0xabc",
        "limit": 5,
    })

    assert result == {
        "success": True,
        "data": {"items": [{"transactionHash": "0x1"}]},
        "message": "Retrieved token transfers for account 0xabc",
    }
    [request] = recorder.requests
    assert request.method == "POST"
    assert str(request.url) == "https://nodit.test/v1/ethereum/mainnet/token/getTokenTransfersByAccount"
    assert request.headers["X-API-KEY"] == "nodit-test-key"
    assert request.headers["accept"] == "application/json"
    assert json.loads(request.content) == {"accountAddress": "0xabc", "limit": 5}


async def test_balances_use_tokens_owned_endpoint():
    recorder = Recorder()
    await _action(_provider(recorder), "getTokenBalancesByAccount").invoke({
        "network": "base",
        "chainType": "mainnet",
        "accountAddress": "0xabc",
        "tokenAddresses": ["0xt1"],
    })
    request = recorder.requests[0]
    assert request.url.path == "/v1/base/mainnet/token/getTokensOwnedByAccount"
    assert json.loads(request.content) == {"accountAddress": "0xabc", "tokenAddresses": ["0xt1"]}


async def test_block_number_is_sent_as_string():
    recorder = Recorder(payload={"number": 100})
    result = await _action(_provider(recorder), "getBlockByNumber").invoke({
        "network": "polygon",
        "chainType": "testnet",
        "blockNumber": 100,
    })
    assert result["message"] == "Retrieved block 100 information"
    assert json.loads(recorder.requests[0].content) == {"blockNumber": "100"}


async def test_transaction_by_hash():
    recorder = Recorder(payload={"transactionHash": "0xfeed"})
    result = await _action(_provider(recorder), "getTransactionByHash").invoke({
        "network": "ethereum",
        "chainType": "mainnet",
        "transactionHash": "0xfeed",
    })
    assert recorder.requests[0].url.path == "/v1/ethereum/mainnet/transaction/getTransactionByHash"
    assert result["message"] == "Retrieved transaction 0xfeed details"


async def test_http_error_becomes_error_result():
    recorder = Recorder(status_code=401, payload={"message": "bad key"})
    result = await _action(_provider(recorder), "getTransactionByHash").invoke({
        "network": "ethereum",
        "chainType": "mainnet",
        "transactionHash": "0xfeed",
    })
    assert result["success"] is False
    assert result["error"].startswith("Nodit API error: 401 Unauthorized - ")
    assert "bad key" in result["error"]


async def test_missing_network_is_validation_error():
    recorder = Recorder()
    result = await _action(_provider(recorder), "getTransactionByHash").invoke({"transactionHash": "0x1"})
    assert result["success"] is False
    assert "network" in result["error"]
    assert recorder.requests == []


async def test_health_check():
    healthy = _provider(Recorder(payload={"status": "ok"}))
    assert await healthy.health_check() == {"status": "healthy"}

    failing = _provider(Recorder(status_code=503, payload={}))
    status = await failing.health_check()
    assert status["status"] == "error"
    assert "503" in status["reason"]
