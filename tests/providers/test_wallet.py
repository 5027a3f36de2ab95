import pytest
from eth_account import Account
from web3 import Web3

from agentchat.core.chains import get_chain
from agentchat.providers.wallet import (
    EvmWalletClient,
    WalletConfigError,
    _find_function_abi,
    coerce_args,
    create_wallet_client,
)

TEST_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"

SET_VALUE_ABI = [
    {
        "type": "function",
        "name": "setValue",
        "inputs": [{"name": "value", "type": "uint256"}],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "configure",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "enabled", "type": "bool"},
            {"name": "ids", "type": "uint256[]"},
            {"name": "tag", "type": "bytes4"},
            {"name": "label", "type": "string"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
]


def test_coerce_args_by_abi_type():
    function_abi = _find_function_abi(SET_VALUE_ABI, "configure", 5)
    owner = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"
    args = coerce_args(function_abi, [owner, "true", "[1, 2]", "0xdeadbeef", "hello"])
    assert args == [
        Web3.to_checksum_address(owner),
        True,
        [1, 2],
        b"\xde\xad\xbe\xef",
        "hello",
    ]


def test_coerce_hex_integers():
    function_abi = _find_function_abi(SET_VALUE_ABI, "setValue", 1)
    assert coerce_args(function_abi, ["0x10"]) == [16]


def test_unknown_function():
    with pytest.raises(ValueError, match="Function 'missing' not found"):
        _find_function_abi(SET_VALUE_ABI, "missing", 0)


def test_wrong_argument_count():
    with pytest.raises(ValueError, match="expects 1 argument"):
        _find_function_abi(SET_VALUE_ABI, "setValue", 2)


def test_encode_call():
    client = EvmWalletClient(get_chain(8453))
    data = client.encode_call(
        "0x0000000000000000000000000000000000000001", SET_VALUE_ABI, "setValue", ["42"]
    )
    selector = Web3.to_hex(Web3.keccak(text="setValue(uint256)")[:4])
    assert data == selector + format(42, "064x")


def test_read_only_client_cannot_sign():
    client = create_wallet_client(get_chain(84532), private_key="")
    assert client.address is None
    with pytest.raises(WalletConfigError):
        client._require_account()


async def test_send_without_key_raises():
    client = EvmWalletClient(get_chain(84532))
    with pytest.raises(WalletConfigError):
        await client.send_transaction("0x0000000000000000000000000000000000000001", value=1)


def test_client_with_key_exposes_address():
    client = create_wallet_client(get_chain(84532), private_key=TEST_KEY)
    assert client.address == Account.from_key(TEST_KEY).address
