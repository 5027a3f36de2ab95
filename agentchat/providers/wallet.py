"""
EVM wallet client used by the contract and wallet action providers.

One client is built per chat request for the selected chain. Reads only need
the chain's RPC endpoint; sending transactions also needs the agent's private
key (``AGENT_PRIVATE_KEY``).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3

from ..config import settings
from ..core.chains import ChainEntry

logger = logging.getLogger(__name__)


class WalletConfigError(RuntimeError):
    """Raised when a signing operation is requested without an agent key."""


def _find_function_abi(abi: Sequence[Dict[str, Any]], function_name: str, arg_count: int) -> Dict[str, Any]:
    candidates = [
        item for item in abi
        if item.get("type") == "function" and item.get("name") == function_name
    ]
    if not candidates:
        raise ValueError(f"Function '{function_name}' not found in contract ABI")
    for item in candidates:
        if len(item.get("inputs", [])) == arg_count:
            return item
    expected = sorted({len(item.get("inputs", [])) for item in candidates})
    raise ValueError(
        f"Function '{function_name}' expects {' or '.join(map(str, expected))} argument(s), got {arg_count}"
    )


def _coerce_value(abi_type: str, raw: Any) -> Any:
    if not isinstance(raw, str):
        return raw
    text = raw.strip()
    if abi_type.endswith("]") or abi_type.startswith("tuple"):
        return json.loads(text)
    if abi_type.startswith(("uint", "int")):
        return int(text, 0)
    if abi_type == "bool":
        return text.lower() in ("true", "1", "yes")
    if abi_type == "address":
        return Web3.to_checksum_address(text)
    if abi_type.startswith("bytes"):
        return Web3.to_bytes(hexstr=text)
    return raw


def coerce_args(function_abi: Dict[str, Any], args: Sequence[Any]) -> List[Any]:
    """Convert string arguments to the python values the ABI types expect."""
    inputs = function_abi.get("inputs", [])
    return [_coerce_value(param.get("type", ""), value) for param, value in zip(inputs, args)]


class EvmWalletClient:
    """Thin async wrapper over web3.py for one chain and (optionally) one signer."""

    def __init__(
        self,
        chain: ChainEntry,
        private_key: Optional[str] = None,
        w3: Optional[AsyncWeb3] = None,
    ):
        self.chain = chain
        self.w3 = w3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(chain.rpc_url))
        self.account: Optional[LocalAccount] = Account.from_key(private_key) if private_key else None

    @property
    def address(self) -> Optional[str]:
        return self.account.address if self.account else None

    def _require_account(self) -> LocalAccount:
        if self.account is None:
            raise WalletConfigError("AGENT_PRIVATE_KEY is not configured; the agent wallet cannot sign")
        return self.account

    def _contract(self, address: str, abi: Sequence[Dict[str, Any]]):
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=list(abi))

    async def read_contract(
        self,
        address: str,
        abi: Sequence[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        function_abi = _find_function_abi(abi, function_name, len(args))
        contract = self._contract(address, abi)
        call_args = coerce_args(function_abi, args)
        return await getattr(contract.functions, function_name)(*call_args).call()

    def encode_call(
        self,
        address: str,
        abi: Sequence[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> str:
        function_abi = _find_function_abi(abi, function_name, len(args))
        contract = self._contract(address, abi)
        return contract.encode_abi(function_name, args=coerce_args(function_abi, args))

    async def _fee_params(self) -> Dict[str, int]:
        """EIP-1559 fees when the chain reports a base fee, legacy gasPrice otherwise."""
        latest = await self.w3.eth.get_block("latest")
        base_fee = latest.get("baseFeePerGas")
        if base_fee is not None:
            priority = await self.w3.eth.max_priority_fee
            return {"maxFeePerGas": int(base_fee) * 2 + priority, "maxPriorityFeePerGas": priority}
        return {"gasPrice": await self.w3.eth.gas_price}

    async def send_transaction(self, to: str, data: Optional[str] = None, value: int = 0) -> str:
        """Sign and broadcast a transaction; returns the 0x-prefixed hash without waiting for a receipt."""
        account = self._require_account()
        tx: Dict[str, Any] = {
            "from": account.address,
            "to": Web3.to_checksum_address(to),
            "value": int(value),
            "chainId": self.chain.id,
            "nonce": await self.w3.eth.get_transaction_count(account.address, "pending"),
        }
        if data:
            tx["data"] = data
        tx["gas"] = await self.w3.eth.estimate_gas(tx)
        tx.update(await self._fee_params())

        signed = account.sign_transaction(tx)
        tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        logger.info("Sent transaction %s on chain %s", Web3.to_hex(tx_hash), self.chain.id)
        return Web3.to_hex(tx_hash)

    async def get_balance(self, address: Optional[str] = None) -> int:
        target = address or self._require_account().address
        return await self.w3.eth.get_balance(Web3.to_checksum_address(target))


def create_wallet_client(chain: ChainEntry, private_key: Optional[str] = None) -> EvmWalletClient:
    """Fresh wallet client for one request."""
    key = private_key if private_key is not None else settings.agent_private_key
    if not key:
        logger.warning("AGENT_PRIVATE_KEY not set; wallet tools on %s are read-only", chain.name)
    return EvmWalletClient(chain, private_key=key or None)
