from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.agent.actions import Action, ActionProvider, error_result, success_result
from ..core.contracts import ContractEntry, load_contract_registry
from .wallet import EvmWalletClient

logger = logging.getLogger(__name__)


class ContractInteractionParams(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    contract_name: str = Field(description="Name of a contract configured for the current chain")
    function_name: str = Field(description="The name of the function to call")
    function_args: List[str] = Field(default_factory=list, description="The arguments to pass to the function")
    value: Optional[str] = Field(default=None, description="The value to send with the transaction, in wei")


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_jsonable(item) for key, item in value.items()}
    return value


class ContractInteractor(ActionProvider):
    """Reads and writes contracts from the per-chain registry, by name."""

    name = "contract-interactor"

    def __init__(
        self,
        chain_id: int,
        wallet: EvmWalletClient,
        registry: Optional[Mapping[int, Mapping[str, ContractEntry]]] = None,
    ):
        self.chain_id = chain_id
        self.wallet = wallet
        self.registry = registry if registry is not None else load_contract_registry()
        if not self.registry.get(chain_id):
            logger.warning(
                "No contracts configured for chainId %s; contract interactions will fail", chain_id
            )

    def supports_network(self, chain_id: int) -> bool:
        return int(chain_id) == self.chain_id

    def _lookup(self, params: ContractInteractionParams) -> ContractEntry | str:
        """The contract entry, or an error message when it is not configured."""
        chain_contracts = self.registry.get(self.chain_id)
        if not chain_contracts:
            return (
                f"Contract interaction is not configured for chainId {self.chain_id}. "
                "Please ensure the contracts file is set up for this chain."
            )
        entry = chain_contracts.get(params.contract_name)
        if entry is None:
            return (
                f'Contract "{params.contract_name}" not found or not configured for chainId {self.chain_id}. '
                f"Available on this chain: {', '.join(chain_contracts)}"
            )
        return entry

    async def read_contract(self, params: ContractInteractionParams) -> Dict[str, Any]:
        entry = self._lookup(params)
        if isinstance(entry, str):
            return error_result(entry)

        result = await self.wallet.read_contract(
            entry.address, entry.abi_list, params.function_name, params.function_args
        )
        return success_result(
            {
                "contractName": params.contract_name,
                "functionName": params.function_name,
                "result": _to_jsonable(result),
            },
            f"Result of {params.function_name} on {params.contract_name}: {result}",
        )

    async def write_contract(self, params: ContractInteractionParams) -> Dict[str, Any]:
        entry = self._lookup(params)
        if isinstance(entry, str):
            return error_result(entry)

        data = self.wallet.encode_call(entry.address, entry.abi_list, params.function_name, params.function_args)
        tx_hash = await self.wallet.send_transaction(
            entry.address,
            data=data,
            value=int(params.value) if params.value else 0,
        )
        return success_result(
            {
                "contractName": params.contract_name,
                "functionName": params.function_name,
                "hash": tx_hash,
            },
            f"Sent {params.function_name} to {params.contract_name}: {tx_hash}",
        )

    def get_actions(self) -> List[Action]:
        return [
            Action(
                name="read-contract",
                description="Call a read-only function on a contract",
                schema=ContractInteractionParams,
                handler=self.read_contract,
            ),
            Action(
                name="write-contract",
                description="Call a write function on a contract",
                schema=ContractInteractionParams,
                handler=self.write_contract,
            ),
        ]
