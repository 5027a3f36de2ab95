"""
Per-request agent toolkit.

``create_agent_toolkit`` builds a fresh wallet client and a fresh set of
action providers for one chat request. Nothing here is shared between
requests.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...providers.contract_interactor import ContractInteractor
from ...providers.llm.base import ToolCall, ToolDefinition, ToolResult
from ...providers.nodit import DataApiConfigError, NoditProvider
from ...providers.token_details import TokenDetailsProvider
from ...providers.wallet import EvmWalletClient, create_wallet_client
from ...providers.wallet_actions import WalletActionProvider
from ..chains import ChainEntry, get_chain
from ..contracts import ContractEntry
from .actions import Action, ActionProvider, success_result

logger = logging.getLogger(__name__)


class UnsupportedChainError(ValueError):
    """Raised when a toolkit is requested for a chain id missing from the registry."""


class ShowTransactionParams(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    transaction_hash: str = Field(description="The transaction hash to show")


def show_transaction_action(chain: ChainEntry) -> Action:
    async def show_transaction(params: ShowTransactionParams) -> Dict[str, Any]:
        return success_result(
            {
                "transactionHash": params.transaction_hash,
                "explorerUrl": chain.tx_url(params.transaction_hash),
            },
            f"Transaction {params.transaction_hash}",
        )

    return Action(
        name="showTransaction",
        description="Show the transaction hash",
        schema=ShowTransactionParams,
        handler=show_transaction,
    )


class AgentToolkit:
    """
    The tools one chat request may call.

    Collects the actions of every provider that supports the chain, exposes
    their definitions to the LLM and executes the calls it requests.
    """

    def __init__(
        self,
        chain: ChainEntry,
        providers: Sequence[ActionProvider],
        wallet: Optional[EvmWalletClient] = None,
    ):
        self.chain = chain
        self.wallet = wallet
        self.providers = list(providers)
        self._actions: Dict[str, Action] = {}

        for provider in self.providers:
            if not provider.supports_network(chain.id):
                logger.debug("Provider %s does not support chain %s", provider.name, chain.id)
                continue
            for action in provider.get_actions():
                self.register(action)

        self.register(show_transaction_action(chain))

    def register(self, action: Action) -> None:
        if action.name in self._actions:
            logger.warning("Tool %s registered twice; keeping the latest", action.name)
        self._actions[action.name] = action

    @property
    def tool_names(self) -> List[str]:
        return list(self._actions)

    def has_tool(self, name: str) -> bool:
        return name in self._actions

    def get_definitions(self) -> List[ToolDefinition]:
        """Get all tool definitions for passing to the LLM."""
        return [action.definition() for action in self._actions.values()]

    async def execute_single(self, tool_call: ToolCall) -> ToolResult:
        """Execute a single tool call and return the result."""
        action = self._actions.get(tool_call.name)
        if action is None:
            return ToolResult(
                tool_call_id=tool_call.id,
                result=None,
                error=f"Unknown tool: {tool_call.name}",
            )

        result = await action.invoke(tool_call.arguments)
        return ToolResult(tool_call_id=tool_call.id, result=result)

    async def execute_parallel(self, tool_calls: List[ToolCall]) -> List[ToolResult]:
        """Execute multiple tool calls in parallel."""
        if not tool_calls:
            return []

        results = await asyncio.gather(
            *(self.execute_single(tc) for tc in tool_calls),
            return_exceptions=True,
        )

        final_results = []
        for tool_call, result in zip(tool_calls, results):
            if isinstance(result, Exception):
                logger.error("Tool execution error for %s: %s", tool_call.name, result)
                final_results.append(ToolResult(
                    tool_call_id=tool_call.id,
                    result=None,
                    error=str(result),
                ))
            else:
                final_results.append(result)
        return final_results


def create_agent_toolkit(
    chain_id: int,
    *,
    private_key: Optional[str] = None,
    nodit_api_key: Optional[str] = None,
    contracts: Optional[Dict[int, Dict[str, ContractEntry]]] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> AgentToolkit:
    """Assemble a wallet client and the action providers for one request."""
    chain = get_chain(chain_id)
    if chain is None:
        raise UnsupportedChainError(f"Unsupported chain ID: {chain_id}")

    wallet = create_wallet_client(chain, private_key)
    providers: List[ActionProvider] = [
        WalletActionProvider(wallet),
        ContractInteractor(chain.id, wallet, registry=contracts),
        TokenDetailsProvider(wallet),
    ]

    try:
        providers.append(NoditProvider(api_key=nodit_api_key, client=http_client))
    except DataApiConfigError as exc:
        logger.warning("Nodit tools disabled: %s", exc)

    toolkit = AgentToolkit(chain, providers, wallet=wallet)
    logger.debug("Assembled toolkit for %s with tools: %s", chain.name, ", ".join(toolkit.tool_names))
    return toolkit
