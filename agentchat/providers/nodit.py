"""Nodit Web3 Data API actions (token transfers, balances, blocks, transactions)."""

import logging
from typing import Any, Dict, List, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..config import settings
from ..core.agent.actions import Action, ActionProvider, error_result, success_result
from .base import Provider

logger = logging.getLogger(__name__)


class DataApiConfigError(RuntimeError):
    """Raised when the data API is used without an API key."""


class _NoditParams(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    network: str = Field(description="The blockchain network (e.g., 'ethereum', 'polygon')")
    chain_type: str = Field(description="The chain type (e.g., 'mainnet', 'testnet')")

    def body(self) -> Dict[str, Any]:
        """Request body: every provided field except the ones that form the URL."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"network", "chain_type"})


class TokenTransfersParams(_NoditParams):
    account_address: str = Field(description="The account address to query")
    from_date: Optional[str] = Field(
        default=None, description="Start date in ISO format (e.g., '2025-01-01T00:00:00+00:00')"
    )
    to_date: Optional[str] = Field(
        default=None, description="End date in ISO format (e.g., '2025-01-31T00:00:00+00:00')"
    )
    limit: Optional[int] = Field(default=None, description="Maximum number of results to return")
    offset: Optional[int] = Field(default=None, description="Number of results to skip")


class TokenBalancesParams(_NoditParams):
    account_address: str = Field(description="The account address to query")
    token_addresses: Optional[List[str]] = Field(
        default=None, description="Specific token contract addresses to query"
    )


class BlockParams(_NoditParams):
    block_number: Union[int, str] = Field(description="The block number to query")
    include_transactions: Optional[bool] = Field(
        default=None, description="Whether to include transaction details"
    )

    def body(self) -> Dict[str, Any]:
        body = super().body()
        body["blockNumber"] = str(self.block_number)
        return body


class TransactionParams(_NoditParams):
    transaction_hash: str = Field(description="The transaction hash to query")


class NoditProvider(ActionProvider, Provider):
    """Action provider backed by the Nodit Web3 Data API.

    Nodit is queried by network name rather than chain id, so every chain is
    supported. Pass ``client`` to reuse an existing ``httpx.AsyncClient``.
    """

    name = "nodit"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key or settings.nodit_api_key
        if not self.api_key:
            raise DataApiConfigError("NODIT_API_KEY is required")

        self.base_url = (base_url or settings.nodit_base_url).rstrip("/")
        self.timeout_s = timeout_s or settings.nodit_timeout_seconds
        self._client = client
        logger.debug("Nodit provider initialized with key %s... at %s", self.api_key[:8], self.base_url)

    def supports_network(self, chain_id: int) -> bool:
        return True

    def _headers(self) -> Dict[str, str]:
        return {
            "X-API-KEY": self.api_key,
            "accept": "application/json",
            "content-type": "application/json",
        }

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        if self._client is not None:
            return await self._client.request(method, url, timeout=self.timeout_s, **kwargs)
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            return await client.request(method, url, **kwargs)

    async def _post(self, params: _NoditParams, resource: str, operation: str) -> Any:
        url = f"{self.base_url}/{params.network}/{params.chain_type}/{resource}/{operation}"
        response = await self._send("POST", url, headers=self._headers(), json=params.body())
        if response.is_error:
            raise RuntimeError(
                f"Nodit API error: {response.status_code} {response.reason_phrase} - {response.text}"
            )
        return response.json()

    async def ready(self) -> bool:
        return bool(self.api_key)

    async def test_connection(self) -> Dict[str, Any]:
        """Probe the API's health endpoint."""
        try:
            response = await self._send(
                "GET",
                f"{self.base_url}/health",
                headers={"X-API-KEY": self.api_key, "accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            return error_result(str(exc) or exc.__class__.__name__)

        if response.is_success:
            return success_result(message="Nodit API is accessible")
        return error_result(f"Health check failed: {response.status_code} {response.reason_phrase}")

    async def health_check(self) -> Dict[str, Any]:
        result = await self.test_connection()
        if result["success"]:
            return {"status": "healthy"}
        return {"status": "error", "reason": result["error"]}

    # Actions

    async def get_token_transfers_by_account(self, params: TokenTransfersParams) -> Dict[str, Any]:
        data = await self._post(params, "token", "getTokenTransfersByAccount")
        return success_result(data, f"Retrieved token transfers for account {params.account_address}")

    async def get_token_balances_by_account(self, params: TokenBalancesParams) -> Dict[str, Any]:
        data = await self._post(params, "token", "getTokensOwnedByAccount")
        return success_result(data, f"Retrieved token balances for account {params.account_address}")

    async def get_block_by_number(self, params: BlockParams) -> Dict[str, Any]:
        data = await self._post(params, "block", "getBlockByNumber")
        return success_result(data, f"Retrieved block {params.block_number} information")

    async def get_transaction_by_hash(self, params: TransactionParams) -> Dict[str, Any]:
        data = await self._post(params, "transaction", "getTransactionByHash")
        return success_result(data, f"Retrieved transaction {params.transaction_hash} details")

    def get_actions(self) -> List[Action]:
        return [
            Action(
                name="getTokenTransfersByAccount",
                description="Get token transfer history for a specific account",
                schema=TokenTransfersParams,
                handler=self.get_token_transfers_by_account,
            ),
            Action(
                name="getTokenBalancesByAccount",
                description="Get token balances for a specific account",
                schema=TokenBalancesParams,
                handler=self.get_token_balances_by_account,
            ),
            Action(
                name="getBlockByNumber",
                description="Get block information by block number",
                schema=BlockParams,
                handler=self.get_block_by_number,
            ),
            Action(
                name="getTransactionByHash",
                description="Get transaction details by transaction hash",
                schema=TransactionParams,
                handler=self.get_transaction_by_hash,
            ),
        ]
