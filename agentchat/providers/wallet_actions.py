from decimal import Decimal
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

from ..core.agent.actions import Action, ActionProvider, success_result
from .wallet import EvmWalletClient


class EmptyParams(BaseModel):
    pass


class NativeTransferParams(BaseModel):
    to: str = Field(description="Recipient address")
    value: str = Field(description="Amount of the native token to send, in wei")

    @field_validator("value")
    @classmethod
    def _whole_wei(cls, value: str) -> str:
        if not value.strip().isdigit():
            raise ValueError("value must be a whole number of wei")
        return value.strip()


def _format_native(wei: int) -> str:
    return f"{Decimal(wei) / Decimal(10**18):f}"


class WalletActionProvider(ActionProvider):
    """Details and native transfers for the agent's own wallet."""

    name = "wallet"

    def __init__(self, wallet: EvmWalletClient):
        self.wallet = wallet

    async def get_wallet_details(self, params: EmptyParams) -> Dict[str, Any]:
        balance = await self.wallet.get_balance()
        chain = self.wallet.chain
        return success_result(
            {
                "address": self.wallet.address,
                "chainId": chain.id,
                "network": chain.name,
                "nativeBalance": str(balance),
                "formattedBalance": f"{_format_native(balance)} {chain.native_symbol}",
            },
            f"Wallet {self.wallet.address} on {chain.name}",
        )

    async def native_transfer(self, params: NativeTransferParams) -> Dict[str, Any]:
        tx_hash = await self.wallet.send_transaction(params.to, value=int(params.value))
        return success_result(
            {"transactionHash": tx_hash, "to": params.to, "value": params.value},
            f"Transferred {_format_native(int(params.value))} {self.wallet.chain.native_symbol} to {params.to}",
        )

    def get_actions(self) -> List[Action]:
        return [
            Action(
                name="get_wallet_details",
                description="Get the agent wallet's address, network and native token balance",
                schema=EmptyParams,
                handler=self.get_wallet_details,
            ),
            Action(
                name="native_transfer",
                description="Send the chain's native token from the agent wallet to an address",
                schema=NativeTransferParams,
                handler=self.native_transfer,
            ),
        ]
