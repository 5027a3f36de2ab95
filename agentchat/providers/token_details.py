import asyncio
from decimal import Decimal
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.agent.actions import Action, ActionProvider, success_result
from ..core.contracts import ERC20_ABI
from .wallet import EvmWalletClient


class TokenDetailsParams(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    contract_address: str = Field(description="The ERC-20 token contract address on the current chain")


class TokenDetailsProvider(ActionProvider):
    """ERC-20 metadata reads on the request's chain."""

    name = "token-details"

    def __init__(self, wallet: EvmWalletClient):
        self.wallet = wallet

    def supports_network(self, chain_id: int) -> bool:
        return int(chain_id) == self.wallet.chain.id

    async def get_token_details(self, params: TokenDetailsParams) -> Dict[str, Any]:
        address = params.contract_address
        name, symbol, decimals, total_supply = await asyncio.gather(
            self.wallet.read_contract(address, ERC20_ABI, "name"),
            self.wallet.read_contract(address, ERC20_ABI, "symbol"),
            self.wallet.read_contract(address, ERC20_ABI, "decimals"),
            self.wallet.read_contract(address, ERC20_ABI, "totalSupply"),
        )
        formatted_supply = Decimal(total_supply) / Decimal(10 ** decimals)
        return success_result(
            {
                "contractAddress": address,
                "chainId": self.wallet.chain.id,
                "name": name,
                "symbol": symbol,
                "decimals": decimals,
                "totalSupply": str(total_supply),
                "formattedTotalSupply": f"{formatted_supply:,f}",
            },
            f"{name} ({symbol}) on {self.wallet.chain.name}",
        )

    def get_actions(self) -> List[Action]:
        return [
            Action(
                name="getTokenDetails",
                description=(
                    "Fetch the name, symbol, decimals and total supply of an ERC-20 token "
                    "contract on the current chain"
                ),
                schema=TokenDetailsParams,
                handler=self.get_token_details,
            ),
        ]
