"""Static registry of the EVM networks the chat agent can operate on."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class ChainEntry:
    """Display and connection metadata for one supported network."""
    id: int
    name: str
    icon: str
    explorer: str
    rpc_url: str
    factory_address: str = ZERO_ADDRESS
    native_symbol: str = "ETH"
    is_testnet: bool = False

    @property
    def has_factory(self) -> bool:
        return self.factory_address != ZERO_ADDRESS

    def tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer.rstrip('/')}/tx/{tx_hash}"

    def address_url(self, address: str) -> str:
        return f"{self.explorer.rstrip('/')}/address/{address}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_CHAIN_LIST: List[ChainEntry] = [
    ChainEntry(
        id=1,
        name="Ethereum",
        icon="⟠",
        explorer="https://etherscan.io",
        rpc_url="https://eth.llamarpc.com",
    ),
    ChainEntry(
        id=8453,
        name="Base",
        icon="🟦",
        explorer="https://basescan.org",
        rpc_url="https://mainnet.base.org",
        factory_address="0x777777751622c0d3258f214F9DF38E35BF45baF3",
    ),
    ChainEntry(
        id=84532,
        name="Base Sepolia",
        icon="🔵",
        explorer="https://sepolia.basescan.org",
        rpc_url="https://sepolia.base.org",
        factory_address="0x777777751622c0d3258f214F9DF38E35BF45baF3",
        is_testnet=True,
    ),
    ChainEntry(
        id=10,
        name="Optimism",
        icon="🟧",
        explorer="https://optimistic.etherscan.io",
        rpc_url="https://mainnet.optimism.io",
        factory_address="0x7777777F279eba3d3Ad8F4E708545291A6fDBA8B",
    ),
    ChainEntry(
        id=42161,
        name="Arbitrum",
        icon="🟨",
        explorer="https://arbiscan.io",
        rpc_url="https://arb1.arbitrum.io/rpc",
        factory_address="0x7777777F279eba3d3Ad8F4E708545291A6fDBA8B",
    ),
    ChainEntry(
        id=137,
        name="Polygon",
        icon="🟣",
        explorer="https://polygonscan.com",
        rpc_url="https://polygon-rpc.com",
        native_symbol="POL",
    ),
    ChainEntry(
        id=43114,
        name="Avalanche",
        icon="🔺",
        explorer="https://snowtrace.io",
        rpc_url="https://api.avax.network/ext/bc/C/rpc",
        native_symbol="AVAX",
    ),
    ChainEntry(
        id=81457,
        name="Blast",
        icon="💥",
        explorer="https://blastscan.io",
        rpc_url="https://rpc.blast.io",
        factory_address="0x7777777F279eba3d3Ad8F4E708545291A6fDBA8B",
    ),
]

# Used when a request does not name a chain (Base Sepolia)
DEFAULT_CHAIN_ID = 84532

# Read-only view keyed by numeric chain id
CHAINS: Mapping[int, ChainEntry] = MappingProxyType({chain.id: chain for chain in _CHAIN_LIST})


def get_chain(chain_id: Any) -> Optional[ChainEntry]:
    """Return the registry entry for ``chain_id`` or None when unsupported.

    Accepts ints and digit strings ("8453") since clients send both.
    """
    if isinstance(chain_id, bool):
        return None
    if isinstance(chain_id, str):
        chain_id = chain_id.strip()
        if not (chain_id.isascii() and chain_id.isdigit()):
            return None
        return CHAINS.get(int(chain_id))
    if isinstance(chain_id, int):
        return CHAINS.get(chain_id)
    return None


def is_supported_chain(chain_id: Any) -> bool:
    return get_chain(chain_id) is not None


def list_chains() -> List[ChainEntry]:
    return list(CHAINS.values())
