"""Per-chain registry of contracts the agent is allowed to call by name.

The registry ships empty. Deployments are described in a JSON file named by
``settings.contracts_file``::

    {
      "8453": {
        "YourContract": {"address": "0x...", "abi": [...]}
      }
    }

An ``abi`` value may also be a path to a Foundry/Hardhat artifact JSON, in
which case its ``abi`` key is used.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..config import BASE_DIR, settings

logger = logging.getLogger(__name__)

# Minimal ERC-20 surface used by the token details action
ERC20_ABI: List[Dict[str, Any]] = [
    {
        "constant": True,
        "inputs": [],
        "name": "name",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "totalSupply",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]


class ContractRegistryError(ValueError):
    """Raised when the contracts file cannot be parsed."""


@dataclass(frozen=True)
class ContractEntry:
    address: str
    abi: tuple

    @property
    def abi_list(self) -> List[Dict[str, Any]]:
        return list(self.abi)

    def function_names(self) -> List[str]:
        return [item["name"] for item in self.abi if item.get("type") == "function" and item.get("name")]


ContractRegistry = Mapping[int, Mapping[str, ContractEntry]]


def _resolve_path(raw: str) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (BASE_DIR / path).resolve()
    return path


def _load_abi(value: Any) -> List[Dict[str, Any]]:
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        artifact = json.loads(_resolve_path(value).read_text(encoding="utf-8"))
        if isinstance(artifact, dict) and isinstance(artifact.get("abi"), list):
            return artifact["abi"]
        if isinstance(artifact, list):
            return artifact
    raise ContractRegistryError("ABI must be a list or a path to an artifact containing one")


def parse_contract_registry(raw: Mapping[str, Any]) -> Dict[int, Dict[str, ContractEntry]]:
    """Build a registry from the decoded JSON structure."""
    registry: Dict[int, Dict[str, ContractEntry]] = {}
    for chain_key, contracts in raw.items():
        try:
            chain_id = int(chain_key)
        except (TypeError, ValueError) as exc:
            raise ContractRegistryError(f"Invalid chain id key: {chain_key!r}") from exc
        if not isinstance(contracts, Mapping):
            raise ContractRegistryError(f"Contracts for chain {chain_id} must be an object")

        entries: Dict[str, ContractEntry] = {}
        for name, info in contracts.items():
            if not isinstance(info, Mapping) or "address" not in info or "abi" not in info:
                raise ContractRegistryError(f"Contract {name!r} on chain {chain_id} needs 'address' and 'abi'")
            entries[name] = ContractEntry(
                address=str(info["address"]),
                abi=tuple(_load_abi(info["abi"])),
            )
        registry[chain_id] = entries
    return registry


def load_contract_registry(path: Optional[str] = None) -> Dict[int, Dict[str, ContractEntry]]:
    """Load the deployed-contracts registry; empty when no file is configured."""
    source = path if path is not None else settings.contracts_file
    if not source:
        return {}

    file_path = _resolve_path(source)
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ContractRegistryError(f"Contracts file not found: {file_path}") from exc
    except json.JSONDecodeError as exc:
        raise ContractRegistryError(f"Contracts file is not valid JSON: {file_path} - {exc}") from exc

    if not isinstance(data, Mapping):
        raise ContractRegistryError("Contracts file must contain an object keyed by chain id")

    registry = parse_contract_registry(data)
    logger.info(
        "Loaded contract registry from %s (%d chains)",
        file_path,
        len(registry),
    )
    return registry
