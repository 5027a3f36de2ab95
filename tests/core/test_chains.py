import json

import pytest

from agentchat.core.chains import CHAINS, DEFAULT_CHAIN_ID, get_chain, is_supported_chain, list_chains
from agentchat.core.contracts import (
    ERC20_ABI,
    ContractRegistryError,
    load_contract_registry,
    parse_contract_registry,
)


class TestChainRegistry:

    def test_default_chain_is_base_sepolia(self):
        chain = get_chain(DEFAULT_CHAIN_ID)
        assert chain.name == "Base Sepolia"
        assert chain.is_testnet

    @pytest.mark.parametrize("value", [8453, "8453", " 8453 "])
    def test_lookup_accepts_numeric_strings(self, value):
        assert get_chain(value).name == "Base"

    @pytest.mark.parametrize("value", [999999, "abc", "", None, True, 8453.7, 8453.0, "8453.7", "-8453", "٨٤٥٣"])
    def test_unsupported_values(self, value):
        assert get_chain(value) is None
        assert not is_supported_chain(value)

    def test_list_preserves_declaration_order(self):
        assert [c.id for c in list_chains()][:3] == [1, 8453, 84532]
        assert len(list_chains()) == len(CHAINS)

    def test_tx_url(self):
        assert get_chain(1).tx_url("0xabc") == "https://etherscan.io/tx/0xabc"

    def test_to_dict_fields(self):
        data = get_chain(137).to_dict()
        assert data["native_symbol"] == "POL"
        assert set(data) == {
            "id", "name", "icon", "explorer", "rpc_url", "factory_address", "native_symbol", "is_testnet"
        }


class TestContractRegistry:

    def test_no_file_means_empty_registry(self):
        assert load_contract_registry("") == {}

    def test_parse_registry(self):
        registry = parse_contract_registry({"8453": {"Token": {"address": "0x1", "abi": ERC20_ABI}}})
        entry = registry[8453]["Token"]
        assert entry.address == "0x1"
        assert entry.function_names() == ["name", "symbol", "decimals", "totalSupply"]

    def test_abi_from_artifact_path(self, tmp_path):
        artifact = tmp_path / "Token.json"
        artifact.write_text(json.dumps({"abi": ERC20_ABI}), encoding="utf-8")
        contracts = tmp_path / "contracts.json"
        contracts.write_text(
            json.dumps({"1": {"Token": {"address": "0x2", "abi": str(artifact)}}}), encoding="utf-8"
        )
        registry = load_contract_registry(str(contracts))
        assert registry[1]["Token"].abi_list == ERC20_ABI

    @pytest.mark.parametrize(
        "raw",
        [
            {"mainnet": {}},
            {"1": []},
            {"1": {"Token": {"address": "0x1"}}},
            {"1": {"Token": {"address": "0x1", "abi": 42}}},
        ],
    )
    def test_invalid_registry(self, raw):
        with pytest.raises(ContractRegistryError):
            parse_contract_registry(raw)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ContractRegistryError, match="not found"):
            load_contract_registry(str(tmp_path / "missing.json"))
