"""Record normalisation for exports.

Data API payloads name the same field differently depending on the endpoint
(``hash`` vs ``transactionHash``, ``symbol`` vs ``tokenSymbol``...). The
formatters map every record onto one fixed column set per record type.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping

TOKEN_BALANCES = "token-balances"
TOKEN_TRANSFERS = "token-transfers"
TRANSACTIONS = "transactions"
PORTFOLIO_SUMMARY = "portfolio-summary"

RECORD_TYPE_LABELS: Dict[str, str] = {
    TOKEN_BALANCES: "Token Balances",
    TOKEN_TRANSFERS: "Token Transfers",
    TRANSACTIONS: "Transactions",
    PORTFOLIO_SUMMARY: "Portfolio Summary",
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _first(record: Mapping[str, Any], *keys: str, default: Any = "") -> Any:
    """First truthy value among ``keys``; empty strings and zeros count as missing."""
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return default


def _to_float(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def format_token_balances_for_export(balances: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    exported_at = _now_iso()
    return [
        {
            "TokenAddress": _first(balance, "tokenAddress", "contractAddress"),
            "TokenName": _first(balance, "name", "tokenName"),
            "TokenSymbol": _first(balance, "symbol", "tokenSymbol"),
            "Balance": _first(balance, "balance", "amount", default="0"),
            "Decimals": _first(balance, "decimals", default="18"),
            "USDValue": _first(balance, "usdValue", "value", default="0"),
            "Network": _first(balance, "network"),
            "LastUpdated": _first(balance, "lastUpdated", default=exported_at),
        }
        for balance in balances
    ]


def format_token_transfers_for_export(transfers: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "TransactionHash": _first(transfer, "transactionHash", "hash"),
            "From": _first(transfer, "from", "fromAddress"),
            "To": _first(transfer, "to", "toAddress"),
            "TokenAddress": _first(transfer, "tokenAddress", "contractAddress"),
            "TokenName": _first(transfer, "tokenName", "name"),
            "TokenSymbol": _first(transfer, "tokenSymbol", "symbol"),
            "Amount": _first(transfer, "amount", "value", default="0"),
            "USDValue": _first(transfer, "usdValue", "valueUSD", default="0"),
            "BlockNumber": _first(transfer, "blockNumber", "block"),
            "Timestamp": _first(transfer, "timestamp", "blockTimestamp"),
            "Network": _first(transfer, "network"),
            "GasUsed": _first(transfer, "gasUsed"),
            "GasPrice": _first(transfer, "gasPrice"),
        }
        for transfer in transfers
    ]


def _transaction_status(tx: Mapping[str, Any]) -> str:
    status = tx.get("status")
    if isinstance(status, str) and status:
        return status
    return "Success" if tx.get("isSuccessful") else "Failed"


def format_transactions_for_export(transactions: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "TransactionHash": _first(tx, "transactionHash", "hash"),
            "From": _first(tx, "from", "fromAddress"),
            "To": _first(tx, "to", "toAddress"),
            "Value": _first(tx, "value", default="0"),
            "USDValue": _first(tx, "usdValue", default="0"),
            "BlockNumber": _first(tx, "blockNumber", "block"),
            "Timestamp": _first(tx, "timestamp", "blockTimestamp"),
            "Network": _first(tx, "network"),
            "GasUsed": _first(tx, "gasUsed"),
            "GasPrice": _first(tx, "gasPrice"),
            "Status": _transaction_status(tx),
            "Method": _first(tx, "method", "functionName"),
        }
        for tx in transactions
    ]


def create_portfolio_summary(
    balances: List[Mapping[str, Any]],
    transfers: List[Mapping[str, Any]],
    transactions: List[Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    """One summary row: counts, total USD value and the ten largest holdings."""
    ranked = sorted(balances, key=lambda b: _to_float(b.get("usdValue")), reverse=True)
    summary = {
        "TotalTokens": len(balances),
        "TotalTransfers": len(transfers),
        "TotalTransactions": len(transactions),
        "TotalUSDValue": sum(_to_float(b.get("usdValue")) for b in balances),
        "ExportDate": _now_iso(),
        "TopTokens": [
            {
                "Token": _first(balance, "name", "tokenName", default="Unknown"),
                "Symbol": _first(balance, "symbol", "tokenSymbol"),
                "USDValue": _first(balance, "usdValue", default="0"),
            }
            for balance in ranked[:10]
        ],
    }
    return [summary]


FORMATTERS = {
    TOKEN_BALANCES: format_token_balances_for_export,
    TOKEN_TRANSFERS: format_token_transfers_for_export,
    TRANSACTIONS: format_transactions_for_export,
}


def _tool_payload(entry: Mapping[str, Any]) -> Mapping[str, Any]:
    # tool-result stream events wrap the action payload under "result"
    result = entry.get("result")
    if isinstance(result, Mapping):
        return result
    return entry


def collect_export_data(tool_results: Iterable[Mapping[str, Any]]) -> Dict[str, List[Any]]:
    """Pull exportable records out of data API tool results.

    Accepts either tool-result stream events (``{"toolName", "result"}``) or
    bare action payloads carrying a ``toolName`` key. Later results of the same
    tool replace earlier ones.
    """
    collected: Dict[str, List[Any]] = {TOKEN_BALANCES: [], TOKEN_TRANSFERS: [], TRANSACTIONS: []}

    for entry in tool_results:
        tool_name = entry.get("toolName")
        payload = _tool_payload(entry)
        data = payload.get("data")
        if not payload.get("success") or not data:
            continue

        if tool_name == "getTokenBalancesByAccount":
            if isinstance(data, Mapping) and data.get("items"):
                collected[TOKEN_BALANCES] = list(data["items"])
            elif isinstance(data, Mapping) and data.get("balances"):
                collected[TOKEN_BALANCES] = list(data["balances"])
            elif isinstance(data, list):
                collected[TOKEN_BALANCES] = data
        elif tool_name == "getTokenTransfersByAccount":
            if isinstance(data, Mapping) and data.get("items"):
                collected[TOKEN_TRANSFERS] = list(data["items"])
            elif isinstance(data, Mapping) and data.get("transfers"):
                collected[TOKEN_TRANSFERS] = list(data["transfers"])
        elif tool_name == "getTransactionByHash":
            collected[TRANSACTIONS] = data if isinstance(data, list) else [data]

    return collected
