from .formatters import (
    TOKEN_BALANCES,
    TOKEN_TRANSFERS,
    TRANSACTIONS,
    PORTFOLIO_SUMMARY,
    collect_export_data,
    create_portfolio_summary,
    format_token_balances_for_export,
    format_token_transfers_for_export,
    format_transactions_for_export,
)
from .serializers import (
    convert_to_csv,
    convert_to_json,
    convert_to_pdf,
    convert_to_xlsx,
    generate_filename,
)
from .service import (
    SUPPORTED_FORMATS,
    ExportError,
    ExportFile,
    ExportOptions,
    UnsupportedExportFormat,
    export_data,
)

__all__ = [
    "TOKEN_BALANCES",
    "TOKEN_TRANSFERS",
    "TRANSACTIONS",
    "PORTFOLIO_SUMMARY",
    "collect_export_data",
    "create_portfolio_summary",
    "format_token_balances_for_export",
    "format_token_transfers_for_export",
    "format_transactions_for_export",
    "convert_to_csv",
    "convert_to_json",
    "convert_to_pdf",
    "convert_to_xlsx",
    "generate_filename",
    "SUPPORTED_FORMATS",
    "ExportError",
    "ExportFile",
    "ExportOptions",
    "UnsupportedExportFormat",
    "export_data",
]
