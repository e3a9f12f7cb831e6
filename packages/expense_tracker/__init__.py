"""Public interface for the ``expense_tracker`` package.

This module re-exports the import, query, and report operations together with
the record models and the store protocol. There is no runtime logic here.
"""

from .ingest.pipeline import format_for_path, import_file, preview_errors
from .models import (
    CategorySummary,
    ExportResult,
    ImportResult,
    LineError,
    MonthlyReport,
    Page,
    ParsedTransaction,
    Transaction,
    TransactionFilter,
)
from .query import FETCH_ALL, fetch_all, query_transactions
from .reports import (
    category_summary_json,
    export_aggregate,
    export_transactions,
    generate_monthly_report,
    generate_reports_for_all_months,
    month_bounds,
    summarize,
    summarize_records,
)
from .store import RecordStore, SqlRecordStore

__all__ = [
    # Import
    "import_file",
    "format_for_path",
    "preview_errors",
    # Query
    "query_transactions",
    "fetch_all",
    "FETCH_ALL",
    # Reports / exports
    "summarize",
    "summarize_records",
    "month_bounds",
    "generate_monthly_report",
    "generate_reports_for_all_months",
    "category_summary_json",
    "export_aggregate",
    "export_transactions",
    # Store
    "RecordStore",
    "SqlRecordStore",
    # Models
    "Transaction",
    "ParsedTransaction",
    "LineError",
    "CategorySummary",
    "TransactionFilter",
    "Page",
    "ImportResult",
    "MonthlyReport",
    "ExportResult",
]
