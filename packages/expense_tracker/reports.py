"""Category aggregation, monthly reports, and file exports.

Summaries come either from the store's ``GROUP BY`` aggregate
(:func:`summarize`) or from records already in memory
(:func:`summarize_records`); both order by total amount descending and break
ties by category name.

Report and export artifacts are written under ``output_dir`` with fixed names:

- ``YYYY-MM-summary.json`` / ``YYYY-MM-summary.xml`` for monthly reports;
- ``aggregate_summary.json`` for ad-hoc aggregates;
- ``transactions_export.json`` / ``transactions_export.xml`` for exports.
"""

from __future__ import annotations

import calendar
import os
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from pathlib import Path

from rich.console import Console

from .encoders import (
    summaries_to_json,
    summaries_to_xml,
    transactions_to_json,
    transactions_to_xml,
)
from .logging_setup import get_logger
from .models import CategorySummary, ExportResult, MonthlyReport, Transaction, TransactionFilter
from .query import fetch_all
from .store import RecordStore
from .term_ui import summary_table

logger = get_logger("expense_tracker.reports")

AGGREGATE_FILE_NAME = "aggregate_summary.json"
EXPORT_BASE_NAME = "transactions_export"


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def _ordered(summaries: Iterable[CategorySummary]) -> list[CategorySummary]:
    return sorted(summaries, key=lambda s: (-s.total_amount, s.category))


def summarize(
    store: RecordStore,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[CategorySummary]:
    """Per-category totals for the inclusive date range, computed by the store."""

    return _ordered(store.aggregate(TransactionFilter(start_date=start_date, end_date=end_date)))


def summarize_records(records: Iterable[Transaction]) -> list[CategorySummary]:
    """Per-category totals for records that are already loaded."""

    totals: dict[str, Decimal] = {}
    counts: dict[str, int] = {}
    for tx in records:
        totals[tx.category] = totals.get(tx.category, Decimal("0.00")) + tx.amount
        counts[tx.category] = counts.get(tx.category, 0) + 1
    return _ordered(
        CategorySummary(category=cat, total_amount=total, transaction_count=counts[cat])
        for cat, total in totals.items()
    )


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of the calendar month (leap years included)."""

    if not 1 <= month <= 12:
        raise ValueError(f"month must be within 1..12, got {month}")
    if not date.min.year <= year <= date.max.year:
        raise ValueError(f"year out of range: {year}")
    _, days = calendar.monthrange(year, month)
    return date(year, month, 1), date(year, month, days)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def _write_text(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _write_bytes(path: Path, data: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def generate_monthly_report(
    store: RecordStore,
    year: int,
    month: int,
    *,
    output_dir: str | os.PathLike[str] = ".",
    console: Console | None = None,
) -> MonthlyReport:
    """Write the JSON and XML category summary for one month and print it.

    When the month has no transactions nothing is written; the returned report
    has empty ``summaries`` and no paths.
    """

    start, end = month_bounds(year, month)
    summaries = summarize(store, start, end)
    period = f"{year:04d}-{month:02d}"
    if not summaries:
        logger.info("No data for report %s", period)
        if console is not None:
            console.print(f"No data for report {period}")
        return MonthlyReport(year=year, month=month, summaries=[])

    out = Path(output_dir)
    json_path = _write_text(out / f"{period}-summary.json", summaries_to_json(summaries))
    xml_path = _write_bytes(out / f"{period}-summary.xml", summaries_to_xml(summaries))
    logger.info("Report %s written to %s and %s", period, json_path, xml_path)

    if console is not None:
        console.print(f"Report generated for {period}")
        console.print(f"Files: {json_path} and {xml_path}")
        console.print(summary_table(summaries, title=f"Category summary {period}"))

    return MonthlyReport(
        year=year,
        month=month,
        summaries=summaries,
        json_path=json_path,
        xml_path=xml_path,
    )


def months_with_data(records: Iterable[Transaction]) -> list[tuple[int, int]]:
    return sorted({(tx.date.year, tx.date.month) for tx in records})


def generate_reports_for_all_months(
    store: RecordStore,
    *,
    output_dir: str | os.PathLike[str] = ".",
    console: Console | None = None,
) -> list[MonthlyReport]:
    """Generate one monthly report per month present in the store, oldest first."""

    months = months_with_data(fetch_all(store).records)
    if not months and console is not None:
        console.print("No data to report")
    return [
        generate_monthly_report(store, year, month, output_dir=output_dir, console=console)
        for year, month in months
    ]


# ---------------------------------------------------------------------------
# Ad-hoc aggregate and exports
# ---------------------------------------------------------------------------


def category_summary_json(
    store: RecordStore,
    start_date: date | None = None,
    end_date: date | None = None,
) -> str:
    """The category summary for an optional date range as indented JSON."""

    return summaries_to_json(summarize(store, start_date, end_date))


def export_aggregate(
    store: RecordStore,
    start_date: date | None = None,
    end_date: date | None = None,
    *,
    output_dir: str | os.PathLike[str] = ".",
    file_name: str = AGGREGATE_FILE_NAME,
) -> Path:
    path = _write_text(
        Path(output_dir) / file_name,
        category_summary_json(store, start_date, end_date),
    )
    logger.info("Aggregate summary written to %s", path)
    return path


def export_transactions(
    records: Sequence[Transaction],
    *,
    output_dir: str | os.PathLike[str] = ".",
    base_name: str = EXPORT_BASE_NAME,
) -> ExportResult:
    """Write ``records`` as ``<base_name>.json`` and ``<base_name>.xml``."""

    if records is None:
        raise ValueError("records must not be None")
    out = Path(output_dir)
    json_path = _write_text(out / f"{base_name}.json", transactions_to_json(records))
    xml_path = _write_bytes(out / f"{base_name}.xml", transactions_to_xml(records))
    logger.info("Exported %d record(s) to %s and %s", len(records), json_path, xml_path)
    return ExportResult(json_path=json_path, xml_path=xml_path, count=len(records))


__all__ = [
    "summarize",
    "summarize_records",
    "month_bounds",
    "generate_monthly_report",
    "generate_reports_for_all_months",
    "months_with_data",
    "category_summary_json",
    "export_aggregate",
    "export_transactions",
]
