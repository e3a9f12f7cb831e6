"""Terminal rendering with ``rich``.

Builders return ``rich`` renderables so callers decide where they are
printed (the CLI's console, a recording console in tests).
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from rich.console import Console
from rich.table import Table

from .models import CategorySummary, ImportResult, Page


def _money(d: Decimal) -> str:
    return f"{d:,.2f}"


def summary_table(summaries: Sequence[CategorySummary], *, title: str | None = None) -> Table:
    """Category / total / count table closed by a totals row."""

    table = Table(title=title, show_footer=True)
    total_amount = sum((s.total_amount for s in summaries), Decimal("0.00"))
    total_count = sum(s.transaction_count for s in summaries)
    table.add_column("Category", footer="Total")
    table.add_column("Amount", justify="right", footer=_money(total_amount))
    table.add_column("Count", justify="right", footer=str(total_count))
    for s in summaries:
        table.add_row(s.category, _money(s.total_amount), str(s.transaction_count))
    return table


def transactions_table(page: Page, *, title: str | None = None) -> Table:
    caption = f"Found {page.total_count} record(s), showing {len(page.records)}"
    table = Table(title=title, caption=caption)
    table.add_column("Date")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    table.add_column("Note")
    for tx in page.records:
        table.add_row(tx.date.isoformat(), tx.category, _money(tx.amount), tx.note)
    return table


def print_import_result(
    console: Console,
    result: ImportResult,
    *,
    error_lines: Sequence[str],
) -> None:
    """Print counts and a capped list of error messages for one import."""

    console.print(f"Import ({result.source_format}) finished")
    console.print(f"Imported records: {result.imported}")
    console.print(f"Errors: {result.errors}")
    if error_lines:
        console.print("Error messages:")
        for line in error_lines:
            # Messages quote raw input; keep rich from reading [..] as markup.
            console.print(f"  - {line}", markup=False)
    if result.persistence_failures:
        console.print(f"Records not stored: {len(result.persistence_failures)}")


__all__ = ["summary_table", "transactions_table", "print_import_result"]
