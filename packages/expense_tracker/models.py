"""Data models for ``expense_tracker``.

Records are frozen dataclasses so they can be compared, hashed, and passed
between the ingest, query, and report layers without defensive copies.
Amounts are always :class:`~decimal.Decimal` with two fractional digits and
dates are plain :class:`~datetime.date` values.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from pathlib import Path

# ---------------------------------------------------------------------------
# Core records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """A persisted transaction row. ``id`` is assigned by the store on insert."""

    id: int
    date: date
    category: str
    amount: Decimal
    note: str = ""


@dataclass(frozen=True, slots=True)
class ParsedTransaction:
    """A successfully parsed input record that has not been stored yet.

    ``line`` is the 1-based source line, or ``None`` for records that came
    from a whole-file JSON array.
    """

    date: date
    category: str
    amount: Decimal
    note: str = ""
    line: int | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class LineError:
    """A parse failure for one input line (or for the whole file when ``line`` is None)."""

    line: int | None
    reason: str

    @property
    def message(self) -> str:
        if self.line is None:
            return self.reason
        return f"Line {self.line}: {self.reason}"


type ParseOutcome = ParsedTransaction | LineError
"""Result of parsing a single input record."""


@dataclass(frozen=True, slots=True)
class CategorySummary:
    """Per-category total and count over a filtered set of transactions."""

    category: str
    total_amount: Decimal
    transaction_count: int


# ---------------------------------------------------------------------------
# Query inputs/outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransactionFilter:
    """Inclusive date bounds plus an exact category match.

    ``None`` bounds and an empty/``None`` category impose no constraint.
    """

    start_date: date | None = None
    end_date: date | None = None
    category: str | None = None

    @property
    def category_value(self) -> str | None:
        return self.category if self.category else None

    def matches(self, tx: Transaction) -> bool:
        if self.start_date is not None and tx.date < self.start_date:
            return False
        if self.end_date is not None and tx.date > self.end_date:
            return False
        cat = self.category_value
        return cat is None or tx.category == cat


@dataclass(frozen=True, slots=True)
class Page:
    """One page of query results and the pre-pagination match count."""

    records: Sequence[Transaction]
    total_count: int
    page: int
    page_size: int


# ---------------------------------------------------------------------------
# Operation results
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ImportResult:
    """Outcome of importing one file.

    ``errors`` counts parse-level failures; records whose insert failed are
    listed in ``persistence_failures`` and are simply absent from
    ``imported``.
    """

    imported: int = 0
    errors: int = 0
    error_messages: list[str] = field(default_factory=list)
    source_format: str = ""
    persistence_failures: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class MonthlyReport:
    year: int
    month: int
    summaries: Sequence[CategorySummary]
    json_path: Path | None = None
    xml_path: Path | None = None

    @property
    def period(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def has_data(self) -> bool:
        return bool(self.summaries)


@dataclass(frozen=True, slots=True)
class ExportResult:
    json_path: Path
    xml_path: Path
    count: int


__all__ = [
    "Transaction",
    "ParsedTransaction",
    "LineError",
    "ParseOutcome",
    "CategorySummary",
    "TransactionFilter",
    "Page",
    "ImportResult",
    "MonthlyReport",
    "ExportResult",
]
