"""Filtered, sorted, paginated transaction queries.

:func:`query_transactions` never raises for odd paging input. Page numbers
below 1 read the first page, non-positive page sizes return an empty page,
and windows past the end return an empty page; ``total_count`` is always the
number of matches before pagination.
"""

from __future__ import annotations

import sys
from datetime import date

from .logging_setup import get_logger
from .models import Page, TransactionFilter
from .store import MAX_ROWS, SORT_FIELDS, RecordStore, SortField

logger = get_logger("expense_tracker.query")

# Page size meaning "no bound"; used by exports.
FETCH_ALL = sys.maxsize


def normalize_sort_field(sort_by: str | None) -> SortField:
    """Map ``sort_by`` onto a supported field, case-insensitively; default ``date``."""

    key = (sort_by or "").strip().lower()
    for field in SORT_FIELDS:
        if key == field:
            return field
    return "date"


def page_window(page: int, page_size: int) -> tuple[int, int]:
    """Return ``(offset, limit)`` for a 1-based ``page``, clamped to ``[0, MAX_ROWS]``."""

    limit = min(max(page_size, 0), MAX_ROWS)
    offset = min(max(page - 1, 0) * limit, MAX_ROWS)
    return offset, limit


def query_transactions(
    store: RecordStore,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    category: str | None = None,
    sort_by: str = "date",
    descending: bool = True,
    page: int = 1,
    page_size: int = 50,
) -> Page:
    """Return one page of matching transactions plus the total match count.

    Parameters
    ----------
    start_date, end_date:
        Inclusive date bounds; ``None`` leaves that side open.
    category:
        Exact category match; ``None`` or ``""`` matches every category.
    sort_by:
        ``date``, ``amount`` or ``category`` (any case); anything else sorts
        by date. Equal keys are ordered by record id ascending so repeated
        queries page identically.
    descending:
        Reverse the primary sort direction.
    page, page_size:
        1-based page number and page length. Pass :data:`FETCH_ALL` as
        ``page_size`` to read everything.
    """

    filters = TransactionFilter(start_date=start_date, end_date=end_date, category=category)
    field = normalize_sort_field(sort_by)
    offset, limit = page_window(page, page_size)

    total = store.count(filters)
    if limit == 0 or offset >= total:
        records = []
    else:
        records = store.select(
            filters,
            sort_field=field,
            descending=descending,
            offset=offset,
            limit=limit,
        )
    logger.debug(
        "query %s sort=%s desc=%s offset=%d limit=%d -> %d of %d",
        filters,
        field,
        descending,
        offset,
        limit,
        len(records),
        total,
    )
    return Page(records=records, total_count=total, page=page, page_size=page_size)


def fetch_all(
    store: RecordStore,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    category: str | None = None,
) -> Page:
    """Every matching record in ascending date order."""

    return query_transactions(
        store,
        start_date=start_date,
        end_date=end_date,
        category=category,
        sort_by="date",
        descending=False,
        page=1,
        page_size=FETCH_ALL,
    )


__all__ = [
    "FETCH_ALL",
    "normalize_sort_field",
    "page_window",
    "query_transactions",
    "fetch_all",
]
