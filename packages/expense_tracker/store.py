"""Record store interface and its SQLAlchemy implementation.

The import pipeline, query engine, and report generator only depend on the
:class:`RecordStore` protocol: insert one record, select a sorted window,
count matches, and aggregate by category. :class:`SqlRecordStore` fulfils it
against the ``et_transactions`` table from ``libs/db``; tests also run the
same operations against an in-memory fake.

Each :class:`SqlRecordStore` call opens its own short session via
:func:`db.client.session_scope`, so every insert is committed (or rolled
back) independently.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Literal, Protocol

from db.client import session_scope
from db.models.expenses import EtTransaction
from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError

from .errors import PersistenceError
from .models import CategorySummary, ParsedTransaction, Transaction, TransactionFilter

type SortField = Literal["date", "amount", "category"]

SORT_FIELDS: tuple[SortField, ...] = ("date", "amount", "category")

# Largest OFFSET/LIMIT a signed 64-bit database integer can carry.
MAX_ROWS = 2**63 - 1

_CENT = Decimal("0.01")


class RecordStore(Protocol):
    def insert(self, record: ParsedTransaction) -> Transaction:
        """Persist ``record`` and return it with its store-assigned id.

        Raises ``PersistenceError`` when the write fails.
        """
        ...

    def select(
        self,
        filters: TransactionFilter,
        *,
        sort_field: SortField,
        descending: bool,
        offset: int,
        limit: int,
    ) -> list[Transaction]:
        """Return matching rows ordered by ``sort_field`` then ``id`` ascending."""
        ...

    def count(self, filters: TransactionFilter) -> int: ...

    def aggregate(self, filters: TransactionFilter) -> list[CategorySummary]:
        """Per-category totals ordered by total desc, then category asc."""
        ...


def _to_record(row: EtTransaction) -> Transaction:
    return Transaction(
        id=row.id,
        date=row.date,
        category=row.category,
        amount=Decimal(str(row.amount)).quantize(_CENT),
        note=row.note or "",
    )


_SORT_COLUMNS = {
    "date": EtTransaction.date,
    "amount": EtTransaction.amount,
    "category": EtTransaction.category,
}


class SqlRecordStore:
    """:class:`RecordStore` backed by the shared SQLAlchemy engine for ``database_url``."""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"SqlRecordStore({self.database_url!r})"

    @staticmethod
    def _where(stmt: Select, filters: TransactionFilter) -> Select:
        if filters.start_date is not None:
            stmt = stmt.where(EtTransaction.date >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(EtTransaction.date <= filters.end_date)
        if filters.category_value is not None:
            stmt = stmt.where(EtTransaction.category == filters.category_value)
        return stmt

    def insert(self, record: ParsedTransaction) -> Transaction:
        row = EtTransaction(
            date=record.date,
            category=record.category,
            amount=record.amount,
            note=record.note,
        )
        try:
            with session_scope(database_url=self.database_url) as session:
                session.add(row)
                session.flush()
                stored = _to_record(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc.__cause__ or exc)) from exc
        return stored

    def select(
        self,
        filters: TransactionFilter,
        *,
        sort_field: SortField,
        descending: bool,
        offset: int,
        limit: int,
    ) -> list[Transaction]:
        column = _SORT_COLUMNS.get(sort_field, EtTransaction.date)
        order = column.desc() if descending else column.asc()
        stmt = (
            self._where(select(EtTransaction), filters)
            .order_by(order, EtTransaction.id.asc())
            .offset(offset)
            .limit(limit)
        )
        with session_scope(database_url=self.database_url) as session:
            return [_to_record(row) for row in session.scalars(stmt)]

    def count(self, filters: TransactionFilter) -> int:
        stmt = self._where(select(func.count()).select_from(EtTransaction), filters)
        with session_scope(database_url=self.database_url) as session:
            return int(session.execute(stmt).scalar_one())

    def aggregate(self, filters: TransactionFilter) -> list[CategorySummary]:
        total = func.sum(EtTransaction.amount).label("total_amount")
        stmt = self._where(
            select(EtTransaction.category, total, func.count().label("transaction_count")),
            filters,
        )
        stmt = stmt.group_by(EtTransaction.category).order_by(
            total.desc(), EtTransaction.category.asc()
        )
        with session_scope(database_url=self.database_url) as session:
            rows = session.execute(stmt).all()
        return [
            CategorySummary(
                category=cat,
                total_amount=Decimal(str(amount)).quantize(_CENT),
                transaction_count=int(n),
            )
            for cat, amount, n in rows
        ]


__all__ = [
    "RecordStore",
    "SqlRecordStore",
    "SortField",
    "SORT_FIELDS",
    "MAX_ROWS",
]
