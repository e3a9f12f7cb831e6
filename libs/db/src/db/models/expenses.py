from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import BigInteger, Date, Index, Integer, Numeric, String, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# Column bounds shared with the ingest validators.
CATEGORY_MAX_LENGTH = 100
NOTE_MAX_LENGTH = 500


# ---------------------------
# Core: et_transactions
# ---------------------------


class EtTransaction(Base):
    __tablename__ = "et_transactions"

    # SQLite only autoincrements an INTEGER PRIMARY KEY (rowid alias).
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer(), "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    category: Mapped[str] = mapped_column(String(CATEGORY_MAX_LENGTH), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    # Stored as '' rather than NULL so reads never need to coalesce.
    note: Mapped[str] = mapped_column(
        String(NOTE_MAX_LENGTH), nullable=False, server_default=text("''")
    )

    __table_args__ = (
        Index("ix_et_transactions_date", "date"),
        Index("ix_et_transactions_category", "category"),
        Index("ix_et_transactions_date_category", "date", "category"),
    )


__all__ = [
    "Base",
    "EtTransaction",
    "CATEGORY_MAX_LENGTH",
    "NOTE_MAX_LENGTH",
]
