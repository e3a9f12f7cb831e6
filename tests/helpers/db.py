"""DB helpers for tests: bootstrap a temporary SQLite DB and seed transactions."""

from __future__ import annotations

import os
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from pathlib import Path

from db.client import create_schema, session_scope
from db.models.expenses import EtTransaction
from sqlalchemy import text as sql_text


def bootstrap_sqlite_db(db_file: Path, *, set_default_env: bool = False) -> str:
    """Create a SQLite database file, initialize schema, and return the URL.

    Using a file-backed SQLite DB ensures multiple SQLAlchemy connections share
    the same state (in-memory DBs are per-connection by default).
    """

    url = f"sqlite+pysqlite:///{db_file}"
    # Ensure parent exists before engine creation attempts any writes
    db_file.parent.mkdir(parents=True, exist_ok=True)
    create_schema(database_url=url)
    _assert_transactions_schema_in_sync(url)

    # Make it the default for any code paths that read from the environment
    if set_default_env:
        os.environ.setdefault("DATABASE_URL", url)
    return url


def seed_transactions(
    *,
    database_url: str,
    rows: Iterable[tuple[date, str, Decimal | str, str]],
) -> list[int]:
    """Insert ``(date, category, amount, note)`` rows in order; return their ids."""

    ids: list[int] = []
    with session_scope(database_url=database_url) as session:
        for d, category, amount, note in rows:
            row = EtTransaction(date=d, category=category, amount=Decimal(amount), note=note)
            session.add(row)
            session.flush()
            ids.append(row.id)
    return ids


def _assert_transactions_schema_in_sync(database_url: str) -> None:
    """Quick sanity check: ORM column set matches SQLite table column set."""

    expected = {c.name for c in EtTransaction.__table__.columns}
    with session_scope(database_url=database_url) as session:
        rows = session.execute(sql_text("PRAGMA table_info('et_transactions')")).fetchall()
        got = {row[1] for row in rows}  # (cid, name, type, notnull, dflt_value, pk)
    missing = expected - got
    extra = got - expected
    assert not missing and not extra, (
        f"et_transactions schema drift: missing={missing or '∅'}, extra={extra or '∅'}"
    )


# (date, category, amount, note); inserted in this order so ids are 1..6.
SAMPLE_ROWS: list[tuple[date, str, str, str]] = [
    (date(2024, 1, 5), "Food", "12.50", "Bakery"),
    (date(2024, 1, 20), "Transport", "30.00", "Monthly pass"),
    (date(2024, 2, 1), "Food", "12.50", ""),
    (date(2024, 2, 15), "Entertainment", "99.99", "Concert"),
    (date(2024, 3, 10), "Food", "5.00", "Coffee"),
    (date(2024, 3, 10), "Rent", "1200.00", "March"),
]
