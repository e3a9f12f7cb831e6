"""Pytest configuration for test isolation.

Every test runs in its own temporary working directory with the
``expense_tracker`` environment variables cleared, so a developer's ``.env``
or ``DATABASE_URL`` never leaks in and the default ``expensetracker.db`` lands
under ``tmp_path``. Cached SQLAlchemy engines are disposed after each test
and the package logger is reset, because the CLI configures logging against
whatever ``sys.stderr`` is current when it first runs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from decimal import Decimal
from pathlib import Path

import pytest
from db.client import dispose_engines

from expense_tracker import logging_setup
from expense_tracker.models import ParsedTransaction
from expense_tracker.store import RecordStore, SqlRecordStore
from tests.helpers.db import SAMPLE_ROWS, bootstrap_sqlite_db, seed_transactions
from tests.helpers.fakes import InMemoryRecordStore

_ENV_VARS = (
    "DATABASE_URL",
    "ET_OUTPUT_DIR",
    "ET_ERROR_PREVIEW_LIMIT",
    "ET_PAGE_SIZE",
    logging_setup.LOG_LEVEL_ENV,
)

@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(logging_setup, "_handler", None)
    yield
    pkg_logger = logging.getLogger(logging_setup.PKG_LOGGER_NAME)
    for h in list(pkg_logger.handlers):
        pkg_logger.removeHandler(h)
    pkg_logger.propagate = True
    dispose_engines()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return bootstrap_sqlite_db(tmp_path / "db" / "expenses.db")


@pytest.fixture
def sql_store(db_url: str) -> SqlRecordStore:
    return SqlRecordStore(db_url)


@pytest.fixture(params=["sql", "memory"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> RecordStore:
    """An empty store; tests using it run once per implementation."""

    if request.param == "memory":
        return InMemoryRecordStore()
    return SqlRecordStore(bootstrap_sqlite_db(tmp_path / "db" / "expenses.db"))


@pytest.fixture
def seeded_store(store: RecordStore) -> RecordStore:
    if isinstance(store, SqlRecordStore):
        seed_transactions(database_url=store.database_url, rows=SAMPLE_ROWS)
    else:
        for d, category, amount, note in SAMPLE_ROWS:
            store.insert(
                ParsedTransaction(date=d, category=category, amount=Decimal(amount), note=note)
            )
    return store
