"""Runtime settings resolved from the environment.

The CLI loads a local ``.env`` (``python-dotenv``) before calling
:func:`load_settings`; explicit keyword arguments win over the environment.

Environment variables
---------------------
- ``DATABASE_URL``: SQLAlchemy URL of the record store. Defaults to a SQLite
  file ``expensetracker.db`` in the working directory.
- ``ET_OUTPUT_DIR``: directory for reports and exports (default ``.``).
- ``ET_ERROR_PREVIEW_LIMIT``: how many import errors to print (default 10).
- ``ET_PAGE_SIZE``: default query page size (default 50).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///expensetracker.db"
DEFAULT_ERROR_PREVIEW_LIMIT = 10
DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str
    output_dir: Path
    error_preview_limit: int = DEFAULT_ERROR_PREVIEW_LIMIT
    default_page_size: int = DEFAULT_PAGE_SIZE


def _env_positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    try:
        value = int(raw) if raw else None
    except ValueError:
        value = None
    if value is None or value <= 0:
        return default
    return value


def load_settings(
    *,
    database_url: str | None = None,
    output_dir: str | os.PathLike[str] | None = None,
) -> Settings:
    """Resolve settings from arguments, then environment, then defaults."""

    url = database_url or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
    out = Path(output_dir or os.getenv("ET_OUTPUT_DIR") or ".")
    return Settings(
        database_url=url,
        output_dir=out,
        error_preview_limit=_env_positive_int(
            "ET_ERROR_PREVIEW_LIMIT", DEFAULT_ERROR_PREVIEW_LIMIT
        ),
        default_page_size=_env_positive_int("ET_PAGE_SIZE", DEFAULT_PAGE_SIZE),
    )


__all__ = ["Settings", "load_settings", "DEFAULT_DATABASE_URL"]
