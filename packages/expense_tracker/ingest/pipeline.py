"""File import pipeline: read, parse per record, persist per record.

The pipeline runs in two passes. The parse pass turns the file into a list of
``ParsedTransaction | LineError`` outcomes via the adapter registered for the
file's format; malformed lines become error messages and never stop the
batch. The persist pass inserts each parsed record on its own through the
injected :class:`~expense_tracker.store.RecordStore`; a failed insert is
logged and skipped so earlier and later records still land.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from ..errors import PersistenceError
from ..logging_setup import get_logger
from ..models import ImportResult, LineError, ParsedTransaction, ParseOutcome
from ..store import RecordStore
from .adapters.delimited import parse_delimited
from .adapters.json_records import parse_json_array, parse_json_lines

logger = get_logger("expense_tracker.ingest.pipeline")

type Parser = Callable[[str], Iterable[ParseOutcome]]

PARSERS: dict[str, Parser] = {
    "delimited": parse_delimited,
    "jsonl": parse_json_lines,
    "json": parse_json_array,
}

_EXTENSION_FORMATS: dict[str, str] = {
    ".jsonl": "jsonl",
    ".json": "json",
}


def format_for_path(path: str | os.PathLike[str]) -> str:
    """Return the parser name for ``path`` based on its extension.

    ``.jsonl`` and ``.json`` map to the JSON adapters; every other extension
    (``.txt``, ``.csv``, none) is treated as the delimited-line format.
    """

    return _EXTENSION_FORMATS.get(Path(path).suffix.lower(), "delimited")


def parse_content(content: str, source_format: str) -> list[ParseOutcome]:
    try:
        parser = PARSERS[source_format]
    except KeyError:
        raise ValueError(
            f"Unsupported import format: {source_format!r}. Allowed: {sorted(PARSERS)}"
        ) from None
    return list(parser(content))


def persist_records(store: RecordStore, records: Sequence[ParsedTransaction]) -> tuple[int, list[str]]:
    """Insert ``records`` one by one; return ``(inserted, failure_messages)``."""

    inserted = 0
    failures: list[str] = []
    for pos, record in enumerate(records, start=1):
        try:
            store.insert(record)
        except PersistenceError as exc:
            where = f"line {record.line}" if record.line is not None else f"record {pos}"
            msg = f"Insert failed for {where} ({record.category}): {exc}"
            logger.warning(msg)
            failures.append(msg)
            continue
        inserted += 1
    return inserted, failures


def import_file(
    store: RecordStore,
    path: str | os.PathLike[str],
    *,
    source_format: str | None = None,
) -> ImportResult:
    """Import every record of ``path`` into ``store``.

    Parameters
    ----------
    store:
        Destination record store.
    path:
        Input file. The format is taken from the extension unless
        ``source_format`` (``"delimited"``, ``"jsonl"``, ``"json"``) is given.

    Raises
    ------
    ValueError
        ``path`` is empty or ``source_format`` is unknown.
    FileNotFoundError
        ``path`` does not exist. Raised before anything is parsed.
    """

    if path is None or not os.fspath(path).strip():
        raise ValueError("file path must not be empty")
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"File not found: {p}")

    fmt = source_format or format_for_path(p)
    if fmt not in PARSERS:
        raise ValueError(f"Unsupported import format: {fmt!r}. Allowed: {sorted(PARSERS)}")

    logger.info("Importing %s as %s", p, fmt)
    # utf-8-sig drops a leading BOM that editors on some platforms add.
    raw = p.read_bytes()
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        # Bad bytes become U+FFFD so they only affect the line they sit on.
        logger.warning("%s is not valid UTF-8 (%s); replacing undecodable bytes", p.name, exc.reason)
        content = raw.decode("utf-8-sig", errors="replace")

    result = ImportResult(source_format=fmt)
    parsed: list[ParsedTransaction] = []
    for outcome in parse_content(content, fmt):
        if isinstance(outcome, LineError):
            result.errors += 1
            result.error_messages.append(outcome.message)
            logger.debug("Skipping record: %s", outcome.message)
        else:
            parsed.append(outcome)

    if parsed:
        result.imported, result.persistence_failures = persist_records(store, parsed)

    logger.info(
        "Imported %d record(s) from %s with %d parse error(s) and %d insert failure(s)",
        result.imported,
        p.name,
        result.errors,
        len(result.persistence_failures),
    )
    return result


def preview_errors(messages: Sequence[str], limit: int = 10) -> list[str]:
    """Return at most ``limit`` messages plus a ``... and N more`` tail line."""

    limit = max(0, limit)
    shown = list(messages[:limit])
    hidden = len(messages) - len(shown)
    if hidden > 0:
        shown.append(f"... and {hidden} more")
    return shown


__all__ = [
    "PARSERS",
    "format_for_path",
    "parse_content",
    "persist_records",
    "import_file",
    "preview_errors",
]
