"""Adapter for pipe-delimited transaction lines.

Line format
-----------
``YYYY-MM-DD|Category|Amount[|Note]``

- Fields are trimmed; at least three are required.
- A fourth field becomes the note; anything past it is ignored.
- Blank (whitespace-only) lines are skipped without producing an outcome.
"""

from __future__ import annotations

from collections.abc import Iterator

from ...errors import FormatError
from ...models import LineError, ParsedTransaction, ParseOutcome
from ..fields import clean_category, clean_note, format_amount, parse_date, to_amount

DELIMITER = "|"
EXPECTED_LAYOUT = "Date|Category|Amount|[Note]"


def parse_line(line: str, *, line_no: int | None = None) -> ParsedTransaction:
    """Parse one non-blank line, raising ``FormatError`` when it is malformed."""

    parts = [p.strip() for p in line.split(DELIMITER)]
    if len(parts) < 3:
        raise FormatError(f"not enough fields; expected {EXPECTED_LAYOUT}")
    return ParsedTransaction(
        date=parse_date(parts[0]),
        category=clean_category(parts[1]),
        amount=to_amount(parts[2]),
        note=clean_note(parts[3]) if len(parts) > 3 else "",
        line=line_no,
    )


def parse_delimited(content: str) -> Iterator[ParseOutcome]:
    """Yield one outcome per non-blank line of ``content`` in input order."""

    for line_no, line in enumerate(content.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            yield parse_line(line, line_no=line_no)
        except FormatError as exc:
            yield LineError(line=line_no, reason=str(exc))


def format_delimited(record: ParsedTransaction) -> str:
    """Render ``record`` back into the line format accepted by :func:`parse_line`."""

    return DELIMITER.join(
        (
            record.date.isoformat(),
            record.category,
            format_amount(record.amount),
            record.note,
        )
    )


__all__ = ["parse_line", "parse_delimited", "format_delimited", "EXPECTED_LAYOUT"]
