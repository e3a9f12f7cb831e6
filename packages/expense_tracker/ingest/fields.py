"""Field coercion shared by every input adapter.

Each helper takes raw text (or a decoded JSON scalar) and either returns the
normalized value or raises :class:`~expense_tracker.errors.FormatError` with a
short, human-readable reason. Adapters turn those errors into ``LineError``
values; nothing here knows about line numbers.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from db.models.expenses import CATEGORY_MAX_LENGTH, NOTE_MAX_LENGTH

from ..errors import FormatError

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
# Plain decimal text with an optional sign; no exponents, no separators.
_AMOUNT_TEXT_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_CENT = Decimal("0.01")
# SQLite stores Numeric as a double; 13 integer digits plus cents stay
# within the 15 significant digits a double holds exactly.
_AMOUNT_LIMIT = Decimal(10) ** 13


def parse_date(raw: Any) -> date:
    """Parse a strict ``YYYY-MM-DD`` calendar date."""

    if isinstance(raw, date):
        return raw
    s = str(raw).strip() if raw is not None else ""
    if not s:
        raise FormatError("date is required")
    if not _ISO_DATE_RE.match(s):
        raise FormatError(f"invalid date {s!r}; expected YYYY-MM-DD")
    try:
        return date.fromisoformat(s)
    except ValueError as exc:
        raise FormatError(f"invalid date {s!r}: {exc}") from exc


def to_amount(raw: Any) -> Decimal:
    """Return ``raw`` as a finite decimal rounded half-up to cents.

    Accepts ``Decimal``/``int`` values and plain numeric text with a ``.``
    decimal separator. Booleans, NaN/Infinity, exponents in text, and
    thousands separators are rejected.
    """

    if raw is None or isinstance(raw, bool):
        raise FormatError("amount is required")
    if isinstance(raw, Decimal):
        d = raw
    else:
        s = str(raw).strip()
        if not s:
            raise FormatError("amount is empty")
        if not _AMOUNT_TEXT_RE.match(s):
            raise FormatError(f"invalid amount {s!r}")
        try:
            d = Decimal(s)
        except InvalidOperation as exc:
            raise FormatError(f"invalid amount {s!r}") from exc
    if not d.is_finite():
        raise FormatError(f"invalid amount {raw!r}")
    # Range check first: quantize signals InvalidOperation past the context precision.
    if abs(d) >= _AMOUNT_LIMIT:
        raise FormatError(f"amount {raw!r} is out of range")
    try:
        q = d.quantize(_CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise FormatError(f"invalid amount {raw!r}") from exc
    if abs(q) >= _AMOUNT_LIMIT:
        raise FormatError(f"amount {raw!r} is out of range")
    return q


def _text(raw: Any, field: str) -> str:
    if raw is None:
        return ""
    if not isinstance(raw, str):
        raise FormatError(f"{field} must be text, got {type(raw).__name__}")
    return raw.strip()


def clean_category(raw: Any) -> str:
    s = _text(raw, "category")
    if not s:
        raise FormatError("category is required")
    if len(s) > CATEGORY_MAX_LENGTH:
        raise FormatError(f"category longer than {CATEGORY_MAX_LENGTH} characters")
    return s


def clean_note(raw: Any) -> str:
    s = _text(raw, "note")
    if len(s) > NOTE_MAX_LENGTH:
        raise FormatError(f"note longer than {NOTE_MAX_LENGTH} characters")
    return s


def format_amount(d: Decimal) -> str:
    # Exactly two decimals; ASCII dot; leading minus for negatives.
    return f"{d.quantize(_CENT, rounding=ROUND_HALF_UP):.2f}"


__all__ = [
    "parse_date",
    "to_amount",
    "clean_category",
    "clean_note",
    "format_amount",
]
