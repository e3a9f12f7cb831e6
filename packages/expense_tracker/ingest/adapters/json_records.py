"""Adapters for JSON transaction records.

Two layouts share one record schema (:class:`TransactionPayload`):

- **JSON Lines** (``.jsonl``): one object per non-blank line. Each line is
  decoded and validated on its own, so a bad line only costs that line.
- **JSON array** (``.json``): the whole file is a single array. It is
  decoded and validated as a unit; any failure yields exactly one file-level
  ``LineError`` and no records.

Object keys are matched case-insensitively (``Date``, ``AMOUNT``...) and
unknown keys, including any ``id``, are ignored because ids belong to the
store. ``amount`` may be a JSON number or a numeric string; numbers are
decoded straight to ``Decimal`` so no binary float rounding creeps in.
"""

from __future__ import annotations

import datetime as dt
import json
from collections.abc import Iterator, Mapping
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError, field_validator, model_validator

from ...models import LineError, ParsedTransaction, ParseOutcome
from ..fields import clean_category, clean_note, parse_date, to_amount


class TransactionPayload(BaseModel):
    """Typed view of one JSON transaction object."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    date: dt.date
    category: str
    amount: Decimal
    note: str = ""

    @model_validator(mode="before")
    @classmethod
    def _fold_key_case(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {str(k).lower(): v for k, v in data.items()}
        return data

    @field_validator("date", mode="before")
    @classmethod
    def _strict_date(cls, v: Any) -> dt.date:
        return parse_date(v)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: Any) -> str:
        return clean_category(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, v: Any) -> Decimal:
        return to_amount(v)

    @field_validator("note", mode="before")
    @classmethod
    def _note(cls, v: Any) -> str:
        return clean_note(v)

    def to_parsed(self, *, line: int | None = None) -> ParsedTransaction:
        return ParsedTransaction(
            date=self.date,
            category=self.category,
            amount=self.amount,
            note=self.note,
            line=line,
        )


_PAYLOAD_LIST = TypeAdapter(list[TransactionPayload])


def describe_validation_error(exc: ValidationError, *, max_items: int = 3) -> str:
    """Condense a pydantic ``ValidationError`` into one readable sentence."""

    parts: list[str] = []
    for err in exc.errors()[:max_items]:
        cause = (err.get("ctx") or {}).get("error")
        msg = str(cause) if isinstance(cause, Exception) else err["msg"]
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {msg}" if loc else msg)
    extra = exc.error_count() - len(parts)
    if extra > 0:
        parts.append(f"(+{extra} more)")
    return "; ".join(parts)


def _decode(text: str) -> Any:
    return json.loads(text, parse_float=Decimal)


def parse_json_lines(content: str) -> Iterator[ParseOutcome]:
    """Yield one outcome per non-blank line of a JSON Lines document."""

    for line_no, line in enumerate(content.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            obj = _decode(line)
        except json.JSONDecodeError as exc:
            yield LineError(line=line_no, reason=f"JSON error - {exc.msg} (column {exc.colno})")
            continue
        if not isinstance(obj, dict):
            yield LineError(line=line_no, reason="expected a JSON object")
            continue
        try:
            payload = TransactionPayload.model_validate(obj)
        except ValidationError as exc:
            yield LineError(line=line_no, reason=describe_validation_error(exc))
            continue
        yield payload.to_parsed(line=line_no)


def parse_json_array(content: str) -> Iterator[ParseOutcome]:
    """Yield every record of a JSON array document, or a single file-level error."""

    try:
        data = _decode(content)
    except json.JSONDecodeError as exc:
        yield LineError(line=None, reason=f"JSON error: {exc}")
        return
    if not isinstance(data, list):
        yield LineError(line=None, reason="JSON error: expected a top-level array of transactions")
        return
    if not data:
        yield LineError(line=None, reason="File contains no transactions")
        return
    try:
        payloads = _PAYLOAD_LIST.validate_python(data)
    except ValidationError as exc:
        yield LineError(line=None, reason=f"JSON error: {describe_validation_error(exc)}")
        return
    for payload in payloads:
        yield payload.to_parsed()


__all__ = [
    "TransactionPayload",
    "describe_validation_error",
    "parse_json_lines",
    "parse_json_array",
]
