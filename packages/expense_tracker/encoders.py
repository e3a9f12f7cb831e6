"""JSON and XML encodings for summaries and transactions.

Both encodings carry the same fields. Amounts are fixed two-decimal strings
(``"1500.50"``) and dates ISO ``YYYY-MM-DD``, so files round-trip through the
JSON import adapters without float rounding.

JSON is indented by two spaces; XML is UTF-8 with a declaration, a plural root
element, and one child element per item::

    <summaries>
      <summary>
        <category>Food</category>
        <total_amount>2300.75</total_amount>
        <transaction_count>2</transaction_count>
      </summary>
    </summaries>
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Mapping
from typing import Any

from .ingest.fields import format_amount
from .models import CategorySummary, Transaction


def summary_to_dict(s: CategorySummary) -> dict[str, Any]:
    return {
        "category": s.category,
        "total_amount": format_amount(s.total_amount),
        "transaction_count": s.transaction_count,
    }


def transaction_to_dict(tx: Transaction) -> dict[str, Any]:
    return {
        "id": tx.id,
        "date": tx.date.isoformat(),
        "category": tx.category,
        "amount": format_amount(tx.amount),
        "note": tx.note,
    }


def _to_json(items: list[dict[str, Any]]) -> str:
    return json.dumps(items, indent=2, ensure_ascii=False)


def _to_xml(root_tag: str, item_tag: str, items: Iterable[Mapping[str, Any]]) -> bytes:
    root = ET.Element(root_tag)
    for item in items:
        el = ET.SubElement(root, item_tag)
        for key, value in item.items():
            ET.SubElement(el, key).text = "" if value is None else str(value)
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def summaries_to_json(summaries: Iterable[CategorySummary]) -> str:
    return _to_json([summary_to_dict(s) for s in summaries])


def summaries_to_xml(summaries: Iterable[CategorySummary]) -> bytes:
    return _to_xml("summaries", "summary", (summary_to_dict(s) for s in summaries))


def transactions_to_json(records: Iterable[Transaction]) -> str:
    return _to_json([transaction_to_dict(tx) for tx in records])


def transactions_to_xml(records: Iterable[Transaction]) -> bytes:
    return _to_xml("transactions", "transaction", (transaction_to_dict(tx) for tx in records))


__all__ = [
    "summary_to_dict",
    "transaction_to_dict",
    "summaries_to_json",
    "summaries_to_xml",
    "transactions_to_json",
    "transactions_to_xml",
]
