import json
from decimal import Decimal
from pathlib import Path

import pytest

from expense_tracker.ingest.pipeline import (
    format_for_path,
    import_file,
    parse_content,
    persist_records,
    preview_errors,
)
from expense_tracker.models import TransactionFilter
from expense_tracker.query import query_transactions
from expense_tracker.store import SqlRecordStore
from tests.helpers.fakes import InMemoryRecordStore


def _write(tmp_path: Path, name: str, text: str, *, encoding: str = "utf-8") -> Path:
    p = tmp_path / name
    p.write_text(text, encoding=encoding)
    return p


def test_import_delimited_counts_records_and_errors(tmp_path: Path):
    src = _write(
        tmp_path,
        "tx.txt",
        "2024-01-15|Food|1500.50|Groceries\n"
        "bad line\n"
        "2024-02-05|Entertainment|1200.00|\n"
        "2024-02-31|Food|1.00\n"
        "2024-02-10|Food|800.25|Restaurant\n",
    )
    store = InMemoryRecordStore()

    result = import_file(store, src)

    assert result.source_format == "delimited"
    assert result.imported == 3
    assert result.errors == 2
    assert len(result.error_messages) == 2
    assert result.error_messages[0].startswith("Line 2:")
    assert result.error_messages[1].startswith("Line 4:")
    assert [tx.category for tx in store.records] == ["Food", "Entertainment", "Food"]


def test_import_into_sql_store_persists_every_valid_line(tmp_path: Path, sql_store: SqlRecordStore):
    src = _write(tmp_path, "tx.txt", "2024-01-15|Food|10.00\n2024-01-16|Food|oops\n2024-01-17|Rent|5\n")

    result = import_file(sql_store, src)

    assert (result.imported, result.errors) == (2, 1)
    assert sql_store.count(TransactionFilter()) == 2


def test_import_missing_file_raises_before_touching_the_store(tmp_path: Path):
    store = InMemoryRecordStore()
    with pytest.raises(FileNotFoundError):
        import_file(store, tmp_path / "nope.txt")
    assert store.insert_calls == 0


@pytest.mark.parametrize("path", ["", "   "])
def test_import_empty_path_is_an_argument_error(path):
    with pytest.raises(ValueError, match="must not be empty"):
        import_file(InMemoryRecordStore(), path)


def test_import_unknown_format_is_an_argument_error(tmp_path: Path):
    src = _write(tmp_path, "tx.txt", "2024-01-15|Food|1.00\n")
    with pytest.raises(ValueError, match="Unsupported import format"):
        import_file(InMemoryRecordStore(), src, source_format="xml")
    with pytest.raises(ValueError, match="Unsupported import format"):
        parse_content("", "xml")


def test_failed_insert_is_skipped_and_later_records_still_land(tmp_path: Path):
    src = _write(
        tmp_path,
        "tx.txt",
        "2024-01-15|Food|1.00\n2024-01-16|Broken|2.00\n2024-01-17|Food|3.00\n",
    )
    store = InMemoryRecordStore(fail_categories={"Broken"})

    result = import_file(store, src)

    assert result.imported == 2
    assert result.errors == 0
    assert store.insert_calls == 3
    assert [tx.amount for tx in store.records] == [Decimal("1.00"), Decimal("3.00")]
    [failure] = result.persistence_failures
    assert "line 2" in failure
    assert "Broken" in failure


def test_persist_records_names_unnumbered_records_by_position(tmp_path: Path):
    src = _write(
        tmp_path,
        "tx.json",
        json.dumps(
            [
                {"date": "2024-01-15", "category": "Food", "amount": "1.00"},
                {"date": "2024-01-16", "category": "Broken", "amount": "2.00"},
            ]
        ),
    )
    store = InMemoryRecordStore(fail_categories={"Broken"})
    records = parse_content(src.read_text(encoding="utf-8"), "json")

    inserted, failures = persist_records(store, records)

    assert inserted == 1
    assert len(failures) == 1
    assert "record 2" in failures[0]


def test_import_json_array_is_all_or_nothing(tmp_path: Path):
    src = _write(
        tmp_path,
        "tx.json",
        json.dumps(
            [
                {"date": "2024-01-15", "category": "Food", "amount": 10},
                {"date": "2024-01-16", "category": "Food", "amount": "ten"},
            ]
        ),
    )
    store = InMemoryRecordStore()

    result = import_file(store, src)

    assert result.source_format == "json"
    assert (result.imported, result.errors) == (0, 1)
    assert result.error_messages[0].startswith("JSON error")
    assert store.insert_calls == 0


def test_import_empty_json_array_reports_one_error(tmp_path: Path):
    result = import_file(InMemoryRecordStore(), _write(tmp_path, "tx.json", "[]"))
    assert (result.imported, result.errors) == (0, 1)
    assert result.error_messages == ["File contains no transactions"]


def test_import_json_lines_by_extension(tmp_path: Path):
    src = _write(
        tmp_path,
        "tx.jsonl",
        '{"date": "2024-01-15", "category": "Food", "amount": 10}\n'
        "not json\n"
        '{"DATE": "2024-01-16", "Category": "Rent", "AMOUNT": "900"}\n',
    )
    store = InMemoryRecordStore()

    result = import_file(store, src)

    assert result.source_format == "jsonl"
    assert (result.imported, result.errors) == (2, 1)
    assert result.error_messages[0].startswith("Line 2: JSON error")


def test_import_forced_format_overrides_extension(tmp_path: Path):
    src = _write(tmp_path, "export.dat", '{"date": "2024-01-15", "category": "Food", "amount": 1}\n')
    result = import_file(InMemoryRecordStore(), src, source_format="jsonl")
    assert (result.source_format, result.imported) == ("jsonl", 1)


def test_import_tolerates_utf8_bom(tmp_path: Path):
    src = _write(tmp_path, "tx.txt", "2024-01-15|Café|4.20|Flat white\n", encoding="utf-8-sig")
    store = InMemoryRecordStore()

    result = import_file(store, src)

    assert result.imported == 1
    assert store.records[0].category == "Café"


def test_import_replaces_undecodable_bytes_instead_of_aborting(tmp_path: Path):
    src = tmp_path / "tx.txt"
    src.write_bytes(
        b"2024-01-15|Caf\xe9|4.20\n"
        b"2024-01-16|Food|1\xff.00\n"
        b"2024-01-17|Food|1.00\n"
    )
    store = InMemoryRecordStore()

    result = import_file(store, src)

    assert (result.imported, result.errors) == (2, 1)
    assert result.error_messages[0].startswith("Line 2: invalid amount")
    assert [tx.category for tx in store.records] == ["Caf\ufffd", "Food"]


def test_import_huge_amount_is_a_line_error(tmp_path: Path):
    src = _write(
        tmp_path,
        "tx.txt",
        "2024-01-15|Food|1000000000000000000000000000000\n2024-01-16|Food|1.00\n",
    )
    store = InMemoryRecordStore()

    result = import_file(store, src)

    assert (result.imported, result.errors) == (1, 1)
    assert "out of range" in result.error_messages[0]
    assert store.records[0].amount == Decimal("1.00")


def test_import_json_lines_huge_number_is_a_line_error(tmp_path: Path):
    src = _write(
        tmp_path,
        "tx.jsonl",
        '{"date": "2024-01-15", "category": "Food", "amount": 1e40}\n'
        '{"date": "2024-01-16", "category": "Food", "amount": 2}\n',
    )

    result = import_file(InMemoryRecordStore(), src)

    assert (result.imported, result.errors) == (1, 1)
    assert result.error_messages[0].startswith("Line 1:")
    assert "out of range" in result.error_messages[0]


def test_largest_amount_round_trips_through_sql_store(tmp_path: Path, sql_store: SqlRecordStore):
    src = _write(tmp_path, "tx.txt", "2024-01-15|Food|9999999999999.99\n2024-01-16|Food|-0.01\n")

    result = import_file(sql_store, src)

    assert (result.imported, result.errors) == (2, 0)
    page = query_transactions(sql_store, sort_by="amount", descending=False)
    assert [tx.amount for tx in page.records] == [Decimal("-0.01"), Decimal("9999999999999.99")]


def test_import_empty_file_imports_nothing(tmp_path: Path):
    result = import_file(InMemoryRecordStore(), _write(tmp_path, "tx.txt", "\n\n"))
    assert (result.imported, result.errors, result.error_messages) == (0, 0, [])


@pytest.mark.parametrize(
    ("name", "fmt"),
    [
        ("a.txt", "delimited"),
        ("a.csv", "delimited"),
        ("noext", "delimited"),
        ("a.jsonl", "jsonl"),
        ("a.JSON", "json"),
        ("dir.d/a.json", "json"),
    ],
)
def test_format_for_path(name, fmt):
    assert format_for_path(name) == fmt


def test_preview_errors_caps_and_counts_the_rest():
    messages = [f"Line {i}: bad" for i in range(1, 13)]

    shown = preview_errors(messages, limit=10)

    assert len(shown) == 11
    assert shown[:10] == messages[:10]
    assert shown[-1] == "... and 2 more"
    assert preview_errors(messages[:3]) == messages[:3]
    assert preview_errors([]) == []


def test_two_field_line_adds_exactly_one_error(tmp_path: Path):
    store = InMemoryRecordStore()
    first = import_file(store, _write(tmp_path, "a.txt", "2024-01-15|Food|1.00\n"))
    second = import_file(
        store, _write(tmp_path, "b.txt", "2024-01-15|Food|1.00\n2024-01-15|OnlyTwoFields\n")
    )
    assert second.errors == first.errors + 1
    assert second.imported == first.imported
