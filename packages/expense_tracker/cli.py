# ruff: noqa: I001
"""CLI for the ``expense_tracker`` package.

A Typer application exposing one command per core operation. The root
callback loads a local ``.env`` (``python-dotenv``), configures logging,
resolves :class:`~expense_tracker.config.Settings`, and makes sure the
transaction table exists before any command runs. Business logic lives in
``expense_tracker.ingest``, ``expense_tracker.query`` and
``expense_tracker.reports``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings, load_settings
from .logging_setup import configure_logging, get_logger

if TYPE_CHECKING:
    from .store import SqlRecordStore

logger = get_logger("expense_tracker.cli")

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Import transactions from delimited, JSON Lines, or JSON files, query "
        "them, and produce category reports. Loads DATABASE_URL from a local .env."
    ),
)


@dataclass(slots=True)
class _State:
    settings: Settings

    @property
    def store(self) -> SqlRecordStore:
        from .store import SqlRecordStore

        return SqlRecordStore(self.settings.database_url)


def _state(ctx: typer.Context) -> _State:
    state = ctx.obj
    assert isinstance(state, _State)  # set by the root callback
    return state


def _fail(message: str, code: int = 1) -> typer.Exit:
    err_console.print(f"Error: {message}", markup=False)
    return typer.Exit(code)


def _as_date(value: datetime | None) -> date | None:
    return value.date() if value is not None else None


# Shared date options for the range-taking commands. Typer parses them as
# datetimes; ``_as_date`` drops the time part.
START_OPTION = typer.Option("--start", formats=["%Y-%m-%d"], help="Inclusive start date.")
END_OPTION = typer.Option("--end", formats=["%Y-%m-%d"], help="Inclusive end date.")


# ---- Commands -----------------------------------------------------------------


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    file_path: Annotated[Path, typer.Argument(help="File to import (.txt, .jsonl, .json)")],
    source_format: Annotated[
        str | None,
        typer.Option("--format", help="Force a format: delimited, jsonl, or json."),
    ] = None,
) -> None:
    """Import transactions from a file, isolating malformed records."""

    from .ingest.pipeline import import_file, preview_errors
    from .term_ui import print_import_result

    state = _state(ctx)
    try:
        result = import_file(state.store, file_path, source_format=source_format)
    except FileNotFoundError:
        raise _fail(f"File not found: {file_path}") from None
    except ValueError as e:
        raise _fail(str(e)) from None

    print_import_result(
        console,
        result,
        error_lines=preview_errors(result.error_messages, state.settings.error_preview_limit),
    )


@app.command("report")
def report_cmd(
    ctx: typer.Context,
    year: Annotated[int, typer.Argument(help="Report year, e.g. 2024")],
    month: Annotated[int, typer.Argument(help="Report month, 1-12")],
) -> None:
    """Write the JSON/XML category summary for one month."""

    from .reports import generate_monthly_report

    state = _state(ctx)
    try:
        generate_monthly_report(
            state.store,
            year,
            month,
            output_dir=state.settings.output_dir,
            console=console,
        )
    except ValueError as e:
        raise _fail(str(e)) from None


@app.command("reports-all")
def reports_all_cmd(ctx: typer.Context) -> None:
    """Write a monthly report for every month that has transactions."""

    from .reports import generate_reports_for_all_months

    state = _state(ctx)
    reports = generate_reports_for_all_months(
        state.store, output_dir=state.settings.output_dir, console=console
    )
    console.print(f"Reports generated: {sum(1 for r in reports if r.has_data)}")


@app.command("query")
def query_cmd(
    ctx: typer.Context,
    start: Annotated[datetime | None, START_OPTION] = None,
    end: Annotated[datetime | None, END_OPTION] = None,
    category: Annotated[str | None, typer.Option(help="Exact category to match.")] = None,
    sort: Annotated[str, typer.Option(help="Sort by date, amount, or category.")] = "date",
    asc: Annotated[bool, typer.Option("--asc", help="Sort ascending.")] = False,
    page: Annotated[int, typer.Option(help="1-based page number.")] = 1,
    size: Annotated[int | None, typer.Option(help="Page size (defaults to ET_PAGE_SIZE).")] = None,
) -> None:
    """List transactions with filters, sorting, and pagination."""

    from .query import query_transactions
    from .term_ui import transactions_table

    state = _state(ctx)
    result = query_transactions(
        state.store,
        start_date=_as_date(start),
        end_date=_as_date(end),
        category=category,
        sort_by=sort,
        descending=not asc,
        page=page,
        page_size=size if size is not None else state.settings.default_page_size,
    )
    console.print(transactions_table(result))


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    base_name: Annotated[
        str, typer.Option(help="Output file name without extension.")
    ] = "transactions_export",
) -> None:
    """Export every stored transaction to JSON and XML."""

    from .query import fetch_all
    from .reports import export_transactions

    state = _state(ctx)
    page = fetch_all(state.store)
    result = export_transactions(
        page.records, output_dir=state.settings.output_dir, base_name=base_name
    )
    console.print(f"Exported to {result.json_path} and {result.xml_path}")
    console.print(f"Exported records: {result.count}")


@app.command("aggregate")
def aggregate_cmd(
    ctx: typer.Context,
    start: Annotated[datetime | None, START_OPTION] = None,
    end: Annotated[datetime | None, END_OPTION] = None,
    file_name: Annotated[
        str, typer.Option(help="Output file name inside the output directory.")
    ] = "aggregate_summary.json",
) -> None:
    """Print the category summary as JSON and save it to a file."""

    from .reports import category_summary_json, export_aggregate

    state = _state(ctx)
    start_d, end_d = _as_date(start), _as_date(end)
    console.print_json(category_summary_json(state.store, start_d, end_d))
    path = export_aggregate(
        state.store,
        start_d,
        end_d,
        output_dir=state.settings.output_dir,
        file_name=file_name,
    )
    console.print(f"Saved to {path}")


@app.command("db-check")
def db_check_cmd(ctx: typer.Context) -> None:
    """Report the configured database and how many transactions it holds."""

    from .models import TransactionFilter

    state = _state(ctx)
    try:
        count = state.store.count(TransactionFilter())
    except SQLAlchemyError as e:
        raise _fail(f"database check failed: {e}") from None
    console.print(f"Database: {state.settings.database_url}", markup=False)
    console.print(f"Transactions stored: {count}")


@app.callback()
def _root(
    ctx: typer.Context,
    *,
    database_url: Annotated[
        str | None, typer.Option(help="Override DATABASE_URL (falls back to env var).")
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option(help="Directory for reports and exports (falls back to ET_OUTPUT_DIR)."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(help="Log level (falls back to EXPENSE_TRACKER_LOG_LEVEL)."),
    ] = None,
) -> None:
    """Root command: environment, logging, settings, and schema."""

    # Load environment from .env in CWD (override=False to keep existing env)
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Central logging setup so child loggers inherit configuration
    configure_logging(log_level)

    settings = load_settings(database_url=database_url, output_dir=output_dir)
    try:
        from db.client import create_schema

        create_schema(database_url=settings.database_url)
    except SQLAlchemyError as e:
        raise _fail(f"cannot open database {settings.database_url}: {e}") from None
    logger.debug("Using database %s", settings.database_url)
    ctx.obj = _State(settings=settings)


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    # Running as a module: `python -m expense_tracker.cli`
    app()
