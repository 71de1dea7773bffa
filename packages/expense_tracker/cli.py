# ruff: noqa: I001
"""CLI for the ``expense_tracker`` package.

This module exposes callable command handlers (``cmd_add``, ``cmd_list``, ...)
that return process exit codes, and a Typer-based console interface wrapping
them. Environment variables are loaded from a local ``.env`` using
``python-dotenv`` before any command runs. Business logic lives in
``expense_tracker.store`` and the interactive modules.
"""

from __future__ import annotations

import sys
from datetime import MAXYEAR, MINYEAR, date
from pathlib import Path
import typer
from dotenv import load_dotenv
from rich.console import Console
from typer.models import OptionInfo

from .config import Settings, load_settings
from .errors import ExpenseTrackerError
from .logging_setup import configure_logging, get_logger
from .models import ExpenseRecord, to_amount, to_date
from .store import ExpenseStore

logger = get_logger("expense_tracker.cli")

# Full-screen sessions log here unless --log-file says otherwise; log lines on
# stderr would draw over the interface.
DEFAULT_TUI_LOG_FILE = Path("expense_tracker.log")


# ---- Small module-level helpers used by CLI commands -------------------------


def _error(msg: str) -> None:
    print(f"Error: {msg}", file=sys.stderr)


def _open_store(settings: Settings) -> ExpenseStore:
    return ExpenseStore(settings.database_url)


def _parse_month(text: str) -> tuple[int, int]:
    """Parse ``YYYY-MM`` into ``(year, month)``; raises ``ValueError``."""

    parts = text.strip().split("-")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid month {text!r}; expected YYYY-MM")
    year, month = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month {text!r}; month must be 01..12")
    if not MINYEAR <= year <= MAXYEAR:
        raise ValueError(f"Invalid month {text!r}; year must be {MINYEAR:04d}..{MAXYEAR}")
    return year, month


# ---- Command handlers ----------------------------------------------------------


def cmd_tui(
    *,
    database_url: str | None = None,
    snapshot_path: Path | None = None,
    export_on_quit: bool | None = None,
) -> int:
    """Run the full-screen interactive tracker until the user quits."""

    # Deferred imports keep non-interactive commands fast to start.
    from .session import TrackerSession
    from .term_ui import run_tui

    settings = load_settings(
        database_url=database_url,
        snapshot_path=snapshot_path,
        export_on_quit=export_on_quit,
    )
    try:
        store = _open_store(settings)
    except ExpenseTrackerError as e:
        _error(str(e))
        return 1
    with store:
        session = TrackerSession(
            store,
            snapshot_path=settings.snapshot_path,
            export_on_quit=settings.export_on_quit,
            require_complete=settings.require_complete,
        )
        run_tui(session)
    return 0


def cmd_menu(*, database_url: str | None = None) -> int:
    """Run the numbered line-based menu."""

    from .menu import ExpenseMenu

    settings = load_settings(database_url=database_url)
    try:
        store = _open_store(settings)
    except ExpenseTrackerError as e:
        _error(str(e))
        return 1
    with store:
        return ExpenseMenu(store).run()


def cmd_add(
    *,
    date_text: str | None,
    name: str,
    category: str,
    amount: str,
    database_url: str | None = None,
) -> int:
    try:
        record = ExpenseRecord(
            date=date_text if date_text is not None else date.today(),
            name=name,
            category=category,
            amount=amount,
        )
    except ExpenseTrackerError as e:
        _error(str(e))
        return 2
    settings = load_settings(database_url=database_url)
    try:
        with _open_store(settings) as store:
            new_id = store.create(record)
    except ExpenseTrackerError as e:
        _error(f"failed to add expense: {e}")
        return 1
    print(f"Added expense #{new_id}")
    return 0


def cmd_list(
    *,
    category: str | None = None,
    month: str | None = None,
    database_url: str | None = None,
    console: Console | None = None,
) -> int:
    """Print expenses as a table, optionally filtered by category and/or month."""

    from .menu import expense_table

    year_month: tuple[int, int] | None = None
    if month is not None:
        try:
            year_month = _parse_month(month)
        except ValueError as e:
            _error(str(e))
            return 2
    settings = load_settings(database_url=database_url)
    try:
        with _open_store(settings) as store:
            if year_month is not None:
                records = store.filter_by_month(*year_month)
                if category is not None:
                    records = [r for r in records if r.category == category]
            elif category is not None:
                records = store.filter_by_category(category)
            else:
                records = store.list()
    except ExpenseTrackerError as e:
        _error(f"failed to list expenses: {e}")
        return 1

    out = console if console is not None else Console()
    if not records:
        out.print("No expenses found.")
        return 0
    out.print(expense_table(records))
    return 0


def cmd_update(
    expense_id: int,
    *,
    date_text: str | None = None,
    name: str | None = None,
    category: str | None = None,
    amount: str | None = None,
    database_url: str | None = None,
) -> int:
    """Replace an expense's fields; omitted fields keep their stored value."""

    settings = load_settings(database_url=database_url)
    try:
        with _open_store(settings) as store:
            current = store.get(expense_id)
            if current is None:
                _error(f"no expense with id {expense_id}")
                return 1
            try:
                updated = ExpenseRecord(
                    id=current.id,
                    date=to_date(date_text) if date_text is not None else current.date,
                    name=name if name is not None else current.name,
                    category=category if category is not None else current.category,
                    amount=to_amount(amount) if amount is not None else current.amount,
                )
            except ExpenseTrackerError as e:
                _error(str(e))
                return 2
            if not store.update(updated):
                _error(f"no expense with id {expense_id}")
                return 1
    except ExpenseTrackerError as e:
        _error(f"failed to update expense: {e}")
        return 1
    print(f"Updated expense #{expense_id}")
    return 0


def cmd_delete(expense_id: int, *, database_url: str | None = None) -> int:
    settings = load_settings(database_url=database_url)
    try:
        with _open_store(settings) as store:
            removed = store.delete(expense_id)
    except ExpenseTrackerError as e:
        _error(f"failed to delete expense: {e}")
        return 1
    if not removed:
        _error(f"no expense with id {expense_id}")
        return 1
    print(f"Deleted expense #{expense_id}")
    return 0


def cmd_export(path: Path | None = None, *, database_url: str | None = None) -> int:
    settings = load_settings(database_url=database_url, snapshot_path=path)
    try:
        with _open_store(settings) as store:
            written = store.export_snapshot(settings.snapshot_path)
    except ExpenseTrackerError as e:
        _error(f"export failed: {e}")
        return 1
    print(f"Exported {written} expenses to {settings.snapshot_path}")
    return 0


def cmd_import(path: Path | None = None, *, database_url: str | None = None) -> int:
    """Re-insert every record of a snapshot with fresh ids (missing file: no-op)."""

    settings = load_settings(database_url=database_url, snapshot_path=path)
    try:
        with _open_store(settings) as store:
            imported = store.import_snapshot(settings.snapshot_path)
    except ExpenseTrackerError as e:
        _error(f"import failed: {e}")
        return 1
    print(f"Imported {imported} expenses from {settings.snapshot_path}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Record, list, edit, delete and filter personal expenses. "
        "Loads settings from a local .env before running."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect these when used as default values below.
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    None,
    "--database-url",
    help="Override EXPENSE_TRACKER_DATABASE_URL / DATABASE_URL.",
)
SNAPSHOT_PATH_ARGUMENT = typer.Argument(
    None,
    help="Snapshot file (defaults to EXPENSE_TRACKER_SNAPSHOT or expenses.json).",
    dir_okay=False,
)


@app.command("tui")
def tui_cmd(
    database_url: str | None = DATABASE_URL_OPTION,
    snapshot: Path | None = typer.Option(None, help="Snapshot file used by export."),
    export_on_quit: bool | None = typer.Option(
        None,
        "--export-on-quit/--no-export-on-quit",
        help="Write the snapshot when quitting (env EXPENSE_TRACKER_EXPORT_ON_QUIT).",
    ),
) -> None:
    """Interactive full-screen tracker."""

    raise typer.Exit(
        cmd_tui(database_url=database_url, snapshot_path=snapshot, export_on_quit=export_on_quit)
    )


@app.command("menu")
def menu_cmd(database_url: str | None = DATABASE_URL_OPTION) -> None:
    """Numbered menu: create, list, update, delete, quit."""

    raise typer.Exit(cmd_menu(database_url=database_url))


@app.command("add")
def add_cmd(
    name: str = typer.Option(..., help="Display label."),
    amount: str = typer.Option(..., help="Non-negative amount, e.g. 12.50."),
    category: str = typer.Option("", help="Free-text category."),
    date_text: str | None = typer.Option(None, "--date", help="YYYY-MM-DD (default today)."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Record a new expense."""

    raise typer.Exit(
        cmd_add(
            date_text=date_text,
            name=name,
            category=category,
            amount=amount,
            database_url=database_url,
        )
    )


@app.command("list")
def list_cmd(
    category: str | None = typer.Option(None, help="Only this category."),
    month: str | None = typer.Option(None, help="Only this month, as YYYY-MM."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """List expenses."""

    raise typer.Exit(cmd_list(category=category, month=month, database_url=database_url))


@app.command("update")
def update_cmd(
    expense_id: int = typer.Argument(..., help="Id of the expense to change."),
    date_text: str | None = typer.Option(None, "--date", help="New date (YYYY-MM-DD)."),
    name: str | None = typer.Option(None, help="New name."),
    category: str | None = typer.Option(None, help="New category."),
    amount: str | None = typer.Option(None, help="New amount."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Edit an existing expense."""

    raise typer.Exit(
        cmd_update(
            expense_id,
            date_text=date_text,
            name=name,
            category=category,
            amount=amount,
            database_url=database_url,
        )
    )


@app.command("delete")
def delete_cmd(
    expense_id: int = typer.Argument(..., help="Id of the expense to delete."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Delete an expense by id."""

    raise typer.Exit(cmd_delete(expense_id, database_url=database_url))


@app.command("export")
def export_cmd(
    path: Path | None = SNAPSHOT_PATH_ARGUMENT,
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Write all expenses to a JSON snapshot."""

    raise typer.Exit(cmd_export(path, database_url=database_url))


@app.command("import")
def import_cmd(
    path: Path | None = SNAPSHOT_PATH_ARGUMENT,
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Insert the expenses of a JSON snapshot (new ids are assigned)."""

    raise typer.Exit(cmd_import(path, database_url=database_url))


@app.callback()
def _root(
    ctx: typer.Context,
    log_level: str | None = typer.Option(
        None, help="Log level (env EXPENSE_TRACKER_LOG_LEVEL, default INFO)."
    ),
    log_file: Path | None = typer.Option(
        None, help="Write logs to this file (env EXPENSE_TRACKER_LOG_FILE)."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging once.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    settings = load_settings()
    level = log_level if log_level is not None else settings.log_level
    if log_file is None:
        log_file = settings.log_file
    if ctx.invoked_subcommand == "tui" and log_file is None:
        log_file = DEFAULT_TUI_LOG_FILE
    configure_logging(level, log_file=log_file)


def main() -> None:  # pragma: no cover - console script entry
    app()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m expense_tracker.cli`
    main()
