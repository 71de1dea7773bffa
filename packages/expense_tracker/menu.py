"""Line-based numbered menu: a non-full-screen front end over the store.

Commands map 1:1 onto store operations::

    1) Create   2) List   3) Update   4) Delete   5) Quit

Prompts use prompt_toolkit with inline validation so a bad date or amount is
re-asked instead of aborting the command. Output goes through a rich
``Console``; both are injectable for headless tests.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date

from prompt_toolkit import PromptSession
from prompt_toolkit.validation import ValidationError as PromptValidationError
from prompt_toolkit.validation import Validator
from rich.console import Console
from rich.table import Table

from .errors import ExpenseTrackerError
from .errors import ValidationError as RecordValidationError
from .logging_setup import get_logger
from .models import ExpenseRecord, to_amount, to_date
from .store import ExpenseStore

logger = get_logger("expense_tracker.menu")

MENU_TEXT = (
    "1) Create expense\n"
    "2) List expenses\n"
    "3) Update expense\n"
    "4) Delete expense\n"
    "5) Quit"
)


def expense_table(records: Sequence[ExpenseRecord], *, title: str = "Expenses") -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Date")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Amount", justify="right", style="green")
    for r in records:
        table.add_row(str(r.id), r.date.isoformat(), r.name, r.category, f"${r.amount:.2f}")
    return table


class _ParseValidator(Validator):
    """Reject input that ``parse`` refuses, showing its message inline."""

    def __init__(self, parse: Callable[[str], object]) -> None:
        self._parse = parse

    def validate(self, document) -> None:
        try:
            self._parse(document.text)
        except RecordValidationError as e:
            raise PromptValidationError(message=str(e)) from None


class _IdValidator(Validator):
    def validate(self, document) -> None:
        if not document.text.strip().isdigit():
            raise PromptValidationError(message="Enter a numeric id")


class ExpenseMenu:
    def __init__(
        self,
        store: ExpenseStore,
        *,
        session: PromptSession | None = None,
        console: Console | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.session: PromptSession = session if session is not None else PromptSession()
        self.console = console if console is not None else Console()
        self._today = today
        self._commands: dict[str, Callable[[], None]] = {
            "1": self.create,
            "2": self.list,
            "3": self.update,
            "4": self.delete,
        }

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------

    def _ask(self, message: str, *, default: str = "", validator: Validator | None = None) -> str:
        return self.session.prompt(
            message, default=default, validator=validator, validate_while_typing=False
        )

    def _ask_fields(self, current: ExpenseRecord | None) -> ExpenseRecord:
        d = self._ask(
            "Date (YYYY-MM-DD): ",
            default=(current.date if current else self._today()).isoformat(),
            validator=_ParseValidator(to_date),
        )
        name = self._ask("Name: ", default=current.name if current else "")
        category = self._ask("Category: ", default=current.category if current else "")
        amount = self._ask(
            "Amount: ",
            default=f"{current.amount:.2f}" if current else "",
            validator=_ParseValidator(to_amount),
        )
        return ExpenseRecord(
            date=d,
            name=name,
            category=category,
            amount=amount,
            id=current.id if current else None,
        )

    def _ask_id(self) -> int:
        return int(self._ask("Expense id: ", validator=_IdValidator()).strip())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create(self) -> None:
        record = self._ask_fields(None)
        new_id = self.store.create(record)
        self.console.print(f"Added expense #{new_id}.")

    def list(self) -> None:
        records = self.store.list()
        if not records:
            self.console.print("No expenses recorded.")
            return
        self.console.print(expense_table(records))

    def update(self) -> None:
        record_id = self._ask_id()
        current = self.store.get(record_id)
        if current is None:
            self.console.print(f"No expense with id {record_id}.")
            return
        if self.store.update(self._ask_fields(current)):
            self.console.print(f"Updated expense #{record_id}.")
        else:
            self.console.print(f"No expense with id {record_id}.")

    def delete(self) -> None:
        record_id = self._ask_id()
        if self.store.delete(record_id):
            self.console.print(f"Deleted expense #{record_id}.")
        else:
            self.console.print(f"No expense with id {record_id}.")

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def run(self) -> int:
        """Show the menu until Quit (or end of input); returns an exit code."""

        while True:
            self.console.print(MENU_TEXT)
            try:
                choice = self._ask("Choose an option: ").strip()
            except (EOFError, KeyboardInterrupt):
                return 0
            if choice == "5":
                return 0
            command = self._commands.get(choice)
            if command is None:
                self.console.print(f"Invalid choice: {choice!r}")
                continue
            try:
                command()
            except (EOFError, KeyboardInterrupt):
                return 0
            except ExpenseTrackerError as e:
                logger.warning("menu command %s failed: %s", choice, e)
                self.console.print(f"[red]Error:[/red] {e}")


__all__ = ["ExpenseMenu", "MENU_TEXT", "expense_table"]
