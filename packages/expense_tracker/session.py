"""The interactive session: one owned object holding all mutable UI state.

A front end feeds :class:`KeyEvent` values to :meth:`TrackerSession.handle`
one at a time; each event is processed to completion (including any store
round-trip) before the next is read, so rendering always reflects the latest
completed mutation.

Errors raised by the store or the snapshot codec never escape ``handle``:
they are logged and kept as a :class:`StatusMessage` that the footer shows
until the next key press.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Literal

from .editor import EditStateMachine
from .errors import ExpenseTrackerError
from .logging_setup import get_logger
from .models import is_complete
from .selection import SelectionController
from .store import ExpenseStore

logger = get_logger("expense_tracker.session")


class Key(Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    TAB = "tab"
    ENTER = "enter"
    ESCAPE = "escape"
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True, slots=True)
class KeyEvent:
    key: Key
    char: str = ""

    @classmethod
    def of(cls, ch: str) -> KeyEvent:
        return cls(Key.CHAR, ch)


@dataclass(frozen=True, slots=True)
class StatusMessage:
    text: str
    kind: Literal["info", "error"] = "info"


# Browsing-mode commands
ADD_KEY = "a"
DELETE_KEY = "d"
EXPORT_KEY = "e"
QUIT_KEY = "q"


class TrackerSession:
    def __init__(
        self,
        store: ExpenseStore,
        *,
        snapshot_path: str | Path | None = None,
        export_on_quit: bool = False,
        require_complete: bool = False,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.snapshot_path = Path(snapshot_path) if snapshot_path is not None else None
        self.export_on_quit = export_on_quit
        self.require_complete = require_complete
        self._today = today
        self.editor = EditStateMachine()
        self.selection = SelectionController()
        self.message: StatusMessage | None = None
        self.running = True
        self._quit_armed = False
        self._attempt("load expenses", self.refresh)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def handle(self, event: KeyEvent) -> None:
        """Process one input event to completion."""

        if not self.running:
            return
        # Any key press dismisses the previous message.
        self.message = None
        if self.editor.composing:
            self._handle_composing(event)
        else:
            self._handle_browsing(event)

    def _handle_composing(self, event: KeyEvent) -> None:
        if event.key is Key.CHAR:
            self.editor.type_char(event.char)
        elif event.key is Key.BACKSPACE:
            self.editor.backspace()
        elif event.key is Key.TAB:
            self.editor.tab()
        elif event.key is Key.ENTER:
            self._attempt("save expense", self.commit)
        elif event.key is Key.ESCAPE:
            self.editor.escape()

    def _handle_browsing(self, event: KeyEvent) -> None:
        if event.key is Key.UP:
            self.selection.move_up()
        elif event.key is Key.DOWN:
            self.selection.move_down()
        elif event.key is Key.CHAR:
            ch = event.char
            if ch == ADD_KEY:
                self.editor.start_add(self._today())
            elif ch == DELETE_KEY:
                self._attempt("delete expense", self.delete_selected)
            elif ch == EXPORT_KEY:
                self._attempt("export snapshot", self.export)
            elif ch == QUIT_KEY:
                self.quit()
        if not (event.key is Key.CHAR and event.char == QUIT_KEY):
            self._quit_armed = False

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        self.selection.replace(self.store.list())

    def commit(self) -> None:
        """Store the draft, return to browsing and re-read the list.

        On failure the draft is kept so the user can correct it.
        """

        draft = self.editor.draft
        if draft is None:
            return
        record = draft.to_record()
        if self.require_complete and not is_complete(record):
            self.message = StatusMessage("Name and category are required", "error")
            return
        new_id = self.store.create(record)
        self.editor.committed()
        self.refresh()
        self.message = StatusMessage(f"Added {record.name or 'expense'} (#{new_id})")

    def delete_selected(self) -> None:
        deleted = self.selection.delete_selected(self.store)
        if deleted is not None:
            self.message = StatusMessage(f"Deleted {deleted.name or 'expense'} (#{deleted.id})")

    def export(self) -> None:
        if self.snapshot_path is None:
            self.message = StatusMessage("No snapshot path configured", "error")
            return
        written = self.store.export_snapshot(self.snapshot_path)
        self.message = StatusMessage(f"Exported {written} expenses to {self.snapshot_path}")

    def quit(self) -> None:
        """Stop the loop, flushing the snapshot first when configured.

        If that flush fails the session keeps running and shows the error;
        pressing the quit key again exits without exporting.
        """

        if self.export_on_quit and self.snapshot_path is not None and not self._quit_armed:
            try:
                self.store.export_snapshot(self.snapshot_path)
            except ExpenseTrackerError as e:
                logger.warning("export on quit failed: %s", e)
                self.message = StatusMessage(
                    f"Export failed: {e}. Press {QUIT_KEY} again to quit without exporting.",
                    "error",
                )
                self._quit_armed = True
                return
        self.running = False

    def _attempt(self, action: str, fn: Callable[[], None]) -> None:
        try:
            fn()
        except ExpenseTrackerError as e:
            logger.warning("%s failed: %s", action, e)
            self.message = StatusMessage(f"Could not {action}: {e}", "error")


__all__ = [
    "Key",
    "KeyEvent",
    "StatusMessage",
    "TrackerSession",
    "ADD_KEY",
    "DELETE_KEY",
    "EXPORT_KEY",
    "QUIT_KEY",
]
