"""Highlighted-row tracking over the in-memory snapshot of records.

``SelectionController`` owns both the snapshot (the records last read from
the store) and the cursor into it. The cursor is ``None`` when nothing is
selected and otherwise stays within ``[0, len(records) - 1]``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .models import ExpenseRecord


class _Deleter(Protocol):
    def delete(self, record_id: int) -> bool: ...

    def list(self) -> list[ExpenseRecord]: ...


class SelectionController:
    def __init__(self, records: Sequence[ExpenseRecord] = ()) -> None:
        self._records: list[ExpenseRecord] = list(records)
        self._cursor: int | None = None

    @property
    def records(self) -> tuple[ExpenseRecord, ...]:
        return tuple(self._records)

    @property
    def cursor(self) -> int | None:
        return self._cursor

    @property
    def selected(self) -> ExpenseRecord | None:
        if self._cursor is None:
            return None
        return self._records[self._cursor]

    def replace(self, records: Sequence[ExpenseRecord]) -> None:
        """Install a freshly read snapshot and re-clamp the cursor."""

        self._records = list(records)
        if not self._records:
            self._cursor = None
        elif self._cursor is not None:
            self._cursor = min(self._cursor, len(self._records) - 1)

    def move_up(self) -> None:
        if not self._records:
            return
        if self._cursor is None:
            self._cursor = 0
        elif self._cursor > 0:
            self._cursor -= 1

    def move_down(self) -> None:
        if not self._records:
            return
        if self._cursor is None:
            self._cursor = 0
        elif self._cursor < len(self._records) - 1:
            self._cursor += 1

    def delete_selected(self, store: _Deleter) -> ExpenseRecord | None:
        """Delete the highlighted record from ``store`` and refresh.

        Returns the deleted record, or ``None`` when nothing was selected or
        the selected row has no persisted id. Storage errors propagate.
        """

        target = self.selected
        if target is None or target.id is None:
            return None
        store.delete(target.id)
        self.replace(store.list())
        return target


__all__ = ["SelectionController"]
