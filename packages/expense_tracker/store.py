# ruff: noqa: I001
"""Record store: the durable list of expenses.

``ExpenseStore`` wraps the ``expenses`` table owned by ``libs/db`` and is the
single source of truth for the interactive session and the CLI. Every
operation runs in its own short transaction (``session_scope``) and completes
before returning, so a read issued after a mutation always observes it.

Backend failures (``SQLAlchemyError``) are logged and re-raised as
``StorageError``; a missing id is reported through the return value, never as
an exception.
"""

from __future__ import annotations

import calendar
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from expense_db import metadata
from expense_db.client import database_url as _resolve_url
from expense_db.client import make_engine, make_session_factory, session_scope
from expense_db.models.expense import Expense

from .errors import StorageError
from .logging_setup import get_logger
from .models import ExpenseRecord
from .snapshot import dump_snapshot, load_snapshot

logger = get_logger("expense_tracker.store")

T = TypeVar("T")


def _row_to_record(row: Expense) -> ExpenseRecord:
    return ExpenseRecord(
        id=row.id,
        date=row.date,
        name=row.name,
        category=row.category,
        amount=row.amount,
    )


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last calendar day of ``year``-``month``."""

    if not 1 <= month <= 12:
        raise ValueError(f"month must be within 1..12 (got {month})")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


class ExpenseStore:
    """CRUD, filtering and snapshot import/export over the ``expenses`` table."""

    def __init__(self, database_url: str | None = None, *, create_schema: bool = True) -> None:
        self.database_url = _resolve_url(database_url)
        self._engine = make_engine(self.database_url)
        self._session_factory = make_session_factory(self._engine)
        if create_schema:
            with self._guard("create schema"):
                metadata.create_all(bind=self._engine)

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    @contextmanager
    def _guard(self, op: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error("storage failure during %s: %s", op, e, exc_info=True)
            raise StorageError(f"Storage failure during {op}: {e}") from e

    def _run(self, op: str, fn: Callable[[Session], T]) -> T:
        with self._guard(op), session_scope(self._session_factory) as session:
            return fn(session)

    def close(self) -> None:
        self._engine.dispose()

    def __enter__(self) -> ExpenseStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, record: ExpenseRecord) -> int:
        """Persist ``record`` and return its newly assigned id.

        Any id already set on ``record`` is ignored; ids come from the
        database and are never reused after a delete.
        """

        def _insert(session: Session) -> int:
            row = Expense(
                date=record.date,
                name=record.name,
                category=record.category,
                amount=record.amount,
            )
            session.add(row)
            session.flush()
            return int(row.id)

        new_id = self._run("create", _insert)
        logger.debug("created expense id=%s name=%r", new_id, record.name)
        return new_id

    def get(self, record_id: int) -> ExpenseRecord | None:
        def _get(session: Session) -> ExpenseRecord | None:
            row = session.get(Expense, record_id)
            return _row_to_record(row) if row is not None else None

        return self._run("get", _get)

    def update(self, record: ExpenseRecord) -> bool:
        """Replace every field of the stored row with ``record``'s values.

        Returns ``False`` (no-op) when ``record`` has no id or the id is absent.
        """

        if record.id is None:
            return False

        def _update(session: Session) -> bool:
            row = session.get(Expense, record.id)
            if row is None:
                return False
            row.date = record.date
            row.name = record.name
            row.category = record.category
            row.amount = record.amount
            return True

        changed = self._run("update", _update)
        logger.debug("update expense id=%s affected=%s", record.id, changed)
        return changed

    def delete(self, record_id: int) -> bool:
        """Remove the record with ``record_id``; ``False`` when absent."""

        def _delete(session: Session) -> bool:
            result = session.execute(delete(Expense).where(Expense.id == record_id))
            return bool(result.rowcount)

        removed = self._run("delete", _delete)
        logger.debug("delete expense id=%s affected=%s", record_id, removed)
        return removed

    def list(self) -> list[ExpenseRecord]:
        return self._select("list")

    def count(self) -> int:
        return self._run(
            "count", lambda s: int(s.execute(select(func.count(Expense.id))).scalar_one())
        )

    def clear(self) -> int:
        """Delete every record; returns how many were removed."""

        removed = self._run("clear", lambda s: int(s.execute(delete(Expense)).rowcount or 0))
        logger.debug("cleared %s expenses", removed)
        return removed

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def filter_by_category(self, category: str) -> list[ExpenseRecord]:
        return self._select("filter_by_category", Expense.category == category)

    def filter_by_month(self, year: int, month: int) -> list[ExpenseRecord]:
        """Records dated from the first to the last day of the month, inclusive."""

        first, last = month_bounds(year, month)
        return self._select("filter_by_month", Expense.date.between(first, last))

    def _select(self, op: str, *criteria) -> list[ExpenseRecord]:
        stmt = select(Expense).where(*criteria).order_by(Expense.date, Expense.id)
        return self._run(op, lambda s: [_row_to_record(r) for r in s.execute(stmt).scalars()])

    # ------------------------------------------------------------------
    # Snapshot import/export
    # ------------------------------------------------------------------

    def export_snapshot(self, path: str | Path) -> int:
        """Write the full record list (ids included) to ``path``."""

        written = dump_snapshot(self.list(), path)
        logger.info("exported %s expenses to %s", written, path)
        return written

    def import_snapshot(self, path: str | Path) -> int:
        """Insert every record from the snapshot at ``path`` with fresh ids.

        A missing file is a no-op (returns 0). A malformed file raises
        ``MalformedSnapshotError`` before anything is written; the inserts
        themselves share one transaction.
        """

        records = load_snapshot(path)
        if records is None:
            logger.info("snapshot %s not found; nothing to import", path)
            return 0

        def _insert_all(session: Session) -> int:
            session.add_all(
                Expense(date=r.date, name=r.name, category=r.category, amount=r.amount)
                for r in records
            )
            return len(records)

        imported = self._run("import", _insert_all)
        logger.info("imported %s expenses from %s", imported, path)
        return imported


__all__ = ["ExpenseStore", "month_bounds"]
