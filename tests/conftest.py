"""Pytest configuration for test isolation.

The application reads its database URL, snapshot path and logging settings
from the environment and defaults to files in the current directory. To keep
tests hermetic, every test runs in its own temporary working directory with
those variables cleared, and the package logger is reset afterwards so a
handler bound to one test's stream never leaks into the next.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from expense_tracker.logging_setup import reset_logging
from expense_tracker.store import ExpenseStore
from tests.helpers.db import bootstrap_sqlite_db

_ENV_VARS = (
    "DATABASE_URL",
    "EXPENSE_TRACKER_DATABASE_URL",
    "EXPENSE_TRACKER_SNAPSHOT",
    "EXPENSE_TRACKER_EXPORT_ON_QUIT",
    "EXPENSE_TRACKER_REQUIRE_COMPLETE",
    "EXPENSE_TRACKER_LOG_LEVEL",
    "EXPENSE_TRACKER_LOG_FILE",
)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    yield
    reset_logging()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return bootstrap_sqlite_db(tmp_path / "expenses.db")


@pytest.fixture
def store(db_url: str) -> Iterator[ExpenseStore]:
    with ExpenseStore(db_url, create_schema=False) as s:
        yield s
