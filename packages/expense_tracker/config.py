"""Runtime settings resolved from explicit overrides and the environment.

The CLI loads a local ``.env`` (``python-dotenv``, without overriding already
set variables) before calling :func:`load_settings`, so every value below can
also come from that file.

Environment variables
---------------------
- ``EXPENSE_TRACKER_DATABASE_URL`` (falls back to ``DATABASE_URL``)
- ``EXPENSE_TRACKER_SNAPSHOT``: JSON snapshot path (default ``expenses.json``)
- ``EXPENSE_TRACKER_EXPORT_ON_QUIT``: ``1/true/yes`` or ``0/false/no``
- ``EXPENSE_TRACKER_REQUIRE_COMPLETE``: block commits of drafts with an empty
  name or category (default off)
- ``EXPENSE_TRACKER_LOG_LEVEL`` / ``EXPENSE_TRACKER_LOG_FILE``
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from expense_db.client import database_url as _database_url

DEFAULT_SNAPSHOT_PATH = Path("expenses.json")


def _env_flag(name: str) -> bool | None:
    env_val = os.getenv(name)
    if env_val is None:
        return None
    v = env_val.strip().lower()
    if v in {"0", "false", "no"}:
        return False
    if v in {"1", "true", "yes"}:
        return True
    return None


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str
    snapshot_path: Path
    export_on_quit: bool = False
    require_complete: bool = False
    log_level: str | None = None
    log_file: Path | None = None


def load_settings(
    *,
    database_url: str | None = None,
    snapshot_path: str | Path | None = None,
    export_on_quit: bool | None = None,
    require_complete: bool | None = None,
) -> Settings:
    """Resolve settings; explicit arguments win over the environment."""

    if snapshot_path is None:
        env_snapshot = os.getenv("EXPENSE_TRACKER_SNAPSHOT")
        snapshot_path = Path(env_snapshot) if env_snapshot else DEFAULT_SNAPSHOT_PATH
    if export_on_quit is None:
        export_on_quit = bool(_env_flag("EXPENSE_TRACKER_EXPORT_ON_QUIT"))
    if require_complete is None:
        require_complete = bool(_env_flag("EXPENSE_TRACKER_REQUIRE_COMPLETE"))
    log_file = os.getenv("EXPENSE_TRACKER_LOG_FILE")

    return Settings(
        database_url=_database_url(database_url),
        snapshot_path=Path(snapshot_path),
        export_on_quit=export_on_quit,
        require_complete=require_complete,
        log_level=os.getenv("EXPENSE_TRACKER_LOG_LEVEL") or None,
        log_file=Path(log_file) if log_file else None,
    )


__all__ = ["DEFAULT_SNAPSHOT_PATH", "Settings", "load_settings"]
