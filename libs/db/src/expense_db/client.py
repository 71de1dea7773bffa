"""SQLAlchemy engine/session helpers for the expense database.

Usage
-----
from expense_db.client import make_engine, make_session_factory, session_scope

engine = make_engine("sqlite+pysqlite:///expenses.db")
factory = make_session_factory(engine)
with session_scope(factory) as s:
    s.execute(...)

Callers own the engine they create; there is no process-wide engine so two
stores pointed at different databases can coexist (tests rely on this).
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///expenses.db"


def database_url(override: str | None = None) -> str:
    """Resolve the database URL: explicit override, then env, then default."""

    return (
        override
        or os.getenv("EXPENSE_TRACKER_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or DEFAULT_DATABASE_URL
    )


def _is_sqlite_memory(url: str) -> bool:
    u = make_url(url)
    return u.get_backend_name() == "sqlite" and u.database in (None, "", ":memory:")


def make_engine(url: str) -> Engine:
    """Create an engine for ``url``.

    In-memory SQLite is bound to a single shared connection; otherwise every
    pooled connection would see its own empty database.
    """

    if _is_sqlite_memory(url):
        return create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    # Default isolation level is fine; echo disabled.
    return create_engine(url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False, class_=Session)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "DEFAULT_DATABASE_URL",
    "database_url",
    "make_engine",
    "make_session_factory",
    "session_scope",
]
