"""expense_db: database library for the expense tracker (SQLAlchemy/Alembic).

Public exports
--------------
- ``Base`` and ``metadata`` for Alembic autogenerate/targeting
- ORM models in ``expense_db.models.expense`` (re-exported for convenience)
- Engine/session helpers in ``expense_db.client``
"""

from __future__ import annotations

from .models.expense import Base, Expense

# Re-export SQLAlchemy metadata for Alembic's env.py
metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "Expense",
]
