"""SQLAlchemy models registry for the expense database.

Currently a single table, ``expenses``, used by ``expense_tracker``.
"""

from .expense import Base, Expense

__all__ = [
    "Base",
    "Expense",
]
