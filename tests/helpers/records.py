"""Small record builders shared by the tests."""

from __future__ import annotations

from decimal import Decimal

from expense_tracker.models import ExpenseRecord, validate_and_construct

GROCERIES = ("2023-07-28", "Groceries", "Food", 50.0)
RENT = ("2023-08-01", "Rent", "Housing", 1200.0)


def rec(
    date: str, name: str = "Item", category: str = "Misc", amount: Decimal | float | str = 1.0
) -> ExpenseRecord:
    return validate_and_construct(date, name, category, amount)
