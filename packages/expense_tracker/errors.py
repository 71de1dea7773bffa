"""Exception taxonomy for ``expense_tracker``.

- ``ValidationError``: a single record was rejected (user-correctable).
- ``StorageError``: the durable backend or snapshot file failed to read/write.
- ``MalformedSnapshotError``: a snapshot file exists but cannot be parsed.

A missing record is not an error: lookups return ``None`` and mutations report
``False`` when nothing was affected.
"""

from __future__ import annotations

from enum import Enum


class ExpenseTrackerError(Exception):
    """Base class for errors surfaced to the user interface."""


class ValidationReason(str, Enum):
    NEGATIVE_AMOUNT = "negative_amount"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_DATE = "invalid_date"


class ValidationError(ExpenseTrackerError):
    def __init__(self, reason: ValidationReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class StorageError(ExpenseTrackerError):
    pass


class MalformedSnapshotError(ExpenseTrackerError):
    def __init__(self, path: object, detail: str) -> None:
        super().__init__(f"Malformed snapshot {path}: {detail}")
        self.path = path
        self.detail = detail


__all__ = [
    "ExpenseTrackerError",
    "ValidationReason",
    "ValidationError",
    "StorageError",
    "MalformedSnapshotError",
]
