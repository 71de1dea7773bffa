"""Public interface for the ``expense_tracker`` package.

This module exposes the store, the record model and the interactive session
types as the stable import surface. There is no runtime logic here, only
symbol re-exports.
"""

from .editor import Draft, EditStateMachine, Field, Mode, backspace_amount, feed_amount_char
from .errors import (
    ExpenseTrackerError,
    MalformedSnapshotError,
    StorageError,
    ValidationError,
    ValidationReason,
)
from .models import ExpenseRecord, is_complete, validate_and_construct
from .selection import SelectionController
from .session import Key, KeyEvent, StatusMessage, TrackerSession
from .store import ExpenseStore

__all__ = [
    # Store
    "ExpenseStore",
    # Models
    "ExpenseRecord",
    "validate_and_construct",
    "is_complete",
    # Editing / selection
    "Field",
    "Mode",
    "Draft",
    "EditStateMachine",
    "feed_amount_char",
    "backspace_amount",
    "SelectionController",
    # Session
    "Key",
    "KeyEvent",
    "StatusMessage",
    "TrackerSession",
    # Errors
    "ExpenseTrackerError",
    "ValidationError",
    "ValidationReason",
    "StorageError",
    "MalformedSnapshotError",
]
