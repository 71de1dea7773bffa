"""JSON snapshot codec.

A snapshot is a JSON array of objects with exactly the fields ``id``
(integer or null), ``date`` (``YYYY-MM-DD``), ``name``, ``category`` and
``amount`` (number >= 0). The schema is validated with pydantic so a file
that parses as JSON but has the wrong shape is reported as malformed rather
than half-imported.
"""

from __future__ import annotations

import datetime as dt
import json
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, RootModel
from pydantic import ValidationError as PydanticValidationError

from .errors import MalformedSnapshotError, StorageError
from .models import MAX_AMOUNT, ExpenseRecord


class SnapshotRecord(BaseModel):
    """Typed model of one snapshot entry."""

    model_config = ConfigDict(extra="forbid")

    id: int | None = None
    date: dt.date
    name: str
    category: str
    # A JSON number; strict float rejects strings and booleans.
    amount: float = Field(ge=0, le=float(MAX_AMOUNT))

    @classmethod
    def from_record(cls, record: ExpenseRecord) -> SnapshotRecord:
        return cls(
            id=record.id,
            date=record.date,
            name=record.name,
            category=record.category,
            amount=float(record.amount),
        )

    def to_record(self) -> ExpenseRecord:
        """Build a draft record; snapshot ids are never restored."""

        return ExpenseRecord(
            date=self.date, name=self.name, category=self.category, amount=self.amount
        )


class SnapshotFile(RootModel[list[SnapshotRecord]]):
    """Top-level schema for a snapshot file."""


def dump_snapshot(records: Iterable[ExpenseRecord], path: str | Path) -> int:
    """Write ``records`` to ``path`` atomically; return the number written.

    The file is written to a temporary sibling and moved into place so a
    failed write never leaves a truncated snapshot behind.
    """

    target = Path(path)
    payload = SnapshotFile([SnapshotRecord.from_record(r) for r in records])
    text = json.dumps(payload.model_dump(mode="json"), indent=2, ensure_ascii=False)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.write("\n")
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise StorageError(f"Failed to write snapshot {target}: {e}") from e
    return len(payload.root)


def load_snapshot(path: str | Path) -> list[ExpenseRecord] | None:
    """Read a snapshot file.

    Returns ``None`` when the file does not exist. Raises
    ``MalformedSnapshotError`` when it exists but is not a valid snapshot, and
    ``StorageError`` when it cannot be read.
    """

    source = Path(path)
    try:
        raw = source.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as e:
        raise MalformedSnapshotError(source, f"not UTF-8 text: {e.reason}") from e
    except OSError as e:
        raise StorageError(f"Failed to read snapshot {source}: {e}") from e

    try:
        # Strict: no coercion of numbers to dates or of strings to ids.
        parsed = SnapshotFile.model_validate_json(raw, strict=True)
    except PydanticValidationError as e:
        raise MalformedSnapshotError(source, f"{e.error_count()} schema error(s): {e}") from e
    return [item.to_record() for item in parsed.root]


__all__ = [
    "SnapshotRecord",
    "SnapshotFile",
    "dump_snapshot",
    "load_snapshot",
]
