"""Domain model for a single expense.

``ExpenseRecord`` is the value object passed between the store, the snapshot
codec and the interactive session. Invariants are enforced at construction:

- ``amount`` is a ``Decimal`` quantized to cents and is never negative.
- ``date`` is a ``datetime.date`` (ISO ``YYYY-MM-DD`` strings are accepted).
- ``id`` is ``None`` for a draft that has not been persisted yet.

``name`` and ``category`` may be empty here; whether an incomplete record may
be committed is a policy applied by the caller (see :func:`is_complete`).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date as _date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from .errors import ValidationError, ValidationReason

_CENTS = Decimal("0.01")

# SQLite keeps Numeric as a float; 15 significant digits survive the round trip.
MAX_AMOUNT = Decimal("9999999999999.99")


def to_amount(raw: Any) -> Decimal:
    """Coerce ``raw`` to a cents-quantized ``Decimal``.

    Raises ``ValidationError`` for unparsable or non-finite input, for
    negative values and for values above ``MAX_AMOUNT``.
    """

    if isinstance(raw, bool):
        raise ValidationError(ValidationReason.INVALID_AMOUNT, f"Invalid amount: {raw!r}")
    try:
        d = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(
            ValidationReason.INVALID_AMOUNT, f"Invalid amount: {raw!r}"
        ) from None
    if not d.is_finite():
        raise ValidationError(ValidationReason.INVALID_AMOUNT, f"Invalid amount: {raw!r}")
    if d < 0:
        raise ValidationError(
            ValidationReason.NEGATIVE_AMOUNT, f"Amount must not be negative (got {d})"
        )
    # Checked before quantizing; huge values overflow the decimal context.
    if d > MAX_AMOUNT:
        raise ValidationError(
            ValidationReason.INVALID_AMOUNT, f"Amount must not exceed {MAX_AMOUNT} (got {d})"
        )
    return d.quantize(_CENTS, rounding=ROUND_HALF_UP)


def to_date(raw: Any) -> _date:
    if isinstance(raw, _date):
        return raw
    s = str(raw).strip()
    try:
        # Expect YYYY-MM-DD
        return _date.fromisoformat(s)
    except ValueError:
        raise ValidationError(
            ValidationReason.INVALID_DATE, f"Invalid date {s!r}; expected YYYY-MM-DD"
        ) from None


@dataclass(frozen=True, slots=True)
class ExpenseRecord:
    date: _date
    name: str
    category: str
    amount: Decimal
    id: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", to_date(self.date))
        object.__setattr__(self, "amount", to_amount(self.amount))
        object.__setattr__(self, "name", str(self.name))
        object.__setattr__(self, "category", str(self.category))

    @property
    def is_draft(self) -> bool:
        return self.id is None

    def with_id(self, record_id: int) -> ExpenseRecord:
        """Return a persisted copy; an assigned id is never replaced."""

        if self.id is not None and self.id != record_id:
            raise ValueError(f"record already has id {self.id}")
        return replace(self, id=record_id)

    def fields(self) -> tuple[_date, str, str, Decimal]:
        """The identity-free content, used for comparisons across stores."""

        return (self.date, self.name, self.category, self.amount)


def validate_and_construct(
    date: _date | str,
    name: str,
    category: str,
    amount: Decimal | float | int | str,
) -> ExpenseRecord:
    """Build a draft record, raising ``ValidationError`` on bad input."""

    return ExpenseRecord(date=date, name=name, category=category, amount=amount)


def is_complete(record: ExpenseRecord) -> bool:
    """Whether every text field is filled in (the optional commit gate)."""

    return bool(record.name.strip()) and bool(record.category.strip())


__all__ = [
    "MAX_AMOUNT",
    "ExpenseRecord",
    "validate_and_construct",
    "is_complete",
    "to_amount",
    "to_date",
]
