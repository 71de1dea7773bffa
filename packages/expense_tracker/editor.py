"""Field-by-field editing of a new expense (the composing mode).

The machine has two modes. ``BROWSING`` is the initial mode; ``start_add``
enters ``COMPOSING`` with a fresh draft focused on the date field. While
composing, keystrokes mutate the focused field of the draft. Committing is
left to the session, which owns the store; this module never touches storage.

The amount field keeps two values: the text typed so far and the last numeric
value that text parsed to. :func:`feed_amount_char` and
:func:`backspace_amount` are the pure transitions for that pair.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum

from .models import ExpenseRecord, validate_and_construct

_ZERO = Decimal(0)


class Field(Enum):
    DATE = "Date"
    NAME = "Name"
    CATEGORY = "Category"
    AMOUNT = "Amount"

    def next(self) -> Field:
        order = list(Field)
        return order[(order.index(self) + 1) % len(order)]


class Mode(Enum):
    BROWSING = "browsing"
    COMPOSING = "composing"


def _parse_amount(text: str) -> Decimal | None:
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def feed_amount_char(value: Decimal, text: str, ch: str) -> tuple[Decimal, str]:
    """Apply one typed character to the amount field.

    Only ASCII digits and a single ``.`` are accepted; anything else leaves
    both values unchanged. After appending, the text is re-parsed and the
    previous numeric value is kept when it does not parse (e.g. a lone ``.``).
    """

    if ch == ".":
        if "." in text:
            return value, text
    elif not (len(ch) == 1 and ch in "0123456789"):
        return value, text
    new_text = text + ch
    parsed = _parse_amount(new_text)
    return (parsed if parsed is not None else value), new_text


def backspace_amount(value: Decimal, text: str) -> tuple[Decimal, str]:
    """Drop the last character; the value becomes zero if the rest won't parse."""

    new_text = text[:-1]
    parsed = _parse_amount(new_text) if new_text else None
    return (parsed if parsed is not None else _ZERO), new_text


@dataclass(slots=True)
class Draft:
    """Mutable staging area for the record being composed."""

    date_text: str = ""
    name: str = ""
    category: str = ""
    amount_text: str = ""
    amount: Decimal = field(default_factory=lambda: _ZERO)

    @classmethod
    def blank(cls, today: date) -> Draft:
        return cls(date_text=today.isoformat())

    def text_of(self, f: Field) -> str:
        if f is Field.DATE:
            return self.date_text
        if f is Field.NAME:
            return self.name
        if f is Field.CATEGORY:
            return self.category
        return self.amount_text or "0"

    def append(self, f: Field, ch: str) -> None:
        if f is Field.DATE:
            self.date_text += ch
        elif f is Field.NAME:
            self.name += ch
        elif f is Field.CATEGORY:
            self.category += ch
        else:
            self.amount, self.amount_text = feed_amount_char(self.amount, self.amount_text, ch)

    def pop(self, f: Field) -> None:
        if f is Field.DATE:
            self.date_text = self.date_text[:-1]
        elif f is Field.NAME:
            self.name = self.name[:-1]
        elif f is Field.CATEGORY:
            self.category = self.category[:-1]
        else:
            self.amount, self.amount_text = backspace_amount(self.amount, self.amount_text)

    def to_record(self) -> ExpenseRecord:
        """Validate the draft; raises ``ValidationError`` (e.g. a bad date)."""

        return validate_and_construct(self.date_text, self.name, self.category, self.amount)


class EditStateMachine:
    """Tracks the mode, the focused field and the draft buffer."""

    def __init__(self) -> None:
        self.mode = Mode.BROWSING
        self.focus = Field.DATE
        self.draft: Draft | None = None

    @property
    def composing(self) -> bool:
        return self.mode is Mode.COMPOSING

    def start_add(self, today: date) -> None:
        self.draft = Draft.blank(today)
        self.focus = Field.DATE
        self.mode = Mode.COMPOSING

    def tab(self) -> None:
        if self.composing:
            self.focus = self.focus.next()

    def type_char(self, ch: str) -> None:
        if self.composing and self.draft is not None:
            self.draft.append(self.focus, ch)

    def backspace(self) -> None:
        if self.composing and self.draft is not None:
            self.draft.pop(self.focus)

    def escape(self) -> None:
        """Discard the draft without persisting it."""

        self._finish()

    def committed(self) -> None:
        """Called by the session once the draft has been stored."""

        self._finish()

    def _finish(self) -> None:
        self.mode = Mode.BROWSING
        self.focus = Field.DATE
        self.draft = None


__all__ = [
    "Field",
    "Mode",
    "Draft",
    "EditStateMachine",
    "feed_amount_char",
    "backspace_amount",
]
