from collections.abc import Iterator
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest
from prompt_toolkit import PromptSession
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.input.base import PipeInput
from prompt_toolkit.output import DummyOutput
from rich.console import Console

from expense_tracker.menu import ExpenseMenu
from tests.helpers.records import GROCERIES, rec

TODAY = date(2023, 7, 28)

# Emacs-mode Ctrl-A + Ctrl-K: clear a pre-filled default.
CLEAR = "\x01\x0b"


@pytest.fixture
def pipe() -> Iterator[PipeInput]:
    with create_pipe_input() as p:
        yield p


@pytest.fixture
def console() -> Console:
    return Console(file=StringIO(), width=120)


@pytest.fixture
def menu(store, pipe, console) -> ExpenseMenu:
    session = PromptSession(input=pipe, output=DummyOutput())
    return ExpenseMenu(store, session=session, console=console, today=lambda: TODAY)


def _output(console: Console) -> str:
    return console.file.getvalue()


def test_create_uses_today_as_default_date(menu, pipe, store, console):
    pipe.send_text("1\r\rLunch\rFood\r12.5\r5\r")
    assert menu.run() == 0

    [row] = store.list()
    assert row.fields() == (TODAY, "Lunch", "Food", Decimal("12.50"))
    assert f"Added expense #{row.id}." in _output(console)


def test_create_reasks_invalid_amount(menu, pipe, store):
    pipe.send_text("1\r" + CLEAR + "2023-08-01\rRent\rHousing\r-5\r" + CLEAR + "abc\r" + CLEAR + "1200\r5\r")
    assert menu.run() == 0

    [row] = store.list()
    assert row.amount == Decimal("1200.00")
    assert row.date == date(2023, 8, 1)


def test_list_empty(menu, pipe, console):
    pipe.send_text("2\r5\r")
    menu.run()
    assert "No expenses recorded." in _output(console)


def test_list_renders_table(menu, pipe, store, console):
    store.create(rec(*GROCERIES))
    pipe.send_text("2\r5\r")
    menu.run()
    out = _output(console)
    assert "Groceries" in out
    assert "$50.00" in out


def test_update_keeps_defaults_and_replaces_edited_fields(menu, pipe, store, console):
    new_id = store.create(rec(*GROCERIES))
    pipe.send_text(f"3\r{new_id}\r\r{CLEAR}Supermarket\r\r{CLEAR}61.5\r5\r")
    menu.run()

    row = store.get(new_id)
    assert row is not None
    assert row.fields() == (date(2023, 7, 28), "Supermarket", "Food", Decimal("61.50"))
    assert f"Updated expense #{new_id}." in _output(console)


def test_update_unknown_id(menu, pipe, console):
    pipe.send_text("3\r99\r5\r")
    menu.run()
    assert "No expense with id 99." in _output(console)


def test_delete(menu, pipe, store, console):
    new_id = store.create(rec(*GROCERIES))
    pipe.send_text(f"4\r{new_id}\r4\r{new_id}\r5\r")
    menu.run()
    out = _output(console)
    assert f"Deleted expense #{new_id}." in out
    assert f"No expense with id {new_id}." in out
    assert store.list() == []


def test_invalid_choice_is_reported(menu, pipe, console):
    pipe.send_text("7\r5\r")
    assert menu.run() == 0
    assert "Invalid choice: '7'" in _output(console)


def test_end_of_input_quits(menu, pipe):
    pipe.close()
    assert menu.run() == 0
