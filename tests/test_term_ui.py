from datetime import date
from decimal import Decimal

import pytest
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from expense_tracker.session import Key, KeyEvent, StatusMessage, TrackerSession
from expense_tracker.term_ui import TITLE, render_body, render_footer, render_title, run_tui
from tests.helpers.records import GROCERIES, RENT, rec

TODAY = date(2023, 7, 28)


def _text(fragments) -> str:
    return "".join(text for _style, text, *_ in fragments)


@pytest.fixture
def session(store) -> TrackerSession:
    return TrackerSession(store, today=lambda: TODAY)


def test_title(session):
    assert _text(render_title(session)) == TITLE


def test_empty_list_hint(session):
    assert "No expenses yet" in _text(render_body(session))


def test_rows_show_date_name_category_amount(store):
    store.create(rec(*GROCERIES))
    store.create(rec(*RENT))
    s = TrackerSession(store, today=lambda: TODAY)
    lines = _text(render_body(s)).splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("2023-07-28")
    assert "Groceries" in lines[0] and "Food" in lines[0]
    assert lines[0].endswith("$50.00")
    assert lines[1].endswith("$1200.00")


def test_selected_row_is_highlighted(store):
    store.create(rec(*GROCERIES))
    store.create(rec(*RENT))
    s = TrackerSession(store, today=lambda: TODAY)
    s.handle(KeyEvent(Key.DOWN))
    s.handle(KeyEvent(Key.DOWN))
    selected = [text for style, text, *_ in render_body(s) if "class:selected" in style]
    assert "Rent" in "".join(selected)
    assert "Groceries" not in "".join(selected)


def test_form_marks_focused_field(session):
    session.handle(KeyEvent.of("a"))
    session.handle(KeyEvent(Key.TAB))
    for ch in "Tea":
        session.handle(KeyEvent.of(ch))
    lines = _text(render_body(session)).splitlines()
    assert lines[0] == "  Date:     2023-07-28"
    assert lines[1] == "> Name:     Tea"
    assert lines[2] == "  Category: "
    assert lines[3] == "  Amount:   0"


def test_footer_hints_follow_mode(session):
    assert "'a' add" in _text(render_footer(session))
    session.handle(KeyEvent.of("a"))
    assert "Esc cancel" in _text(render_footer(session))


def test_footer_shows_status_message(session):
    session.message = StatusMessage("boom", "error")
    assert render_footer(session) == [("class:error", "boom")]


def test_run_tui_adds_expense_and_quits(store):
    s = TrackerSession(store, today=lambda: TODAY)
    with create_pipe_input() as pipe:
        pipe.send_text("a\tLunch\tFood\t12.5\rq")
        run_tui(s, input=pipe, output=DummyOutput())

    assert not s.running
    [row] = store.list()
    assert (row.name, row.category, row.amount) == ("Lunch", "Food", Decimal("12.50"))


def test_run_tui_deletes_selected_row(store):
    store.create(rec(*GROCERIES))
    store.create(rec(*RENT))
    s = TrackerSession(store, today=lambda: TODAY)
    with create_pipe_input() as pipe:
        # Down arrow twice, delete, quit.
        pipe.send_text("\x1b[B\x1b[Bdq")
        run_tui(s, input=pipe, output=DummyOutput())

    assert [r.name for r in store.list()] == ["Groceries"]
