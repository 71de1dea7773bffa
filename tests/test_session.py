import json
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from expense_tracker.editor import Field, Mode
from expense_tracker.errors import StorageError
from expense_tracker.session import Key, KeyEvent, TrackerSession
from expense_tracker.store import ExpenseStore
from tests.helpers.records import GROCERIES, RENT, rec

TODAY = date(2023, 7, 28)


def _keys(session: TrackerSession, *events) -> None:
    for ev in events:
        if isinstance(ev, str):
            for ch in ev:
                session.handle(KeyEvent.of(ch))
        else:
            session.handle(KeyEvent(ev))


class _FailingCreateStore(ExpenseStore):
    def create(self, record):
        raise StorageError("disk full")


def _session(store, **kw) -> TrackerSession:
    return TrackerSession(store, today=lambda: TODAY, **kw)


def test_session_loads_existing_records(store):
    store.create(rec(*GROCERIES))
    s = _session(store)
    assert [r.name for r in s.selection.records] == ["Groceries"]
    assert s.editor.mode is Mode.BROWSING
    assert s.running


def test_add_flow_commits_and_refreshes(store):
    s = _session(store)
    _keys(s, "a")
    assert s.editor.mode is Mode.COMPOSING
    assert s.editor.focus is Field.DATE

    _keys(s, Key.TAB, "Lunch", Key.TAB, "Food", Key.TAB, "12.5", Key.ENTER)

    assert s.editor.mode is Mode.BROWSING
    rows = store.list()
    assert len(rows) == 1
    assert rows[0].fields() == (TODAY, "Lunch", "Food", Decimal("12.50"))
    assert s.selection.records == tuple(rows)
    assert s.message is not None and s.message.kind == "info"


def test_command_letters_are_text_while_composing(store):
    s = _session(store)
    _keys(s, "a", Key.TAB, "quade", Key.ENTER)
    assert s.running
    assert [r.name for r in store.list()] == ["quade"]


def test_escape_discards_draft(store):
    s = _session(store)
    _keys(s, "a", Key.TAB, "Lunch", Key.ESCAPE)
    assert s.editor.mode is Mode.BROWSING
    assert store.list() == []


def test_invalid_date_keeps_composing_with_error(store):
    s = _session(store)
    _keys(s, "a", Key.BACKSPACE, Key.BACKSPACE, Key.TAB, "Lunch", Key.ENTER)
    assert s.editor.mode is Mode.COMPOSING
    assert s.message is not None and s.message.kind == "error"
    assert "date" in s.message.text.lower()
    assert store.list() == []

    # Fix the date and commit again.
    _keys(s, Key.TAB, Key.TAB, Key.TAB, "28", Key.ENTER)
    assert s.editor.mode is Mode.BROWSING
    assert [r.name for r in store.list()] == ["Lunch"]


def test_incomplete_draft_is_committable_by_default(store):
    s = _session(store)
    _keys(s, "a", Key.ENTER)
    assert len(store.list()) == 1


def test_require_complete_blocks_empty_fields(store):
    s = _session(store, require_complete=True)
    _keys(s, "a", Key.TAB, "Lunch", Key.ENTER)
    assert s.editor.mode is Mode.COMPOSING
    assert s.message is not None and s.message.kind == "error"
    _keys(s, Key.TAB, "Food", Key.ENTER)
    assert s.editor.mode is Mode.BROWSING
    assert len(store.list()) == 1


def test_storage_failure_is_surfaced_and_loop_survives(db_url):
    with _FailingCreateStore(db_url, create_schema=False) as failing:
        s = _session(failing)
        _keys(s, "a", Key.TAB, "Lunch", Key.ENTER)
        assert s.running
        assert s.editor.mode is Mode.COMPOSING
        assert s.message is not None and s.message.kind == "error"
        assert "disk full" in s.message.text

        # Message is dismissed by the next key; the draft is intact.
        _keys(s, Key.ESCAPE)
        assert s.message is None
        assert s.editor.mode is Mode.BROWSING


def test_navigation_and_delete(store):
    for r in [rec(*GROCERIES), rec(*RENT), rec("2023-09-01", "Gym", "Health", 30)]:
        store.create(r)
    s = _session(store)
    _keys(s, "d")
    assert len(store.list()) == 3  # nothing selected yet

    _keys(s, Key.DOWN, Key.DOWN, Key.DOWN, Key.DOWN)
    assert s.selection.cursor == 2
    _keys(s, "d")
    assert [r.name for r in store.list()] == ["Groceries", "Rent"]
    assert s.selection.cursor == 1

    _keys(s, Key.UP, "d")
    assert [r.name for r in store.list()] == ["Rent"]
    assert s.selection.cursor == 0
    _keys(s, "d")
    assert store.list() == []
    assert s.selection.cursor is None


def test_quit_without_export(store, tmp_path: Path):
    snap = tmp_path / "snap.json"
    s = _session(store, snapshot_path=snap)
    _keys(s, "q")
    assert not s.running
    assert not snap.exists()
    # Events after quitting are ignored.
    _keys(s, "a")
    assert s.editor.mode is Mode.BROWSING


def test_quit_exports_when_enabled(store, tmp_path: Path):
    store.create(rec(*GROCERIES))
    snap = tmp_path / "snap.json"
    s = _session(store, snapshot_path=snap, export_on_quit=True)
    _keys(s, "q")
    assert not s.running
    assert [item["name"] for item in json.loads(snap.read_text())] == ["Groceries"]


def test_failed_export_on_quit_asks_again(store, tmp_path: Path):
    blocker = tmp_path / "file.txt"
    blocker.write_text("x")
    s = _session(store, snapshot_path=blocker / "snap.json", export_on_quit=True)

    _keys(s, "q")
    assert s.running
    assert s.message is not None and s.message.kind == "error"

    _keys(s, Key.DOWN)  # any other key disarms the second-press quit
    _keys(s, "q")
    assert s.running

    _keys(s, "q")
    assert not s.running


def test_export_key_writes_snapshot(store, tmp_path: Path):
    store.create(rec(*RENT))
    snap = tmp_path / "snap.json"
    s = _session(store, snapshot_path=snap)
    _keys(s, "e")
    assert snap.exists()
    assert s.message is not None and "Exported 1" in s.message.text


def test_export_key_without_path_reports_error(store):
    s = _session(store)
    _keys(s, "e")
    assert s.message is not None and s.message.kind == "error"


@pytest.mark.parametrize("key", [Key.UP, Key.DOWN])
def test_moves_on_empty_list_keep_cursor_none(store, key):
    s = _session(store)
    _keys(s, key)
    assert s.selection.cursor is None
