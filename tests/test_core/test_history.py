# tests/test_core/test_history.py
"""Undo/redo history tests
=========================

Covers snapshot recording with debouncing and eviction, the redo branch
being dropped by a new edit, and exact restoration of text, cursor and
selection.
"""

import pytest

from wee.core import EditOps
from wee.core.History import History
from wee.core.State import Mode


@pytest.fixture
def stepping_clock(clock):
    clock.step = 2.0
    return clock


def type_text(state, history, text) -> None:
    for ch in text:
        history.record("Insert char")
        EditOps.insert_char(state, ch, auto_pair=False)


def test_records_within_debounce_window_are_coalesced(make_state, clock) -> None:
    history = History(make_state(["a"]), debounce_seconds=1.0, clock=clock)
    assert history.record("first") is True
    assert history.record("second") is False
    clock.advance(0.5)
    assert history.record("third") is False
    clock.advance(1.0)
    assert history.record("fourth") is True
    assert len(history) == 2


def test_oldest_snapshots_are_evicted(make_state, stepping_clock) -> None:
    history = History(make_state(["a"]), max_snapshots=3, clock=stepping_clock)
    for i in range(5):
        history.record(f"edit {i}")
    assert len(history) == 3
    assert [s.description for s in history._snapshots] == ["edit 2", "edit 3", "edit 4"]
    assert history.current.description == "edit 4"


def test_n_edits_are_undone_by_n_undos_and_redone(make_state, stepping_clock) -> None:
    """Three typed characters: three undos restore the original, three redos return."""
    state = make_state(["abc"])
    history = History(state, clock=stepping_clock)
    type_text(state, history, "xyz")
    assert state.buffer.lines() == ["xyzabc"]

    for expected in (["xyabc"], ["xabc"], ["abc"]):
        assert history.undo() is not None
        assert state.buffer.lines() == expected
    assert state.status_message == "Undo: Insert char"
    assert state.cursor == (0, 0)

    assert history.undo() is None
    assert state.status_message == "Nothing to undo"

    for expected in (["xabc"], ["xyabc"], ["xyzabc"]):
        assert history.redo() is not None
        assert state.buffer.lines() == expected
    assert state.cursor == (3, 0)
    assert state.status_message == "Redo: Insert char"

    assert history.redo() is None
    assert state.status_message == "Nothing to redo"


def test_new_edit_after_undo_drops_redo_branch(make_state, stepping_clock) -> None:
    state = make_state(["abc"])
    history = History(state, clock=stepping_clock)
    type_text(state, history, "xy")
    history.undo()
    assert history.can_redo()

    type_text(state, history, "q")
    assert not history.can_redo()
    assert state.buffer.lines() == ["xqabc"]

    history.undo()
    assert state.buffer.lines() == ["xabc"]


def test_undo_restores_cursor_and_selection(make_state, stepping_clock) -> None:
    state = make_state(["hello"])
    history = History(state, clock=stepping_clock)
    state.selection.set((0, 0), (5, 0))
    state.mode = Mode.SELECTING
    state.cx = 5

    history.record("Cut")
    EditOps.cut_selection(state)
    assert state.buffer.lines() == [""]

    history.undo()
    assert state.buffer.lines() == ["hello"]
    assert state.cursor == (5, 0)
    assert state.selection.active is True
    assert state.selection.normalized() == ((0, 0), (5, 0))
    assert state.mode is Mode.SELECTING
    assert state.buffer.rows[0] is not history.current.rows[0]


def test_undo_and_redo_on_empty_history(make_state, clock) -> None:
    state = make_state(["a"])
    history = History(state, clock=clock)
    assert history.undo() is None
    assert state.status_message == "Nothing to undo"
    assert history.redo() is None
    assert state.status_message == "Nothing to redo"
    assert not history.can_undo()


def test_clear_drops_everything(make_state, stepping_clock) -> None:
    state = make_state(["a"])
    history = History(state, clock=stepping_clock)
    type_text(state, history, "bc")
    history.clear()
    assert len(history) == 0
    assert history.current is None
    assert history.record("fresh") is True
