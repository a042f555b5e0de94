# tests/test_core/test_selection.py
"""Selection model tests
=======================

Normalization, per-row spans, and the block operations: vertical moves of
full-line selections, one-space horizontal shifts and tab-stop
indent/unindent.
"""

from wee.core.EditOps import selection_text
from wee.core.Selection import (
    Selection,
    deselect,
    indent_selection,
    is_full_line_selection,
    move_selection_vertical,
    shift_selection_left,
    shift_selection_right,
    unindent_selection,
)
from wee.core.State import Mode
from wee.core.Syntax import Highlight, SyntaxHighlighter


def test_normalized_orders_row_major_then_column() -> None:
    sel = Selection()
    sel.set((2, 1), (1, 0))
    assert sel.normalized() == ((1, 0), (2, 1))
    assert sel.anchor_is_start() is False

    sel.set((3, 0), (1, 0))
    assert sel.normalized() == ((1, 0), (3, 0))


def test_selected_text_does_not_depend_on_direction(make_state) -> None:
    state = make_state(["hello", "world"])
    state.selection.set((1, 0), (2, 1))
    forward = selection_text(state)
    state.selection.set((2, 1), (1, 0))
    assert selection_text(state) == forward == "ello\nwo"


def test_empty_range_is_not_a_selection() -> None:
    sel = Selection()
    assert sel.set((1, 1), (1, 1)) is False
    assert sel.active is False

    sel.start_at_cursor((0, 0))
    assert sel.active is True
    assert sel.extend_to((2, 0)) is True
    assert sel.extend_to((0, 0)) is False


def test_span_in_row() -> None:
    sel = Selection()
    sel.set((3, 0), (2, 2))
    assert sel.span_in_row(0, 10) == (3, 10)
    assert sel.span_in_row(1, 4) == (0, 4)
    assert sel.span_in_row(2, 10) == (0, 2)
    assert sel.span_in_row(3, 10) is None
    assert list(sel.rows()) == [0, 1, 2]


def test_full_line_selection(make_state) -> None:
    state = make_state(["ab", "cd"])
    state.selection.set((0, 0), (2, 1))
    assert is_full_line_selection(state)
    state.selection.set((0, 0), (1, 1))
    assert not is_full_line_selection(state)


def test_move_full_line_block_up_and_down(make_state) -> None:
    state = make_state(["a", "b", "c"])
    state.selection.set((0, 1), (1, 1))

    assert move_selection_vertical(state, -1) is True
    assert state.buffer.lines() == ["b", "a", "c"]
    assert state.selection.normalized() == ((0, 0), (1, 0))
    assert (state.cx, state.cy) == (1, 0)
    assert state.status_message == "Selection moved up"

    assert move_selection_vertical(state, 1) is True
    assert state.buffer.lines() == ["a", "b", "c"]
    assert state.cy == 1


def test_move_rejections(make_state) -> None:
    state = make_state(["ab", "c"])
    state.selection.set((0, 0), (1, 0))
    assert move_selection_vertical(state, -1) is False
    assert state.status_message == "Cannot move selection up - selection must be full lines"

    state.selection.set((0, 0), (2, 0))
    assert move_selection_vertical(state, -1) is False
    assert state.status_message == "Cannot move selection up - already at top"

    state.selection.set((0, 1), (1, 1))
    assert move_selection_vertical(state, 1) is False
    assert state.status_message == "Cannot move selection down - already at bottom"
    assert state.buffer.lines() == ["ab", "c"]


def test_shift_left_consumes_one_space_per_row(make_state) -> None:
    state = make_state(["  ab", "  cd"])
    state.selection.set((2, 0), (4, 1))
    assert shift_selection_left(state) is True
    assert state.buffer.lines() == [" ab", " cd"]
    assert state.selection.normalized() == ((1, 0), (3, 1))
    assert state.status_message == "Selection moved left"


def test_shift_left_needs_a_space_everywhere(make_state) -> None:
    state = make_state(["  ab", "cd"])
    state.selection.set((2, 0), (2, 1))
    assert shift_selection_left(state) is False
    assert state.buffer.lines() == ["  ab", "cd"]
    assert state.status_message == "Cannot move selection left - not enough spaces"


def test_shift_right_inserts_one_space_per_row(make_state) -> None:
    state = make_state(["ab", "cd"])
    state.selection.set((1, 1), (1, 0))
    assert shift_selection_right(state) is True
    assert state.buffer.lines() == ["a b", " cd"]
    # The anchor stays on the end side.
    assert state.selection.anchor == (2, 1)
    assert state.selection.cursor == (2, 0)
    assert (state.cx, state.cy) == (2, 0)


def test_indent_selection_adds_a_tab_stop(make_state) -> None:
    state = make_state(["a", "b"])
    state.selection.set((0, 0), (1, 1))
    assert indent_selection(state) is True
    assert state.buffer.lines() == ["    a", "    b"]
    assert state.selection.normalized() == ((4, 0), (5, 1))


def test_unindent_selection_removes_up_to_a_tab_stop(make_state) -> None:
    state = make_state(["      a", "  b"])
    state.selection.set((0, 0), (3, 1))
    assert unindent_selection(state) is True
    assert state.buffer.lines() == ["  a", "b"]
    assert state.selection.normalized() == ((0, 0), (1, 1))


def test_unindent_without_leading_spaces_changes_nothing(make_state) -> None:
    state = make_state(["a", "b"])
    state.selection.set((0, 0), (1, 1))
    assert unindent_selection(state) is False
    assert state.buffer.dirty == 0


def test_block_operations_stop_at_the_last_row(make_state) -> None:
    """A selection ending on the row after the last one edits only existing rows."""
    state = make_state(["  a", "    b"])
    state.selection.set((0, 0), (0, 2))
    assert unindent_selection(state) is True
    assert state.buffer.lines() == ["a", "b"]
    assert state.selection.normalized() == ((0, 0), (1, 1))

    state.selection.set((0, 0), (0, 2))
    assert indent_selection(state) is True
    assert state.buffer.lines() == ["    a", "    b"]
    assert state.selection.normalized() == ((4, 0), (5, 1))

    state.selection.set((0, 1), (0, 2))
    assert shift_selection_right(state) is True
    assert state.buffer.lines() == ["    a", "     b"]
    assert state.selection.normalized() == ((1, 1), (6, 1))


def test_deselect_clears_match_overlay_and_mode(make_state) -> None:
    state = make_state(["find me"])
    row = state.buffer.rows[0]
    SyntaxHighlighter.mark_match(row, 0, 4)
    state.selection.set((0, 0), (4, 0))
    state.mode = Mode.SELECTING

    deselect(state)
    assert Highlight.MATCH not in row.hl
    assert state.selection.active is False
    assert state.mode is Mode.NORMAL
