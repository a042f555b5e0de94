# wee/core/Selection.py
"""Selection Model for the wee editor
===================================
A selection is an anchor and a cursor over `(cx, cy)` positions. Nothing keeps
the two in order; every consumer calls `Selection.normalized()` first, which
orders them row-major then column-major. An empty normalized range means "no
selection" and deactivates it.

Besides the `Selection` value itself, this module implements the block
operations that act on the selected rows: full-line checks, vertical moves
(swapping the block with a neighbouring row), horizontal moves (one space per
row) and tab-stop indent/outdent.

Functions take the shared `EditorState`, mutate it through its `Buffer`, keep
the edit cursor on the selection cursor and report results through the status
line.
"""
import logging
from typing import TYPE_CHECKING, Optional


if TYPE_CHECKING:
    from wee.core.State import EditorState

Position = tuple[int, int]


## ==================== Selection Class ====================
class Selection:
    """Class Selection
    =================
    Anchor and cursor of a selection.

    Attributes:
        anchor (Position): The fixed endpoint, `(cx, cy)`.
        cursor (Position): The moving endpoint, follows the edit cursor.
        active (bool): Whether the selection is live.
    """

    def __init__(self):
        self.anchor: Position = (0, 0)
        self.cursor: Position = (0, 0)
        self.active = False

    def normalized(self) -> tuple[Position, Position]:
        """Returns `(start, end)` with `start` not after `end`."""
        (ax, ay), (cx, cy) = self.anchor, self.cursor
        if (ay, ax) <= (cy, cx):
            return self.anchor, self.cursor
        return self.cursor, self.anchor

    def is_empty(self) -> bool:
        return self.anchor == self.cursor

    def anchor_is_start(self) -> bool:
        return self.normalized()[0] == self.anchor

    def start_at_cursor(self, pos: Position) -> None:
        """Places both endpoints at `pos` unless a selection is already active."""
        if not self.active:
            self.anchor = pos
            self.cursor = pos
            self.active = True

    def extend_to(self, pos: Position) -> bool:
        """Moves the cursor endpoint; an empty result deactivates the selection."""
        self.cursor = pos
        if self.anchor == self.cursor:
            self.active = False
        return self.active

    def set(self, anchor: Position, cursor: Position) -> bool:
        self.anchor = anchor
        self.cursor = cursor
        self.active = anchor != cursor
        return self.active

    def set_normalized(self, start: Position, end: Position) -> None:
        """Replaces the range keeping the anchor on the same side as before."""
        if self.anchor_is_start():
            self.anchor, self.cursor = start, end
        else:
            self.anchor, self.cursor = end, start

    def clear(self) -> None:
        self.active = False

    def rows(self) -> range:
        (_, sy), (_, ey) = self.normalized()
        return range(sy, ey + 1)

    def span_in_row(self, cy: int, row_len: int) -> Optional[tuple[int, int]]:
        """Character span `[start, end)` of row `cy` covered by the selection."""
        if not self.active:
            return None
        (sx, sy), (ex, ey) = self.normalized()
        if cy < sy or cy > ey:
            return None
        start = sx if cy == sy else 0
        end = ex if cy == ey else row_len
        if start >= end:
            return None
        return start, end

    def __repr__(self) -> str:
        return f"Selection(anchor={self.anchor}, cursor={self.cursor}, active={self.active})"


## ==================== Selection operations ====================
def _follow_cursor(state: "EditorState") -> None:
    state.cx, state.cy = state.selection.cursor


def _clamped_range(state: "EditorState") -> Optional[tuple[Position, Position]]:
    """Normalized selection with an end on the pending row pulled back to the last row."""
    sel = state.selection
    if not sel.active or state.numrows == 0:
        return None
    (sx, sy), (ex, ey) = sel.normalized()
    last = state.numrows - 1
    if sy > last:
        return None
    if ey > last:
        ey, ex = last, state.buffer.rows[last].size
    return (sx, sy), (ex, ey)


def deselect(state: "EditorState") -> None:
    """Deactivates the selection and refreshes highlighting of the rows it covered.

    The refresh also drops search-match overlays on those rows.
    """
    sel = state.selection
    if sel.active:
        buffer = state.buffer
        for cy in sel.rows():
            if 0 <= cy < buffer.numrows:
                buffer.highlighter.update_from(buffer.rows, cy)
    sel.clear()
    state.sync_mode()


def is_full_line_selection(state: "EditorState") -> bool:
    sel = state.selection
    if not sel.active:
        return False
    (sx, _), (ex, ey) = sel.normalized()
    row = state.buffer.row_at(ey)
    return sx == 0 and row is not None and ex == row.size


def can_shift_left(state: "EditorState") -> bool:
    """True iff every selected row has a space to give up.

    The first row gives up the character before the selection start; the
    other rows give up their first character.
    """
    sel = state.selection
    if not sel.active:
        return False
    (sx, sy), (_, ey) = sel.normalized()
    for cy in range(sy, ey + 1):
        row = state.buffer.row_at(cy)
        if row is None:
            return False
        if cy == sy:
            if not (sx > 0 and row.text[sx - 1] == " "):
                return False
        elif not row.text.startswith(" "):
            return False
    return True


def shift_selection_left(state: "EditorState") -> bool:
    if not can_shift_left(state):
        state.set_status("Cannot move selection left - not enough spaces")
        return False
    sel = state.selection
    buffer = state.buffer
    (sx, sy), (ex, ey) = sel.normalized()
    for cy in range(sy, ey + 1):
        row = buffer.rows[cy]
        buffer.delete_char(row, sx - 1 if cy == sy else 0)
    if sy == ey:
        new_start, new_end = (sx - 1, sy), (ex - 1, ey)
    else:
        new_start, new_end = (sx - 1, sy), (max(ex - 1, 0), ey)
    sel.set_normalized(new_start, new_end)
    _follow_cursor(state)
    state.set_status("Selection moved left")
    return True


def shift_selection_right(state: "EditorState") -> bool:
    sel = state.selection
    bounds = _clamped_range(state)
    if bounds is None:
        state.set_status("Cannot move selection right")
        return False
    buffer = state.buffer
    (sx, sy), (ex, ey) = bounds
    for cy in range(sy, ey + 1):
        row = buffer.rows[cy]
        buffer.insert_char(row, sx if cy == sy else 0, " ")
    sel.set_normalized((sx + 1, sy), (ex + 1, ey))
    _follow_cursor(state)
    state.set_status("Selection moved right")
    return True


def move_selection_vertical(state: "EditorState", delta: int) -> bool:
    """Swaps the selected full-line block with the row above (-1) or below (+1)."""
    word = "up" if delta < 0 else "down"
    sel = state.selection
    if not is_full_line_selection(state):
        state.set_status(f"Cannot move selection {word} - selection must be full lines")
        return False
    (sx, sy), (ex, ey) = sel.normalized()
    if delta < 0 and sy == 0:
        state.set_status("Cannot move selection up - already at top")
        return False
    if delta > 0 and ey >= state.numrows - 1:
        state.set_status("Cannot move selection down - already at bottom")
        return False
    if not state.buffer.move_block(sy, ey, delta):
        return False
    sel.set_normalized((sx, sy + delta), (ex, ey + delta))
    _follow_cursor(state)
    logging.debug(f"Selection rows {sy}-{ey} moved {word}")
    state.set_status(f"Selection moved {word}")
    return True


def indent_selection(state: "EditorState") -> bool:
    """Prefixes every selected row with one tab stop of spaces."""
    sel = state.selection
    bounds = _clamped_range(state)
    if bounds is None:
        return False
    width = state.tab_stop
    buffer = state.buffer
    (sx, sy), (ex, ey) = bounds
    for cy in range(sy, ey + 1):
        buffer.replace_in_row(buffer.rows[cy], 0, 0, " " * width)
    sel.set_normalized((sx + width, sy), (ex + width, ey))
    _follow_cursor(state)
    return True


def unindent_selection(state: "EditorState") -> bool:
    """Removes up to one tab stop of leading spaces from every selected row."""
    sel = state.selection
    bounds = _clamped_range(state)
    if bounds is None:
        return False
    width = state.tab_stop
    buffer = state.buffer
    (sx, sy), (ex, ey) = bounds
    removed: dict[int, int] = {}
    for cy in range(sy, ey + 1):
        row = buffer.rows[cy]
        count = len(row.text[:width]) - len(row.text[:width].lstrip(" "))
        if count:
            buffer.replace_in_row(row, 0, count, "")
        removed[cy] = count
    if not any(removed.values()):
        return False
    sel.set_normalized((max(sx - removed[sy], 0), sy), (max(ex - removed[ey], 0), ey))
    _follow_cursor(state)
    return True
