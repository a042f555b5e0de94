# wee/core/Search.py
"""Search and replace for the wee editor
======================================
Whole-word replace-all over the buffer and the incremental search session
driven by the controller's prompt.

A match counts as a whole word when the characters on both sides of it are
separators (or the row ends there). Replacement continues searching right
after the inserted text, so a replacement that contains the needle is never
processed twice.

Classes:
--------
- FindSession: Per-keystroke search callback with its own match/direction state.
"""
import logging
from typing import TYPE_CHECKING, Optional

from wee.core.Buffer import Row
from wee.core.Coords import render_to_char
from wee.core.Selection import deselect
from wee.core.State import EditorState
from wee.core.Syntax import is_separator


if TYPE_CHECKING:
    from wee.core.Wee import Wee


def is_whole_word(text: str, at: int, length: int) -> bool:
    if at > 0 and not is_separator(text[at - 1]):
        return False
    end = at + length
    if end < len(text) and not is_separator(text[end]):
        return False
    return True


def count_in_row(row: Row, needle: str) -> int:
    if not needle:
        return 0
    count = 0
    pos = row.text.find(needle)
    while pos != -1:
        if is_whole_word(row.text, pos, len(needle)):
            count += 1
            pos = row.text.find(needle, pos + len(needle))
        else:
            pos = row.text.find(needle, pos + 1)
    return count


def count_occurrences(state: EditorState, needle: str) -> int:
    return sum(count_in_row(row, needle) for row in state.buffer.rows)


def replace_all_in_row(state: EditorState, row: Row, needle: str, repl: str) -> int:
    if not needle:
        return 0
    replaced = 0
    pos = row.text.find(needle)
    while pos != -1:
        if not is_whole_word(row.text, pos, len(needle)):
            pos = row.text.find(needle, pos + 1)
            continue
        state.buffer.replace_in_row(row, pos, len(needle), repl)
        replaced += 1
        pos = row.text.find(needle, pos + len(repl))
    return replaced


def replace_all(state: EditorState, needle: str, repl: str) -> int:
    """Replaces every whole-word occurrence of `needle`; returns the count."""
    total = sum(replace_all_in_row(state, row, needle, repl) for row in state.buffer.rows)
    if total:
        state.clamp_cursor()
    logging.debug(f"replace_all: {needle!r} -> {repl!r}, {total} replacement(s)")
    return total


## ==================== FindSession Class ====================
class FindSession:
    """Class FindSession
    ===================
    Incremental search callback for `Wee.prompt`.

    Called with the current query and the key just pressed. Arrow keys pick
    the search direction, enter/escape end the session, ctrl+r starts a
    whole-word replace-all with the current query and any other key restarts
    the search from the row the cursor was on when the session began.

    Attributes:
        editor (Wee): Controller providing the state, prompts and undo recording.
        origin (int): Cursor row when the session began.
        last_match (int): Row of the previous match, -1 when none.
        direction (int): 1 forward, -1 backward.
    """

    FORWARD_KEYS = ("right", "down")
    BACKWARD_KEYS = ("left", "up")

    def __init__(self, editor: "Wee"):
        self.editor = editor
        self.origin = editor.state.cy
        self.last_match = -1
        self.direction = 1

    @property
    def state(self) -> EditorState:
        return self.editor.state

    def __call__(self, query: str, key: str) -> None:
        state = self.state
        if self.last_match != -1 and self.last_match < state.numrows:
            state.buffer.highlighter.update_from(state.buffer.rows, self.last_match)

        if key in ("enter", "esc"):
            self.last_match = -1
            self.direction = 1
            deselect(state)
            return
        if key in self.FORWARD_KEYS:
            self.direction = 1
        elif key in self.BACKWARD_KEYS:
            self.direction = -1
        elif key == "ctrl+r":
            self._replace_all(query)
            return
        else:
            self.last_match = -1
            self.direction = 1

        if not query:
            deselect(state)
            return
        if self.find(query) is None:
            deselect(state)
            self.last_match = -1

    def find(self, query: str) -> Optional[int]:
        """Selects the next match of `query` in render text; returns its row."""
        state = self.state
        if self.last_match == -1:
            self.direction = 1
        current = self.last_match if self.last_match != -1 else self.origin
        for _ in range(state.numrows):
            current += self.direction
            if current < 0:
                current = state.numrows - 1
            elif current >= state.numrows:
                current = 0
            row = state.buffer.rows[current]
            rx = row.render.find(query)
            if rx == -1:
                continue
            self.last_match = current
            cx = render_to_char(row.text, rx, state.tab_stop)
            end_cx = render_to_char(row.text, rx + len(query) - 1, state.tab_stop) + 1
            state.cy = current
            state.cx = cx
            state.rowoff = state.numrows
            state.buffer.highlighter.mark_match(row, rx, len(query))
            state.selection.set((cx, current), (end_cx, current))
            return current
        return None

    def _replace_all(self, query: str) -> None:
        editor = self.editor
        state = self.state
        if not query:
            state.set_status("Enter a search term first, then press Ctrl-R to replace.")
            return
        repl = editor.prompt("Replace with: %s (ESC to cancel)")
        if repl is None:
            state.set_status("Replace cancelled.")
            return
        total = count_occurrences(state, query)
        if total == 0:
            state.set_status(f"No occurrences of '{query}' found.")
            return
        state.set_status(f"Replace all {total} whole-word occurrence(s) of '{query}' with '{repl}'? (y/n)")
        editor.redraw()
        if editor.read_key() in ("y", "Y"):
            editor.history.record("Replace all")
            replaced = replace_all(state, query, repl)
            deselect(state)
            self.last_match = -1
            state.set_status(f"Replaced {replaced} occurrence(s). Press ESC to close search.")
        else:
            state.set_status("Replace aborted.")
