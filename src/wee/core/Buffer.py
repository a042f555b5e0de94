# wee/core/Buffer.py
"""Row Store for the wee editor
=============================
This module holds the document: an ordered list of `Row` objects, each keeping
its raw text together with the derived rendered text and highlight classes.

Every content mutation goes through `Buffer`, which keeps three things in step:
row indexes (renumbered on structural changes), the rendered form and
highlighting of the touched rows, and the dirty counter.

Out-of-range positions are clamped or ignored rather than raised; callers in
the edit layer rely on that to stay simple.

Classes:
--------
- Row: One line of the document.
- Buffer: The ordered row collection with character and row level edits.
"""
import logging
from typing import Optional

from wee.core.Coords import DEFAULT_TAB_STOP, expand_tabs
from wee.core.Syntax import Highlight, SyntaxHighlighter


class Row:
    """Class Row
    ===========
    One line of text.

    Attributes:
        index (int): Position of the row in its buffer.
        text (str): Raw characters, never containing a line terminator.
        render (str): `text` with tabs expanded.
        hl (list[Highlight]): One highlight class per character of `render`.
        open_comment_at_start (bool): Multi-line comment state entering the row.
        open_comment (bool): Multi-line comment state leaving the row.
    """

    __slots__ = ("index", "text", "render", "hl", "open_comment_at_start", "open_comment")

    def __init__(self, index: int, text: str = ""):
        self.index = index
        self.text = text
        self.render = ""
        self.hl: list[Highlight] = []
        self.open_comment_at_start = False
        self.open_comment = False

    @property
    def size(self) -> int:
        return len(self.text)

    def copy(self) -> "Row":
        clone = Row(self.index, self.text)
        clone.render = self.render
        clone.hl = list(self.hl)
        clone.open_comment_at_start = self.open_comment_at_start
        clone.open_comment = self.open_comment
        return clone

    def __repr__(self) -> str:
        return f"Row({self.index}, {self.text!r})"


## ==================== Buffer Class (Row Store) ====================
class Buffer:
    """Class Buffer
    ==============
    Ordered sequence of rows with dirty tracking.

    Attributes:
        rows (list[Row]): The document rows, index == position.
        dirty (int): Count of mutations since the last load/save; 0 means clean.
        highlighter (SyntaxHighlighter): Recomputes highlighting after edits.
        tab_stop (int): Tab width used for rendering.

    Methods:
        insert_row(at, text), delete_row(at):
            Structural edits; indexes of later rows are renumbered.
        insert_char(row, at, ch), delete_char(row, at), append_string(row, text):
            Character edits within a row.
        truncate_row(row, at), replace_in_row(row, at, length, repl):
            Helpers used by split, selection delete and replace-all.
        move_block(start, end, delta):
            Moves rows start..end one position up or down.
        load_lines(lines), to_string():
            Bulk load and serialization.
    """

    def __init__(self, highlighter: Optional[SyntaxHighlighter] = None, tab_stop: int = DEFAULT_TAB_STOP):
        self.rows: list[Row] = []
        self.dirty = 0
        self.highlighter = highlighter or SyntaxHighlighter()
        self.tab_stop = tab_stop

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def lines(self) -> list[str]:
        return [row.text for row in self.rows]

    # --------------------- Internal helpers ---------------------
    def _renumber(self, start: int = 0) -> None:
        for i in range(start, len(self.rows)):
            self.rows[i].index = i

    def _update_row(self, row: Row) -> None:
        """Recomputes the rendered text and re-highlights from this row on."""
        row.render = expand_tabs(row.text, self.tab_stop)
        self.highlighter.update_from(self.rows, row.index)

    def row_at(self, at: int) -> Optional[Row]:
        if 0 <= at < len(self.rows):
            return self.rows[at]
        return None

    # --------------------- Row level edits ---------------------
    def insert_row(self, at: int, text: str = "") -> Row:
        """Inserts a row at `at`, clamped to [0, numrows]."""
        at = max(0, min(at, len(self.rows)))
        row = Row(at, text)
        self.rows.insert(at, row)
        self._renumber(at + 1)
        self._update_row(row)
        self.dirty += 1
        return row

    def delete_row(self, at: int) -> bool:
        """Removes row `at`; no-op when `at` is out of range."""
        if not 0 <= at < len(self.rows):
            return False
        del self.rows[at]
        self._renumber(at)
        # The row that slid into `at` may now have a different entry state.
        if at < len(self.rows):
            self.highlighter.update_from(self.rows, at)
        self.dirty += 1
        return True

    # --------------------- Character level edits ---------------------
    def insert_char(self, row: Row, at: int, ch: str) -> None:
        at = max(0, min(at, row.size))
        row.text = row.text[:at] + ch + row.text[at:]
        self._update_row(row)
        self.dirty += 1

    def delete_char(self, row: Row, at: int) -> bool:
        if at < 0 or at >= row.size:
            return False
        row.text = row.text[:at] + row.text[at + 1:]
        self._update_row(row)
        self.dirty += 1
        return True

    def append_string(self, row: Row, text: str) -> None:
        row.text += text
        self._update_row(row)
        self.dirty += 1

    def truncate_row(self, row: Row, at: int) -> str:
        """Cuts `row` at `at` and returns the removed suffix."""
        at = max(0, min(at, row.size))
        suffix = row.text[at:]
        row.text = row.text[:at]
        self._update_row(row)
        self.dirty += 1
        return suffix

    def replace_in_row(self, row: Row, at: int, length: int, repl: str) -> bool:
        """Replaces `length` characters at `at` with `repl`; rejects out-of-range spans."""
        if at < 0 or length < 0 or at + length > row.size:
            return False
        row.text = row.text[:at] + repl + row.text[at + length:]
        self._update_row(row)
        self.dirty += 1
        return True

    def set_row_text(self, row: Row, text: str) -> None:
        row.text = text
        self._update_row(row)
        self.dirty += 1

    # --------------------- Block moves ---------------------
    def move_block(self, start: int, end: int, delta: int) -> bool:
        """Moves rows start..end (inclusive) by `delta` (-1 or +1).

        The neighbouring row swaps to the other side of the block. Returns
        False without mutating when the block would leave the buffer.
        """
        if delta not in (-1, 1) or start < 0 or end >= len(self.rows) or start > end:
            return False
        if delta < 0:
            if start == 0:
                return False
            neighbour = self.rows.pop(start - 1)
            self.rows.insert(end, neighbour)
            first = start - 1
        else:
            if end >= len(self.rows) - 1:
                return False
            neighbour = self.rows.pop(end + 1)
            self.rows.insert(start, neighbour)
            first = start
        self._renumber(first)
        last = end + 1 if delta > 0 else end
        for i in range(first, last + 1):
            self.highlighter.update_from(self.rows, i)
        self.dirty += 1
        return True

    # --------------------- Bulk ---------------------
    def load_lines(self, lines: list[str]) -> None:
        """Replaces the whole content; leaves the buffer clean."""
        self.rows = [Row(i, text) for i, text in enumerate(lines)]
        for row in self.rows:
            row.render = expand_tabs(row.text, self.tab_stop)
        self.highlighter.rehighlight_all(self.rows)
        self.dirty = 0
        logging.debug(f"Buffer: loaded {len(self.rows)} rows")

    def restore_rows(self, rows: list[Row]) -> None:
        """Installs deep copies of `rows` (used by undo/redo)."""
        self.rows = [row.copy() for row in rows]
        self._renumber()
        self.dirty += 1

    def rehighlight(self) -> None:
        self.highlighter.rehighlight_all(self.rows)

    def to_string(self) -> str:
        """Serializes rows joined by newlines with one trailing newline per row."""
        return "".join(row.text + "\n" for row in self.rows)
