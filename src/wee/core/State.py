# wee/core/State.py
"""Editor state
============
`EditorState` is the single point of truth shared by every core operation:
the buffer, the edit cursor, scroll offsets, the selection, the current input
mode, the internal clipboard and the status line. The controller owns one
instance and passes it by reference into the edit, selection and search
functions.
"""
import logging
import time
from enum import Enum
from typing import Optional

from wee.core.Buffer import Buffer, Row
from wee.core.Selection import Selection


class Mode(Enum):
    """Input modes of the controller."""

    NORMAL = "normal"
    SELECTING = "selecting"


class EditorState:
    """Class EditorState
    ===================
    Mutable editor state.

    Attributes:
        buffer (Buffer): The document.
        cx, cy (int): Edit cursor; `cx` indexes `text`, `cy` may equal `numrows`.
        rx (int): Render column of the cursor, refreshed by `scroll()`.
        rowoff, coloff (int): First visible row and render column.
        screen_rows, screen_cols (int): Text area size, set by the renderer.
        selection (Selection): Anchor/cursor selection.
        mode (Mode): NORMAL or SELECTING.
        clipboard (str): Internal clipboard, `\\n` separated, no trailing newline.
        filename (Optional[str]): Path of the open document.
        status_message (str), status_time (float): Last message and when it was set.
        show_line_numbers (bool): Whether the renderer draws a gutter.
    """

    def __init__(self, buffer: Optional[Buffer] = None):
        self.buffer = buffer or Buffer()
        self.cx = 0
        self.cy = 0
        self.rx = 0
        self.rowoff = 0
        self.coloff = 0
        self.screen_rows = 24
        self.screen_cols = 80
        self.selection = Selection()
        self.mode = Mode.NORMAL
        self.clipboard = ""
        self.filename: Optional[str] = None
        self.status_message = ""
        self.status_time = 0.0
        self.show_line_numbers = False

    # --------------------- Convenience ---------------------
    @property
    def numrows(self) -> int:
        return self.buffer.numrows

    @property
    def cursor(self) -> tuple[int, int]:
        return self.cx, self.cy

    @property
    def current_row(self) -> Optional[Row]:
        return self.buffer.row_at(self.cy)

    @property
    def tab_stop(self) -> int:
        return self.buffer.tab_stop

    def set_cursor(self, cx: int, cy: int) -> None:
        self.cx = cx
        self.cy = cy

    def clamp_cursor(self) -> None:
        """Keeps `cy` within [0, numrows] and `cx` within the row."""
        self.cy = max(0, min(self.cy, self.numrows))
        row = self.current_row
        self.cx = max(0, min(self.cx, row.size if row else 0))

    def set_status(self, message: str) -> None:
        self.status_message = message
        self.status_time = time.time()
        logging.debug(f"Status: {message}")

    def sync_mode(self) -> None:
        """Falls back to NORMAL whenever the selection is gone."""
        if self.mode is Mode.SELECTING and not self.selection.active:
            self.mode = Mode.NORMAL
