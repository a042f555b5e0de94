# wee/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen renders the wee editor with curses.

It is responsible for:
- keeping the cursor visible by adjusting `rowoff`/`coloff` from the render column,
- drawing the visible rows from their tab-expanded `render` text, colored by
  their per-cell highlight classes,
- painting the selection in reverse video,
- the optional line-number gutter,
- the status bar (file, line count, modified flag, language, cursor line)
  and the message bar (status message, shown for five seconds).

All curses errors are caught and logged so that a failed paint never stops
the editor.
"""

import curses
import logging
import os
import time
from typing import TYPE_CHECKING, Any

from wee.core.Coords import char_to_render
from wee.core.State import Mode
from wee.core.Syntax import Highlight


if TYPE_CHECKING:
    from wee.core.Buffer import Row
    from wee.core.Wee import Wee


COLOR_NAMES: dict[str, int] = {
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
}

MESSAGE_TIMEOUT = 5.0
WELCOME = "wee editor -- ctrl+q quit, f1 help"


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Paints the editor state onto the curses window.

    Attributes:
        editor (Wee): The controller whose state is drawn.
        stdscr (curses.window): The main curses window.
        colors (dict[Highlight, int]): Curses attribute per highlight class.
        status_attr (int): Attribute of the status bar.
        _text_start_x (int): First screen column of the text area (gutter width).

    Methods:
        draw(): Renders the whole screen.
        scroll(): Refreshes `rx` and the scroll offsets so the cursor is visible.
        update_screen_size(): Re-reads the window size into the editor state.
    """

    MIN_WINDOW_WIDTH = 20
    MIN_WINDOW_HEIGHT = 5

    def __init__(self, editor: "Wee") -> None:
        self.editor = editor
        self.stdscr = editor.stdscr
        self.colors: dict[Highlight, int] = {}
        self.status_attr = curses.A_REVERSE
        self._text_start_x = 0
        self._init_colors(editor.config.get("colors", {}))
        self.update_screen_size()

    def _init_colors(self, color_config: dict[str, Any]) -> None:
        """Creates one color pair per highlight class from the `[colors]` names."""
        for hl in Highlight:
            self.colors[hl] = curses.A_NORMAL
        self.colors[Highlight.SELECTION] = curses.A_REVERSE
        self.colors[Highlight.MATCH] = curses.A_UNDERLINE
        try:
            curses.start_color()
            curses.use_default_colors()
        except curses.error as exc:
            logging.warning(f"Color initialisation failed ({exc}); drawing without colors.")
            return

        for hl in Highlight:
            if hl in (Highlight.NORMAL, Highlight.SELECTION):
                continue
            name = color_config.get(hl.name.lower())
            if name not in COLOR_NAMES:
                continue
            pair = int(hl) + 1
            try:
                curses.init_pair(pair, COLOR_NAMES[name], -1)
                self.colors[hl] = curses.color_pair(pair)
            except curses.error as exc:
                logging.warning(f"init_pair failed for {hl.name} ({exc})")

    # --------------------- Geometry ---------------------
    def _gutter_width(self) -> int:
        state = self.editor.state
        if not state.show_line_numbers:
            return 0
        return len(str(max(1, state.numrows))) + 1

    def update_screen_size(self) -> None:
        height, width = self.stdscr.getmaxyx()
        state = self.editor.state
        self._text_start_x = self._gutter_width()
        state.screen_rows = max(1, height - 2)
        state.screen_cols = max(1, width - self._text_start_x)
        logging.debug(f"Screen size: {state.screen_rows} rows x {state.screen_cols} cols")

    def scroll(self) -> None:
        """Keeps the cursor inside the visible window."""
        state = self.editor.state
        row = state.current_row
        state.rx = char_to_render(row.text, state.cx, state.tab_stop) if row else 0

        if state.cy < state.rowoff:
            state.rowoff = state.cy
        if state.cy >= state.rowoff + state.screen_rows:
            state.rowoff = state.cy - state.screen_rows + 1
        if state.rx < state.coloff:
            state.coloff = state.rx
        if state.rx >= state.coloff + state.screen_cols:
            state.coloff = state.rx - state.screen_cols + 1

    # --------------------- Drawing ---------------------
    def draw(self) -> None:
        """The main screen drawing method."""
        try:
            height, width = self.stdscr.getmaxyx()
            if height < self.MIN_WINDOW_HEIGHT or width < self.MIN_WINDOW_WIDTH:
                self._show_small_window_error(height, width)
                return

            self.update_screen_size()
            self.scroll()
            self.stdscr.erase()
            self._draw_rows()
            self._draw_status_bar(height - 2, width)
            self._draw_message_bar(height - 1, width)
            self._position_cursor()
            self._update_display()
        except curses.error as e:
            logging.error(f"Curses error in DrawScreen.draw(): {e}", exc_info=True)

    def _show_small_window_error(self, height: int, width: int) -> None:
        msg = f"Window too small ({width}x{height})"
        try:
            self.stdscr.erase()
            self.stdscr.addstr(height // 2, max(0, (width - len(msg)) // 2), msg[: max(0, width - 1)])
            self.stdscr.refresh()
        except curses.error:
            pass

    def _row_cells(self, filerow: int, row: "Row") -> list[tuple[str, int]]:
        """Visible `(char, attr)` cells of `row` after horizontal scrolling."""
        state = self.editor.state
        start, stop = state.coloff, state.coloff + state.screen_cols
        attrs = [self.colors.get(hl, curses.A_NORMAL) for hl in row.hl[start:stop]]
        attrs += [curses.A_NORMAL] * (len(row.render[start:stop]) - len(attrs))

        span = state.selection.span_in_row(filerow, row.size)
        if span is not None:
            sel_start = char_to_render(row.text, span[0], state.tab_stop)
            sel_end = char_to_render(row.text, span[1], state.tab_stop)
            for rx in range(max(sel_start, start), min(sel_end, stop)):
                attrs[rx - start] = self.colors[Highlight.SELECTION]
        return list(zip(row.render[start:stop], attrs))

    def _draw_rows(self) -> None:
        state = self.editor.state
        gutter = self._text_start_x
        for y in range(state.screen_rows):
            filerow = state.rowoff + y
            if filerow >= state.numrows:
                if state.numrows == 0 and y == state.screen_rows // 3:
                    welcome = WELCOME[: state.screen_cols]
                    pad = max(0, (state.screen_cols - len(welcome)) // 2)
                    self._addstr(y, gutter, "~" + " " * max(0, pad - 1) + welcome)
                else:
                    self._addstr(y, gutter, "~")
                continue

            if gutter:
                self._addstr(y, 0, f"{filerow + 1:>{gutter - 1}} ", curses.A_DIM)
            x = gutter
            # Paint runs of equal attributes in one call.
            run, run_attr = "", None
            for ch, attr in self._row_cells(filerow, state.buffer.rows[filerow]):
                if attr != run_attr and run:
                    self._addstr(y, x, run, run_attr)
                    x += len(run)
                    run = ""
                run_attr = attr
                run += ch if ch.isprintable() else "?"
            if run:
                self._addstr(y, x, run, run_attr)

    def _draw_status_bar(self, y: int, width: int) -> None:
        editor = self.editor
        state = editor.state
        name = os.path.basename(state.filename) if state.filename else "[No Name]"
        mode = " -- SELECT --" if state.mode is Mode.SELECTING else ""
        left = f" {name[:20]} - {state.numrows} lines{' (modified)' if state.buffer.dirty else ''}{mode}"
        language = editor.highlighter.language or "no ft"
        right = f"{language} | {state.cy + 1}/{state.numrows} "
        if len(left) + len(right) > width:
            left = left[: max(0, width - len(right))]
        line = left + " " * max(0, width - len(left) - len(right)) + right
        self._addstr(y, 0, line[: width - 1], self.status_attr)

    def _draw_message_bar(self, y: int, width: int) -> None:
        state = self.editor.state
        if state.status_message and time.time() - state.status_time < MESSAGE_TIMEOUT:
            self._addstr(y, 0, state.status_message[: width - 1])

    def _position_cursor(self) -> None:
        state = self.editor.state
        y = state.cy - state.rowoff
        x = self._text_start_x + state.rx - state.coloff
        try:
            self.stdscr.move(max(0, y), max(0, x))
        except curses.error as e:
            logging.warning(f"Curses error positioning cursor at ({y}, {x}): {e}")

    def _addstr(self, y: int, x: int, text: str, attr: int = curses.A_NORMAL) -> None:
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            # Writing into the bottom-right cell raises after painting.
            pass

    def _update_display(self) -> None:
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses doupdate error: {e}")
