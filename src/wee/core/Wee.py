# wee/core/Wee.py
"""wee.core.Wee
============================
Wee: Main Module for the wee Terminal Text Editor

This module defines the `Wee` class, the central controller of the editor.
It owns the single `EditorState`, the undo/redo `History` and the syntax
rules, and exposes one method per logical command:

- File operations (open, save, save as, new file, quit with confirmation)
- Text editing with auto-pairing and smart indentation
- Selection: start/end marks, quick shift-selection, row text, delimiter
  interiors, select all and block moves/indents
- Clipboard integration (internal, mirrored to the system clipboard)
- Undo/redo with debounced snapshots
- Incremental search and whole-word replace-all
- Status messaging and a single-line prompt driven by logical key names

Commands are dispatched by `wee.ui.KeyBinder`; rendering is delegated to
`wee.ui.DrawScreen`. Both are optional: without a curses window the
controller runs headless with an injectable key source, which is how the
test-suite drives it.
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional

import pyperclip

from wee.core import EditOps
from wee.core.Buffer import Buffer
from wee.core.History import History
from wee.core.Search import FindSession
from wee.core.Selection import (
    deselect,
    indent_selection,
    move_selection_vertical,
    shift_selection_left,
    shift_selection_right,
    unindent_selection,
)
from wee.core.State import EditorState, Mode
from wee.core.Syntax import (
    SyntaxHighlighter,
    SyntaxRule,
    load_syntax_dir,
    rules_from_config,
    select_syntax,
)
from wee.ui.DrawScreen import DrawScreen
from wee.ui.KeyBinder import KeyBinder
from wee.utils.utils import DEFAULT_CONFIG, deep_merge, detect_encoding


logger = logging.getLogger("wee")

HELP_MESSAGE = (
    "^S save | F5 save as | ^Q quit | ^F find (^R replace) | ^Z/^Y undo/redo | "
    "^C/^X/^V copy/cut/paste | ^G goto | ^B/^E mark | ^A all | F2 new | ^O open"
)


## ==================== Wee Class ====================
class Wee:
    """Class Wee
    ==========
    Controller of the wee editor.

    Attributes:
        stdscr (Optional[curses.window]): Terminal window, None when headless.
        config (dict[str, Any]): Merged configuration.
        state (EditorState): Buffer, cursor, selection, mode, clipboard and status line.
        highlighter (SyntaxHighlighter): Highlighter shared with the buffer.
        syntax_rules (list[SyntaxRule]): Rules from `[syntax.*]` tables and `syntax_dir`.
        history (History): Undo/redo store.
        encoding (str): Encoding used for the current document on save.
        auto_pair (bool): Whether typing an opener also inserts its closer.
        quit_times (int): Remaining quit presses needed to abandon a dirty buffer.
        running (bool): Main loop control flag.
        use_system_clipboard (bool): Whether copy/cut also feed the system clipboard.
        keybinder (KeyBinder): Maps logical key names to commands.
        drawer (Optional[DrawScreen]): Renderer, None when headless.
        read_key (Callable[[], str]): Source of logical key names.

    Methods:
        prompt(template, callback=None) -> Optional[str]:
            Reads a line on the status bar; `%s` in `template` shows the input.
        type_char(ch), handle_enter(), handle_backspace(), handle_delete(), handle_tab():
            Text input.
        handle_up/down/left/right/home/end/page_up/page_down():
            Cursor movement; arrows extend the selection while selecting.
        extend_selection_*(), move_selection_*(), start_selection(), end_selection(),
        select_row_text(), select_inside_delimiters(), select_all(), cancel_operation():
            Selection commands.
        copy(), cut(), paste(), undo(), redo(), find(), goto_line():
            Editing commands.
        new_file(), open_file(), save_file(), save_file_as(), exit_editor():
            File commands.
        run():
            The main event loop.
    """

    def __init__(
        self,
        stdscr: Any = None,
        config: Optional[dict[str, Any]] = None,
        key_source: Optional[Callable[[], str]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.stdscr = stdscr
        self.config: dict[str, Any] = deep_merge(DEFAULT_CONFIG, config or {})
        editor_cfg = self.config.get("editor", {})

        self.highlighter = SyntaxHighlighter()
        self.state = EditorState(Buffer(self.highlighter, tab_stop=int(editor_cfg.get("tab_size", 4))))
        self.state.show_line_numbers = bool(editor_cfg.get("show_line_numbers", False))
        self.history = History(
            self.state,
            max_snapshots=int(editor_cfg.get("max_undo_snapshots", 50)),
            debounce_seconds=float(editor_cfg.get("undo_debounce_seconds", 1.0)),
            clock=clock,
        )
        self.syntax_rules: list[SyntaxRule] = rules_from_config(self.config)
        syntax_dir = editor_cfg.get("syntax_dir")
        if syntax_dir:
            self.syntax_rules.extend(load_syntax_dir(syntax_dir))

        self.encoding = "utf-8"
        self.auto_pair = bool(editor_cfg.get("auto_pair", True))
        self._quit_confirmations = max(0, int(editor_cfg.get("quit_times", 2)))
        self.quit_times = self._quit_confirmations
        self.running = False

        self.use_system_clipboard = self._check_pyclip_availability()

        self.keybinder = KeyBinder(self)
        self.drawer: Optional[DrawScreen] = DrawScreen(self) if stdscr is not None else None
        self.read_key: Callable[[], str] = key_source or self.keybinder.get_key_input
        logger.info(f"Wee initialized. Syntax rules: {[r.language for r in self.syntax_rules]}")

    # --------------------- Environment ---------------------
    def _check_pyclip_availability(self) -> bool:
        """Checks that pyperclip can reach a system clipboard, if enabled in config."""
        if not self.config.get("editor", {}).get("use_system_clipboard", True):
            logging.debug("System clipboard usage is disabled by editor configuration.")
            return False
        try:
            pyperclip.copy("")
            logging.debug("pyperclip and system clipboard utilities appear to be available.")
            return True
        except pyperclip.PyperclipException as e:
            logging.warning(
                f"System clipboard unavailable via pyperclip: {e}. Falling back to internal clipboard."
            )
            return False

    def _mirror_to_system_clipboard(self, text: Optional[str]) -> None:
        if not text or not self.use_system_clipboard:
            return
        try:
            pyperclip.copy(text)
            logging.debug(f"Copied {len(text)} chars to system clipboard.")
        except pyperclip.PyperclipException as e:
            logging.error(f"Failed to copy to system clipboard: {e}", exc_info=True)

    def redraw(self) -> None:
        if self.drawer is not None:
            self.drawer.draw()

    def reset_quit_times(self) -> None:
        self.quit_times = self._quit_confirmations

    def handle_resize(self) -> bool:
        if self.drawer is not None:
            self.drawer.update_screen_size()
        return True

    # --------------------- Prompt ---------------------
    def prompt(
        self,
        template: str,
        callback: Optional[Callable[[str, str], None]] = None,
        initial: str = "",
    ) -> Optional[str]:
        """Reads a line of input on the status bar.

        `callback(text, key)` is invoked after every key, including the
        terminating enter/escape. Enter on empty input keeps prompting.

        Returns:
            Optional[str]: The input, or None when cancelled with escape.
        """
        state = self.state
        text = initial
        keep_status = False
        while True:
            # A message set by the callback stays up for one keystroke.
            if not keep_status:
                state.set_status(template.replace("%s", text) if "%s" in template else template + text)
            keep_status = False
            self.redraw()
            key = self.read_key()

            if key in ("backspace", "delete"):
                text = text[:-1]
            elif key == "esc":
                state.set_status("")
                if callback:
                    callback(text, key)
                return None
            elif key == "enter":
                if text:
                    state.set_status("")
                    if callback:
                        callback(text, key)
                    return text
            elif isinstance(key, str) and len(key) == 1 and key.isprintable():
                text += key

            if callback:
                before = state.status_message
                callback(text, key)
                keep_status = state.status_message != before

    def _confirm_discard(self) -> bool:
        """Asks what to do with unsaved changes; True when the caller may proceed."""
        if not self.state.buffer.dirty:
            return True
        answer = self.prompt("Unsaved changes. Save first? (y/n): %s")
        if answer is None:
            self.state.set_status("Cancelled.")
            return False
        if answer.lower().startswith("y"):
            return self.save_file() and not self.state.buffer.dirty
        return answer.lower().startswith("n")

    # --------------------- Text input ---------------------
    def type_char(self, ch: str) -> bool:
        """Inserts a printable character, replacing an active selection."""
        state = self.state
        if state.selection.active:
            self.history.record("Replace selection")
            EditOps.delete_selection(state)
        else:
            self.history.record("Insert char")
        EditOps.insert_char(state, ch, auto_pair=self.auto_pair)
        state.mode = Mode.NORMAL
        return True

    def handle_enter(self) -> bool:
        state = self.state
        if state.selection.active:
            self.history.record("Replace selection")
            EditOps.delete_selection(state)
        else:
            self.history.record("Newline")
        EditOps.insert_newline(state)
        state.mode = Mode.NORMAL
        return True

    def handle_backspace(self) -> bool:
        state = self.state
        if state.mode is Mode.SELECTING and state.selection.active:
            self.history.record("Unindent")
            if not unindent_selection(state):
                state.set_status("Nothing to unindent")
            return True
        self.history.record("Delete char")
        if not EditOps.smart_outdent(state):
            EditOps.delete_char_before_cursor(state)
        return True

    def handle_delete(self) -> bool:
        state = self.state
        if state.selection.active:
            self.history.record("Delete selection")
            if EditOps.delete_selection(state):
                state.set_status("Selection deleted.")
            return True

        row = state.current_row
        if row is None:
            return False
        buffer = state.buffer
        if state.cx < row.size:
            self.history.record("Delete char")
            buffer.delete_char(row, state.cx)
        elif state.cy < state.numrows - 1:
            self.history.record("Delete char")
            nxt = buffer.rows[state.cy + 1]
            buffer.append_string(row, nxt.text)
            buffer.delete_row(state.cy + 1)
        else:
            return False
        return True

    def handle_tab(self) -> bool:
        state = self.state
        if state.mode is Mode.SELECTING and state.selection.active:
            self.history.record("Indent")
            indent_selection(state)
            return True
        self.history.record("Insert char")
        EditOps.insert_text(state, " " * state.tab_stop)
        return True

    # --------------------- Cursor movement ---------------------
    def _move(self, direction: str) -> bool:
        state = self.state
        sel = state.selection
        if state.mode is Mode.SELECTING and sel.active:
            EditOps.move_cursor(state, direction)
            if not sel.extend_to(state.cursor):
                deselect(state)
            return True
        EditOps.move_cursor(state, direction)
        return True

    def handle_up(self) -> bool:
        return self._move("up")

    def handle_down(self) -> bool:
        return self._move("down")

    def handle_left(self) -> bool:
        return self._move("left")

    def handle_right(self) -> bool:
        return self._move("right")

    def handle_home(self) -> bool:
        EditOps.move_home(self.state)
        return True

    def handle_end(self) -> bool:
        EditOps.move_end(self.state)
        return True

    def handle_page_up(self) -> bool:
        EditOps.page(self.state, -1)
        return True

    def handle_page_down(self) -> bool:
        EditOps.page(self.state, 1)
        return True

    def goto_line(self) -> bool:
        answer = self.prompt(f"Jump to line (1-{self.state.numrows}): %s (ESC to cancel)")
        if answer is None:
            self.state.set_status("Jump cancelled.")
            return True
        try:
            line = int(answer.strip())
        except ValueError:
            self.state.set_status(f"Invalid line number: {answer}. Total lines: {self.state.numrows}.")
            return True
        deselect(self.state)
        EditOps.jump_to_line(self.state, line)
        return True

    # --------------------- Selection ---------------------
    def extend_selection_left(self) -> bool:
        return EditOps.quick_select_char(self.state, -1)

    def extend_selection_right(self) -> bool:
        return EditOps.quick_select_char(self.state, 1)

    def extend_selection_up(self) -> bool:
        return EditOps.quick_select_line(self.state, -1)

    def extend_selection_down(self) -> bool:
        return EditOps.quick_select_line(self.state, 1)

    def _move_selection(self, word: str, mover: Callable[[EditorState], bool]) -> bool:
        if not self.state.selection.active:
            self.state.set_status("No selection to move")
            return True
        self.history.record(f"Move selection {word}")
        mover(self.state)
        return True

    def move_selection_up(self) -> bool:
        return self._move_selection("up", lambda s: move_selection_vertical(s, -1))

    def move_selection_down(self) -> bool:
        return self._move_selection("down", lambda s: move_selection_vertical(s, 1))

    def move_selection_left(self) -> bool:
        return self._move_selection("left", shift_selection_left)

    def move_selection_right(self) -> bool:
        return self._move_selection("right", shift_selection_right)

    def start_selection(self) -> bool:
        state = self.state
        if state.selection.active:
            deselect(state)
        state.selection.start_at_cursor(state.cursor)
        state.mode = Mode.SELECTING
        state.set_status("Selection start set")
        return True

    def end_selection(self) -> bool:
        state = self.state
        sel = state.selection
        if not sel.active:
            state.set_status("No selection start set")
            return True
        if sel.extend_to(state.cursor):
            state.mode = Mode.SELECTING
            state.set_status("Selection end set")
        else:
            deselect(state)
            state.set_status("Selection cleared")
        return True

    def select_row_text(self) -> bool:
        return EditOps.select_row_text(self.state)

    def select_inside_delimiters(self) -> bool:
        return EditOps.select_inside_delimiters(self.state)

    def select_all(self) -> bool:
        return EditOps.select_all(self.state)

    def cancel_operation(self) -> bool:
        """Escape: drops any selection and returns to NORMAL mode."""
        state = self.state
        was_active = state.selection.active
        deselect(state)
        state.mode = Mode.NORMAL
        if was_active:
            state.set_status("Selection cancelled")
        return True

    # --------------------- Clipboard ---------------------
    def copy(self) -> bool:
        state = self.state
        if state.selection.active:
            text = EditOps.copy_selection(state)
        else:
            text = EditOps.copy_line(state)
        if text is None:
            state.set_status("Nothing to copy")
        self._mirror_to_system_clipboard(text)
        return True

    def cut(self) -> bool:
        state = self.state
        if state.selection.active:
            self.history.record("Cut")
            text = EditOps.cut_selection(state)
        elif state.current_row is not None:
            self.history.record("Cut line")
            text = EditOps.cut_line(state)
        else:
            text = None
        if text is None:
            state.set_status("Nothing to cut")
        self._mirror_to_system_clipboard(text)
        return True

    def paste(self) -> bool:
        state = self.state
        text = state.clipboard
        if not text and self.use_system_clipboard:
            try:
                text = pyperclip.paste().replace("\r\n", "\n")
            except pyperclip.PyperclipException as e:
                logging.error(f"Failed to paste from system clipboard: {e}", exc_info=True)
        if not text:
            state.set_status("Clipboard is empty")
            return True
        self.history.record("Paste")
        EditOps.paste(state, text)
        return True

    # --------------------- History ---------------------
    def undo(self) -> bool:
        self.history.undo()
        return True

    def redo(self) -> bool:
        self.history.redo()
        return True

    # --------------------- Search ---------------------
    def find(self) -> bool:
        """Incremental search; escape restores the cursor and scroll position."""
        state = self.state
        saved = (state.cx, state.cy, state.rowoff, state.coloff)
        session = FindSession(self)
        query = self.prompt("Search: %s (ESC/Arrows/Enter, ^R replace)", session)
        if query is None:
            state.cx, state.cy, state.rowoff, state.coloff = saved
            state.clamp_cursor()
        return True

    # --------------------- View ---------------------
    def toggle_line_numbers(self) -> bool:
        state = self.state
        state.show_line_numbers = not state.show_line_numbers
        state.set_status(f"Line numbers {'on' if state.show_line_numbers else 'off'}")
        return True

    def show_help(self) -> bool:
        self.state.set_status(HELP_MESSAGE)
        return True

    # --------------------- Files ---------------------
    def _apply_syntax(self) -> None:
        rule = select_syntax(self.syntax_rules, self.state.filename)
        self.highlighter.set_rule(rule, self.state.buffer.rows)
        logging.debug(f"Syntax for '{self.state.filename}': {rule.language if rule else None}")

    def _reset_document(self, lines: list[str], filename: Optional[str]) -> None:
        state = self.state
        state.filename = filename
        state.buffer.load_lines(lines)
        state.selection.clear()
        state.mode = Mode.NORMAL
        state.cx = state.cy = state.rx = 0
        state.rowoff = state.coloff = 0
        self.history.clear()
        self._apply_syntax()

    def load_document(self, filename: str) -> bool:
        """Reads `filename` into the buffer; a missing file starts an empty named buffer."""
        path = Path(filename).expanduser()
        if not path.exists():
            self.encoding = "utf-8"
            self._reset_document([], filename)
            self.state.set_status(f"New file: {filename}")
            return True
        try:
            raw = path.read_bytes()
        except OSError as e:
            logging.error(f"Failed to open '{filename}': {e}", exc_info=True)
            self.state.set_status(f"Can't open {filename}: {e.strerror or e}")
            return False

        self.encoding = detect_encoding(raw)
        try:
            text = raw.decode(self.encoding, errors="replace")
        except LookupError:
            logging.warning(f"Unknown encoding '{self.encoding}' for '{filename}', using utf-8.")
            self.encoding = "utf-8"
            text = raw.decode(self.encoding, errors="replace")

        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        lines = [line[:-1] if line.endswith("\r") else line for line in lines]
        self._reset_document(lines, filename)
        self.state.set_status(f"{filename} opened ({len(lines)} lines, {self.encoding})")
        logging.info(f"Opened '{filename}': {len(lines)} lines, encoding {self.encoding}")
        return True

    def open_file(self, filename: Optional[str] = None) -> bool:
        if not self._confirm_discard():
            return True
        if filename is None:
            filename = self.prompt("Open file: %s (ESC to cancel)")
            if filename is None:
                self.state.set_status("Open cancelled.")
                return True
        self.load_document(filename)
        return True

    def new_file(self) -> bool:
        if not self._confirm_discard():
            return True
        self.encoding = "utf-8"
        self._reset_document([], None)
        self.state.set_status("New file")
        return True

    def _write_file(self, filename: str) -> bool:
        data = self.state.buffer.to_string()
        try:
            with open(filename, "w", encoding=self.encoding, errors="replace", newline="") as f:
                f.write(data)
        except OSError as e:
            logging.error(f"Failed to write file '{filename}': {e}", exc_info=True)
            self.state.set_status(f"Can't save! I/O error: {e.strerror or e}")
            return False
        self.state.buffer.dirty = 0
        size = len(data.encode(self.encoding, errors="replace"))
        self.state.set_status(f"{size} bytes written to disk")
        logging.info(f"Saved '{filename}' ({size} bytes)")
        return True

    def save_file(self) -> bool:
        if not self.state.filename:
            return self.save_file_as()
        return self._write_file(self.state.filename)

    def save_file_as(self) -> bool:
        state = self.state
        name = self.prompt("Save as: %s (ESC to cancel)", initial=state.filename or "")
        if name is None:
            state.set_status("Save aborted")
            return False
        if not self._write_file(name):
            return False
        if name != state.filename:
            state.filename = name
            self._apply_syntax()
        return True

    def exit_editor(self) -> bool:
        """Stops the main loop; a dirty buffer needs `quit_times` extra presses."""
        if self.state.buffer.dirty and self.quit_times > 0:
            self.state.set_status(
                f"WARNING!!! File has unsaved changes. Press Ctrl-Q {self.quit_times} more times to quit."
            )
            self.quit_times -= 1
            return True
        self.running = False
        logger.info("Main loop stop signaled.")
        return True

    # --------------------- Main loop ---------------------
    def run(self) -> None:
        """Reads one key at a time and dispatches it until `exit_editor` stops the loop."""
        logger.info("Editor main loop started.")
        self.running = True
        self.state.set_status(f"HELP: {HELP_MESSAGE}")
        while self.running:
            try:
                self.redraw()
                key = self.read_key()
                if key:
                    self.keybinder.handle_input(key)
            except KeyboardInterrupt:
                logger.info("Main loop interrupted by KeyboardInterrupt.")
                self.running = False
        logger.info("Editor main loop finished.")
