# wee/core/EditOps.py
"""Edit Operations for the wee editor
===================================
Text-level operations on the shared `EditorState`: character insertion with
auto-pairing, newline split with indentation carry-over, character and
selection deletion, clipboard copy/cut/paste, row-text and delimiter
auto-selection, quick (shift-move) selection and cursor movement.

All functions mutate the state through its `Buffer`, so dirty tracking and
re-highlighting happen in one place. None of them records undo snapshots;
the controller does that before calling in.

Return values follow the controller's convention: True when the state
changed, False for a rejected or no-op request (with the reason on the
status line where the user needs to know).
"""
import logging
from typing import Optional

from wee.core.Selection import deselect
from wee.core.State import EditorState, Mode

AUTO_PAIRS = {"(": ")", "[": "]", "{": "}", '"': '"', "'": "'"}

BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}", "<": ">"}
QUOTES = ('"', "'")


def leading_spaces(text: str) -> int:
    return len(text) - len(text.lstrip(" "))


# ======================== Insertion ========================
def insert_char(state: EditorState, ch: str, auto_pair: bool = True) -> bool:
    """Inserts `ch` at the cursor; opening brackets and quotes get their closer.

    The cursor lands after `ch`, i.e. between an auto-inserted pair.
    """
    buffer = state.buffer
    if state.cy == buffer.numrows:
        buffer.insert_row(buffer.numrows, "")
    row = buffer.rows[state.cy]
    buffer.insert_char(row, state.cx, ch)
    state.cx += 1
    closer = AUTO_PAIRS.get(ch) if auto_pair else None
    if closer:
        buffer.insert_char(row, state.cx, closer)
    return True


def insert_text(state: EditorState, text: str) -> bool:
    """Inserts a newline-free chunk at the cursor without auto-pairing."""
    if not text:
        return False
    buffer = state.buffer
    if state.cy == buffer.numrows:
        buffer.insert_row(buffer.numrows, "")
    row = buffer.rows[state.cy]
    cx = min(state.cx, row.size)
    buffer.replace_in_row(row, cx, 0, text)
    state.cx = cx + len(text)
    return True


def insert_newline(state: EditorState, carry_indent: bool = True) -> bool:
    """Splits the current row at the cursor.

    At column 0 an empty row is inserted above and the cursor follows the
    current row down. Otherwise the row is split and the new row is prefixed
    with the full run of leading spaces of the original row, the cursor
    landing after them.
    """
    buffer = state.buffer
    row = state.current_row
    if state.cx == 0 or row is None:
        buffer.insert_row(state.cy, "")
        state.cy += 1
        state.cx = 0
        return True

    indent = leading_spaces(row.text) if carry_indent else 0
    suffix = row.text[state.cx:]
    buffer.insert_row(state.cy + 1, " " * indent + suffix)
    buffer.truncate_row(row, state.cx)
    state.cy += 1
    state.cx = indent
    return True


# ======================== Deletion ========================
def delete_char_before_cursor(state: EditorState) -> bool:
    """Backspace: deletes the preceding character or joins with the previous row.

    A cursor sitting inside an empty bracket/quote pair removes both halves,
    mirroring the auto-pairing done by `insert_char`.
    """
    buffer = state.buffer
    if state.cy >= buffer.numrows:
        return False
    if state.cx == 0 and state.cy == 0:
        return False

    row = buffer.rows[state.cy]
    if state.cx > 0:
        cx = min(state.cx, row.size)
        if cx < row.size and AUTO_PAIRS.get(row.text[cx - 1]) == row.text[cx]:
            buffer.delete_char(row, cx)
        buffer.delete_char(row, cx - 1)
        state.cx = cx - 1
    else:
        prev = buffer.rows[state.cy - 1]
        state.cx = prev.size
        buffer.append_string(prev, row.text)
        buffer.delete_row(state.cy)
        state.cy -= 1
    return True


def _selection_range(state: EditorState) -> Optional[tuple[tuple[int, int], tuple[int, int]]]:
    """Normalized selection clamped to the buffer, or None when inactive or empty."""
    sel = state.selection
    if not sel.active or state.numrows == 0:
        return None
    (sx, sy), (ex, ey) = sel.normalized()
    last = state.numrows - 1
    if sy > last:
        return None
    if ey > last:
        ey, ex = last, state.buffer.rows[last].size
    sx = min(sx, state.buffer.rows[sy].size)
    ex = min(ex, state.buffer.rows[ey].size)
    if (sx, sy) == (ex, ey):
        return None
    return (sx, sy), (ex, ey)


def delete_selection(state: EditorState) -> bool:
    """Removes the selected text; the cursor moves to the selection start."""
    sel = state.selection
    if not sel.active:
        return False
    rng = _selection_range(state)
    if rng is None:
        deselect(state)
        return False

    buffer = state.buffer
    (sx, sy), (ex, ey) = rng
    if sy == ey:
        buffer.replace_in_row(buffer.rows[sy], sx, ex - sx, "")
    else:
        suffix = buffer.rows[ey].text[ex:]
        buffer.truncate_row(buffer.rows[sy], sx)
        for _ in range(ey - sy):
            buffer.delete_row(sy + 1)
        buffer.append_string(buffer.rows[sy], suffix)
    logging.debug(f"delete_selection: removed ({sx},{sy})-({ex},{ey})")
    state.cx, state.cy = sx, sy
    sel.clear()
    state.sync_mode()
    return True


# ======================== Clipboard ========================
def selection_text(state: EditorState) -> Optional[str]:
    """The selected text joined with newlines, no trailing newline."""
    rng = _selection_range(state)
    if rng is None:
        return None
    (sx, sy), (ex, ey) = rng
    rows = state.buffer.rows
    if sy == ey:
        return rows[sy].text[sx:ex]
    parts = [rows[sy].text[sx:]]
    parts.extend(rows[cy].text for cy in range(sy + 1, ey))
    parts.append(rows[ey].text[:ex])
    return "\n".join(parts)


def copy_selection(state: EditorState) -> Optional[str]:
    text = selection_text(state)
    if text is None:
        return None
    state.clipboard = text
    deselect(state)
    state.set_status("Selection copied.")
    return text


def cut_selection(state: EditorState) -> Optional[str]:
    text = selection_text(state)
    if text is None:
        return None
    state.clipboard = text
    delete_selection(state)
    state.set_status("Selection cut.")
    return text


def copy_line(state: EditorState) -> Optional[str]:
    row = state.current_row
    if row is None:
        return None
    state.clipboard = row.text
    state.set_status("Line copied.")
    return row.text


def cut_line(state: EditorState) -> Optional[str]:
    row = state.current_row
    if row is None:
        return None
    text = row.text
    state.clipboard = text
    state.buffer.delete_row(state.cy)
    if state.numrows == 0:
        state.cx = state.cy = 0
    elif state.cy >= state.numrows:
        state.cy = state.numrows - 1
        state.cx = state.buffer.rows[state.cy].size
    else:
        state.cx = min(state.cx, state.buffer.rows[state.cy].size)
    state.set_status("Line cut.")
    return text


def paste(state: EditorState, text: Optional[str] = None) -> bool:
    """Inserts `text` (default: the internal clipboard) and selects the pasted span.

    An active selection is replaced. Newlines split rows without carrying
    indentation.
    """
    if text is None:
        text = state.clipboard
    if not text:
        return False
    if state.selection.active:
        delete_selection(state)

    start = (state.cx, state.cy)
    for i, chunk in enumerate(text.split("\n")):
        if i:
            insert_newline(state, carry_indent=False)
        insert_text(state, chunk)

    if state.selection.set(start, (state.cx, state.cy)):
        state.mode = Mode.SELECTING
    state.set_status("Pasted and selected.")
    return True


# ======================== Auto-selection ========================
def _enter_selecting(state: EditorState) -> None:
    if state.selection.active:
        state.mode = Mode.SELECTING


def select_row_text(state: EditorState) -> bool:
    """Selects the current row without its leading and trailing whitespace."""
    row = state.current_row
    if row is None:
        state.set_status("No line to select")
        return False
    if row.size == 0:
        state.set_status("Empty line - nothing to select")
        return False
    stripped = row.text.strip()
    if not stripped:
        state.set_status("Line contains only whitespace - nothing to select")
        return False
    start = len(row.text) - len(row.text.lstrip())
    end = start + len(stripped)
    state.selection.set((end, state.cy), (start, state.cy))
    state.cx = start
    _enter_selecting(state)
    state.set_status(f"Row text selected (chars {start}-{end - 1})")
    return True


def _find_closing_bracket(text: str, left: int, open_ch: str, close_ch: str) -> int:
    depth = 1
    for i in range(left + 1, len(text)):
        ch = text[i]
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return i
    return -1


def _find_closing_quote(text: str, left: int, quote: str) -> int:
    escaped = False
    for i in range(left + 1, len(text)):
        ch = text[i]
        if not escaped and ch == "\\":
            escaped = True
            continue
        if not escaped and ch == quote:
            return i
        escaped = False
    return -1


def select_inside_delimiters(state: EditorState) -> bool:
    """Selects the interior of the nearest delimiter pair enclosing the cursor."""
    row = state.current_row
    if row is None:
        state.set_status("No line to operate on")
        return False
    if row.size == 0:
        state.set_status("Empty line")
        return False

    text = row.text
    cx = min(state.cx, row.size)
    for left in range(cx - 1, -1, -1):
        ch = text[left]
        if ch in BRACKET_PAIRS:
            close_ch = BRACKET_PAIRS[ch]
            right = _find_closing_bracket(text, left, ch, close_ch)
        elif ch in QUOTES:
            close_ch = ch
            right = _find_closing_quote(text, left, ch)
        else:
            continue
        if right < 0 or not (left < cx <= right) or right - left <= 1:
            continue
        state.selection.set((left + 1, state.cy), (right, state.cy))
        state.cx = right
        _enter_selecting(state)
        state.set_status(f"Selected inside {ch}{close_ch}")
        return True

    state.set_status("No surrounding delimiters found")
    return False


def select_all(state: EditorState) -> bool:
    if state.numrows == 0:
        state.set_status("No text to select")
        return False
    last = state.numrows - 1
    end = (state.buffer.rows[last].size, last)
    if not state.selection.set((0, 0), end):
        state.set_status("No text to select")
        return False
    state.cx, state.cy = end
    _enter_selecting(state)
    state.set_status("All text selected.")
    return True


# ======================== Quick (shift-move) selection ========================
def quick_select_char(state: EditorState, direction: int) -> bool:
    """Extends the selection one character left (-1) or right (+1)."""
    if state.cy >= state.numrows:
        state.set_status("No text to select")
        return False
    sel = state.selection
    sel.start_at_cursor((state.cx, state.cy))
    move_cursor(state, "left" if direction < 0 else "right")
    if sel.extend_to((state.cx, state.cy)):
        _enter_selecting(state)
        state.set_status("Selection active")
    else:
        deselect(state)
        state.set_status("Selection cleared")
    return True


def quick_select_line(state: EditorState, direction: int) -> bool:
    """Selects whole lines from the anchor line to the cursor line, moving the cursor line by `direction`."""
    if state.cy >= state.numrows:
        state.set_status("No line to select")
        return False
    sel = state.selection
    rows = state.buffer.rows
    anchor_row = sel.anchor[1] if sel.active else state.cy

    if direction < 0:
        if state.cy == 0:
            state.set_status("Cannot move up - at beginning of file")
            return False
        state.cy -= 1
    else:
        if state.cy >= state.numrows - 1:
            state.set_status("Cannot move down - at end of file")
            return False
        state.cy += 1
    sel.active = True

    if state.cy == anchor_row:
        state.cx = 0
        sel.anchor = sel.cursor = (0, anchor_row)
        deselect(state)
        state.set_status("Selection cleared")
        return True

    if state.cy < anchor_row:
        sel.anchor = (rows[anchor_row].size, anchor_row)
        sel.cursor = (0, state.cy)
    else:
        sel.anchor = (0, anchor_row)
        sel.cursor = (rows[state.cy].size, state.cy)
    state.cx = sel.cursor[0]
    _enter_selecting(state)
    first, last = sorted((anchor_row, state.cy))
    state.set_status(f"Selected: lines {first + 1}-{last + 1}")
    return True


# ======================== Cursor movement ========================
def move_cursor(state: EditorState, direction: str) -> None:
    """Moves the edit cursor one step; horizontal moves wrap across rows."""
    row = state.current_row
    if direction == "left":
        if state.cx > 0:
            state.cx -= 1
        elif state.cy > 0:
            state.cy -= 1
            state.cx = state.buffer.rows[state.cy].size
    elif direction == "right":
        if row is not None and state.cx < row.size:
            state.cx += 1
        elif row is not None and state.cy < state.numrows - 1:
            state.cy += 1
            state.cx = 0
    elif direction == "up":
        if state.cy > 0:
            state.cy -= 1
    elif direction == "down":
        if state.cy < state.numrows:
            state.cy += 1
    state.clamp_cursor()


def move_home(state: EditorState) -> None:
    state.cx = 0


def move_end(state: EditorState) -> None:
    row = state.current_row
    state.cx = row.size if row else 0


def page(state: EditorState, direction: int) -> None:
    """PageUp (-1) / PageDown (+1): jump to the screen edge then scroll a screenful."""
    if direction < 0:
        state.cy = state.rowoff
    else:
        state.cy = min(state.rowoff + state.screen_rows - 1, state.numrows)
    for _ in range(state.screen_rows):
        move_cursor(state, "up" if direction < 0 else "down")


def jump_to_line(state: EditorState, line: int) -> bool:
    """Moves the cursor to the start of 1-based `line`."""
    if line < 1 or line > state.numrows:
        state.set_status(f"Invalid line number: {line}. Total lines: {state.numrows}.")
        return False
    state.cy = line - 1
    state.cx = 0
    state.rowoff = max(0, state.cy - state.screen_rows // 2)
    state.set_status(f"Jumped to line {line}.")
    return True


def smart_outdent(state: EditorState) -> bool:
    """Backspace at the first non-space column deletes back to the previous tab stop.

    Returns False (nothing done) when the cursor is not at that column.
    """
    row = state.current_row
    if row is None:
        return False
    first_ns = leading_spaces(row.text)
    if state.cx != first_ns or first_ns == 0:
        return False
    width = state.tab_stop
    target = (first_ns - 1) // width * width
    state.buffer.replace_in_row(row, 0, first_ns - target, "")
    state.cx = target
    return True
