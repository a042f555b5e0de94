# wee/core/Coords.py
"""Coordinate Mapper
=================

Conversion between character indexes and rendered (tab-expanded) columns
within a single line.

The editor stores raw text per row, but the screen and the highlighter work on
the rendered form in which every tab advances to the next multiple of the tab
stop. Every cursor placement that crosses that boundary goes through the two
functions below.

Functions:
----------
- char_to_render(text, cx, tab_stop): character index -> render column.
- render_to_char(text, rx, tab_stop): render column -> character index.
- expand_tabs(text, tab_stop): the rendered form of a row.
"""

DEFAULT_TAB_STOP = 4


def char_to_render(text: str, cx: int, tab_stop: int = DEFAULT_TAB_STOP) -> int:
    """Returns the render column of character index `cx` in `text`.

    Args:
        text (str): Raw row text.
        cx (int): Character index; values past the end are clamped.
        tab_stop (int): Width of a tab stop.

    Returns:
        int: The accumulated rendered width of the characters before `cx`.
    """
    rx = 0
    for ch in text[:cx]:
        if ch == "\t":
            rx += (tab_stop - 1) - (rx % tab_stop)
        rx += 1
    return rx


def render_to_char(text: str, rx: int, tab_stop: int = DEFAULT_TAB_STOP) -> int:
    """Returns the character index whose rendered cell contains column `rx`.

    Walks the row accumulating rendered width and stops at the first character
    that pushes the width past `rx`. If `rx` lies beyond the rendered line, the
    row length is returned.
    """
    cur_rx = 0
    for cx, ch in enumerate(text):
        if ch == "\t":
            cur_rx += (tab_stop - 1) - (cur_rx % tab_stop)
        cur_rx += 1
        if cur_rx > rx:
            return cx
    return len(text)


def expand_tabs(text: str, tab_stop: int = DEFAULT_TAB_STOP) -> str:
    """Builds the rendered form of `text` with tabs expanded to spaces."""
    if "\t" not in text:
        return text
    out: list[str] = []
    width = 0
    for ch in text:
        if ch == "\t":
            out.append(" ")
            width += 1
            while width % tab_stop:
                out.append(" ")
                width += 1
        else:
            out.append(ch)
            width += 1
    return "".join(out)
