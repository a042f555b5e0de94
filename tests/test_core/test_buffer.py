# tests/test_core/test_buffer.py
"""Row store tests
=================

Row and character edits on `Buffer`, dirty tracking, serialization, block
moves and the multi-line comment ripple through following rows.
"""

from wee.core.Buffer import Buffer
from wee.core.Syntax import Highlight, SyntaxHighlighter


def make_buffer(lines, rule=None) -> Buffer:
    buffer = Buffer(SyntaxHighlighter(rule))
    buffer.load_lines(lines)
    return buffer


def test_load_lines_renders_tabs_and_is_clean() -> None:
    buffer = make_buffer(["a\tb", "c"])
    assert buffer.numrows == 2
    assert buffer.rows[0].render == "a   b"
    assert len(buffer.rows[0].hl) == 5
    assert buffer.dirty == 0


def test_insert_row_clamps_index_and_renumbers() -> None:
    buffer = make_buffer(["a", "b"])
    buffer.insert_row(99, "z")
    buffer.insert_row(-5, "first")
    assert buffer.lines() == ["first", "a", "b", "z"]
    assert [row.index for row in buffer.rows] == [0, 1, 2, 3]
    assert buffer.dirty == 2


def test_delete_row_out_of_range_is_noop() -> None:
    buffer = make_buffer(["a"])
    assert buffer.delete_row(3) is False
    assert buffer.dirty == 0
    assert buffer.delete_row(0) is True
    assert buffer.lines() == []


def test_char_edits_update_render_and_dirty() -> None:
    buffer = make_buffer(["ab"])
    row = buffer.rows[0]
    buffer.insert_char(row, 1, "\t")
    assert row.text == "a\tb"
    assert row.render == "a   b"
    assert buffer.delete_char(row, 1) is True
    assert row.render == "ab"
    assert buffer.delete_char(row, 5) is False
    assert buffer.dirty == 2


def test_insert_char_clamps_column() -> None:
    buffer = make_buffer(["ab"])
    buffer.insert_char(buffer.rows[0], 10, "c")
    assert buffer.lines() == ["abc"]
    buffer.insert_char(buffer.rows[0], -1, "X")
    assert buffer.lines() == ["Xabc"]


def test_truncate_append_and_replace() -> None:
    buffer = make_buffer(["hello world"])
    row = buffer.rows[0]
    assert buffer.truncate_row(row, 5) == " world"
    buffer.append_string(row, "!")
    assert row.text == "hello!"
    assert buffer.replace_in_row(row, 0, 5, "bye") is True
    assert row.text == "bye!"
    assert buffer.replace_in_row(row, 3, 5, "x") is False
    assert row.text == "bye!"


def test_to_string_adds_newline_after_every_row() -> None:
    assert make_buffer(["a", "b"]).to_string() == "a\nb\n"
    assert make_buffer([]).to_string() == ""
    assert make_buffer([""]).to_string() == "\n"


def test_move_block_up_and_down() -> None:
    buffer = make_buffer(["a", "b", "c", "d"])
    assert buffer.move_block(1, 2, -1) is True
    assert buffer.lines() == ["b", "c", "a", "d"]
    assert buffer.move_block(0, 1, 1) is True
    assert buffer.lines() == ["a", "b", "c", "d"]
    assert [row.index for row in buffer.rows] == [0, 1, 2, 3]


def test_move_block_rejects_leaving_the_buffer() -> None:
    buffer = make_buffer(["a", "b"])
    assert buffer.move_block(0, 0, -1) is False
    assert buffer.move_block(1, 1, 1) is False
    assert buffer.move_block(0, 1, 2) is False
    assert buffer.lines() == ["a", "b"]
    assert buffer.dirty == 0


def test_block_comment_opened_and_closed_ripples_forward(c_rule) -> None:
    buffer = make_buffer(["int a;", "b", "c"], c_rule)
    assert buffer.rows[2].hl == [Highlight.NORMAL]

    buffer.set_row_text(buffer.rows[0], "/* int a;")
    assert buffer.rows[0].open_comment is True
    assert buffer.rows[1].hl == [Highlight.MLCOMMENT]
    assert buffer.rows[2].hl == [Highlight.MLCOMMENT]
    assert buffer.rows[2].open_comment_at_start is True

    buffer.set_row_text(buffer.rows[0], "int a;")
    assert buffer.rows[2].hl == [Highlight.NORMAL]
    assert buffer.rows[2].open_comment is False


def test_deleting_comment_opener_row_rehighlights_the_row_below(c_rule) -> None:
    buffer = make_buffer(["/*", "x", "*/", "y"], c_rule)
    assert buffer.rows[1].hl == [Highlight.MLCOMMENT]
    buffer.delete_row(0)
    assert buffer.rows[0].hl == [Highlight.NORMAL]
    # "*/" without an opener is plain text now.
    assert Highlight.MLCOMMENT not in buffer.rows[1].hl


def test_block_comment_ripples_through_a_large_file(c_rule) -> None:
    """Opening a comment on the first row re-highlights every row in one pass."""
    total = 5000
    buffer = make_buffer(["x"] * total, c_rule)
    first = buffer.rows[0]
    first.text = first.render = "/*x"
    assert buffer.highlighter.update_from(buffer.rows, 0) == total
    assert all(row.hl == [Highlight.MLCOMMENT] for row in buffer.rows[1:])
    assert buffer.rows[-1].open_comment is True

    buffer.delete_char(first, 0)
    assert buffer.rows[0].text == "*x"
    assert all(row.hl == [Highlight.NORMAL] for row in buffer.rows[1:])
    assert buffer.rows[-1].open_comment is False


def test_row_copy_is_independent() -> None:
    buffer = make_buffer(["abc"])
    clone = buffer.rows[0].copy()
    buffer.insert_char(buffer.rows[0], 0, "x")
    assert clone.text == "abc"
    assert len(clone.hl) == 3
