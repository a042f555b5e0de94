# tests/test_core/test_search.py
"""Search and replace tests
==========================

Whole-word counting and replace-all, the incremental `FindSession`
callback, and the full find/replace flow through `Wee.find` driven by
scripted keys.
"""

from wee.core.Search import FindSession, count_occurrences, replace_all
from wee.core.Syntax import Highlight

DOC = ["alpha", "beta cat", "cat gamma"]


def test_count_matches_whole_words_only(make_state) -> None:
    state = make_state(["concatenate cat scatter", "cat,cat"])
    assert count_occurrences(state, "cat") == 3
    assert count_occurrences(state, "") == 0


def test_replacement_containing_the_needle_is_not_reprocessed(make_state) -> None:
    state = make_state(["a a"])
    assert replace_all(state, "a", "aa") == 2
    assert state.buffer.lines() == ["aa aa"]


def test_replace_all_skips_partial_words(make_state) -> None:
    state = make_state(["cat scatter cat"])
    assert replace_all(state, "cat", "dog") == 2
    assert state.buffer.lines() == ["dog scatter dog"]


def test_find_session_walks_matches_in_both_directions(make_editor) -> None:
    editor = make_editor(DOC)
    state = editor.state
    session = FindSession(editor)

    session("cat", "t")
    assert state.cursor == (5, 1)
    assert state.selection.normalized() == ((5, 1), (8, 1))

    session("cat", "down")
    assert state.cursor == (0, 2)

    session("cat", "down")
    assert state.cursor == (5, 1)

    session("cat", "up")
    assert state.cursor == (0, 2)

    session("cat", "enter")
    assert state.selection.active is False
    assert session.last_match == -1


def test_typing_more_restarts_from_session_origin(make_editor) -> None:
    editor = make_editor(DOC)
    session = FindSession(editor)
    for query in ("c", "ca", "cat"):
        session(query, query[-1])
        assert editor.state.cy == 1


def test_match_is_marked_and_cleared_on_next_key(make_editor) -> None:
    editor = make_editor(DOC)
    session = FindSession(editor)
    session("cat", "t")
    row = editor.state.buffer.rows[1]
    assert row.hl[5:8] == [Highlight.MATCH] * 3

    session("cat", "esc")
    assert Highlight.MATCH not in row.hl


def test_match_after_tab_maps_back_to_character_index(make_editor) -> None:
    editor = make_editor(["\tcat"])
    FindSession(editor)("cat", "t")
    assert editor.state.cursor == (1, 0)
    assert editor.state.selection.normalized() == ((1, 0), (4, 0))


def test_no_match_deselects(make_editor) -> None:
    editor = make_editor(DOC)
    session = FindSession(editor)
    session("zebra", "a")
    assert editor.state.selection.active is False
    assert session.last_match == -1


def test_find_enter_keeps_cursor_on_match(make_editor, keys) -> None:
    editor = make_editor(DOC)
    keys.push("c", "a", "t", "down", "enter")
    editor.find()
    assert editor.state.cursor == (0, 2)
    assert editor.state.selection.active is False


def test_find_escape_restores_cursor_and_offsets(make_editor, keys) -> None:
    editor = make_editor(DOC)
    editor.state.set_cursor(2, 0)
    keys.push("c", "a", "t", "esc")
    editor.find()
    assert editor.state.cursor == (2, 0)
    assert editor.state.rowoff == 0


def test_replace_all_from_search_prompt_is_one_undo_step(make_editor, keys) -> None:
    editor = make_editor(DOC)
    keys.push("c", "a", "t", "ctrl+r", "d", "o", "g", "enter", "y", "esc")
    editor.find()
    assert editor.state.buffer.lines() == ["alpha", "beta dog", "dog gamma"]
    assert not keys.keys

    editor.undo()
    assert editor.state.buffer.lines() == DOC
    assert editor.state.status_message == "Undo: Replace all"


def test_replace_declined(make_editor, keys) -> None:
    editor = make_editor(DOC)
    keys.push("c", "a", "t", "ctrl+r", "x", "enter", "n", "esc")
    editor.find()
    assert editor.state.buffer.lines() == DOC
    assert editor.state.buffer.dirty == 0
    assert len(editor.history) == 0


def test_replace_declined_reports_abort(make_editor, keys) -> None:
    editor = make_editor(DOC)
    session = FindSession(editor)
    keys.push("x", "enter", "n")
    session("cat", "ctrl+r")
    assert editor.state.status_message == "Replace aborted."


def test_replace_without_occurrences(make_editor, keys) -> None:
    editor = make_editor(DOC)
    session = FindSession(editor)
    keys.push("x", "enter")
    session("zebra", "ctrl+r")
    assert editor.state.status_message == "No occurrences of 'zebra' found."


def test_replace_cancelled_and_empty_query(make_editor, keys) -> None:
    editor = make_editor(DOC)
    session = FindSession(editor)
    keys.push("esc")
    session("cat", "ctrl+r")
    assert editor.state.status_message == "Replace cancelled."

    session("", "ctrl+r")
    assert editor.state.status_message == "Enter a search term first, then press Ctrl-R to replace."
