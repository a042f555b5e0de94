# tests/test_core/test_coords.py
"""Coordinate mapping tests
==========================

Character index <-> render column conversion with tab expansion.
"""

import pytest

from wee.core.Coords import char_to_render, expand_tabs, render_to_char


def test_char_to_render_without_tabs_is_identity() -> None:
    assert char_to_render("hello", 3) == 3
    assert char_to_render("hello", 0) == 0


def test_char_to_render_expands_tab_to_next_stop() -> None:
    assert char_to_render("\tab", 1) == 4
    assert char_to_render("a\tb", 2) == 4
    assert char_to_render("abcd\tx", 5, tab_stop=4) == 8
    assert char_to_render("a\tb", 2, tab_stop=8) == 8


def test_char_to_render_clamps_past_end() -> None:
    assert char_to_render("a\tb", 99) == 5


def test_render_to_char_inside_tab_cell_maps_to_tab() -> None:
    # "a\tb" renders as "a   b"; columns 1..3 all belong to the tab.
    for rx in (1, 2, 3):
        assert render_to_char("a\tb", rx) == 1
    assert render_to_char("a\tb", 4) == 2


def test_render_to_char_past_end_returns_length() -> None:
    assert render_to_char("abc", 10) == 3


@pytest.mark.parametrize("text", ["\t\tx", "a\tbc\td", "no tabs", "\t"])
def test_round_trip_on_character_boundaries(text: str) -> None:
    """Every character index survives char -> render -> char."""
    for cx in range(len(text) + 1):
        assert render_to_char(text, char_to_render(text, cx)) == cx


def test_expand_tabs() -> None:
    assert expand_tabs("a\tb") == "a   b"
    assert expand_tabs("\tx", tab_stop=2) == "  x"
    assert expand_tabs("plain") == "plain"
    assert len(expand_tabs("abc\t")) == 4
