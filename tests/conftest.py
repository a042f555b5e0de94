# tests/conftest.py
"""Pytest configuration with shared fixtures for the wee editor tests.

Fixtures build editor states from plain lists of strings, provide a C-like
syntax rule, a manually driven clock for undo debouncing, and a headless
`Wee` controller whose keys come from a scripted list instead of a terminal.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from wee.core.Buffer import Buffer
from wee.core.State import EditorState
from wee.core.Syntax import HL_HIGHLIGHT_NUMBERS, HL_HIGHLIGHT_STRINGS, SyntaxHighlighter, SyntaxRule
from wee.core.Wee import Wee


class FakeClock:
    """Deterministic replacement for `time.time`.

    Each call returns the current time and then advances it by `step`.
    """

    def __init__(self, start: float = 1000.0, step: float = 0.0):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedKeys:
    """Key source returning logical key names from a list."""

    def __init__(self, keys: Optional[list[str]] = None):
        self.keys = list(keys or [])

    def push(self, *keys: str) -> None:
        self.keys.extend(keys)

    def type(self, text: str) -> None:
        self.keys.extend(text)

    def __call__(self) -> str:
        if not self.keys:
            raise AssertionError("scripted key source exhausted")
        return self.keys.pop(0)


@pytest.fixture
def c_rule() -> SyntaxRule:
    """A C-like rule: `//` and `/* */` comments, strings, numbers, two keyword classes."""
    return SyntaxRule(
        language="c",
        filematch=[".c", ".h"],
        keywords=["if", "while", "return", "#if", "#ifdef", "int|", "char|"],
        singleline_comment_start="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
        flags=HL_HIGHLIGHT_NUMBERS | HL_HIGHLIGHT_STRINGS,
    )


@pytest.fixture
def make_state() -> Callable[..., EditorState]:
    """Factory: `make_state(["line", ...], rule=None, tab_stop=4)` -> EditorState."""

    def _make(lines: list[str], rule: Optional[SyntaxRule] = None, tab_stop: int = 4) -> EditorState:
        buffer = Buffer(SyntaxHighlighter(rule), tab_stop=tab_stop)
        buffer.load_lines(lines)
        return EditorState(buffer)

    return _make


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def keys() -> ScriptedKeys:
    return ScriptedKeys()


@pytest.fixture
def editor_config(tmp_path: Path) -> dict[str, Any]:
    return {
        "editor": {
            "use_system_clipboard": False,
            "syntax_dir": str(tmp_path / "syntax"),
        },
    }


@pytest.fixture
def make_editor(editor_config: dict[str, Any], keys: ScriptedKeys) -> Callable[..., Wee]:
    """Factory for a headless controller.

    The clock advances two seconds per call so every recorded edit becomes
    its own undo step.
    """

    def _make(lines: Optional[list[str]] = None, stdscr: Any = None, **editor_overrides: Any) -> Wee:
        config = {"editor": {**editor_config["editor"], **editor_overrides}}
        editor = Wee(stdscr=stdscr, config=config, key_source=keys, clock=FakeClock(step=2.0))
        if lines is not None:
            editor.state.buffer.load_lines(lines)
        return editor

    return _make
