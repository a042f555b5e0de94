# wee/core/Syntax.py
"""Syntax Highlighter for the wee editor
======================================
This module classifies every rendered character of a row into a highlight
class. Classification is a small state machine that runs left to right over the
row's rendered text and understands single-line comments, multi-line comments,
quoted strings with backslash escapes, numbers and two classes of keywords.

A multi-line comment may stay open at the end of a row. That exit state is the
entry state of the following row, so a change on one row can ripple through
the rest of the buffer. The ripple is driven by an explicit loop in
`SyntaxHighlighter.update_from`, bounded by the row count.

Key Features:
-------------
- `SyntaxRule`: a language description (file matches, keywords, comment
  markers, flags) built tolerantly from config tables or JSON rule files.
- `SyntaxHighlighter`: per-row classification plus forward propagation of the
  open-comment state.
- Rule discovery: built-in rules from configuration and `*.json` files from a
  rule directory; rule selection by file extension.

Classes:
--------
- Highlight: Highlight classes understood by the renderer.
- SyntaxRule: One language's highlighting rules.
- SyntaxHighlighter: Applies a rule to rows of a buffer.
"""
import json
import logging
import os
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional


if TYPE_CHECKING:
    from wee.core.Buffer import Row


HL_HIGHLIGHT_NUMBERS = 1 << 0
HL_HIGHLIGHT_STRINGS = 1 << 1

SEPARATOR_CHARS = ",.()+-/*=~%<>[];"


class Highlight(IntEnum):
    """Highlight classes attached to rendered characters."""

    NORMAL = 0
    COMMENT = 1
    MLCOMMENT = 2
    KEYWORD1 = 3
    KEYWORD2 = 4
    STRING = 5
    NUMBER = 6
    MATCH = 7
    SELECTION = 8


def is_separator(ch: str) -> bool:
    """True for characters that end a token: whitespace, NUL or punctuation."""
    return ch == "" or ch == "\0" or ch.isspace() or ch in SEPARATOR_CHARS


## ==================== SyntaxRule Class ====================
class SyntaxRule:
    """Class SyntaxRule
    ===================
    Highlighting rules for one language.

    Attributes:
        language (Optional[str]): Display name, e.g. "c".
        filematch (list[str]): Extensions (with dot) or basenames this rule applies to.
        keywords (list[str]): Keywords; a trailing "|" marks the second keyword class.
        singleline_comment_start (Optional[str]): Marker that comments out the rest of a row.
        multiline_comment_start (Optional[str]): Block comment opener.
        multiline_comment_end (Optional[str]): Block comment closer.
        flags (int): Bitset of HL_HIGHLIGHT_NUMBERS and HL_HIGHLIGHT_STRINGS.
    """

    def __init__(
        self,
        language: Optional[str] = None,
        filematch: Optional[list[str]] = None,
        keywords: Optional[list[str]] = None,
        singleline_comment_start: Optional[str] = None,
        multiline_comment_start: Optional[str] = None,
        multiline_comment_end: Optional[str] = None,
        flags: int = 0,
    ):
        self.language = language
        self.filematch = list(filematch or [])
        self.keywords = list(keywords or [])
        self.singleline_comment_start = singleline_comment_start or None
        self.multiline_comment_start = multiline_comment_start or None
        self.multiline_comment_end = multiline_comment_end or None
        self.flags = flags

        # Longest keyword first; a stable sort keeps list order among equal lengths.
        table: list[tuple[str, Highlight]] = []
        for kw in self.keywords:
            if kw.endswith("|"):
                word, cls = kw[:-1], Highlight.KEYWORD2
            else:
                word, cls = kw, Highlight.KEYWORD1
            if word:
                table.append((word, cls))
        table.sort(key=lambda item: len(item[0]), reverse=True)
        self._keyword_table = table

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyntaxRule":
        """Builds a rule from a loosely-typed mapping.

        Fields with an unexpected type are treated as absent, and non-string
        items inside list fields are dropped.
        """

        def _str(key: str) -> Optional[str]:
            value = data.get(key)
            return value if isinstance(value, str) else None

        def _str_list(key: str) -> list[str]:
            value = data.get(key)
            if not isinstance(value, list):
                return []
            return [item for item in value if isinstance(item, str)]

        flags = data.get("flags")
        if isinstance(flags, bool) or not isinstance(flags, int):
            flags = 0

        return cls(
            language=_str("language"),
            filematch=_str_list("filematch"),
            keywords=_str_list("keywords"),
            singleline_comment_start=_str("singleline_comment_start"),
            multiline_comment_start=_str("multiline_comment_start"),
            multiline_comment_end=_str("multiline_comment_end"),
            flags=flags,
        )

    def matches(self, filename: str) -> bool:
        """True if `filename`'s extension (with dot) or basename is listed in `filematch`."""
        base = os.path.basename(filename)
        ext = os.path.splitext(base)[1]
        for pattern in self.filematch:
            if (ext and pattern == ext) or pattern == base:
                return True
        return False

    def match_keyword(self, render: str, i: int) -> Optional[tuple[int, Highlight]]:
        """Returns (length, class) of the longest keyword at `i` followed by a separator."""
        for word, cls in self._keyword_table:
            end = i + len(word)
            if render.startswith(word, i) and (end >= len(render) or is_separator(render[end])):
                return len(word), cls
        return None

    def __repr__(self) -> str:
        return f"SyntaxRule(language={self.language!r}, filematch={self.filematch!r})"


## ==================== SyntaxHighlighter Class ====================
class SyntaxHighlighter:
    """Class SyntaxHighlighter
    ==========================
    Applies a `SyntaxRule` to rows.

    With no rule every character is `Highlight.NORMAL` and no row ever leaves a
    comment open.

    Attributes:
        rule (Optional[SyntaxRule]): The active rule, or None.

    Methods:
        highlight_row(row, open_at_start) -> bool:
            Classifies one row; returns True when its exit state changed.
        update_from(rows, index):
            Re-highlights `rows[index]` and walks forward while the open-comment
            state keeps changing.
        rehighlight_all(rows):
            Re-highlights every row in order.
    """

    def __init__(self, rule: Optional[SyntaxRule] = None):
        self.rule = rule

    @property
    def language(self) -> Optional[str]:
        return self.rule.language if self.rule else None

    def set_rule(self, rule: Optional[SyntaxRule], rows: list["Row"]) -> None:
        """Switches the active rule and re-highlights the whole buffer."""
        self.rule = rule
        logging.debug(f"SyntaxHighlighter: rule set to {rule!r}")
        self.rehighlight_all(rows)

    def highlight_row(self, row: "Row", open_at_start: bool) -> bool:
        """Classifies `row.render` into `row.hl`.

        Args:
            row (Row): The row to classify.
            open_at_start (bool): Whether a multi-line comment is open when the row begins.

        Returns:
            bool: True if the row's exit open-comment state differs from its previous value.
        """
        render = row.render
        n = len(render)
        hl = [Highlight.NORMAL] * n
        row.open_comment_at_start = open_at_start
        rule = self.rule

        in_comment = open_at_start if rule else False
        if rule is not None:
            scs = rule.singleline_comment_start or ""
            mcs = rule.multiline_comment_start or ""
            mce = rule.multiline_comment_end or ""
            if not (mcs and mce):
                in_comment = False
            highlight_strings = bool(rule.flags & HL_HIGHLIGHT_STRINGS)
            highlight_numbers = bool(rule.flags & HL_HIGHLIGHT_NUMBERS)

            prev_sep = True
            in_string = ""
            i = 0
            while i < n:
                c = render[i]
                prev_hl = hl[i - 1] if i > 0 else Highlight.NORMAL

                if scs and not in_string and not in_comment and render.startswith(scs, i):
                    hl[i:] = [Highlight.COMMENT] * (n - i)
                    break

                if mcs and mce and not in_string:
                    if in_comment:
                        if render.startswith(mce, i):
                            hl[i:i + len(mce)] = [Highlight.MLCOMMENT] * len(mce)
                            i += len(mce)
                            in_comment = False
                            prev_sep = True
                        else:
                            hl[i] = Highlight.MLCOMMENT
                            i += 1
                        continue
                    if render.startswith(mcs, i):
                        hl[i:i + len(mcs)] = [Highlight.MLCOMMENT] * len(mcs)
                        i += len(mcs)
                        in_comment = True
                        continue

                if highlight_strings:
                    if in_string:
                        hl[i] = Highlight.STRING
                        if c == "\\" and i + 1 < n:
                            hl[i + 1] = Highlight.STRING
                            i += 2
                            continue
                        if c == in_string:
                            in_string = ""
                        i += 1
                        prev_sep = True
                        continue
                    if c in ('"', "'"):
                        in_string = c
                        hl[i] = Highlight.STRING
                        i += 1
                        continue

                if highlight_numbers:
                    if ("0" <= c <= "9" and (prev_sep or prev_hl == Highlight.NUMBER)) or (
                        c == "." and prev_hl == Highlight.NUMBER
                    ):
                        hl[i] = Highlight.NUMBER
                        i += 1
                        prev_sep = False
                        continue

                if prev_sep:
                    found = rule.match_keyword(render, i)
                    if found:
                        length, cls = found
                        hl[i:i + length] = [cls] * length
                        i += length
                        prev_sep = False
                        continue

                prev_sep = is_separator(c)
                i += 1

        row.hl = hl
        changed = row.open_comment != in_comment
        row.open_comment = in_comment
        return changed

    def update_from(self, rows: list["Row"], index: int) -> int:
        """Re-highlights `rows[index]` and every following row whose entry state changed.

        Returns:
            int: Number of rows that were re-highlighted.
        """
        count = 0
        total = len(rows)
        while 0 <= index < total:
            row = rows[index]
            open_at_start = rows[index - 1].open_comment if index > 0 else False
            self.highlight_row(row, open_at_start)
            count += 1
            nxt = index + 1
            if nxt >= total or rows[nxt].open_comment_at_start == row.open_comment:
                break
            index = nxt
        if count > 1:
            logging.debug(f"SyntaxHighlighter: open-comment change rippled through {count} rows")
        return count

    def rehighlight_all(self, rows: list["Row"]) -> None:
        open_comment = False
        for row in rows:
            self.highlight_row(row, open_comment)
            open_comment = row.open_comment

    @staticmethod
    def mark_match(row: "Row", rx: int, length: int) -> None:
        """Overlays `Highlight.MATCH` on a rendered span of `row`."""
        end = min(rx + length, len(row.hl))
        for i in range(max(rx, 0), end):
            row.hl[i] = Highlight.MATCH


## ==================== Rule discovery ====================
def rules_from_config(config: dict[str, Any]) -> list[SyntaxRule]:
    """Builds rules from the `[syntax.<name>]` tables of the configuration."""
    rules: list[SyntaxRule] = []
    tables = config.get("syntax", {})
    if not isinstance(tables, dict):
        return rules
    for name, table in tables.items():
        if not isinstance(table, dict):
            logging.warning(f"Syntax table '{name}' is not a table; skipped.")
            continue
        rule = SyntaxRule.from_dict(table)
        if rule.language is None:
            rule.language = name
        rules.append(rule)
    return rules


def load_syntax_dir(directory: str | Path) -> list[SyntaxRule]:
    """Loads every `*.json` rule file in `directory`.

    Files that cannot be read or parsed are logged and skipped, as are files
    whose top level is not an object or that carry no `filematch` list.
    """
    path = Path(directory).expanduser()
    if not path.is_dir():
        logging.debug(f"Syntax directory '{path}' does not exist.")
        return []

    rules: list[SyntaxRule] = []
    for rule_file in sorted(path.glob("*.json")):
        try:
            with open(rule_file, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"Skipping syntax file '{rule_file}': {e}")
            continue
        if not isinstance(data, dict) or not isinstance(data.get("filematch"), list):
            logging.warning(f"Skipping syntax file '{rule_file}': no filematch list.")
            continue
        rules.append(SyntaxRule.from_dict(data))
        logging.debug(f"Loaded syntax rule from '{rule_file}'")
    return rules


def select_syntax(rules: list[SyntaxRule], filename: Optional[str]) -> Optional[SyntaxRule]:
    """Returns the first rule matching `filename`, or None."""
    if not filename:
        return None
    for rule in rules:
        if rule.matches(filename):
            return rule
    return None
