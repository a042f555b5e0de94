# src/wee/core/__init__.py
"""Public facade for wee.core: re-export main classes from CamelCase modules.

Keeps the CamelCase file names (Buffer.py, History.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .Buffer import Buffer, Row  # noqa: F401
from .History import History, Snapshot  # noqa: F401
from .Search import FindSession  # noqa: F401
from .Selection import Selection  # noqa: F401
from .State import EditorState, Mode  # noqa: F401
from .Syntax import Highlight, SyntaxHighlighter, SyntaxRule  # noqa: F401
from .Wee import Wee  # noqa: F401


__all__ = [
    "Buffer",
    "Row",
    "History",
    "Snapshot",
    "FindSession",
    "Selection",
    "EditorState",
    "Mode",
    "Highlight",
    "SyntaxHighlighter",
    "SyntaxRule",
    "Wee",
]
