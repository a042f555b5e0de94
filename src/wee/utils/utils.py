# wee/utils/utils.py
"""
wee.utils.utils
===============

Configuration helpers for the wee editor.

Key functionalities include:
- Automatic User Configuration: creates `~/.config/wee/config.toml` from the
  bundled template on first run.
- Robust Configuration Loading: starts from the embedded `DEFAULT_CONFIG` and
  recursively merges the user's TOML file over it. A missing or unparsable user
  file never stops the editor; it falls back to the defaults.
- Helper Utilities: `deep_merge` for nested dictionaries and
  `detect_encoding` for decoding files of unknown encoding.
"""

import logging
import shutil
import sys
from pathlib import Path
from typing import Any, Dict

import chardet
import toml

logger = logging.getLogger("wee")

USER_CONFIG_DIR = Path.home() / ".config" / "wee"

# Embedded copy of the template `config.toml`; the editor can always start from it.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "tab_size": 4,
        "max_undo_snapshots": 50,
        "undo_debounce_seconds": 1.0,
        "use_system_clipboard": True,
        "show_line_numbers": False,
        "auto_pair": True,
        "quit_times": 2,
        "syntax_dir": str(USER_CONFIG_DIR / "syntax"),
    },
    "colors": {
        "comment": "cyan", "mlcomment": "cyan", "keyword1": "yellow", "keyword2": "green",
        "string": "magenta", "number": "red", "match": "blue", "status": "white",
    },
    "keybindings": {
        "save_file": "ctrl+s", "save_as": "f5", "quit": "ctrl+q",
        "copy": "ctrl+c", "cut": "ctrl+x", "paste": "ctrl+v",
        "find": "ctrl+f", "undo": "ctrl+z", "redo": "ctrl+y",
        "new_file": "f2", "open_file": "ctrl+o", "toggle_line_numbers": "ctrl+n",
        "goto_line": "ctrl+g", "help": "f1", "select_all": "ctrl+a",
        "start_selection": "ctrl+b", "end_selection": "ctrl+e",
        "select_row_text": "alt+r", "select_inside_delimiters": "shift+tab",
        "cancel_operation": "esc",
        "handle_enter": "enter", "handle_backspace": "backspace", "handle_delete": "delete",
        "handle_tab": "tab",
        "handle_up": "up", "handle_down": "down", "handle_left": "left", "handle_right": "right",
        "handle_home": ["home", "alt+b"], "handle_end": ["end", "alt+e"],
        "handle_page_up": "pageup", "handle_page_down": "pagedown",
        "extend_selection_up": "shift+up", "extend_selection_down": "shift+down",
        "extend_selection_left": "shift+left", "extend_selection_right": "shift+right",
        "move_selection_up": "alt+up", "move_selection_down": "alt+down",
        "move_selection_left": "alt+left", "move_selection_right": "alt+right",
    },
    "syntax": {
        "c": {
            "language": "c",
            "filematch": [".c", ".h", ".cpp", ".hpp", ".cc"],
            "keywords": [
                "switch", "if", "while", "for", "break", "continue", "return", "else",
                "struct", "union", "typedef", "static", "enum", "class", "case", "#include",
                "#define", "int|", "long|", "double|", "float|", "char|", "unsigned|",
                "signed|", "void|", "const|", "size_t|",
            ],
            "singleline_comment_start": "//",
            "multiline_comment_start": "/*",
            "multiline_comment_end": "*/",
            "flags": 3,
        },
        "python": {
            "language": "python",
            "filematch": [".py", ".pyw"],
            "keywords": [
                "def", "class", "return", "if", "elif", "else", "for", "while", "break",
                "continue", "import", "from", "as", "with", "try", "except", "finally",
                "raise", "pass", "lambda", "yield", "in", "is", "not", "and", "or",
                "None|", "True|", "False|", "self|", "int|", "str|", "list|", "dict|",
            ],
            "singleline_comment_start": "#",
            "flags": 3,
        },
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
        "log_dir": "",
    },
}


# --- Helper Functions ---

def get_project_root() -> Path:
    """Determines the project's root directory for finding template files."""
    if getattr(sys, 'frozen', False) and hasattr(sys, '_MEIPASS'):
        return Path(sys._MEIPASS)
    return Path(__file__).resolve().parents[3]


def ensure_user_config_exists(config_dir: Path = USER_CONFIG_DIR) -> None:
    """Creates the user config directory and copies the template config into it if missing."""
    try:
        user_config_path = config_dir / "config.toml"
        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            source_config_path = get_project_root() / "config.toml"
            if source_config_path.exists():
                shutil.copy(source_config_path, user_config_path)
                logger.info(f"Created user config template at: {user_config_path}")
    except OSError as e:
        logger.critical(f"Could not create user configuration files: {e}", exc_info=True)


def load_config(config_dir: Path = USER_CONFIG_DIR) -> Dict[str, Any]:
    """
    Loads the embedded defaults and merges the user's `config.toml` over them.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    ensure_user_config_exists(config_dir)

    user_config_path = config_dir / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except (OSError, toml.TomlDecodeError) as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def detect_encoding(raw: bytes, sample_size: int = 20 * 1024) -> str:
    """
    Guesses the encoding of `raw` with chardet, defaulting to UTF-8.

    Pure ASCII input is reported as UTF-8 so that later non-ASCII edits can be saved.
    """
    if not raw:
        return "utf-8"
    guess = chardet.detect(raw[:sample_size])
    encoding = guess.get("encoding") or "utf-8"
    if encoding.lower() == "ascii":
        encoding = "utf-8"
    logger.debug(f"detect_encoding: {encoding} (confidence {guess.get('confidence')})")
    return encoding
