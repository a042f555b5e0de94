# wee/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder class translates terminal key presses into wee editor commands.
Everything past the terminal boundary works with logical key names: "up",
"shift+left", "alt+up", "ctrl+s", "enter", "esc", "f1", "pageup" or a single
printable character. The controller's prompt and the incremental search
callback consume the same names.

Key Features:
- Reads curses input, folding escape sequences and curses key codes into
  logical key names.
- Loads keybindings from configuration (action -> key string, list of key
  strings, or a "|"-separated string) and normalizes their spelling.
- Dispatches key names to controller commands; printable characters go to
  text insertion.

Main Methods:
1. handle_input: Dispatches one logical key to its command.
2. get_key_input: Reads one key or escape sequence from the terminal.
3. lookup: Returns the action name bound to a key.
"""

import curses
import logging
import re
from typing import TYPE_CHECKING, Any, Callable, Optional
from wcwidth import wcswidth

if TYPE_CHECKING:
    from wee.core.Wee import Wee


KEY_LOGGER = logging.getLogger("wee.keyevents")

MODIFIER_ORDER = ("shift", "alt", "ctrl")

KEY_ALIASES: dict[str, str] = {
    "return": "enter",
    "escape": "esc",
    "del": "delete",
    "bs": "backspace",
    "pgup": "pageup",
    "page_up": "pageup",
    "pgdn": "pagedown",
    "page_down": "pagedown",
    "space": " ",
}


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Maps logical key names to `Wee` commands and reads keys from curses.

    Attributes:
        editor (Wee): The controller whose commands are bound.
        config (dict): Editor configuration, including `[keybindings]`.
        stdscr: The curses window keys are read from (None when headless).
        keybindings (dict[str, list[str]]): Action name -> normalized key names.
        action_map (dict[str, Callable]): Key name -> bound command.
    """
    # Keys do NOT include the leading ESC; get_key_input() reads past it.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",

        # xterm modifiers: ;2=Shift, ;3=Alt, ;5=Ctrl
        "[1;2A": "shift+up",    "[1;2B": "shift+down",
        "[1;2C": "shift+right", "[1;2D": "shift+left",

        "[1;3A": "alt+up",      "[1;3B": "alt+down",
        "[1;3C": "alt+right",   "[1;3D": "alt+left",

        "[1;5A": "ctrl+up",     "[1;5B": "ctrl+down",
        "[1;5C": "ctrl+right",  "[1;5D": "ctrl+left",

        # rxvt style shift/alt arrows
        "[a": "shift+up", "[b": "shift+down", "[c": "shift+right", "[d": "shift+left",

        "[H": "home", "[F": "end", "OH": "home", "OF": "end",
        "[1~": "home", "[4~": "end", "[7~": "home", "[8~": "end",

        "[2~": "insert", "[3~": "delete", "[5~": "pageup", "[6~": "pagedown",
        "[Z": "shift+tab",

        "OP": "f1", "OQ": "f2", "OR": "f3", "OS": "f4",
        "[11~": "f1", "[12~": "f2", "[13~": "f3", "[14~": "f4",
        "[15~": "f5", "[17~": "f6", "[18~": "f7", "[19~": "f8",
        "[20~": "f9", "[21~": "f10", "[23~": "f11", "[24~": "f12",
    }

    # Extended keys some terminfo entries report through curses.keyname().
    CURSES_KEYNAME_MAP: dict[str, str] = {
        "kUP": "shift+up", "kDN": "shift+down",
        "kUP3": "alt+up", "kDN3": "alt+down", "kLFT3": "alt+left", "kRIT3": "alt+right",
        "kUP5": "ctrl+up", "kDN5": "ctrl+down", "kLFT5": "ctrl+left", "kRIT5": "ctrl+right",
    }

    def __init__(self, editor: "Wee"):
        logging.debug("KeyBinder initialized with editor: %s", editor)
        self.editor = editor
        self.config = editor.config
        self.stdscr = editor.stdscr

        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()

    # ---------------------- Key name helpers --------------------
    @staticmethod
    def _decode_keystring(key_spec: str) -> str:
        """Normalizes a key specification ("Ctrl+S", "alt-r", "PgUp") to a logical key name.

        Raises:
            ValueError: If the string is empty or carries an unknown modifier.
        """
        if not isinstance(key_spec, str):
            raise ValueError(f"Invalid key spec type: {type(key_spec)}. Expected str.")
        if len(key_spec) == 1:
            return key_spec  # a bare character keeps its case
        s = key_spec.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")

        if s.startswith("alt-"):
            s = "alt+" + s[4:]
        parts = s.split("+")
        if s.endswith("+"):
            # "ctrl++" binds the plus key itself
            parts = [p for p in parts if p] + ["+"]
        base = KEY_ALIASES.get(parts[-1], parts[-1])
        modifiers = parts[:-1]
        for mod in modifiers:
            if mod not in MODIFIER_ORDER:
                raise ValueError(f"Unknown modifier '{mod}' in key string '{key_spec}'.")
        ordered = sorted(set(modifiers), key=MODIFIER_ORDER.index)
        return "+".join(ordered + [base])

    @staticmethod
    def key_name_for_char(ch: str) -> str:
        """Logical name of a character returned by `get_wch()`."""
        if ch in ("\n", "\r"):
            return "enter"
        if ch == "\t":
            return "tab"
        if ch in ("\x7f", "\x08"):
            return "backspace"
        if ch == "\x1b":
            return "esc"
        code = ord(ch)
        if code < 32:
            return f"ctrl+{chr(code + 96)}"
        return ch

    @classmethod
    def key_name_for_code(cls, code: int) -> str:
        """Logical name of a curses key code returned by `get_wch()`/`getch()`."""
        named = {
            curses.KEY_UP: "up", curses.KEY_DOWN: "down",
            curses.KEY_LEFT: "left", curses.KEY_RIGHT: "right",
            curses.KEY_SR: "shift+up", curses.KEY_SF: "shift+down",
            curses.KEY_SLEFT: "shift+left", curses.KEY_SRIGHT: "shift+right",
            curses.KEY_HOME: "home", curses.KEY_END: "end",
            curses.KEY_PPAGE: "pageup", curses.KEY_NPAGE: "pagedown",
            curses.KEY_DC: "delete", curses.KEY_IC: "insert",
            curses.KEY_BACKSPACE: "backspace", curses.KEY_ENTER: "enter",
            curses.KEY_BTAB: "shift+tab", curses.KEY_RESIZE: "resize",
        }
        if code in named:
            return named[code]
        if curses.KEY_F1 <= code <= curses.KEY_F12:
            return f"f{code - curses.KEY_F0}"
        if 0 <= code < 256:
            return cls.key_name_for_char(chr(code))
        try:
            keyname = curses.keyname(code).decode("ascii", errors="replace")
        except (ValueError, curses.error):
            keyname = ""
        return cls.CURSES_KEYNAME_MAP.get(keyname, f"key{code}")

    # ---------------------- Handle Input --------------------
    def _handle_printable_character(self, key: str) -> bool:
        """Sends a single visible character to text insertion."""
        if isinstance(key, str) and len(key) == 1 and wcswidth(key) > 0:
            logging.debug(f"handle_input: Treating {key!r} as printable character for insertion.")
            return self.editor.type_char(key)
        return False

    def handle_input(self, key: str) -> bool:
        """Processes one logical key event and triggers the bound command.

        Returns:
            bool: True if the input changed something that needs a redraw.
        """
        KEY_LOGGER.debug("handle_input: %r", key)
        editor = self.editor
        original_status = editor.state.status_message
        changed = False

        try:
            if key in self.action_map:
                action = self.action_map[key]
                if self.lookup(key) != "quit":
                    editor.reset_quit_times()
                logging.debug(f"handle_input: Key '{key}' found in action_map. Calling: {action.__name__}")
                changed = bool(action())
            elif self._handle_printable_character(key):
                editor.reset_quit_times()
                changed = True
            else:
                logging.debug("Unhandled input: %r", key)
                editor.state.set_status(f"Ignored unhandled input: {key!r}")

            editor.state.sync_mode()
            if editor.state.status_message != original_status:
                changed = True
            return changed

        except Exception as e:
            logging.exception("Input handler critical error. This should be investigated.")
            editor.state.set_status(f"Input handler error: {str(e)[:50]}")
            return True

    def _load_keybindings(self) -> dict[str, list[str]]:
        """Returns action name -> list of logical key names from `[keybindings]`."""
        user_keybindings: dict[str, Any] = self.config.get("keybindings", {})
        parsed: dict[str, list[str]] = {}

        for action, spec in user_keybindings.items():
            if not spec:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue
            if isinstance(spec, list):
                specs = spec
            elif isinstance(spec, str) and "|" in spec:
                specs = [s.strip() for s in spec.split("|")]
            else:
                specs = [spec]

            keys: list[str] = []
            for item in specs:
                try:
                    key = self._decode_keystring(item)
                except ValueError as e:
                    logging.error(
                        "Error parsing keybinding item %r for action %r: %s. This binding is ignored.",
                        item, action, e,
                    )
                    continue
                if key not in keys:
                    keys.append(key)
            if keys:
                parsed[action] = keys
            else:
                logging.warning("No valid keys found for action %r. It will not be bound.", action)

        logging.debug("Loaded keybindings (action -> keys): %s", parsed)
        return parsed

    def _setup_action_map(self) -> dict[str, Callable[..., Any]]:
        """Builds key name -> command from the loaded keybindings."""
        editor = self.editor
        action_to_method: dict[str, Callable[..., Any]] = {
            # --- File ---
            "open_file": editor.open_file,
            "save_file": editor.save_file,
            "save_as": editor.save_file_as,
            "new_file": editor.new_file,
            "quit": editor.exit_editor,
            # --- Edit ---
            "copy": editor.copy,
            "cut": editor.cut,
            "paste": editor.paste,
            "undo": editor.undo,
            "redo": editor.redo,
            "find": editor.find,
            "goto_line": editor.goto_line,
            "help": editor.show_help,
            "toggle_line_numbers": editor.toggle_line_numbers,
            # --- Selection ---
            "select_all": editor.select_all,
            "start_selection": editor.start_selection,
            "end_selection": editor.end_selection,
            "select_row_text": editor.select_row_text,
            "select_inside_delimiters": editor.select_inside_delimiters,
            "cancel_operation": editor.cancel_operation,
            "extend_selection_up": editor.extend_selection_up,
            "extend_selection_down": editor.extend_selection_down,
            "extend_selection_left": editor.extend_selection_left,
            "extend_selection_right": editor.extend_selection_right,
            "move_selection_up": editor.move_selection_up,
            "move_selection_down": editor.move_selection_down,
            "move_selection_left": editor.move_selection_left,
            "move_selection_right": editor.move_selection_right,
            # --- Core handlers ---
            "handle_enter": editor.handle_enter,
            "handle_backspace": editor.handle_backspace,
            "handle_delete": editor.handle_delete,
            "handle_tab": editor.handle_tab,
            "handle_up": editor.handle_up,
            "handle_down": editor.handle_down,
            "handle_left": editor.handle_left,
            "handle_right": editor.handle_right,
            "handle_home": editor.handle_home,
            "handle_end": editor.handle_end,
            "handle_page_up": editor.handle_page_up,
            "handle_page_down": editor.handle_page_down,
        }

        final_map: dict[str, Callable[..., Any]] = {"resize": editor.handle_resize}
        for action_name, keys in self.keybindings.items():
            method = action_to_method.get(action_name)
            if method is None:
                logging.warning(f"Keybinding for unknown action '{action_name}' ignored.")
                continue
            for key in keys:
                if key in final_map and final_map[key].__name__ != method.__name__:
                    logging.warning(
                        f"Keybinding for action '{action_name}' (key: {key}) is overwriting "
                        f"an existing mapping for method '{final_map[key].__name__}'."
                    )
                final_map[key] = method

        final_map_log_str = {k: v.__name__ for k, v in final_map.items()}
        logging.debug(f"Final constructed action map: {final_map_log_str}")
        return final_map

    # ---------------------- Terminal input --------------------
    def get_key_input(self, window: Optional[Any] = None) -> str:
        """Reads one key from the terminal and returns its logical name.

        ESC starts a non-blocking read of the rest of the sequence: nothing
        follows for a lone ESC ("esc"), one printable character for an Alt
        chord ("alt+<char>"), otherwise a CSI/SS3 sequence looked up in
        `ESCAPE_SEQUENCE_MAP`.
        """
        target = window or self.stdscr
        try:
            ch = target.get_wch()
        except curses.error:
            return ""

        if isinstance(ch, int):
            name = self.key_name_for_code(ch)
            KEY_LOGGER.debug("get_key_input: code %r -> %r", ch, name)
            return name
        if ch != "\x1b":
            name = self.key_name_for_char(ch)
            KEY_LOGGER.debug("get_key_input: char %r -> %r", ch, name)
            return name

        seq = ""
        target.nodelay(True)
        try:
            while True:
                nx = target.getch()
                if nx == curses.ERR:
                    break
                if 0 <= nx <= 255:
                    seq += chr(nx)
                else:
                    seq += f"<{nx}>"
        finally:
            target.nodelay(False)

        if not seq:
            KEY_LOGGER.debug("get_key_input: standalone ESC")
            return "esc"
        if seq[0] == "\x1b":
            seq = seq[1:]

        if len(seq) == 1 and seq.isprintable():
            name = f"alt+{seq.lower()}"
            KEY_LOGGER.debug("get_key_input: Alt chord -> %r", name)
            return name

        mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
        if not mapped:
            cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
            mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)
        if mapped:
            KEY_LOGGER.debug("get_key_input: ESC %r -> %r", seq, mapped)
            return mapped

        logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
        return "esc"

    def lookup(self, key_spec: str) -> Optional[str]:
        """Finds the action name bound to a key specification, or None."""
        try:
            key = self._decode_keystring(key_spec)
        except ValueError:
            return None
        for action_name, keys in self.keybindings.items():
            if key in keys:
                return action_name
        return None
