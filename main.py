#!/usr/bin/env python3
# /wee/main.py
"""
wee Main Entry Point
====================

This script is the primary entry point for launching the wee editor. It performs:
1) Path Setup: ensures the wee package under src/ is importable from a checkout.
2) Configuration & Logging: loads config and initializes logging before anything else.
3) Core Import: imports the Wee controller after logging is ready.
4) Curses Wrapper: safely initializes/tears down curses to avoid terminal corruption.
5) Application Run: instantiates Wee, loads the file named on the command line
   (a missing file starts an empty buffer with that name) and runs the main loop.
"""

from __future__ import annotations

import curses
import locale
import logging
import os
import signal
import sys
from pathlib import Path
from typing import Any, Optional

# --- Step 1: Set up the Python Path ---
src_root = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if os.path.isdir(src_root) and src_root not in sys.path:
    sys.path.insert(0, src_root)

# --- Step 2: Immediate Logging and Configuration Setup ---
try:
    from wee.utils.logging_config import setup_logging
    from wee.utils.utils import load_config

    config: dict[str, Any] = load_config()
    setup_logging(config)
    logger = logging.getLogger("wee")
except Exception as e:
    # Logging is not ready; print to stderr and exit.
    print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
    import traceback
    traceback.print_exc()
    sys.exit(1)

# --- Step 3: Import the Core Application ---
try:
    from wee.core.Wee import Wee
except ImportError as e:
    logger.critical("Failed to import a critical application component: %s", e, exc_info=True)
    sys.exit(1)


def _resolve_cli_path(argv: list[str]) -> Optional[Path]:
    """Optional document path from argv[1]; the file does not need to exist."""
    if len(argv) <= 1:
        return None
    raw = argv[1].strip()
    if not raw:
        return None
    return Path(raw).expanduser()


# --- Step 4: Curses Application Runner ---
def main_app_runner(stdscr: curses.window, config: dict[str, Any], file_to_open: Optional[Path]) -> None:
    """
    Target for `curses.wrapper`. Initializes terminal responsiveness and runs the editor.

    Args:
        stdscr: Curses standard screen window provided by wrapper.
        config: Application configuration dict.
        file_to_open: Optional CLI path (may or may not exist on disk).
    """
    # Keep Alt/ESC combos responsive.
    try:
        curses.set_escdelay(25)
    except (AttributeError, curses.error):
        os.environ.setdefault("ESCDELAY", "25")

    # ctrl+z is undo, not job control.
    if hasattr(signal, "SIGTSTP"):
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)

    curses.raw()
    stdscr.keypad(True)
    editor = Wee(stdscr, config=config)
    if file_to_open:
        editor.load_document(str(file_to_open))

    editor.run()


def start() -> None:
    """Initializes locale and runs the curses application via wrapper."""
    logger.info("wee editor starting up...")

    # Locale is important for proper character width/encoding behavior in curses.
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    file_to_open = _resolve_cli_path(sys.argv)

    try:
        curses.wrapper(main_app_runner, config, file_to_open)
        logger.info("wee editor shut down gracefully.")
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    start()
