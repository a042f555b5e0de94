# wee/utils/logging_config.py
"""wee.utils.logging_config
===========================

Logging setup for the wee editor.

A curses application cannot write diagnostics to the terminal it is drawing
on, so the default stack is file based:

    - editor.log: rotating (2 MiB x 5) log of everything from `file_level` up.
    - error.log: optional rotating (1 MiB x 3) log of ERROR and CRITICAL only.
    - stderr console handler: optional, for running headless or under tests.
    - keytrace.log: optional trace of every logical key, attached to the
      `wee.keyevents` logger and enabled with the `WEE_KEYTRACE` environment
      variable (`1`, `true` or `yes`).

Log files go to `logging.log_dir` (default: the working directory). A
directory that cannot be created falls back to the system temp directory.
`setup_logging` replaces existing root handlers, so calling it again (e.g. in
tests) never duplicates records, and it never raises.

Globals:
    logger: Main application logger ("wee").
    KEY_LOGGER: Logger for key trace events ("wee.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
logger = logging.getLogger("wee")
KEY_LOGGER = logging.getLogger("wee.keyevents")

FILE_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
CONSOLE_FORMAT = "%(levelname)-8s - %(name)-12s - %(message)s"
KEYTRACE_ENV = "WEE_KEYTRACE"


def _resolve_log_dir(log_dir: str) -> str:
    """Returns a writable directory for log files, falling back to the temp dir."""
    if not log_dir:
        return ""
    log_dir = os.path.expanduser(log_dir)
    try:
        os.makedirs(log_dir, exist_ok=True)
        return log_dir
    except OSError as e_mkdir:
        fallback = tempfile.gettempdir()
        print(f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr)
        print(f"Logging to temporary directory: '{fallback}'", file=sys.stderr)
        return fallback


def _rotating_handler(
    filename: str, max_bytes: int, backups: int, level: int, formatter: logging.Formatter
) -> Optional[logging.Handler]:
    try:
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
        )
    except OSError as e_fh:
        print(f"Error setting up file logger for '{filename}': {e_fh}.", file=sys.stderr)
        return None
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def _level(name: Any, default: int) -> int:
    level = getattr(logging, str(name).upper(), None)
    return level if isinstance(level, int) else default


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures the root logger and the key trace logger.

    Args:
        config (dict | None): Application configuration; only its
            ``["logging"]`` table is read. Recognised keys:

            - ``file_level`` (str): level of editor.log. Default ``"DEBUG"``.
            - ``console_level`` (str): level of stderr output. Default ``"WARNING"``.
            - ``log_to_console`` (bool): attach the stderr handler. Default ``False``.
            - ``separate_error_log`` (bool): create error.log. Default ``False``.
            - ``log_dir`` (str): directory of the log files. Default: working directory.
    """
    logging_cfg = (config or {}).get("logging", {})
    log_dir = _resolve_log_dir(logging_cfg.get("log_dir", ""))
    file_level = _level(logging_cfg.get("file_level", "DEBUG"), logging.DEBUG)
    file_formatter = logging.Formatter(FILE_FORMAT)

    handlers: list[logging.Handler] = []
    log_filename = os.path.join(log_dir, "editor.log")
    file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5, file_level, file_formatter)
    if file_handler:
        handlers.append(file_handler)

    if logging_cfg.get("log_to_console", False):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        console_handler.setLevel(_level(logging_cfg.get("console_level", "WARNING"), logging.WARNING))
        handlers.append(console_handler)

    if logging_cfg.get("separate_error_log", False):
        error_handler = _rotating_handler(
            os.path.join(log_dir, "error.log"), 1024 * 1024, 3, logging.ERROR, file_formatter
        )
        if error_handler:
            handlers.append(error_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = []
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(file_level)

    # Key trace logger: never propagates into editor.log.
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []
    KEY_LOGGER.disabled = False

    if os.environ.get(KEYTRACE_ENV, "").lower() in {"1", "true", "yes"}:
        key_trace_filename = os.path.join(log_dir, "keytrace.log")
        key_handler = _rotating_handler(
            key_trace_filename, 1024 * 1024, 3, logging.DEBUG, logging.Formatter("%(asctime)s - %(message)s")
        )
        if key_handler:
            KEY_LOGGER.addHandler(key_handler)
            logging.info("Key event tracing enabled, logging to '%s'.", key_trace_filename)
        else:
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s. Handlers: %d.",
        logging.getLevelName(root_logger.level),
        len(root_logger.handlers),
    )
