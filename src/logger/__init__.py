from __future__ import annotations

import logging
import os

from env import command_log_file, get_logging_env
from retention import RetentionMixin
from .console import build_console_handler
from .file import build_file_handler
from . import state as _state


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _level_to_int(level: str | int) -> int:
    if isinstance(level, int):
        return level
    lvl = logging.getLevelName(str(level).upper())
    return lvl if isinstance(lvl, int) else logging.INFO


def _target_path():
    command = os.environ.get("LOGTRAIL_COMMAND") or "bootstrap"
    return command_log_file(command)


def get_file_handler() -> RetentionMixin | None:
    return _state.FILE_HANDLER


def init_logging() -> None:
    """
    Initialize logging for the entire process.

    - Handlers are attached ONLY to the root logger.
    - Named loggers inherit via propagation.
    - Safe to call multiple times; the file handler is replaced, not stacked.
    - Retention configuration errors propagate (nothing is attached then).
    """
    env = get_logging_env()

    root = logging.getLogger()
    logfile = _target_path()

    # Base level from env, but verbose forces DEBUG everywhere.
    root_level = logging.DEBUG if env.verbose else _level_to_int(env.log_level)

    if _state.INITIALIZED and _state.LOG_FILE_PATH == logfile:
        root.setLevel(root_level)
        return

    # Built first so a bad retention window leaves existing handlers alone.
    file_handler = build_file_handler(logfile, env)

    for h in list(root.handlers):
        root.removeHandler(h)
        if h is _state.FILE_HANDLER:
            h.close()

    root.setLevel(root_level)
    root.addHandler(file_handler)

    if not env.quiet:
        root.addHandler(build_console_handler(root_level))

    _state.INITIALIZED = True
    _state.LOG_DIR = logfile.parent
    _state.LOG_FILE_PATH = logfile
    _state.FILE_HANDLER = file_handler

    get_logger(__name__).debug(
        "Retention: window=%s anchor=%s check_interval=%s next_check=%s",
        file_handler.retention_window,
        file_handler.anchor.name,
        file_handler.check_interval,
        file_handler.next_check,
    )
