from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------
# Project root
# ---------------------------------------------------------------------

# This file lives in src/env/, so project root is two levels up
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"


# ---------------------------------------------------------------------
# Base directories (override-friendly)
# ---------------------------------------------------------------------


def _resolve_dir(env_var: str, default: Path) -> Path:
    """
    Resolve a directory path from an environment variable or default.
    Ensures the directory exists.
    """
    raw = os.environ.get(env_var)
    path = Path(raw).expanduser().resolve() if raw else default
    path.mkdir(parents=True, exist_ok=True)
    return path


# ---------------------------------------------------------------------
# Public paths
# ---------------------------------------------------------------------

LOGS_DIR = _resolve_dir(
    "LOGTRAIL_LOGS_DIR",
    PROJECT_ROOT / "logs",
)


# ---------------------------------------------------------------------
# Log layout helpers
# ---------------------------------------------------------------------


def command_logs_dir(command: str) -> Path:
    """
    Log directory for one command (e.g. sweep, demo).
    """
    path = LOGS_DIR / command
    path.mkdir(parents=True, exist_ok=True)
    return path


def command_log_file(command: str) -> Path:
    """
    Active log file for a command. Rotated siblings share its stem.
    """
    return command_logs_dir(command) / f"{command}.log"
