from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from env.paths import LOGS_DIR, PROJECT_ROOT

# ------------------------------------------------------------
# Errors / helpers
# ------------------------------------------------------------


class ConfigError(RuntimeError):
    pass


def _as_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(v: str, default: int) -> int:
    try:
        return int(v)
    except ValueError:
        return default


# ------------------------------------------------------------
# Logging environment (SAFE ANYWHERE)
# ------------------------------------------------------------

ROTATE_WHEN_CHOICES = {"s", "m", "h", "d", "midnight", "size"} | {
    f"w{i}" for i in range(7)
}


@dataclass(frozen=True)
class LoggingEnvironment:
    log_level: str
    log_retention: str
    log_retention_anchor: str
    rotate_when: str
    max_bytes: int
    backup_count: int
    verbose: bool
    quiet: bool

    @property
    def size_rotation(self) -> bool:
        return self.rotate_when == "size"


def get_logging_env() -> LoggingEnvironment:
    rotate_when = os.environ.get("LOG_ROTATE_WHEN", "midnight").strip().lower()
    if rotate_when not in ROTATE_WHEN_CHOICES:
        raise ConfigError(
            f"Invalid LOG_ROTATE_WHEN={rotate_when!r} "
            f"(expected one of: {', '.join(sorted(ROTATE_WHEN_CHOICES))})"
        )

    return LoggingEnvironment(
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        # Raw string; parsed (and rejected) by the retention handler.
        log_retention=os.environ.get("LOG_RETENTION", "36500d"),
        log_retention_anchor=os.environ.get("LOG_RETENTION_ANCHOR", "trailing"),
        rotate_when=rotate_when,
        max_bytes=_as_int(os.environ.get("LOG_MAX_BYTES", "10485760"), 10485760),
        backup_count=_as_int(os.environ.get("LOG_BACKUP_COUNT", "0"), 0),
        verbose=_as_bool(os.environ.get("LOGTRAIL_VERBOSE", "0")),
        quiet=_as_bool(os.environ.get("LOGTRAIL_QUIET", "0")),
    )


# ------------------------------------------------------------
# Full runtime environment
# ------------------------------------------------------------


class Environment:
    def __init__(self):
        # Logging snapshot (immutable)
        self._logging = get_logging_env()

        self.command = os.environ.get("LOGTRAIL_COMMAND", "bootstrap")
        self.logs_dir = LOGS_DIR
        self.project_root = PROJECT_ROOT

    def as_dict(self) -> dict:
        return {
            "Logging": {
                "log_level": self.log_level,
                "verbose": self.verbose,
                "quiet": self.quiet,
            },
            "Retention": {
                "log_retention": self.log_retention,
                "log_retention_anchor": self.log_retention_anchor,
            },
            "Rotation": {
                "rotate_when": self._logging.rotate_when,
                "max_bytes": self._logging.max_bytes,
                "backup_count": self._logging.backup_count,
            },
            "Paths": {
                "project_root": str(self.project_root),
                "logs_dir": str(self.logs_dir),
                "command": self.command,
            },
        }

    # ---- logging passthrough ----
    @property
    def logging(self) -> LoggingEnvironment:
        return self._logging

    @property
    def log_level(self) -> str:
        return self._logging.log_level

    @property
    def log_retention(self) -> str:
        return self._logging.log_retention

    @property
    def log_retention_anchor(self) -> str:
        return self._logging.log_retention_anchor

    @property
    def verbose(self) -> bool:
        return self._logging.verbose

    @property
    def quiet(self) -> bool:
        return self._logging.quiet


_ENV: Optional[Environment] = None


def reset_env_caches() -> None:
    """Invalidate cached views of environment variables."""
    global _ENV
    _ENV = None


def get_env() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = Environment()
    return _ENV
