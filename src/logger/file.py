from __future__ import annotations

import logging
from pathlib import Path

from env import LoggingEnvironment
from retention import RetentionMixin, SizeRetentionFileHandler, TimedRetentionFileHandler

FILE_FORMAT = "%(asctime)s | [%(levelname)s] | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_file_handler(logfile: Path, env: LoggingEnvironment) -> RetentionMixin:
    """
    Rotating file handler with retention applied.

    Raises retention.ConfigurationError if the window, anchor or rotation
    settings are unusable.
    """
    logfile.parent.mkdir(parents=True, exist_ok=True)

    if env.size_rotation:
        handler: RetentionMixin = SizeRetentionFileHandler(
            logfile,
            maxBytes=env.max_bytes,
            backupCount=env.backup_count,
            encoding="utf-8",
            retention=env.log_retention,
            anchor=env.log_retention_anchor,
        )
    else:
        handler = TimedRetentionFileHandler(
            logfile,
            when=env.rotate_when,
            backupCount=env.backup_count,
            encoding="utf-8",
            retention=env.log_retention,
            anchor=env.log_retention_anchor,
        )

    handler.setLevel(logging.NOTSET)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler
