import logging
import os
import sys
from datetime import datetime, timedelta

import pytest


class FakeClock:
    """Deterministic stand-in for datetime.now."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


# Mid-June: clear of DST transitions in common time zones.
NOW = datetime(2024, 6, 12, 12, 30, 45)


def _reset_root():
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()


@pytest.fixture(autouse=True)
def clean_env_and_modules(monkeypatch, tmp_path):
    """
    Ensure tests don't leak env, logger state, or cached path resolution.
    """

    keys = [
        "LOGTRAIL_LOGS_DIR",
        "LOGTRAIL_COMMAND",
        "LOGTRAIL_VERBOSE",
        "LOGTRAIL_QUIET",
        "LOG_LEVEL",
        "LOG_RETENTION",
        "LOG_RETENTION_ANCHOR",
        "LOG_ROTATE_WHEN",
        "LOG_MAX_BYTES",
        "LOG_BACKUP_COUNT",
    ]
    for k in keys:
        monkeypatch.delenv(k, raising=False)

    # Never write into the project's own logs/
    monkeypatch.setenv("LOGTRAIL_LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LOGTRAIL_QUIET", "1")

    _reset_root()

    # Force re-import of path + logger modules
    for mod in [
        "env",
        "env.env",
        "env.paths",
        "bootstrap",
        "logtrail",
        "logger",
        "logger.state",
        "logger.file",
        "logger.console",
        "cli",
        "cli.common",
        "cli.cli_env",
        "cli.cli_logs",
    ]:
        sys.modules.pop(mod, None)

    yield

    _reset_root()


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def make_log():
    """Create a file whose last-modified time is `when`."""

    def _make(path, when: datetime, text: str = "x"):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        ts = when.timestamp()
        os.utime(path, (ts, ts))
        return path

    return _make


@pytest.fixture
def handlers():
    """Collects handlers built in a test and closes them afterwards."""
    made = []
    yield made
    for h in made:
        h.close()
