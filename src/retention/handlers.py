"""
handlers.py

Rotating file handlers that also delete log files older than a retention window.

Retention piggybacks on log writes: every emit() first asks the scheduler
whether a sweep is due. There is no timer thread, so a process that stops
logging also stops sweeping.

The window is anchored one of two ways:
- "trailing": measured back from now, at the window's own precision
- "fixed": measured on the grid of the rollover calendar pattern
  (TimedRetentionFileHandler only)
"""

from __future__ import annotations

import contextlib
import logging
import os
import sys
import traceback
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

from retention.anchoring import AnchoringStrategy, build_anchor
from retention.duration import DEFAULT_WINDOW, format_duration, parse_duration
from retention.errors import (
    ConfigurationError,
    DurationFormatError,
    IncompatibleRolloverError,
)
from retention.scheduler import RetentionScheduler
from retention.sweeper import FileRetentionSweeper, SweepResult

Clock = Callable[[], datetime]
WindowParser = Callable[[str], timedelta]

# Same suffixes TimedRotatingFileHandler picks for each `when`.
_ROLLOVER_PATTERNS = {
    "S": "%Y-%m-%d_%H-%M-%S",
    "M": "%Y-%m-%d_%H-%M",
    "H": "%Y-%m-%d_%H",
    "D": "%Y-%m-%d",
    "MIDNIGHT": "%Y-%m-%d",
}


def rollover_pattern(when: str) -> str:
    """Calendar pattern of a TimedRotatingFileHandler built with `when`."""
    key = when.upper()
    if key.startswith("W") and len(key) == 2 and key[1] in "0123456":
        key = "D"
    try:
        return _ROLLOVER_PATTERNS[key]
    except KeyError:
        raise ConfigurationError(f"Invalid rollover interval: {when!r}") from None


class RetentionMixin:
    """
    Retention behaviour for a logging.FileHandler subclass.

    Subclasses call activate_retention() at the end of __init__ and may
    override _calendar_pattern() / _rollover_period().
    """

    anchor: AnchoringStrategy
    scheduler: RetentionScheduler
    sweeper: FileRetentionSweeper

    def activate_retention(
        self,
        retention: Union[str, timedelta, None] = None,
        *,
        anchor: str = "trailing",
        clock: Optional[Clock] = None,
        parser: WindowParser = parse_duration,
    ) -> None:
        try:
            self._configure_retention(retention, anchor, clock, parser)
        except Exception:
            self.close()
            raise

        try:
            self.scheduler.activate()
        except ConfigurationError:
            self.close()
            raise
        except Exception as e:
            self.handle_retention_error(e)

    def _configure_retention(
        self,
        retention: Union[str, timedelta, None],
        anchor: str,
        clock: Optional[Clock],
        parser: WindowParser,
    ) -> None:
        if retention is None:
            window = DEFAULT_WINDOW
        elif isinstance(retention, timedelta):
            window = retention
        else:
            window = parser(retention)

        if window < timedelta(0):
            raise DurationFormatError(retention, "negative window")

        self.clock: Clock = clock or datetime.now
        self.window = window
        self.anchor = build_anchor(anchor, window=window, pattern=self._calendar_pattern())

        period = self._rollover_period()
        if period is not None and period > window:
            raise IncompatibleRolloverError(
                f"Rollover every {format_duration(period)} is coarser than the "
                f"retention window {format_duration(window)}"
            )

        self.sweeper = FileRetentionSweeper(
            self.baseFilename,
            window,
            self.anchor.normalize,
            delete=self.delete_file,
            access=self.filesystem_access,
        )
        self.scheduler = RetentionScheduler(self.anchor, self.sweeper.sweep, clock=self.clock)

    # ------------------------------------------------------------------
    # Collaborator hooks
    # ------------------------------------------------------------------

    def _calendar_pattern(self) -> Optional[str]:
        return None

    def _rollover_period(self) -> Optional[timedelta]:
        return None

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.scheduler.check()
        except Exception:
            self.handleError(record)

        super().emit(record)

    def delete_file(self, path: Path) -> None:
        if os.path.abspath(path) == self.baseFilename and self.stream is not None:
            # Next emit() reopens a fresh file.
            self.stream.close()
            self.stream = None

        try:
            os.remove(path)
        except FileNotFoundError:
            pass

    @contextlib.contextmanager
    def filesystem_access(self) -> Iterator[None]:
        # Handler lock is an RLock; emit() already holds it.
        self.acquire()
        try:
            yield
        finally:
            self.release()

    def handle_retention_error(self, exc: BaseException) -> None:
        """Report an activation-time sweep failure the way Handler.handleError does."""
        if logging.raiseExceptions and sys.stderr:
            try:
                sys.stderr.write(f"--- Logging retention error ({self.baseFilename}) ---\n")
                traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
            except OSError:
                pass

    # ------------------------------------------------------------------
    # Operations / diagnostics
    # ------------------------------------------------------------------

    def sweep_now(self) -> SweepResult:
        return self.scheduler.run()

    def expired_files(self) -> list[Path]:
        return self.sweeper.expired(self.clock())

    @property
    def retention_window(self) -> str:
        return format_duration(self.window)

    @property
    def check_interval(self) -> Optional[timedelta]:
        return self.scheduler.check_interval

    @property
    def next_check(self) -> Optional[datetime]:
        return self.scheduler.next_check


class TimedRetentionFileHandler(RetentionMixin, TimedRotatingFileHandler):
    def __init__(
        self,
        filename,
        when: str = "midnight",
        interval: int = 1,
        backupCount: int = 0,
        encoding: Optional[str] = None,
        delay: bool = False,
        utc: bool = False,
        atTime=None,
        errors: Optional[str] = None,
        *,
        retention: Union[str, timedelta, None] = None,
        anchor: str = "trailing",
        clock: Optional[Clock] = None,
        parser: WindowParser = parse_duration,
    ):
        TimedRotatingFileHandler.__init__(
            self,
            filename,
            when=when,
            interval=interval,
            backupCount=backupCount,
            encoding=encoding,
            delay=delay,
            utc=utc,
            atTime=atTime,
            errors=errors,
        )
        self.activate_retention(retention, anchor=anchor, clock=clock, parser=parser)

    def _calendar_pattern(self) -> Optional[str]:
        return self.suffix

    def _rollover_period(self) -> Optional[timedelta]:
        # already multiplied out to seconds by TimedRotatingFileHandler
        return timedelta(seconds=self.interval)


class SizeRetentionFileHandler(RetentionMixin, RotatingFileHandler):
    """Size-based rotation; only the trailing anchor applies."""

    def __init__(
        self,
        filename,
        mode: str = "a",
        maxBytes: int = 0,
        backupCount: int = 0,
        encoding: Optional[str] = None,
        delay: bool = False,
        errors: Optional[str] = None,
        *,
        retention: Union[str, timedelta, None] = None,
        anchor: str = "trailing",
        clock: Optional[Clock] = None,
        parser: WindowParser = parse_duration,
    ):
        RotatingFileHandler.__init__(
            self,
            filename,
            mode=mode,
            maxBytes=maxBytes,
            backupCount=backupCount,
            encoding=encoding,
            delay=delay,
            errors=errors,
        )
        self.activate_retention(retention, anchor=anchor, clock=clock, parser=parser)
