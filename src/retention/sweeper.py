from __future__ import annotations

import contextlib
import os
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, ContextManager, Iterable

from retention.errors import SweepError
from retention.normalize import shift


@dataclass(frozen=True)
class SweepResult:
    now: datetime
    cutoff: datetime
    deleted: list[Path] = field(default_factory=list)
    failures: list[tuple[Path, Exception]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def candidate_files(log_file: str | os.PathLike) -> list[Path]:
    """Regular files next to `log_file` whose name contains its stem."""
    log_file = Path(log_file)
    return sorted(
        p for p in log_file.parent.iterdir() if log_file.stem in p.name and p.is_file()
    )


def _remove(path: Path) -> None:
    path.unlink(missing_ok=True)


class FileRetentionSweeper:
    """
    Deletes files next to `log_file` whose last write is older than the window.

    Candidates are regular files in the same directory (not recursive) whose
    name contains the log file's stem. Timestamps are compared after
    `normalize`, so files in the same bucket as the cutoff are kept.
    """

    def __init__(
        self,
        log_file: str | os.PathLike,
        window: timedelta,
        normalize: Callable[[datetime], datetime],
        delete: Callable[[Path], None] = _remove,
        access: Callable[[], ContextManager] = contextlib.nullcontext,
    ):
        self.log_file = Path(log_file)
        self.window = window
        self.normalize = normalize
        self.delete = delete
        self.access = access

    @property
    def directory(self) -> Path:
        return self.log_file.parent

    @property
    def stem(self) -> str:
        return self.log_file.stem

    def cutoff(self, now: datetime) -> datetime:
        return shift(self.normalize(now), -self.window)

    def candidates(self) -> list[Path]:
        return candidate_files(self.log_file)

    def expired(self, now: datetime) -> list[Path]:
        """Files a sweep at `now` would delete. Nothing is touched."""
        cutoff = self.cutoff(now)
        with self.access():
            return [p for p, _ in self._scan(self._list(), cutoff, [])]

    def sweep(self, now: datetime) -> SweepResult:
        cutoff = self.cutoff(now)
        deleted: list[Path] = []
        failures: list[tuple[Path, Exception]] = []

        with self.access():
            for path, _ in self._scan(self._list(), cutoff, failures):
                try:
                    self.delete(path)
                except OSError as e:
                    failures.append((path, e))
                else:
                    deleted.append(path)

        result = SweepResult(now=now, cutoff=cutoff, deleted=deleted, failures=failures)
        if failures:
            raise SweepError(failures, result)
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _list(self) -> list[Path]:
        try:
            return self.candidates()
        except OSError as e:
            raise SweepError([(self.directory, e)]) from e

    def _scan(
        self,
        paths: Iterable[Path],
        cutoff: datetime,
        failures: list[tuple[Path, Exception]],
    ) -> Iterable[tuple[Path, datetime]]:
        for path in paths:
            try:
                mtime = datetime.fromtimestamp(path.stat().st_mtime)
                stamp = self.normalize(mtime)
            except FileNotFoundError:
                # Removed since listing; nothing left to do.
                continue
            except (OSError, OverflowError, ValueError) as e:
                # mtime outside what datetime or the pattern can represent
                failures.append((path, e))
                continue

            if stamp < cutoff:
                yield path, stamp
