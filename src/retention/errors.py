from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from retention.sweeper import SweepResult


class RetentionError(Exception):
    """Base error for log retention."""


class ConfigurationError(RetentionError):
    """Retention settings cannot be applied."""


class DurationFormatError(ConfigurationError, ValueError):
    """Retention window string is not a valid duration."""

    def __init__(self, value: object, reason: str = "") -> None:
        self.value = value
        msg = f"Invalid retention window: {value!r}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class GranularityUnresolvedError(ConfigurationError):
    """No check interval can be derived from the pattern or window."""


class IncompatibleRolloverError(ConfigurationError):
    """Handler rolls over less often than the retention window allows."""


class SweepError(RetentionError):
    """
    One or more filesystem operations failed during a sweep.

    Every candidate is still processed; `failures` lists what went wrong
    and `result` holds what was deleted before the error surfaced.
    """

    def __init__(
        self,
        failures: list[tuple[Path, Exception]],
        result: "SweepResult | None" = None,
    ) -> None:
        self.failures = failures
        self.result = result
        detail = "; ".join(f"{p}: {e}" for p, e in failures)
        super().__init__(f"Retention sweep failed for {len(failures)} path(s): {detail}")
