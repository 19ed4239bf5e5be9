from __future__ import annotations

import re
from datetime import datetime, timedelta
from enum import Enum

from retention.errors import GranularityUnresolvedError

# Every component non-zero so a pattern's round trip shows what it keeps.
REFERENCE_TIMESTAMP = datetime(1999, 1, 1, 1, 1, 1)


class Granularity(str, Enum):
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"

    @property
    def interval(self) -> timedelta:
        return _INTERVALS[self]


_INTERVALS = {
    Granularity.SECOND: timedelta(seconds=1),
    Granularity.MINUTE: timedelta(minutes=1),
    Granularity.HOUR: timedelta(hours=1),
    Granularity.DAY: timedelta(days=1),
}


def _first_non_zero(second: int, minute: int, hour: int, day: int) -> Granularity | None:
    # finest unit first
    for value, unit in (
        (second, Granularity.SECOND),
        (minute, Granularity.MINUTE),
        (hour, Granularity.HOUR),
        (day, Granularity.DAY),
    ):
        if value > 0:
            return unit
    return None


def granularity_from_pattern(pattern: str) -> Granularity:
    """
    Finest unit a strftime pattern preserves.

    The reference timestamp is formatted with the pattern and parsed back;
    components the pattern drops come back as strptime defaults
    (zero for time fields, 1 for the day).
    """
    if not pattern:
        raise GranularityUnresolvedError("Empty calendar pattern")

    try:
        probe = datetime.strptime(REFERENCE_TIMESTAMP.strftime(pattern), pattern)
    except (ValueError, re.error) as e:
        raise GranularityUnresolvedError(
            f"Calendar pattern {pattern!r} does not round-trip: {e}"
        ) from e

    unit = _first_non_zero(probe.second, probe.minute, probe.hour, probe.day)
    if unit is None:
        raise GranularityUnresolvedError(
            f"Calendar pattern {pattern!r} encodes no usable time unit"
        )
    return unit


def granularity_from_duration(window: timedelta) -> Granularity:
    """Finest non-zero component of the retention window itself."""
    if window < timedelta(0):
        raise GranularityUnresolvedError(f"Retention window {window} is negative")

    hours, rem = divmod(window.seconds, 3600)
    minutes, seconds = divmod(rem, 60)

    unit = _first_non_zero(seconds, minutes, hours, window.days)
    if unit is None:
        raise GranularityUnresolvedError(
            f"Retention window {window} has no second, minute, hour or day component"
        )
    return unit
