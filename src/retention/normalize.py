from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from retention.granularity import Granularity

# Placeholder clamp for an unresolved granularity. Activation rejects that
# case, so this only applies to direct callers of truncate().
FALLBACK_EPSILON = timedelta(seconds=5)


def truncate(t: datetime, granularity: Optional[Granularity]) -> datetime:
    """
    Zero every component finer than `granularity`.

    SECOND leaves the timestamp untouched, microseconds included.
    """
    if granularity is Granularity.SECOND:
        return t
    if granularity is Granularity.MINUTE:
        return t.replace(second=0, microsecond=0)
    if granularity is Granularity.HOUR:
        return t.replace(minute=0, second=0, microsecond=0)
    if granularity is Granularity.DAY:
        return t.replace(hour=0, minute=0, second=0, microsecond=0)

    return shift(t, -FALLBACK_EPSILON)


def reparse(t: datetime, pattern: str) -> datetime:
    """Project a timestamp through a strftime pattern and back."""
    return datetime.strptime(t.strftime(pattern), pattern)


def shift(t: datetime, delta: timedelta) -> datetime:
    """`t + delta`, clamped to the representable datetime range."""
    try:
        return t + delta
    except OverflowError:
        return datetime.min if delta < timedelta(0) else datetime.max
