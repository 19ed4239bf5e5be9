"""
duration.py

Retention window parsing.

Accepted forms (case-insensitive, surrounding whitespace ignored):
- "<N>d" day shorthand: "5d", "5 d", "30days"
- structured literal "[d.]hh:mm[:ss[.fffffff]]": "00:05:00", "5.00:00:00"
- bare integer day count: "5"
- ISO-8601 duration: "PT5M", "P2DT12H"
"""

from __future__ import annotations

import re
from datetime import timedelta

import isodate

from retention.errors import DurationFormatError

# 100 years (365-day years). timedelta.max itself cannot be subtracted
# from any real timestamp.
DEFAULT_WINDOW = timedelta(days=36500)

_DAY_MARKER = "d"

_STRUCTURED = re.compile(
    r"^(?:(?P<days>\d+)\.)?"
    r"(?P<hours>\d{1,2}):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2})(?:\.(?P<fraction>\d{1,7}))?)?$"
)


def parse_duration(value: str) -> timedelta:
    if not isinstance(value, str):
        raise DurationFormatError(value, "expected a string")

    text = value.strip().lower()
    if not text:
        raise DurationFormatError(value, "empty")

    if text.startswith("p"):
        return _parse_iso(value, text)

    if _DAY_MARKER in text:
        head = text[: text.index(_DAY_MARKER)].strip()
        return _days(value, head)

    if text.isdigit():
        return _days(value, text)

    m = _STRUCTURED.match(text)
    if not m:
        raise DurationFormatError(value, "expected [d.]hh:mm[:ss[.fffffff]]")

    hours = int(m.group("hours"))
    minutes = int(m.group("minutes"))
    seconds = int(m.group("seconds") or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        raise DurationFormatError(value, "component out of range")

    # Up to seven fractional digits (100ns ticks); timedelta keeps microseconds.
    ticks = int((m.group("fraction") or "0").ljust(7, "0"))

    try:
        return timedelta(
            days=int(m.group("days") or 0),
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            microseconds=ticks // 10,
        )
    except OverflowError as e:
        raise DurationFormatError(value, "too large") from e


def format_duration(td: timedelta) -> str:
    """Canonical `[d.]hh:mm:ss[.fffffff]` rendering, the inverse of parse_duration."""
    if td < timedelta(0):
        raise ValueError(f"Negative duration: {td}")

    hours, rem = divmod(td.seconds, 3600)
    minutes, seconds = divmod(rem, 60)

    out = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if td.days:
        out = f"{td.days}.{out}"
    if td.microseconds:
        out = f"{out}.{td.microseconds * 10:07d}"
    return out


def _days(original: str, digits: str) -> timedelta:
    if not digits.isdigit():
        raise DurationFormatError(original, "day count must be a non-negative integer")
    try:
        return timedelta(days=int(digits))
    except OverflowError as e:
        raise DurationFormatError(original, "too large") from e


def _parse_iso(original: str, text: str) -> timedelta:
    try:
        parsed = isodate.parse_duration(text.upper())
    except (isodate.ISO8601Error, ValueError, OverflowError) as e:
        raise DurationFormatError(original, str(e)) from e

    if not isinstance(parsed, timedelta):
        # isodate.Duration: years/months have no fixed length
        raise DurationFormatError(original, "years and months are not supported")
    if parsed < timedelta(0):
        raise DurationFormatError(original, "negative")
    return parsed
