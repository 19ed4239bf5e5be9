from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Protocol

from retention.errors import ConfigurationError
from retention.granularity import (
    Granularity,
    granularity_from_duration,
    granularity_from_pattern,
)
from retention.normalize import reparse, truncate


class AnchoringStrategy(Protocol):
    """
    Decides what a retention window is measured against.

    - granularity() resolves the check unit (raises GranularityUnresolvedError)
    - normalize() maps a timestamp onto the grid used for every comparison
    """

    name: str

    def granularity(self) -> Granularity: ...

    def normalize(self, t: datetime) -> datetime: ...


class FixedGridAnchor:
    """Window boundaries follow the rollover calendar pattern."""

    name = "fixed"

    def __init__(self, pattern: str):
        self.pattern = pattern

    def granularity(self) -> Granularity:
        return granularity_from_pattern(self.pattern)

    def normalize(self, t: datetime) -> datetime:
        # The pattern decides precision, not the granularity.
        return reparse(t, self.pattern)

    def __repr__(self) -> str:
        return f"FixedGridAnchor(pattern={self.pattern!r})"


class TrailingAnchor:
    """Window trails the current moment at the window's own precision."""

    name = "trailing"

    def __init__(self, window: timedelta):
        self.window = window
        self._granularity: Optional[Granularity] = None

    def granularity(self) -> Granularity:
        if self._granularity is None:
            self._granularity = granularity_from_duration(self.window)
        return self._granularity

    def normalize(self, t: datetime) -> datetime:
        return truncate(t, self.granularity())

    def __repr__(self) -> str:
        return f"TrailingAnchor(window={self.window!r})"


ANCHORS = ("trailing", "fixed")


def build_anchor(name: str, *, window: timedelta, pattern: Optional[str]) -> AnchoringStrategy:
    key = (name or "").strip().lower()

    if key == "trailing":
        return TrailingAnchor(window)

    if key == "fixed":
        if pattern is None:
            raise ConfigurationError(
                "Fixed-grid retention needs a time-based rollover pattern"
            )
        return FixedGridAnchor(pattern)

    raise ConfigurationError(
        f"Unknown retention anchor: {name!r} (expected one of {', '.join(ANCHORS)})"
    )
