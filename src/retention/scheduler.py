from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Optional

from retention.anchoring import AnchoringStrategy
from retention.granularity import Granularity
from retention.normalize import shift


class SchedulerState(str, Enum):
    IDLE = "idle"
    SWEEPING = "sweeping"


class RetentionScheduler:
    """
    Decides when a sweep is due.

    Called on every write, so it must be cheap when nothing is due:
    a single clock read and comparison. Missed periods collapse into
    one sweep; nothing is caught up.
    """

    def __init__(
        self,
        anchor: AnchoringStrategy,
        sweep: Callable[[datetime], Any],
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.anchor = anchor
        self._sweep = sweep
        self._clock = clock

        self.state = SchedulerState.IDLE
        self.granularity: Optional[Granularity] = None
        self.check_interval: Optional[timedelta] = None
        self.next_check: Optional[datetime] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def activate(self) -> Any:
        """Resolve the check interval, then sweep once regardless of deadline."""
        self.granularity = self.anchor.granularity()
        self.check_interval = self.granularity.interval
        return self.run()

    def check(self) -> Any:
        """Sweep if the deadline has passed. Returns the sweep result or None."""
        if self.state is SchedulerState.SWEEPING or self.next_check is None:
            return None

        if self._clock() < self.next_check:
            return None

        return self.run()

    def run(self) -> Any:
        if self.check_interval is None:
            raise RuntimeError("RetentionScheduler.run() called before activate()")

        now = self._clock()
        self.state = SchedulerState.SWEEPING
        try:
            return self._sweep(now)
        finally:
            # Advance even on failure so a broken directory isn't retried per write.
            self.next_check = self._deadline_after(now)
            self.state = SchedulerState.IDLE

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _deadline_after(self, now: datetime) -> datetime:
        assert self.check_interval is not None

        deadline = shift(self.anchor.normalize(now), self.check_interval)
        if deadline <= now:
            # Pattern without a date part normalizes into the past.
            deadline = shift(now, self.check_interval)
        return deadline
