from datetime import datetime, timedelta

import pytest

from retention.anchoring import FixedGridAnchor, TrailingAnchor
from retention.granularity import Granularity
from retention.scheduler import RetentionScheduler, SchedulerState


def _scheduler(clock, anchor=None):
    calls = []

    def sweep(now):
        calls.append(now)
        return len(calls)

    anchor = anchor or TrailingAnchor(timedelta(minutes=5))
    return RetentionScheduler(anchor, sweep, clock=clock), calls


def test_activation_sweeps_exactly_once(clock):
    sched, calls = _scheduler(clock)

    sched.activate()

    assert calls == [clock.now]
    assert sched.granularity is Granularity.MINUTE
    assert sched.check_interval == timedelta(minutes=1)
    assert sched.next_check == datetime(2024, 6, 12, 12, 31)
    assert sched.state is SchedulerState.IDLE


def test_check_is_noop_before_deadline(clock):
    sched, calls = _scheduler(clock)
    sched.activate()

    clock.advance(seconds=14)
    assert sched.check() is None
    assert len(calls) == 1


def test_check_sweeps_at_deadline(clock):
    sched, calls = _scheduler(clock)
    sched.activate()

    clock.advance(seconds=15)  # exactly 12:31:00
    assert sched.check() == 2
    assert calls[-1] == datetime(2024, 6, 12, 12, 31)
    assert sched.next_check == datetime(2024, 6, 12, 12, 32)

    # same deadline never sweeps twice
    assert sched.check() is None
    assert len(calls) == 2


def test_missed_periods_collapse_into_one_sweep(clock):
    sched, calls = _scheduler(clock)
    sched.activate()

    clock.advance(minutes=10)
    sched.check()
    sched.check()

    assert len(calls) == 2
    assert sched.next_check == datetime(2024, 6, 12, 12, 41)


@pytest.mark.parametrize(
    "anchor",
    [
        TrailingAnchor(timedelta(seconds=30)),
        TrailingAnchor(timedelta(days=2)),
        FixedGridAnchor("%Y-%m-%d_%H"),
        # normalizes into 1900; the deadline must still move forward
        FixedGridAnchor("%H-%M"),
    ],
)
def test_next_check_exceeds_trigger(clock, anchor):
    sched, calls = _scheduler(clock, anchor)
    sched.activate()
    assert sched.next_check > calls[-1]

    clock.advance(days=3)
    sched.check()
    assert sched.next_check > calls[-1]


def test_failed_sweep_still_reschedules(clock):
    def sweep(now):
        raise OSError("disk on fire")

    sched = RetentionScheduler(TrailingAnchor(timedelta(minutes=5)), sweep, clock=clock)

    with pytest.raises(OSError):
        sched.activate()

    assert sched.state is SchedulerState.IDLE
    assert sched.next_check == datetime(2024, 6, 12, 12, 31)


def test_reentrant_check_is_ignored(clock):
    nested = []

    def sweep(now):
        nested.append(sched.check())
        return "swept"

    sched = RetentionScheduler(TrailingAnchor(timedelta(minutes=5)), sweep, clock=clock)
    sched.activate()
    clock.advance(minutes=2)

    assert sched.check() == "swept"
    assert nested == [None, None]


def test_check_before_activation_does_nothing(clock):
    sched, calls = _scheduler(clock)
    assert sched.check() is None
    assert calls == []


def test_run_before_activation_raises(clock):
    sched, _ = _scheduler(clock)
    with pytest.raises(RuntimeError):
        sched.run()
