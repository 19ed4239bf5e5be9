from retention.anchoring import (
    ANCHORS,
    AnchoringStrategy,
    FixedGridAnchor,
    TrailingAnchor,
    build_anchor,
)
from retention.duration import DEFAULT_WINDOW, format_duration, parse_duration
from retention.errors import (
    ConfigurationError,
    DurationFormatError,
    GranularityUnresolvedError,
    IncompatibleRolloverError,
    RetentionError,
    SweepError,
)
from retention.granularity import Granularity
from retention.handlers import (
    RetentionMixin,
    SizeRetentionFileHandler,
    TimedRetentionFileHandler,
    rollover_pattern,
)
from retention.scheduler import RetentionScheduler, SchedulerState
from retention.sweeper import FileRetentionSweeper, SweepResult, candidate_files

__all__ = [
    "ANCHORS",
    "AnchoringStrategy",
    "FixedGridAnchor",
    "TrailingAnchor",
    "build_anchor",
    "DEFAULT_WINDOW",
    "format_duration",
    "parse_duration",
    "ConfigurationError",
    "DurationFormatError",
    "GranularityUnresolvedError",
    "IncompatibleRolloverError",
    "RetentionError",
    "SweepError",
    "Granularity",
    "RetentionMixin",
    "SizeRetentionFileHandler",
    "TimedRetentionFileHandler",
    "rollover_pattern",
    "RetentionScheduler",
    "SchedulerState",
    "FileRetentionSweeper",
    "SweepResult",
    "candidate_files",
]
