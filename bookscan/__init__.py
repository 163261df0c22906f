"""High-level entry points for the book scanning scheduler."""

from .models import Library, MalformedInstance, ProblemInstance, ScheduledLibrary, ScheduleResult
from .scheduler import GreedyScheduler, SchedulerConfig, SelectionKey, build_schedule
from .validation import validate_schedule
from .scorer import score_from_files, score_schedule, load_schedule

__all__ = [
    "build_schedule",
    "GreedyScheduler",
    "SchedulerConfig",
    "SelectionKey",
    "Library",
    "ProblemInstance",
    "ScheduledLibrary",
    "ScheduleResult",
    "MalformedInstance",
    "validate_schedule",
    "score_from_files",
    "score_schedule",
    "load_schedule",
]
