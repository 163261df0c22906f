"""Score `.out` schedules produced by this or any other solver."""

from __future__ import annotations

from pathlib import Path

from .models import ProblemInstance, ScheduleResult, ScoreSummary
from .parser import load_problem
from .postprocess import compute_score, text_to_schedule
from .validation import validate_schedule


class ScheduleFormatError(ValueError):
    """A schedule file is unreadable or breaks the library/book line layout."""


def load_schedule(path: str | Path) -> ScheduleResult:
    """Read a schedule file; layout errors come back as `ScheduleFormatError`."""
    schedule_path = Path(path)
    try:
        text = schedule_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ScheduleFormatError(f"cannot read schedule {schedule_path}: {exc}") from exc
    try:
        return text_to_schedule(text)
    except ValueError as exc:
        raise ScheduleFormatError(f"{schedule_path}: {exc}") from exc


def score_schedule(
    problem: ProblemInstance,
    result: ScheduleResult,
    *,
    validate: bool = False,
) -> ScoreSummary:
    """Total the distinct books `result` scans.

    With `validate`, any rule break raises `ScheduleValidationError` instead
    of being scored leniently. Library or book ids the instance does not
    allow raise `ValueError` either way.
    """
    if validate:
        validate_schedule(problem, result)
    return compute_score(problem, result)


def score_from_files(
    problem_path: str | Path,
    schedule_path: str | Path,
    *,
    validate: bool = False,
) -> ScoreSummary:
    problem = load_problem(problem_path)
    # Held-book checks below rely on the instance's own ids being in range.
    problem.validate()
    return score_schedule(problem, load_schedule(schedule_path), validate=validate)
