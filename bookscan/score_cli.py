"""CLI wrapper to score and validate existing schedules."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .cli import configure_logging
from .models import MalformedInstance
from .parser import ProblemFormatError, load_problem
from .postprocess import schedule_to_dict
from .scorer import ScheduleFormatError, load_schedule, score_schedule
from .validation import ScheduleValidationError


def _summary_to_dict(score):
    return {
        "total": score.total,
        "by_library": [
            {
                "library_id": item.library_id,
                "book_count": item.book_count,
                "score": item.score,
                "start_day": item.start_day,
            }
            for item in score.by_library
        ],
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Score and validate an existing .out schedule.")
    parser.add_argument("--input", "-i", required=True, help="Path to the problem definition (text or JSON)")
    parser.add_argument("--schedule", "-s", required=True, help="Path to the schedule file (.out)")
    parser.add_argument("--validate", action="store_true", help="Run scanning rule validation")
    parser.add_argument("--output-json", help="Optional path to write score + schedule JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    try:
        problem = load_problem(args.input)
        problem.validate()
    except ProblemFormatError as exc:
        print(f"Failed to parse problem: {exc}", file=sys.stderr)
        return 2
    except MalformedInstance as exc:
        print(f"Malformed instance: {exc}", file=sys.stderr)
        return 4

    try:
        result = load_schedule(args.schedule)
    except ScheduleFormatError as exc:
        print(f"Failed to parse schedule: {exc}", file=sys.stderr)
        return 2

    try:
        score = score_schedule(problem, result, validate=args.validate)
    except ScheduleValidationError as exc:
        print(f"Validation failed: {exc}", file=sys.stderr)
        return 3
    except ValueError as exc:
        print(f"Failed to score schedule: {exc}", file=sys.stderr)
        return 2

    print(f"Score: {score.total}")

    if args.output_json:
        payload = schedule_to_dict(result)
        payload["score"] = _summary_to_dict(score)
        Path(args.output_json).write_text(json.dumps(payload, indent=2), encoding="utf-8")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
