"""Command-line interface for the book scanning scheduler."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .models import MalformedInstance, ProblemInstance, ScheduleResult
from .parser import ProblemFormatError, load_problem, parse_problem_from_text
from .postprocess import compute_score, schedule_to_dict, schedule_to_text
from .refine import RefineConfig, refine_schedule
from .scheduler import SchedulerConfig, SelectionKey, build_schedule
from .validation import ScheduleValidationError, validate_schedule


def _score_summary_to_dict(summary):
    return {
        "total": summary.total,
        "by_library": [
            {
                "library_id": item.library_id,
                "book_count": item.book_count,
                "score": item.score,
                "start_day": item.start_day,
            }
            for item in summary.by_library
        ],
    }


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _banner(path: str) -> None:
    message = f"Solving file at {path}"
    separator = "#" * len(message)
    print(separator, file=sys.stderr)
    print(message, file=sys.stderr)
    print(separator, file=sys.stderr)


def _solve(problem: ProblemInstance, args: argparse.Namespace) -> ScheduleResult:
    config = SchedulerConfig(selection_key=SelectionKey(args.selection_key), workers=args.workers)
    result = build_schedule(problem, config)
    if args.solver == "milp":
        result = refine_schedule(problem, result, RefineConfig(time_limit=args.time_limit))
    return result


def _emit(problem: ProblemInstance, result: ScheduleResult, args: argparse.Namespace, output_text: str | None) -> int:
    if args.validate:
        try:
            validate_schedule(problem, result)
        except ScheduleValidationError as exc:
            print(f"Schedule validation failed: {exc}", file=sys.stderr)
            return 3

    schedule_text = schedule_to_text(result)
    if output_text:
        Path(output_text).write_text(schedule_text, encoding="utf-8")
    else:
        sys.stdout.write(schedule_text)

    score = compute_score(problem, result)
    if args.output_json:
        payload = schedule_to_dict(result)
        payload["score"] = _score_summary_to_dict(score)
        Path(args.output_json).write_text(json.dumps(payload, indent=2), encoding="utf-8")

    print(
        f"Scheduled {len(result)} of {problem.library_count} libraries | score={score.total}",
        file=sys.stderr,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Book scanning library scheduler")
    parser.add_argument(
        "--input",
        "-i",
        action="append",
        default=[],
        help="Path to a text or JSON instance; repeat to solve several (reads stdin when omitted)",
    )
    parser.add_argument("--output-text", help="File for the schedule when solving a single input")
    parser.add_argument("--output-json", help="Optional file to write the schedule and score JSON")
    parser.add_argument(
        "--selection-key",
        choices=[key.value for key in SelectionKey],
        default=SelectionKey.BY_TOTAL_SCORE.value,
        help="How candidate libraries are ranked on each step",
    )
    parser.add_argument("--workers", type=int, default=1, help="Threads used to value libraries on each step")
    parser.add_argument(
        "--solver",
        choices=["greedy", "milp"],
        default="greedy",
        help="Greedy only, or greedy followed by exact book reassignment",
    )
    parser.add_argument("--time-limit", type=float, default=10.0, help="Time limit for the MILP pass (seconds)")
    parser.add_argument("--validate", action="store_true", help="Validate the produced schedule")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log scheduler steps to stderr")
    args = parser.parse_args(argv)

    if args.workers < 1:
        parser.error("--workers must be at least 1")
    if args.output_text and len(args.input) > 1:
        parser.error("--output-text needs exactly one --input")
    if args.output_json and len(args.input) > 1:
        parser.error("--output-json needs exactly one --input")

    configure_logging(args.verbose)

    if not args.input:
        try:
            problem = parse_problem_from_text(sys.stdin.read())
            result = _solve(problem, args)
        except ProblemFormatError as exc:
            print(f"Failed to parse problem: {exc}", file=sys.stderr)
            return 2
        except MalformedInstance as exc:
            print(f"Malformed instance: {exc}", file=sys.stderr)
            return 4
        return _emit(problem, result, args, args.output_text)

    for path in args.input:
        _banner(path)
        try:
            problem = load_problem(path)
            result = _solve(problem, args)
        except ProblemFormatError as exc:
            print(f"Failed to parse problem: {exc}", file=sys.stderr)
            return 2
        except MalformedInstance as exc:
            print(f"Malformed instance: {exc}", file=sys.stderr)
            return 4
        code = _emit(problem, result, args, args.output_text or f"{path}.out")
        if code:
            return code
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
