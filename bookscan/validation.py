"""Legality checks for schedules."""

from __future__ import annotations

from .models import ProblemInstance, ScheduleResult


class ScheduleValidationError(ValueError):
    """Raised when a schedule violates the scanning rules."""


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ScheduleValidationError(message)


def validate_schedule(problem: ProblemInstance, result: ScheduleResult) -> None:
    """Validate scanning rules and raise `ScheduleValidationError` on failure."""
    seen_libraries: set[int] = set()
    scanned: dict[int, int] = {}
    day = 0

    for position, entry in enumerate(result):
        library_id = entry.library_id
        _require(
            0 <= library_id < problem.library_count,
            f"schedule references unknown library {library_id}",
        )
        _require(library_id not in seen_libraries, f"library {library_id} is signed up twice")
        seen_libraries.add(library_id)

        library = problem.libraries[library_id]
        day += library.signup_days
        _require(
            day <= problem.days,
            f"library {library_id} finishes sign-up on day {day}, past the budget of {problem.days}",
        )

        capacity = (problem.days - day) * library.books_per_day
        _require(capacity > 0, f"library {library_id} at position {position} has no scanning capacity")
        _require(
            len(entry.book_ids) <= capacity,
            f"library {library_id} scans {len(entry.book_ids)} books, capacity is {capacity}",
        )

        held = set(library.books)
        for book_id in entry.book_ids:
            _require(book_id in held, f"library {library_id} does not hold book {book_id}")
            owner = scanned.get(book_id)
            _require(
                owner is None,
                f"book {book_id} assigned to library {library_id} was already assigned to library {owner}",
            )
            scanned[book_id] = library_id
