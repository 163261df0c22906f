"""Schedule utilities: scoring and formatting."""

from __future__ import annotations

from typing import List

from .models import ProblemInstance, ScheduledLibrary, ScheduleResult, ScoreSlice, ScoreSummary


def compute_score(problem: ProblemInstance, result: ScheduleResult) -> ScoreSummary:
    """Score `result` by simulating sign-ups in order.

    A library scans its listed books in order, at most its capacity for the
    days left after its sign-up finishes. Each book scores once no matter how
    many libraries scan it.
    """
    scanned: set[int] = set()
    slices: List[ScoreSlice] = []
    total = 0
    day = 0

    for entry in result:
        if not 0 <= entry.library_id < problem.library_count:
            raise ValueError(f"schedule references unknown library {entry.library_id}")
        library = problem.libraries[entry.library_id]
        day += library.signup_days
        capacity = max(0, problem.days - day) * library.books_per_day
        held = set(library.books)
        for book_id in entry.book_ids:
            if book_id not in held:
                raise ValueError(f"library {entry.library_id} does not hold book {book_id}")

        library_score = 0
        counted = 0
        for book_id in entry.book_ids[:capacity]:
            counted += 1
            if book_id in scanned:
                continue
            scanned.add(book_id)
            library_score += problem.scores[book_id]

        total += library_score
        slices.append(
            ScoreSlice(
                library_id=entry.library_id,
                book_count=counted,
                score=library_score,
                start_day=day,
            )
        )

    return ScoreSummary(total=total, by_library=slices)


def text_to_schedule(text: str) -> ScheduleResult:
    lines = [line.strip() for line in text.splitlines()]
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        raise ValueError("schedule is empty; expected library count")

    try:
        library_count = int(lines[0])
    except ValueError as exc:
        raise ValueError(f"invalid library count line: {lines[0]!r}") from exc

    index = 1
    entries: List[ScheduledLibrary] = []
    for _ in range(library_count):
        if index >= len(lines):
            raise ValueError("unexpected end of schedule while reading library header")
        header = lines[index].split()
        index += 1
        if len(header) != 2:
            raise ValueError(f"invalid library header line: {lines[index - 1]!r}")
        library_id = int(header[0])
        book_count = int(header[1])

        # An empty book line may be missing at the very end of the file.
        book_line = lines[index] if index < len(lines) else ""
        index += 1
        book_ids = tuple(int(token) for token in book_line.split())
        if len(book_ids) != book_count:
            raise ValueError(
                f"library {library_id} declares {book_count} books but lists {len(book_ids)}"
            )
        entries.append(ScheduledLibrary(library_id=library_id, book_ids=book_ids))

    if any(lines[index:]):
        raise ValueError("unexpected trailing lines after the last library")

    return ScheduleResult(libraries=tuple(entries))


def schedule_to_text(result: ScheduleResult) -> str:
    lines: List[str] = [str(len(result))]
    for entry in result:
        lines.append(f"{entry.library_id} {len(entry.book_ids)}")
        lines.append(" ".join(str(book_id) for book_id in entry.book_ids))
    return "\n".join(lines) + "\n"


def schedule_to_dict(result: ScheduleResult) -> dict:
    return {
        "libraries": [
            {
                "library_id": entry.library_id,
                "books": list(entry.book_ids),
            }
            for entry in result
        ]
    }
