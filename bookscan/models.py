"""Core data structures shared by the scheduling modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Tuple


class MalformedInstance(ValueError):
    """Raised when a problem instance violates a structural invariant."""


@dataclass(frozen=True, slots=True)
class Library:
    library_id: int
    signup_days: int
    books_per_day: int
    books: Tuple[int, ...]


@dataclass(frozen=True, slots=True)
class ProblemInstance:
    days: int
    scores: Tuple[int, ...]
    libraries: Tuple[Library, ...]

    @property
    def book_count(self) -> int:
        return len(self.scores)

    @property
    def library_count(self) -> int:
        return len(self.libraries)

    def validate(self) -> None:
        """Raise `MalformedInstance` unless every invariant holds."""
        if self.days < 0:
            raise MalformedInstance(f"day budget must be non-negative, got {self.days}")

        for book_id, score in enumerate(self.scores):
            if score < 0:
                raise MalformedInstance(f"book {book_id} has negative score {score}")

        book_count = len(self.scores)
        for position, library in enumerate(self.libraries):
            if library.library_id != position:
                raise MalformedInstance(
                    f"library at position {position} carries identifier {library.library_id}"
                )
            if library.signup_days <= 0:
                raise MalformedInstance(
                    f"library {position} has non-positive signup cost {library.signup_days}"
                )
            if library.books_per_day <= 0:
                raise MalformedInstance(
                    f"library {position} has non-positive throughput {library.books_per_day}"
                )
            seen: set[int] = set()
            for book_id in library.books:
                if not 0 <= book_id < book_count:
                    raise MalformedInstance(
                        f"library {position} references book {book_id} outside 0..{book_count - 1}"
                    )
                if book_id in seen:
                    raise MalformedInstance(f"library {position} lists book {book_id} twice")
                seen.add(book_id)


@dataclass(frozen=True, slots=True)
class ScheduledLibrary:
    library_id: int
    book_ids: Tuple[int, ...]


@dataclass(frozen=True, slots=True)
class ScheduleResult:
    libraries: Tuple[ScheduledLibrary, ...] = ()

    def __len__(self) -> int:
        return len(self.libraries)

    def __iter__(self) -> Iterator[ScheduledLibrary]:
        return iter(self.libraries)

    def total_score(self, problem: ProblemInstance) -> int:
        return sum(problem.scores[book_id] for entry in self.libraries for book_id in entry.book_ids)


@dataclass(slots=True)
class ScoreSlice:
    library_id: int
    book_count: int
    score: int
    start_day: int


@dataclass(slots=True)
class ScoreSummary:
    total: int
    by_library: List[ScoreSlice] = field(default_factory=list)
