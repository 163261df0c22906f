"""Per-library valuation against the current ledger and day budget."""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Container, Sequence, Tuple

from .models import Library


@dataclass(frozen=True, slots=True)
class LibraryValuation:
    library_id: int
    book_ids: Tuple[int, ...]
    score: int
    signup_days: int


def library_capacity(library: Library, remaining_days: int) -> int:
    """Distinct books `library` could still scan if signed up now."""
    scanning_days = max(0, remaining_days - library.signup_days)
    return min(scanning_days * library.books_per_day, len(library.books))


def value_library(
    library: Library,
    scores: Sequence[int],
    claimed: Container[int],
    remaining_days: int,
) -> LibraryValuation:
    """Best books `library` can contribute on its own.

    Picks up to capacity unclaimed books with the highest scores, lower
    identifier first on equal scores. Books come back in that order.
    """
    capacity = library_capacity(library, remaining_days)
    if capacity == 0:
        return LibraryValuation(library.library_id, (), 0, library.signup_days)

    available = [book_id for book_id in library.books if book_id not in claimed]
    if not available:
        return LibraryValuation(library.library_id, (), 0, library.signup_days)

    def rank(book_id: int) -> Tuple[int, int]:
        return (-scores[book_id], book_id)

    if capacity >= len(available):
        chosen = sorted(available, key=rank)
    else:
        chosen = heapq.nsmallest(capacity, available, key=rank)

    total = sum(scores[book_id] for book_id in chosen)
    return LibraryValuation(library.library_id, tuple(chosen), total, library.signup_days)
