"""Running record of books claimed while a schedule is being built."""

from __future__ import annotations

from typing import FrozenSet, Iterable, Iterator, Set


class InternalConsistencyError(AssertionError):
    """Raised when the scheduler tries to claim a book or library twice."""


class BookLedger:
    """Claimed book identifiers for one schedule build.

    Claims are permanent: a book never leaves the ledger once added.
    """

    __slots__ = ("_claimed",)

    def __init__(self) -> None:
        self._claimed: Set[int] = set()

    def is_claimed(self, book_id: int) -> bool:
        return book_id in self._claimed

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._claimed

    def __len__(self) -> int:
        return len(self._claimed)

    def __iter__(self) -> Iterator[int]:
        return iter(self._claimed)

    def claim(self, book_ids: Iterable[int]) -> None:
        batch = list(book_ids)
        fresh = set(batch)
        if len(fresh) != len(batch):
            raise InternalConsistencyError(f"claim batch repeats a book identifier: {batch}")
        already = fresh & self._claimed
        if already:
            raise InternalConsistencyError(f"books already claimed: {sorted(already)}")
        self._claimed |= fresh

    def snapshot(self) -> FrozenSet[int]:
        """Immutable view handed to valuation workers."""
        return frozenset(self._claimed)
