"""Input parsing for book scanning instances."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Sequence

from .models import Library, ProblemInstance


class ProblemFormatError(ValueError):
    """Raised when an input file cannot be parsed."""


def _tokens_from_text(raw_text: str) -> List[str]:
    tokens = raw_text.split()
    if not tokens:
        raise ProblemFormatError("input is empty; expected problem definition")
    return tokens


def _take(tokens: Sequence[str], index: int) -> str:
    try:
        return tokens[index]
    except IndexError as exc:
        raise ProblemFormatError("unexpected end of input while parsing problem definition") from exc


def _parse_from_tokens(tokens: Sequence[str]) -> ProblemInstance:
    pointer = 0

    def next_int() -> int:
        nonlocal pointer
        token = _take(tokens, pointer)
        pointer += 1
        try:
            return int(token)
        except ValueError as exc:
            raise ProblemFormatError(f"expected an integer, got {token!r}") from exc

    book_count = next_int()
    library_count = next_int()
    days = next_int()
    if book_count < 0 or library_count < 0:
        raise ProblemFormatError(f"negative header counts: books={book_count} libraries={library_count}")

    scores = tuple(next_int() for _ in range(book_count))

    libraries: List[Library] = []
    for library_id in range(library_count):
        held = next_int()
        signup_days = next_int()
        books_per_day = next_int()
        if held < 0:
            raise ProblemFormatError(f"library {library_id} declares {held} books")
        books = tuple(next_int() for _ in range(held))
        libraries.append(
            Library(
                library_id=library_id,
                signup_days=signup_days,
                books_per_day=books_per_day,
                books=books,
            )
        )

    if pointer != len(tokens):
        raise ProblemFormatError(f"{len(tokens) - pointer} unexpected trailing tokens after the last library")

    return ProblemInstance(days=days, scores=scores, libraries=tuple(libraries))


def parse_problem_from_text(raw_text: str) -> ProblemInstance:
    """Parse either whitespace-delimited text or JSON definitions."""
    stripped = raw_text.lstrip()
    if not stripped:
        raise ProblemFormatError("input is empty; expected problem definition")
    if stripped[0] == "{":
        try:
            payload = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise ProblemFormatError(f"invalid JSON: {exc}") from exc
        return _parse_from_json(payload)
    tokens = _tokens_from_text(raw_text)
    return _parse_from_tokens(tokens)


def _parse_from_json(payload: dict) -> ProblemInstance:
    try:
        days = int(payload["days"])
        scores = tuple(int(score) for score in payload["scores"])
        library_payloads = payload["libraries"]
        libraries = tuple(
            Library(
                library_id=library_id,
                signup_days=int(item["signup_days"]),
                books_per_day=int(item["books_per_day"]),
                books=tuple(int(book_id) for book_id in item["books"]),
            )
            for library_id, item in enumerate(library_payloads)
        )
    except KeyError as exc:
        raise ProblemFormatError(f"missing required field: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ProblemFormatError(f"invalid field value: {exc}") from exc

    return ProblemInstance(days=days, scores=scores, libraries=libraries)


def load_problem(path: str | Path) -> ProblemInstance:
    """Load a problem definition from `path` or raise `ProblemFormatError`."""
    raw_text = Path(path).read_text(encoding="utf-8")
    return parse_problem_from_text(raw_text)
