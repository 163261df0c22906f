"""Exact book reassignment for a fixed library order using PuLP."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

import pulp

from .models import ProblemInstance, ScheduledLibrary, ScheduleResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RefineConfig:
    time_limit: float = 10.0
    mip_gap: float = 0.0


def _capacities(problem: ProblemInstance, result: ScheduleResult) -> Dict[int, int]:
    capacities: Dict[int, int] = {}
    day = 0
    for entry in result:
        library = problem.libraries[entry.library_id]
        day += library.signup_days
        capacities[entry.library_id] = max(0, problem.days - day) * library.books_per_day
    return capacities


def refine_schedule(
    problem: ProblemInstance,
    result: ScheduleResult,
    config: RefineConfig | None = None,
) -> ScheduleResult:
    """Re-solve which book each signed-up library scans, keeping the order.

    Returns `result` unchanged when CBC finds no usable solution or when the
    reassignment does not beat it.
    """
    config = config or RefineConfig()
    if not len(result):
        return result

    capacities = _capacities(problem, result)
    order = [entry.library_id for entry in result]

    x_keys: List[Tuple[int, int]] = []
    by_book: Dict[int, List[Tuple[int, int]]] = {}
    by_library: Dict[int, List[Tuple[int, int]]] = {}
    for library_id in order:
        if capacities[library_id] <= 0:
            continue
        for book_id in problem.libraries[library_id].books:
            if problem.scores[book_id] <= 0:
                continue
            key = (library_id, book_id)
            x_keys.append(key)
            by_book.setdefault(book_id, []).append(key)
            by_library.setdefault(library_id, []).append(key)

    if not x_keys:
        return result

    model = pulp.LpProblem("book_assignment", pulp.LpMaximize)
    x_vars = pulp.LpVariable.dicts("x", x_keys, cat="Binary")

    # Each book is scanned at most once.
    for book_id, keys in by_book.items():
        if len(keys) > 1:
            model += pulp.lpSum(x_vars[key] for key in keys) <= 1, f"book_{book_id}"

    # Per-library scanning capacity at its schedule position.
    for library_id, keys in by_library.items():
        model += pulp.lpSum(x_vars[key] for key in keys) <= capacities[library_id], f"cap_{library_id}"

    model += pulp.lpSum(problem.scores[book_id] * x_vars[(library_id, book_id)] for library_id, book_id in x_keys)

    solver = pulp.PULP_CBC_CMD(
        msg=False,
        timeLimit=config.time_limit,
        gapRel=config.mip_gap if config.mip_gap > 0 else None,
    )
    model.solve(solver)

    # A time-limited CBC run that found an integer solution reports sol_status 2.
    if model.sol_status not in (pulp.LpSolutionOptimal, pulp.LpSolutionIntegerFeasible):
        logger.warning(
            "book reassignment finished with status %s; keeping greedy schedule",
            pulp.LpStatus[model.status],
        )
        return result

    assigned: Dict[int, List[int]] = {library_id: [] for library_id in order}
    for library_id, book_id in x_keys:
        value = x_vars[(library_id, book_id)].value() or 0.0
        if value > 0.5:
            assigned[library_id].append(book_id)

    entries: List[ScheduledLibrary] = []
    for library_id in order:
        books = sorted(assigned[library_id], key=lambda book_id: (-problem.scores[book_id], book_id))
        if books:
            entries.append(ScheduledLibrary(library_id=library_id, book_ids=tuple(books)))
    refined = ScheduleResult(libraries=tuple(entries))

    before = result.total_score(problem)
    after = refined.total_score(problem)
    if after <= before:
        return result
    logger.info("book reassignment raised score from %d to %d", before, after)
    return refined
