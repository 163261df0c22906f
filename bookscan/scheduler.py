"""Greedy library scheduler.

The scheduler is a one-step-lookahead heuristic: on every step it values each
library that has not been signed up yet against the current ledger and the
days that remain, signs up the best one and repeats. Library and book choices
interact across steps, so the result is not guaranteed to be optimal.
"""

from __future__ import annotations

import enum
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from fractions import Fraction
from functools import partial
from typing import Dict, List, Optional, Tuple

from .ledger import BookLedger, InternalConsistencyError
from .models import Library, ProblemInstance, ScheduledLibrary, ScheduleResult
from .valuation import LibraryValuation, value_library

logger = logging.getLogger(__name__)


class SelectionKey(str, enum.Enum):
    BY_TOTAL_SCORE = "total-score"
    BY_SCORE_PER_SIGNUP_DAY = "score-per-signup-day"


@dataclass(slots=True)
class SchedulerConfig:
    selection_key: SelectionKey = SelectionKey.BY_TOTAL_SCORE
    workers: int = 1


def _selection_value(valuation: LibraryValuation, selection_key: SelectionKey):
    if selection_key is SelectionKey.BY_SCORE_PER_SIGNUP_DAY:
        return Fraction(valuation.score, valuation.signup_days)
    return valuation.score


class GreedyScheduler:
    def __init__(self, selection_key: SelectionKey = SelectionKey.BY_TOTAL_SCORE, workers: int = 1):
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.selection_key = selection_key
        self.workers = workers

    def _value_candidates(
        self,
        problem: ProblemInstance,
        candidates: List[Library],
        ledger: BookLedger,
        remaining_days: int,
        executor: Optional[Executor],
    ) -> List[LibraryValuation]:
        evaluate = partial(
            value_library,
            scores=problem.scores,
            claimed=ledger.snapshot() if executor is not None else ledger,
            remaining_days=remaining_days,
        )
        if executor is None:
            return [evaluate(library) for library in candidates]
        # map() yields in submission order and waits for every worker.
        return list(executor.map(evaluate, candidates))

    def _pick(self, valuations: List[LibraryValuation]) -> Optional[LibraryValuation]:
        best: Optional[LibraryValuation] = None
        best_key: Optional[Tuple] = None
        for valuation in valuations:
            key = (_selection_value(valuation, self.selection_key), -valuation.library_id)
            if best_key is None or key > best_key:
                best = valuation
                best_key = key
        return best

    def _run(self, problem: ProblemInstance, executor: Optional[Executor]) -> ScheduleResult:
        ledger = BookLedger()
        pool: Dict[int, Library] = {library.library_id: library for library in problem.libraries}
        selected: set[int] = set()
        committed: List[ScheduledLibrary] = []
        remaining_days = problem.days

        while pool:
            if not any(library.signup_days <= remaining_days for library in pool.values()):
                break

            valuations = self._value_candidates(problem, list(pool.values()), ledger, remaining_days, executor)
            best = self._pick(valuations)
            if best is None or best.score == 0:
                break

            if best.library_id in selected:
                raise InternalConsistencyError(f"library {best.library_id} selected twice")
            selected.add(best.library_id)

            library = pool.pop(best.library_id)
            ledger.claim(best.book_ids)
            remaining_days -= library.signup_days
            committed.append(ScheduledLibrary(library_id=best.library_id, book_ids=best.book_ids))
            logger.debug(
                "step %d: library %d adds %d books worth %d, %d days left",
                len(committed),
                best.library_id,
                len(best.book_ids),
                best.score,
                remaining_days,
            )

        return ScheduleResult(libraries=tuple(committed))

    def schedule(self, problem: ProblemInstance) -> ScheduleResult:
        problem.validate()
        if self.workers == 1:
            result = self._run(problem, None)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                result = self._run(problem, executor)
        logger.info(
            "scheduled %d of %d libraries, score=%d",
            len(result),
            problem.library_count,
            result.total_score(problem),
        )
        return result


def build_schedule(problem: ProblemInstance, config: SchedulerConfig | None = None) -> ScheduleResult:
    """Build a schedule for `problem` or raise `MalformedInstance`."""
    config = config or SchedulerConfig()
    scheduler = GreedyScheduler(selection_key=config.selection_key, workers=config.workers)
    return scheduler.schedule(problem)
