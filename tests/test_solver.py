from __future__ import annotations

import json
import shutil
from pathlib import Path

import pulp
import pytest

from bookscan.cli import main as solve_main
from bookscan.models import ScheduledLibrary, ScheduleResult
from bookscan.parser import ProblemFormatError, load_problem, parse_problem_from_text
from bookscan.postprocess import compute_score, schedule_to_text, text_to_schedule
from bookscan.refine import refine_schedule
from bookscan.score_cli import main as score_main
from bookscan.scheduler import build_schedule
from bookscan.scorer import ScheduleFormatError, load_schedule, score_from_files
from bookscan.validation import ScheduleValidationError, validate_schedule

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"
EXAMPLE_PATH = EXAMPLES / "example1.in"
EXAMPLE_JSON = EXAMPLES / "example1.json"
EXAMPLE_OUTPUT = EXAMPLES / "example1.out"
REFERENCE_OUTPUT = EXAMPLES / "example1_reference.out"


def _load_example():
    return load_problem(EXAMPLE_PATH)


def test_parser_reads_example():
    problem = _load_example()
    assert problem.days == 7
    assert problem.scores == (1, 2, 3, 6, 5, 4)
    assert problem.library_count == 2
    assert problem.libraries[1].signup_days == 3
    assert problem.libraries[1].books == (3, 2, 5, 0)


def test_json_and_text_inputs_agree():
    assert load_problem(EXAMPLE_JSON) == _load_example()


@pytest.mark.parametrize(
    "text",
    [
        "",
        "3 1 5\n1 2\n",
        "2 1 5\n1 2\n2 1 1\n0\n",
        "1 1 5\n1\n1 1 1\n0\n7\n",
        "1 1 five\n1\n1 1 1\n0\n",
        '{"days": 3, "scores": [1]}',
    ],
)
def test_parser_rejects_malformed_text(text):
    with pytest.raises(ProblemFormatError):
        parse_problem_from_text(text)


def test_example_schedule_matches_expected_output():
    problem = _load_example()
    result = build_schedule(problem)
    validate_schedule(problem, result)
    assert schedule_to_text(result) == EXAMPLE_OUTPUT.read_text(encoding="utf-8")
    assert compute_score(problem, result).total == 21


def test_schedule_text_parses_back():
    problem = _load_example()
    result = build_schedule(problem)
    assert text_to_schedule(schedule_to_text(result)) == result


def test_scoring_existing_output():
    summary = score_from_files(EXAMPLE_PATH, EXAMPLE_OUTPUT, validate=True)
    assert summary.total == 21
    assert [item.start_day for item in summary.by_library] == [2, 5]
    assert [item.score for item in summary.by_library] == [17, 4]


def test_scoring_counts_each_book_once_and_respects_capacity():
    summary = score_from_files(EXAMPLE_PATH, REFERENCE_OUTPUT)
    assert summary.total == 16
    assert summary.by_library[1].book_count == 4


def test_validation_rejects_over_capacity_schedule():
    with pytest.raises(ScheduleValidationError):
        score_from_files(EXAMPLE_PATH, REFERENCE_OUTPUT, validate=True)


@pytest.mark.parametrize(
    "entries",
    [
        [ScheduledLibrary(5, (0,))],
        [ScheduledLibrary(0, (0,)), ScheduledLibrary(0, (1,))],
        [ScheduledLibrary(0, (5,))],
        [ScheduledLibrary(0, (3,)), ScheduledLibrary(1, (3,))],
        [ScheduledLibrary(0, (1, 1))],
    ],
)
def test_validation_detects_illegal_schedules(entries):
    problem = _load_example()
    with pytest.raises(ScheduleValidationError):
        validate_schedule(problem, ScheduleResult(libraries=tuple(entries)))


def test_load_schedule_reports_bad_layout(tmp_path):
    broken = tmp_path / "broken.out"
    broken.write_text("1\n0 3\n1 2\n", encoding="utf-8")
    with pytest.raises(ScheduleFormatError):
        load_schedule(broken)
    with pytest.raises(ScheduleFormatError):
        load_schedule(tmp_path / "missing.out")


def test_refinement_reassigns_books_for_fixed_order():
    problem = parse_problem_from_text("4 2 3\n10 9 8 1\n3 1 1\n0 1 2\n2 1 1\n0 3\n")
    greedy = build_schedule(problem)
    assert [entry.library_id for entry in greedy] == [0, 1]
    assert greedy.total_score(problem) == 20

    refined = refine_schedule(problem, greedy)
    validate_schedule(problem, refined)
    assert [entry.library_id for entry in refined] == [0, 1]
    assert refined.libraries[1].book_ids == (0,)
    assert refined.total_score(problem) == 27


def test_refinement_keeps_optimal_schedule():
    problem = _load_example()
    greedy = build_schedule(problem)
    assert refine_schedule(problem, greedy) == greedy


def test_cli_writes_schedule_and_json(tmp_path, capsys):
    output_text = tmp_path / "example1.out"
    output_json = tmp_path / "example1.json"
    exit_code = solve_main(
        [
            "--input",
            str(EXAMPLE_PATH),
            "--output-text",
            str(output_text),
            "--output-json",
            str(output_json),
            "--validate",
        ]
    )
    assert exit_code == 0
    assert output_text.read_text(encoding="utf-8") == EXAMPLE_OUTPUT.read_text(encoding="utf-8")
    payload = json.loads(output_json.read_text(encoding="utf-8"))
    assert payload["score"]["total"] == 21
    assert payload["libraries"][0] == {"library_id": 0, "books": [3, 4, 2, 1, 0]}
    captured = capsys.readouterr()
    assert "Solving file at" in captured.err
    assert "score=21" in captured.err


def test_cli_solves_several_inputs_next_to_them(tmp_path):
    first = tmp_path / "a.in"
    second = tmp_path / "b.in"
    shutil.copy(EXAMPLE_PATH, first)
    second.write_text("1 1 2\n10\n1 1 1\n0\n", encoding="utf-8")
    exit_code = solve_main(["-i", str(first), "-i", str(second), "--solver", "milp"])
    assert exit_code == 0
    assert (tmp_path / "a.in.out").read_text(encoding="utf-8") == EXAMPLE_OUTPUT.read_text(encoding="utf-8")
    assert (tmp_path / "b.in.out").read_text(encoding="utf-8") == "1\n0 1\n0\n"


def test_cli_reports_malformed_instance(tmp_path, capsys):
    bad = tmp_path / "bad.in"
    bad.write_text("1 1 5\n1\n1 1 1\n4\n", encoding="utf-8")
    assert solve_main(["-i", str(bad)]) == 4
    assert "Malformed instance" in capsys.readouterr().err


def test_score_cli_reports_score(capsys):
    exit_code = score_main(
        [
            "--input",
            str(EXAMPLE_PATH),
            "--schedule",
            str(EXAMPLE_OUTPUT),
            "--validate",
        ]
    )
    assert exit_code == 0
    captured = capsys.readouterr()
    assert "Score: 21" in captured.out


def test_score_cli_flags_invalid_schedule():
    exit_code = score_main(["-i", str(EXAMPLE_PATH), "-s", str(REFERENCE_OUTPUT), "--validate"])
    assert exit_code == 3


@pytest.mark.parametrize(
    "schedule_text",
    [
        "1\n1 1\n4\n",
        "1\n0 1\n-1\n",
        "1\n0 1\n99\n",
    ],
)
def test_scoring_rejects_books_the_library_does_not_hold(tmp_path, capsys, schedule_text):
    schedule = tmp_path / "foreign.out"
    schedule.write_text(schedule_text, encoding="utf-8")
    with pytest.raises(ValueError):
        score_from_files(EXAMPLE_PATH, schedule)
    assert score_main(["-i", str(EXAMPLE_PATH), "-s", str(schedule)]) == 2
    captured = capsys.readouterr()
    assert "Score:" not in captured.out
    assert "does not hold book" in captured.err


def test_refinement_keeps_greedy_schedule_without_solution(monkeypatch):
    problem = parse_problem_from_text("4 2 3\n10 9 8 1\n3 1 1\n0 1 2\n2 1 1\n0 3\n")
    greedy = build_schedule(problem)
    monkeypatch.setattr(pulp.LpProblem, "solve", lambda self, solver=None, **kwargs: self.status)
    assert refine_schedule(problem, greedy) is greedy
