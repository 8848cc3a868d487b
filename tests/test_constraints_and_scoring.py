from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.constraints import candidate_feasible, window_allows
from scheduling.grid import TimeGrid
from scheduling.models import Course, Instructor, TimetableSettings
from scheduling.availability import normalize_availability, set_slot
from scheduling.scoring import candidate_score, day_score, sort_by_tightness, tightness, time_score


SETTINGS = TimetableSettings()  # Mon-Fri, 8-18


def _course(**kw) -> Course:
    base = dict(course_id="C1", code="C1", duration=1, sessions_per_week=1, earliest_hour=9, latest_hour=12)
    base.update(kw)
    return Course(**base)


def test_window_allows_start_and_end_bounds() -> None:
    c = _course(duration=2, earliest_hour=9, latest_hour=12)
    assert not window_allows(c, 8)
    assert window_allows(c, 9)
    assert window_allows(c, 10)
    assert not window_allows(c, 11)  # would end at 13


def test_candidate_feasible_checks_grid_window_and_availability() -> None:
    c = _course(duration=2, earliest_hour=8, latest_hour=18, instructor_id="I1")
    inst = set_slot(normalize_availability(Instructor("I1", "A"), SETTINGS), 0, 3, False)  # Mon 11:00 blocked
    grid = TimeGrid.for_settings(SETTINGS)
    grid.place(1, 0, 2, "X")  # Tue 08-10 taken

    assert candidate_feasible(c, inst, grid, SETTINGS, 0, 8)
    assert not candidate_feasible(c, inst, grid, SETTINGS, 0, 10)  # covers 11:00
    assert not candidate_feasible(c, inst, grid, SETTINGS, 1, 9)  # overlaps X
    assert candidate_feasible(c, inst, grid, SETTINGS, 1, 10)
    assert not candidate_feasible(c, inst, grid, SETTINGS, 0, 17)  # past end of grid
    assert not candidate_feasible(c, inst, grid, SETTINGS, 0, 7)  # before start of grid
    assert candidate_feasible(c, None, grid, SETTINGS, 0, 10)


def test_day_score() -> None:
    assert day_score(_course(), "Tue") == 0
    pref = _course(preferred_days=("Mon", "Wed"))
    assert day_score(pref, "Wed") == 0
    assert day_score(pref, "Tue") == 2


def test_time_score_penalizes_later_starts() -> None:
    c = _course(earliest_hour=9)
    assert time_score(c, 9) == 0
    assert time_score(c, 11) == pytest.approx(0.10)


def test_candidate_score_precedence() -> None:
    c = _course(preferred_days=("Fri",), earliest_hour=8, latest_hour=18)
    # latest preferred slot still beats the earliest unpreferred one
    assert candidate_score(c, "Fri", 17, 9) < candidate_score(c, "Mon", 8, 0)
    # within a day, earlier is better
    assert candidate_score(c, "Fri", 9, 1) < candidate_score(c, "Fri", 10, 2)
    assert candidate_score(c, "Fri", 9, 1) == pytest.approx(0.05 + 0.01)


def test_tightness_counts_window_starts_on_every_day() -> None:
    assert tightness(_course(duration=1, earliest_hour=9, latest_hour=12), SETTINGS) == 5 * 3
    assert tightness(_course(duration=3, earliest_hour=9, latest_hour=12), SETTINGS) == 5 * 1
    assert tightness(_course(duration=4, earliest_hour=9, latest_hour=12), SETTINGS) == 0


def test_sort_by_tightness_then_load_then_code() -> None:
    wide_heavy = _course(course_id="A", code="WIDE", earliest_hour=8, latest_hour=18, sessions_per_week=5)
    narrow = _course(course_id="B", code="NARROW", earliest_hour=9, latest_hour=10, sessions_per_week=1)
    same_light = _course(course_id="C", code="BBB", earliest_hour=9, latest_hour=12, sessions_per_week=1)
    same_heavy = _course(course_id="D", code="ZZZ", earliest_hour=9, latest_hour=12, sessions_per_week=3)
    same_light_2 = _course(course_id="E", code="AAA", earliest_hour=9, latest_hour=12, sessions_per_week=1)

    ordered = sort_by_tightness([wide_heavy, narrow, same_light, same_heavy, same_light_2], SETTINGS)

    assert [c.course_id for c in ordered] == ["B", "D", "E", "C", "A"]


def test_sort_by_tightness_does_not_reorder_input() -> None:
    courses = [_course(course_id="A", code="B"), _course(course_id="B", code="A")]
    sort_by_tightness(courses, SETTINGS)
    assert [c.course_id for c in courses] == ["A", "B"]
