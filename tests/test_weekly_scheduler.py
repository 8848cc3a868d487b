from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.availability import is_available, normalize_availability, set_slot
from scheduling.models import (
    REASON_INSTRUCTOR_MISSING,
    REASON_NO_FEASIBLE_SLOT,
    Course,
    Instructor,
    Schedule,
    TimetableSettings,
    UnscheduledEntry,
)
from scheduling.state import build_sample_state
from scheduling.weekly_scheduler import compute_metrics, format_timetable, generate_schedule


SETTINGS = TimetableSettings()  # Mon-Fri, 8-18


def _instructor(iid: str = "I1") -> Instructor:
    return normalize_availability(Instructor(iid, f"Instructor {iid}"), SETTINGS)


def _slots(schedule: Schedule) -> list[tuple[str, str, int]]:
    return [(p.course_id, p.day, p.start_hour) for p in schedule.placements]


# ----------------------------
# Scenarios
# ----------------------------


def test_single_course_takes_earliest_slot_on_successive_days() -> None:
    course = Course(course_id="C1", code="CSC101", sessions_per_week=3, duration=1, earliest_hour=9, latest_hour=12)

    schedule = generate_schedule(SETTINGS, {}, [course])

    assert _slots(schedule) == [("C1", "Mon", 9), ("C1", "Tue", 9), ("C1", "Wed", 9)]
    assert schedule.unscheduled == ()
    assert [p.placement_id for p in schedule.placements] == ["P0001", "P0002", "P0003"]
    assert all(p.instructor_id == "" and p.duration == 1 for p in schedule.placements)


def test_competing_courses_heavier_course_fills_first() -> None:
    inst = _instructor()
    # identical one-hour window (09-10) => 5 slots for 7 sessions
    heavy = Course(course_id="A", code="AAA", instructor_id="I1", sessions_per_week=4, earliest_hour=9, latest_hour=10)
    light = Course(course_id="B", code="BBB", instructor_id="I1", sessions_per_week=3, earliest_hour=9, latest_hour=10)

    schedule = generate_schedule(SETTINGS, {"I1": inst}, [light, heavy])

    assert _slots(schedule) == [
        ("A", "Mon", 9),
        ("A", "Tue", 9),
        ("A", "Wed", 9),
        ("A", "Thu", 9),
        ("B", "Fri", 9),
    ]
    assert schedule.unscheduled == (UnscheduledEntry(course_id="B", remaining=2, reason=REASON_NO_FEASIBLE_SLOT),)


def test_more_constrained_course_is_placed_first() -> None:
    flexible = Course(course_id="F", code="AAA", sessions_per_week=5, earliest_hour=9, latest_hour=11)
    tight = Course(course_id="T", code="ZZZ", sessions_per_week=5, earliest_hour=9, latest_hour=10)

    schedule = generate_schedule(SETTINGS, {}, [flexible, tight])

    # the tight course grabs every 09:00, the flexible one moves to 10:00
    assert [s for s in _slots(schedule) if s[0] == "T"] == [("T", d, 9) for d in SETTINGS.days]
    assert [s for s in _slots(schedule) if s[0] == "F"] == [("F", d, 10) for d in SETTINGS.days]
    assert schedule.unscheduled == ()


def test_unknown_instructor_leaves_every_session_unscheduled() -> None:
    course = Course(course_id="C1", code="GHOST101", instructor_id="NOPE", sessions_per_week=3)

    schedule = generate_schedule(SETTINGS, {"I1": _instructor()}, [course])

    assert schedule.placements == ()
    assert schedule.unscheduled == (UnscheduledEntry(course_id="C1", remaining=3, reason=REASON_INSTRUCTOR_MISSING),)


def test_preferred_days_come_first() -> None:
    course = Course(course_id="C1", code="X", sessions_per_week=2, earliest_hour=9, latest_hour=10, preferred_days=("Wed",))

    schedule = generate_schedule(SETTINGS, {}, [course])

    # only one 09:00 on Wednesday; the second session falls back to the first day
    assert _slots(schedule) == [("C1", "Wed", 9), ("C1", "Mon", 9)]


def test_blocked_hours_are_skipped() -> None:
    inst = set_slot(set_slot(_instructor(), 0, 0, False), 0, 1, False)  # Mon 08-10 off
    course = Course(
        course_id="C1",
        code="X",
        instructor_id="I1",
        sessions_per_week=1,
        earliest_hour=8,
        latest_hour=11,
        preferred_days=("Mon",),
    )

    schedule = generate_schedule(SETTINGS, {"I1": inst}, [course])

    assert _slots(schedule) == [("C1", "Mon", 10)]
    assert schedule.placements[0].instructor_id == "I1"


def test_window_too_short_for_duration_is_unscheduled() -> None:
    course = Course(course_id="C1", code="X", duration=3, sessions_per_week=2, earliest_hour=9, latest_hour=11)

    schedule = generate_schedule(SETTINGS, {}, [course])

    assert schedule.placements == ()
    assert schedule.unscheduled == (UnscheduledEntry(course_id="C1", remaining=2, reason=REASON_NO_FEASIBLE_SLOT),)


def test_multi_hour_sessions_do_not_overlap() -> None:
    a = Course(course_id="A", code="A", duration=2, sessions_per_week=1, earliest_hour=8, latest_hour=12)
    b = Course(course_id="B", code="B", duration=2, sessions_per_week=1, earliest_hour=8, latest_hour=12)

    schedule = generate_schedule(TimetableSettings(days=("Mon",)), {}, [a, b])

    assert _slots(schedule) == [("A", "Mon", 8), ("B", "Mon", 10)]


# ----------------------------
# Properties on the sample data set
# ----------------------------


def test_sample_schedule_properties() -> None:
    state = build_sample_state()
    s = state.settings

    schedule = generate_schedule(s, state.instructors, state.courses.values())

    # no double-booking
    seen = set()
    for p in schedule.placements:
        for h in range(p.start_hour, p.end_hour):
            assert (p.day, h) not in seen
            seen.add((p.day, h))

    for p in schedule.placements:
        course = state.courses[p.course_id]
        # window compliance
        assert p.start_hour >= course.earliest_hour
        assert p.end_hour <= course.latest_hour
        assert p.duration == course.duration
        # availability compliance
        if p.instructor_id:
            inst = state.instructors[p.instructor_id]
            assert is_available(inst, s.day_index(p.day), p.start_hour - s.start_hour, p.duration)

    # session count conservation
    for cid, course in state.courses.items():
        placed = sum(1 for p in schedule.placements if p.course_id == cid)
        remaining = sum(u.remaining for u in schedule.unscheduled if u.course_id == cid)
        assert placed + remaining == course.sessions_per_week

    metrics = compute_metrics(s, state.courses, schedule)
    assert metrics["grid_conflicts"] == 0.0
    assert metrics["placed_sessions"] + metrics["unscheduled_sessions"] == metrics["requested_sessions"]


def test_generation_is_deterministic_and_leaves_inputs_alone() -> None:
    state = build_sample_state()
    courses = list(state.courses.values())
    instructors = dict(state.instructors)

    first = generate_schedule(state.settings, state.instructors, courses)
    second = generate_schedule(state.settings, state.instructors, courses)

    assert first == second
    assert courses == list(state.courses.values())
    assert instructors == state.instructors


def test_format_timetable_marks_continuation_hours() -> None:
    inst = _instructor()
    course = Course(course_id="C1", code="LAB1", instructor_id="I1", duration=2, sessions_per_week=1, earliest_hour=9, latest_hour=12)
    schedule = generate_schedule(SETTINGS, {"I1": inst}, [course])

    table = format_timetable(SETTINGS, {"C1": course}, {"I1": inst}, schedule)

    assert table[0][1] == "LAB1 (Instructor I1)"
    assert table[0][2] == "▸"
    assert table[0][3] == ""
    assert format_timetable(SETTINGS, {"C1": course}, {"I1": inst}, schedule, instructor_id="I2")[0][1] == ""
