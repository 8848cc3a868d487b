"""Application state operations: sanitization, editing helpers, sample data.

The scheduler assumes well-formed input. Everything that reaches it from the
outside (import, DB, forms) goes through the sanitizers here first.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, replace
from typing import Any, Iterable, Mapping, Optional, Tuple

from .availability import make_default_availability, normalize_availability, set_slot
from .models import (
    DEFAULT_DAYS,
    DEFAULT_END_HOUR,
    DEFAULT_START_HOUR,
    AppState,
    Course,
    Instructor,
    Placement,
    Schedule,
    TimetableSettings,
)
from .weekly_scheduler import generate_schedule


logger = logging.getLogger(__name__)


MAX_DAYS = 7
START_HOUR_RANGE = (0, 22)
END_HOUR_RANGE = (2, 24)
SESSIONS_RANGE = (1, 10)
DURATION_RANGE = (1, 4)
DEFAULT_SESSIONS_PER_WEEK = 2


# ----------------------------
# Helpers
# ----------------------------


def clamp(n: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, n))


def to_int(value: Any, default: int) -> int:
    """Coerce to int, truncating fractions (1.5 -> 1); ``default`` when unusable."""

    if value is None or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


# ----------------------------
# Sanitizers
# ----------------------------


def sanitize_settings(raw: Mapping[str, Any]) -> TimetableSettings:
    """Build settings from loosely-typed input (snake_case keys)."""

    raw_days = raw.get("days")
    days: Tuple[str, ...] = DEFAULT_DAYS
    if isinstance(raw_days, (list, tuple)):
        labels = [str(d).strip() for d in raw_days if str(d).strip()]
        labels = list(dict.fromkeys(labels))[:MAX_DAYS]
        if labels:
            days = tuple(labels)

    start = clamp(to_int(raw.get("start_hour"), DEFAULT_START_HOUR), *START_HOUR_RANGE)
    end = clamp(to_int(raw.get("end_hour"), DEFAULT_END_HOUR), *END_HOUR_RANGE)
    if end <= start + 1:
        end = min(END_HOUR_RANGE[1], start + 9)

    return TimetableSettings(days=days, start_hour=start, end_hour=end)


def sanitize_course(
    raw: Mapping[str, Any],
    settings: TimetableSettings,
    instructor_ids: Optional[Iterable[str]] = None,
) -> Course:
    """Build a course with every field in range for ``settings``.

    When ``instructor_ids`` is given, references to unknown instructors are
    cleared (the course becomes unassigned).
    """

    instructor_id = str(raw.get("instructor_id") or "")
    if instructor_ids is not None and instructor_id and instructor_id not in set(instructor_ids):
        logger.info("Clearing unknown instructor %s on course %s", instructor_id, raw.get("code"))
        instructor_id = ""

    earliest = clamp(
        to_int(raw.get("earliest_hour"), settings.start_hour),
        settings.start_hour,
        settings.end_hour - 1,
    )
    latest = clamp(
        to_int(raw.get("latest_hour"), settings.end_hour),
        settings.start_hour + 1,
        settings.end_hour,
    )
    if latest <= earliest:
        latest = min(settings.end_hour, earliest + 1)

    duration = clamp(to_int(raw.get("duration"), 1), *DURATION_RANGE)
    if latest - earliest < duration:
        # widen the window so at least one session fits in the grid
        earliest = max(settings.start_hour, latest - duration)
        latest = min(settings.end_hour, earliest + duration)
        logger.warning("Widened window of course %s to %02d-%02d", raw.get("code"), earliest, latest)

    raw_days = raw.get("preferred_days")
    preferred: Tuple[str, ...] = ()
    if isinstance(raw_days, (list, tuple)):
        preferred = tuple(dict.fromkeys(str(d) for d in raw_days if str(d) in settings.days))

    return Course(
        course_id=str(raw.get("course_id") or new_id("C")),
        code=str(raw.get("code") or "").strip() or "COURSE",
        title=str(raw.get("title") or ""),
        instructor_id=instructor_id,
        sessions_per_week=clamp(to_int(raw.get("sessions_per_week"), DEFAULT_SESSIONS_PER_WEEK), *SESSIONS_RANGE),
        duration=duration,
        earliest_hour=earliest,
        latest_hour=latest,
        preferred_days=preferred,
        notes=str(raw.get("notes") or ""),
    )


def placement_fits(p: Placement, settings: TimetableSettings) -> bool:
    return p.day in settings.days and p.start_hour >= settings.start_hour and p.end_hour <= settings.end_hour


# ----------------------------
# State operations
# ----------------------------


def auto_fix(state: AppState) -> AppState:
    """Drop dangling instructor references, re-sanitize courses, normalize availability."""

    state.instructors = {iid: normalize_availability(i, state.settings) for iid, i in state.instructors.items()}
    state.courses = {
        cid: sanitize_course(asdict(c), state.settings, state.instructors.keys()) for cid, c in state.courses.items()
    }
    logger.info("Auto-fix applied: %d instructor(s), %d course(s)", len(state.instructors), len(state.courses))
    return state


def apply_settings(state: AppState, settings: TimetableSettings) -> AppState:
    """Replace settings and bring instructors, courses and placements in line."""

    state.settings = sanitize_settings(asdict(settings))
    auto_fix(state)
    kept = tuple(p for p in state.schedule.placements if placement_fits(p, state.settings))
    if len(kept) != len(state.schedule.placements):
        logger.warning("Dropped %d placement(s) outside the new grid", len(state.schedule.placements) - len(kept))
    state.schedule = Schedule(placements=kept, unscheduled=state.schedule.unscheduled)
    return state


def add_instructor(state: AppState, name: str, *, instructor_id: Optional[str] = None) -> Instructor:
    inst = Instructor(
        instructor_id=instructor_id or new_id("I"),
        name=str(name or "").strip() or "Instructor",
        availability=make_default_availability(state.settings),
    )
    state.instructors[inst.instructor_id] = inst
    return inst


def update_instructor(state: AppState, instructor: Instructor) -> Instructor:
    inst = normalize_availability(instructor, state.settings)
    state.instructors[inst.instructor_id] = inst
    return inst


def remove_instructor(state: AppState, instructor_id: str) -> None:
    state.instructors.pop(instructor_id, None)
    for cid, c in list(state.courses.items()):
        if c.instructor_id == instructor_id:
            state.courses[cid] = replace(c, instructor_id="")


def add_course(state: AppState, **fields: Any) -> Course:
    course = sanitize_course(fields, state.settings, state.instructors.keys())
    state.courses[course.course_id] = course
    return course


def remove_course(state: AppState, course_id: str) -> None:
    state.courses.pop(course_id, None)


def run_scheduler(state: AppState) -> Schedule:
    """Generate a fresh schedule and store it on ``state``.

    ``state.schedule`` is only replaced once generation has finished.
    """

    schedule = generate_schedule(state.settings, state.instructors, state.courses.values())
    state.schedule = schedule
    logger.info(
        "Placed %d session(s) (%d hour(s)), %d unscheduled entr%s",
        len(schedule.placements),
        schedule.placed_hours,
        len(schedule.unscheduled),
        "y" if len(schedule.unscheduled) == 1 else "ies",
    )
    return schedule


def clear_schedule(state: AppState) -> AppState:
    state.schedule = Schedule()
    return state


def reset_state(state: AppState) -> AppState:
    state.settings = TimetableSettings()
    state.instructors = {}
    state.courses = {}
    state.schedule = Schedule()
    return state


# ----------------------------
# Sample data
# ----------------------------


_SAMPLE_INSTRUCTORS = (
    ("I001", "Dr. Amina Yusuf"),
    ("I002", "Prof. Daniel Okoye"),
    ("I003", "Ms. Leila Mensah"),
    ("I004", "Dr. Sarah Chen"),
)

# duration 1.5 entries are truncated to whole hours by sanitize_course
_SAMPLE_COURSES = (
    ("C001", "CSC201", "Data Structures", "I002", 3, 1, ("Mon", "Wed", "Fri"), 9, 16, "Prefer mid-morning slots."),
    ("C002", "CSC241", "Operating Systems", "I001", 2, 2, ("Tue", "Thu"), 10, 18, "2-hour blocks; avoid early mornings."),
    ("C003", "MTH110", "Discrete Mathematics", "I003", 2, 1, ("Mon", "Thu"), 8, 14, "Keep before afternoon."),
    ("C004", "ENG101", "Technical Writing", "", 1, 2, ("Wed",), 9, 17, "Instructor TBD (availability ignored until assigned)."),
    ("C005", "PHY101", "Physics I", "I004", 3, 1, ("Mon", "Wed", "Fri"), 8, 12, "Lab equipment needed."),
    ("C006", "CSC301", "Algorithms", "I001", 2, 1.5, ("Tue", "Thu"), 13, 17, "Advanced topics."),
    ("C007", "ART105", "Design Studio", "I003", 1, 3, ("Fri",), 13, 17, "Long studio session."),
    ("C008", "HIS101", "World History", "I002", 2, 1.5, ("Mon", "Wed"), 14, 18, "Afternoon lectures."),
)


def build_sample_state(settings: Optional[TimetableSettings] = None) -> AppState:
    """Demo data set: four instructors (some blocked hours) and eight courses."""

    state = AppState(settings=settings or TimetableSettings())
    s = state.settings

    for iid, name in _SAMPLE_INSTRUCTORS:
        add_instructor(state, name, instructor_id=iid)

    def block(iid: str, day: str, offsets: Iterable[int]) -> None:
        d = s.day_index(day)
        if d < 0:
            return
        inst = state.instructors[iid]
        for off in offsets:
            inst = set_slot(inst, d, off, False)
        state.instructors[iid] = inst

    block("I001", "Mon", (0, 1))
    block("I001", "Wed", (14 - s.start_hour,))
    block("I002", "Tue", (0, 1, 2))
    block("I003", "Thu", range(6, s.hours_count))

    for cid, code, title, iid, sessions, duration, days, earliest, latest, notes in _SAMPLE_COURSES:
        add_course(
            state,
            course_id=cid,
            code=code,
            title=title,
            instructor_id=iid,
            sessions_per_week=sessions,
            duration=duration,
            preferred_days=days,
            earliest_hour=earliest,
            latest_hour=latest,
            notes=notes,
        )

    return state
