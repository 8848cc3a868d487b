"""Weekly timetable generation.

Greedy placement on a single shared grid (one session per cell):

1. Courses are ordered by tightness (fewest window options first), then by
   weekly load (sessions x duration, heaviest first), then by code.
2. For each session of a course, every (day, start hour) in the course window
   is checked against the window, grid occupancy and instructor availability.
3. The feasible candidate with the lowest score wins; ties go to the first
   candidate in enumeration order (day index, then hour).
4. When a course runs out of candidates, its remaining sessions are recorded
   as unscheduled and the scheduler moves on to the next course.

Each run starts from an empty grid; earlier placements are discarded. The
result only depends on the inputs, so two runs on the same data give the
same schedule, placement ids included.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .constraints import candidate_feasible, candidate_start_hours
from .grid import TimeGrid
from .models import (
    REASON_INSTRUCTOR_MISSING,
    REASON_NO_FEASIBLE_SLOT,
    Course,
    Instructor,
    Placement,
    Schedule,
    TimetableSettings,
    UnscheduledEntry,
)
from .scoring import candidate_score, sort_by_tightness


logger = logging.getLogger(__name__)


# ----------------------------
# Candidate search
# ----------------------------


def _best_candidate(
    course: Course,
    instructor: Optional[Instructor],
    grid: TimeGrid,
    settings: TimetableSettings,
) -> Optional[Tuple[int, int]]:
    """Return (day_idx, start_hour) of the lowest-scoring feasible slot."""

    best: Optional[Tuple[int, int]] = None
    best_score = 0.0
    for day_idx, day in enumerate(settings.days):
        for start_hour in candidate_start_hours(course):
            if not candidate_feasible(course, instructor, grid, settings, day_idx, start_hour):
                continue
            hour_offset = start_hour - settings.start_hour
            score = candidate_score(course, day, start_hour, hour_offset)
            # strict "<" keeps the earliest enumerated candidate on ties
            if best is None or score < best_score:
                best = (day_idx, start_hour)
                best_score = score
    return best


# ----------------------------
# Solve
# ----------------------------


def generate_schedule(
    settings: TimetableSettings,
    instructors: Mapping[str, Instructor],
    courses: Iterable[Course],
) -> Schedule:
    """Place every course session that fits; report the rest as unscheduled.

    Instructors must already be normalized to ``settings``. Inputs are not
    modified.
    """

    grid = TimeGrid.for_settings(settings)
    placements: List[Placement] = []
    unscheduled: List[UnscheduledEntry] = []

    for course in sort_by_tightness(list(courses), settings):
        instructor = instructors.get(course.instructor_id) if course.instructor_id else None
        dangling = bool(course.instructor_id) and instructor is None

        remaining = int(course.sessions_per_week)
        while remaining > 0:
            # a reference to an unknown instructor can never be satisfied
            best = None if dangling else _best_candidate(course, instructor, grid, settings)
            if best is None:
                reason = REASON_INSTRUCTOR_MISSING if dangling else REASON_NO_FEASIBLE_SLOT
                unscheduled.append(UnscheduledEntry(course_id=course.course_id, remaining=remaining, reason=reason))
                logger.warning("%s: %d session(s) unscheduled (%s)", course.code, remaining, reason)
                break

            day_idx, start_hour = best
            placement = Placement(
                placement_id=f"P{len(placements) + 1:04d}",
                course_id=course.course_id,
                instructor_id=course.instructor_id or "",
                day=settings.days[day_idx],
                start_hour=start_hour,
                duration=int(course.duration),
            )
            grid.place(day_idx, start_hour - settings.start_hour, placement.duration, placement.placement_id)
            placements.append(placement)
            logger.debug("%s -> %s %02d:00 (+%dh)", course.code, placement.day, start_hour, placement.duration)
            remaining -= 1

    return Schedule(placements=tuple(placements), unscheduled=tuple(unscheduled))


# ----------------------------
# Metrics / formatting helpers
# ----------------------------


def compute_metrics(settings: TimetableSettings, courses: Mapping[str, Course], schedule: Schedule) -> Dict[str, float]:
    cells: Dict[Tuple[str, int], int] = {}
    for p in schedule.placements:
        for h in range(p.start_hour, p.end_hour):
            cells[(p.day, h)] = cells.get((p.day, h), 0) + 1
    conflicts = sum(c - 1 for c in cells.values() if c > 1)

    placed_by_course: Dict[str, int] = {}
    for p in schedule.placements:
        placed_by_course[p.course_id] = placed_by_course.get(p.course_id, 0) + 1

    requested = sum(int(c.sessions_per_week) for c in courses.values())
    fully = sum(1 for cid, c in courses.items() if placed_by_course.get(cid, 0) >= int(c.sessions_per_week))
    capacity = len(settings.days) * settings.hours_count

    return {
        "placed_sessions": float(len(schedule.placements)),
        "placed_hours": float(schedule.placed_hours),
        "requested_sessions": float(requested),
        "unscheduled_sessions": float(sum(u.remaining for u in schedule.unscheduled)),
        "courses_fully_scheduled": float(fully),
        "grid_conflicts": float(conflicts),
        "grid_utilization": float(schedule.placed_hours / capacity) if capacity else 0.0,
    }


def format_timetable(
    settings: TimetableSettings,
    courses: Mapping[str, Course],
    instructors: Mapping[str, Instructor],
    schedule: Schedule,
    *,
    instructor_id: Optional[str] = None,
) -> List[List[str]]:
    """Return a table (rows=days, cols=hours) with 'CODE (Instructor)' or ''.

    Continuation hours of multi-hour sessions show '▸'. Pass ``instructor_id``
    to keep only that instructor's sessions.
    """

    table = [["" for _ in range(settings.hours_count)] for _ in settings.days]

    for p in schedule.placements:
        if instructor_id is not None and p.instructor_id != instructor_id:
            continue
        d = settings.day_index(p.day)
        if d < 0:
            continue
        course = courses.get(p.course_id)
        label = course.code if course is not None else "COURSE"
        inst = instructors.get(p.instructor_id) if p.instructor_id else None
        if inst is not None:
            label = f"{label} ({inst.name})"
        for h in range(p.start_hour, p.end_hour):
            col = h - settings.start_hour
            if 0 <= col < settings.hours_count:
                table[d][col] = label if h == p.start_hour else "▸"

    return table
