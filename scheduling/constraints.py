"""Hard constraints for placing one session of a course."""

from __future__ import annotations

from typing import Optional

from .availability import is_available
from .grid import TimeGrid
from .models import Course, Instructor, TimetableSettings


def window_allows(course: Course, start_hour: int) -> bool:
    """Session starts no earlier than ``earliest_hour`` and ends by ``latest_hour``."""

    return start_hour >= course.earliest_hour and start_hour + course.duration <= course.latest_hour


def candidate_start_hours(course: Course) -> range:
    """Start hours allowed by the course window (may be empty)."""

    return range(int(course.earliest_hour), int(course.latest_hour) - int(course.duration) + 1)


def candidate_feasible(
    course: Course,
    instructor: Optional[Instructor],
    grid: TimeGrid,
    settings: TimetableSettings,
    day_idx: int,
    start_hour: int,
) -> bool:
    """True iff a session of ``course`` may start at ``start_hour`` on ``day_idx``.

    Cheap bound/window checks run before grid and availability lookups.
    """

    hour_offset = start_hour - settings.start_hour
    if not grid.in_bounds(day_idx, hour_offset, course.duration):
        return False
    if not window_allows(course, start_hour):
        return False
    if not grid.is_free(day_idx, hour_offset, course.duration):
        return False
    return is_available(instructor, day_idx, hour_offset, course.duration)
