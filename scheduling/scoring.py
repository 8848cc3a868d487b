"""Candidate scoring and course ordering heuristics.

Lower score = better slot. The weights give a strict precedence:

    day preference (x10)  >  earliness in window (x0.05/h)  >  hour offset (x0.01/h)
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .constraints import candidate_start_hours
from .models import Course, TimetableSettings


PREFERRED_DAY_SCORE = 0
UNPREFERRED_DAY_SCORE = 2

DAY_WEIGHT = 10.0
TIME_WEIGHT = 0.05
OFFSET_WEIGHT = 0.01


def day_score(course: Course, day: str) -> int:
    if not course.preferred_days or day in course.preferred_days:
        return PREFERRED_DAY_SCORE
    return UNPREFERRED_DAY_SCORE


def time_score(course: Course, start_hour: int) -> float:
    return (start_hour - course.earliest_hour) * TIME_WEIGHT


def candidate_score(course: Course, day: str, start_hour: int, hour_offset: int) -> float:
    return day_score(course, day) * DAY_WEIGHT + time_score(course, start_hour) + hour_offset * OFFSET_WEIGHT


def tightness(course: Course, settings: TimetableSettings) -> int:
    """Number of (day, start hour) pairs the course's own window allows.

    Ignores other courses and instructor availability; used for ordering only.
    """

    return len(settings.days) * len(candidate_start_hours(course))


def course_order_key(course: Course, settings: TimetableSettings) -> Tuple[int, int, str]:
    # most constrained first, then heaviest weekly load, then code
    return (tightness(course, settings), -course.weekly_load, str(course.code))


def sort_by_tightness(courses: Iterable[Course], settings: TimetableSettings) -> List[Course]:
    """Return courses in scheduling order (stable)."""

    return sorted(courses, key=lambda c: course_order_key(c, settings))
