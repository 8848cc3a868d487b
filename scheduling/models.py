"""Data models for weekly timetable placement.

A timetable is a fixed grid: days x hours (``start_hour`` inclusive,
``end_hour`` exclusive). Courses ask for a number of weekly sessions of a
fixed duration; the scheduler turns them into placements on that grid.

Hours are absolute clock hours (e.g. 9 means 09:00). Grid cells are addressed
by (day index, hour offset) where ``hour offset = hour - settings.start_hour``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


DEFAULT_DAYS: Tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri")
DEFAULT_START_HOUR = 8
DEFAULT_END_HOUR = 18

STATE_VERSION = 1

REASON_INSTRUCTOR_MISSING = "Instructor missing"
REASON_NO_FEASIBLE_SLOT = "No feasible slots with current constraints"

# availability[day_idx][hour_offset] -> True when the instructor can teach
Availability = Tuple[Tuple[bool, ...], ...]


@dataclass(frozen=True)
class TimetableSettings:
    days: Tuple[str, ...] = DEFAULT_DAYS
    start_hour: int = DEFAULT_START_HOUR
    end_hour: int = DEFAULT_END_HOUR

    @property
    def hours_count(self) -> int:
        return int(self.end_hour) - int(self.start_hour)

    def day_index(self, day: str) -> int:
        """Index of ``day`` in ``days`` or -1 when unknown."""

        try:
            return self.days.index(day)
        except ValueError:
            return -1


@dataclass(frozen=True)
class Instructor:
    instructor_id: str
    name: str
    availability: Availability = ()


@dataclass(frozen=True)
class Course:
    course_id: str
    code: str
    title: str = ""
    instructor_id: str = ""  # "" => unassigned
    sessions_per_week: int = 1
    duration: int = 1  # whole hours
    earliest_hour: int = DEFAULT_START_HOUR
    latest_hour: int = DEFAULT_END_HOUR  # sessions must END by this hour
    preferred_days: Tuple[str, ...] = ()
    notes: str = ""

    @property
    def weekly_load(self) -> int:
        return int(self.sessions_per_week) * int(self.duration)


@dataclass(frozen=True)
class Placement:
    placement_id: str
    course_id: str
    instructor_id: str
    day: str
    start_hour: int
    duration: int

    @property
    def end_hour(self) -> int:
        return int(self.start_hour) + int(self.duration)


@dataclass(frozen=True)
class UnscheduledEntry:
    course_id: str
    remaining: int
    reason: str


@dataclass(frozen=True)
class Schedule:
    placements: Tuple[Placement, ...] = ()
    unscheduled: Tuple[UnscheduledEntry, ...] = ()

    @property
    def placed_hours(self) -> int:
        return sum(int(p.duration) for p in self.placements)


@dataclass
class AppState:
    """Everything the host application owns between scheduling runs.

    Instructors and courses are keyed by id; dict insertion order is the
    display order.
    """

    settings: TimetableSettings = field(default_factory=TimetableSettings)
    instructors: dict[str, Instructor] = field(default_factory=dict)
    courses: dict[str, Course] = field(default_factory=dict)
    schedule: Schedule = field(default_factory=Schedule)
    version: int = STATE_VERSION

    def get_instructor(self, instructor_id: str) -> Instructor | None:
        if not instructor_id:
            return None
        return self.instructors.get(instructor_id)

    def get_course(self, course_id: str) -> Course | None:
        return self.courses.get(course_id)
