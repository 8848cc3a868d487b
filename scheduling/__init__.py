"""Weekly timetable placement (grid, availability, constraints, greedy scheduler)."""

from .availability import is_available, make_default_availability, normalize_availability
from .constraints import candidate_feasible, window_allows
from .grid import TimeGrid
from .models import (
    REASON_INSTRUCTOR_MISSING,
    REASON_NO_FEASIBLE_SLOT,
    AppState,
    Course,
    Instructor,
    Placement,
    Schedule,
    TimetableSettings,
    UnscheduledEntry,
)
from .scoring import candidate_score, day_score, sort_by_tightness, tightness, time_score
from .weekly_scheduler import compute_metrics, format_timetable, generate_schedule

__all__ = [
    "REASON_INSTRUCTOR_MISSING",
    "REASON_NO_FEASIBLE_SLOT",
    "AppState",
    "Course",
    "Instructor",
    "Placement",
    "Schedule",
    "TimeGrid",
    "TimetableSettings",
    "UnscheduledEntry",
    "candidate_feasible",
    "candidate_score",
    "compute_metrics",
    "day_score",
    "format_timetable",
    "generate_schedule",
    "is_available",
    "make_default_availability",
    "normalize_availability",
    "sort_by_tightness",
    "tightness",
    "time_score",
    "window_allows",
]
