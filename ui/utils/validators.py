"""Validation helpers for Streamlit forms."""

from __future__ import annotations

import re
from typing import Iterable, Tuple


_ID_RE = re.compile(r"^[A-Za-z0-9_-]{2,32}$")


def require_non_empty(value: str, field: str) -> Tuple[bool, str]:
    if not value or not value.strip():
        return False, f"{field} cannot be empty"
    return True, ""


def validate_id(value: str, field: str) -> Tuple[bool, str]:
    ok, msg = require_non_empty(value, field)
    if not ok:
        return ok, msg
    if not _ID_RE.match(value.strip()):
        return False, f"{field} must be 2-32 chars (letters/numbers/_/-)"
    return True, ""


def validate_positive_int(value: int, field: str, min_value: int = 1, max_value: int | None = None) -> Tuple[bool, str]:
    if value is None:
        return False, f"{field} is required"
    if value < min_value:
        return False, f"{field} must be >= {min_value}"
    if max_value is not None and value > max_value:
        return False, f"{field} must be <= {max_value}"
    return True, ""


def validate_unique(values: Iterable[str], field: str) -> Tuple[bool, str]:
    vals = [v.strip() for v in values if v and v.strip()]
    if len(vals) != len(set(vals)):
        return False, f"{field} contains duplicates"
    return True, ""


def validate_hours(*, start_hour: int, end_hour: int) -> Tuple[bool, str]:
    """Grid hours: start before end with at least two hour slots."""

    if start_hour is None or end_hour is None:
        return False, "Start and end hour are required"
    if not (0 <= int(start_hour) <= 23) or not (1 <= int(end_hour) <= 24):
        return False, "Hours must be between 0 and 24"
    if int(end_hour) <= int(start_hour) + 1:
        return False, "End hour must be at least 2 hours after start hour"
    return True, ""


def validate_course_window(
    *,
    earliest_hour: int,
    latest_hour: int,
    duration: int,
    start_hour: int,
    end_hour: int,
) -> Tuple[bool, str]:
    """Course window must sit inside the grid and fit at least one session."""

    if int(earliest_hour) < int(start_hour) or int(latest_hour) > int(end_hour):
        return False, f"Window must lie within {int(start_hour):02d}:00-{int(end_hour):02d}:00"
    if int(latest_hour) <= int(earliest_hour):
        return False, "Latest hour must be after earliest hour"
    if int(latest_hour) - int(earliest_hour) < int(duration):
        return False, f"Window is shorter than the session duration ({int(duration)}h)"
    return True, ""
