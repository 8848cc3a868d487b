"""Instructor availability (day x hour booleans).

Availability must always match the current settings' dimensions. Whenever
settings change, or an instructor is created or loaded from outside, call
:func:`normalize_availability`.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional

from .models import Availability, Instructor, TimetableSettings


def make_default_availability(settings: TimetableSettings) -> Availability:
    """Every slot available."""

    return tuple(tuple(True for _ in range(settings.hours_count)) for _ in settings.days)


def _resize(raw: Any, settings: TimetableSettings) -> Availability:
    if not isinstance(raw, (list, tuple)):
        return make_default_availability(settings)

    hours = settings.hours_count
    rows = []
    for d in range(len(settings.days)):
        row = raw[d] if d < len(raw) and isinstance(raw[d], (list, tuple)) else ()
        values = [bool(v) for v in list(row)[:hours]]
        # newly introduced slots default to available
        values.extend([True] * (hours - len(values)))
        rows.append(tuple(values))
    return tuple(rows)


def normalize_availability(instructor: Instructor, settings: TimetableSettings) -> Instructor:
    """Return ``instructor`` with availability resized to ``settings``.

    Extra days/hours are truncated, missing ones padded with True and every
    value coerced to a strict bool. Idempotent.
    """

    return replace(instructor, availability=_resize(instructor.availability, settings))


def is_available(instructor: Optional[Instructor], day_idx: int, hour_offset: int, duration: int) -> bool:
    """Can ``instructor`` teach ``duration`` hours from ``hour_offset`` on ``day_idx``?

    Unassigned courses (no instructor) are unconstrained, and a missing day row
    counts as available.
    """

    if instructor is None:
        return True
    availability = instructor.availability or ()
    if day_idx < 0 or day_idx >= len(availability):
        return True
    row = availability[day_idx]
    for k in range(int(duration)):
        idx = hour_offset + k
        if 0 <= idx < len(row) and row[idx] is False:
            return False
    return True


def set_slot(instructor: Instructor, day_idx: int, hour_offset: int, available: bool) -> Instructor:
    """Return a copy with one slot toggled (used by editors and sample data)."""

    rows = [list(r) for r in instructor.availability]
    if 0 <= day_idx < len(rows) and 0 <= hour_offset < len(rows[day_idx]):
        rows[day_idx][hour_offset] = bool(available)
    return replace(instructor, availability=tuple(tuple(r) for r in rows))


def blocked_slots(instructor: Instructor) -> int:
    return sum(1 for row in instructor.availability for v in row if not v)
