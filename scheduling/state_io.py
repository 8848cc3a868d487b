"""JSON document exchange for the full application state.

Document layout (camelCase keys, shared with earlier exports)::

    {
      "version": 1,
      "settings": {"days": [...], "startHour": 8, "endHour": 18},
      "instructors": [{"id", "name", "availability": [[bool, ...], ...]}],
      "courses": [{"id", "code", "title", "instructorId", "sessionsPerWeek",
                   "duration", "preferredDays", "earliestHour", "latestHour",
                   "notes"}],
      "schedule": {"placements": [{"id", "courseId", "instructorId", "day",
                                    "startHour", "duration"}],
                   "unscheduled": [{"courseId", "remaining", "reason"}]}
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .availability import normalize_availability
from .models import STATE_VERSION, AppState, Instructor, Placement, Schedule, UnscheduledEntry
from .state import new_id, placement_fits, sanitize_course, sanitize_settings, to_int


logger = logging.getLogger(__name__)


# ----------------------------
# To document
# ----------------------------


def state_to_dict(state: AppState) -> Dict[str, Any]:
    s = state.settings
    return {
        "version": int(state.version),
        "settings": {"days": list(s.days), "startHour": int(s.start_hour), "endHour": int(s.end_hour)},
        "instructors": [
            {
                "id": i.instructor_id,
                "name": i.name,
                "availability": [list(row) for row in i.availability],
            }
            for i in state.instructors.values()
        ],
        "courses": [
            {
                "id": c.course_id,
                "code": c.code,
                "title": c.title,
                "instructorId": c.instructor_id,
                "sessionsPerWeek": int(c.sessions_per_week),
                "duration": int(c.duration),
                "preferredDays": list(c.preferred_days),
                "earliestHour": int(c.earliest_hour),
                "latestHour": int(c.latest_hour),
                "notes": c.notes,
            }
            for c in state.courses.values()
        ],
        "schedule": {
            "placements": [
                {
                    "id": p.placement_id,
                    "courseId": p.course_id,
                    "instructorId": p.instructor_id,
                    "day": p.day,
                    "startHour": int(p.start_hour),
                    "duration": int(p.duration),
                }
                for p in state.schedule.placements
            ],
            "unscheduled": [
                {"courseId": u.course_id, "remaining": int(u.remaining), "reason": u.reason}
                for u in state.schedule.unscheduled
            ],
        },
    }


# ----------------------------
# From document
# ----------------------------


def _placements_from_raw(raw: List[Any], state: AppState) -> List[Placement]:
    out: List[Placement] = []
    for p in raw:
        if not isinstance(p, dict):
            continue
        start = to_int(p.get("startHour"), -1)
        duration = to_int(p.get("duration"), 0)
        if start < 0 or duration <= 0:
            continue
        placement = Placement(
            placement_id=str(p.get("id") or new_id("P")),
            course_id=str(p.get("courseId") or ""),
            instructor_id=str(p.get("instructorId") or ""),
            day=str(p.get("day") or ""),
            start_hour=start,
            duration=duration,
        )
        if placement_fits(placement, state.settings):
            out.append(placement)
    if len(out) != len(raw):
        logger.warning("Dropped %d placement(s) that do not fit the grid", len(raw) - len(out))
    return out


def _unscheduled_from_raw(raw: List[Any]) -> List[UnscheduledEntry]:
    return [
        UnscheduledEntry(
            course_id=str(u.get("courseId") or ""),
            remaining=to_int(u.get("remaining"), 0),
            reason=str(u.get("reason") or ""),
        )
        for u in raw
        if isinstance(u, dict)
    ]


def state_from_dict(data: Any) -> AppState:
    """Build a sanitized state from a parsed document.

    Raises:
        ValueError: if the document is not an object or lacks settings,
            instructors or courses.
    """

    if not isinstance(data, dict):
        raise ValueError("Invalid JSON")
    if (
        not isinstance(data.get("settings"), dict)
        or not isinstance(data.get("courses"), list)
        or not isinstance(data.get("instructors"), list)
    ):
        raise ValueError("Missing required fields")

    raw_settings = data["settings"]
    settings = sanitize_settings(
        {
            "days": raw_settings.get("days"),
            "start_hour": raw_settings.get("startHour"),
            "end_hour": raw_settings.get("endHour"),
        }
    )
    state = AppState(settings=settings, version=to_int(data.get("version"), STATE_VERSION))

    for i in data["instructors"]:
        if not isinstance(i, dict):
            continue
        inst = Instructor(
            instructor_id=str(i.get("id") or new_id("I")),
            name=str(i.get("name") or ""),
            availability=i.get("availability"),
        )
        state.instructors[inst.instructor_id] = normalize_availability(inst, settings)

    for c in data["courses"]:
        if not isinstance(c, dict):
            continue
        # dangling instructor ids are kept; the scheduler reports them
        course = sanitize_course(
            {
                "course_id": c.get("id"),
                "code": c.get("code"),
                "title": c.get("title"),
                "instructor_id": c.get("instructorId"),
                "sessions_per_week": c.get("sessionsPerWeek"),
                "duration": c.get("duration"),
                "preferred_days": c.get("preferredDays"),
                "earliest_hour": c.get("earliestHour"),
                "latest_hour": c.get("latestHour"),
                "notes": c.get("notes"),
            },
            settings,
        )
        state.courses[course.course_id] = course

    raw_schedule = data.get("schedule") if isinstance(data.get("schedule"), dict) else {}
    raw_placements = raw_schedule.get("placements") if isinstance(raw_schedule.get("placements"), list) else []
    raw_unscheduled = raw_schedule.get("unscheduled") if isinstance(raw_schedule.get("unscheduled"), list) else []
    state.schedule = Schedule(
        placements=tuple(_placements_from_raw(raw_placements, state)),
        unscheduled=tuple(_unscheduled_from_raw(raw_unscheduled)),
    )

    logger.info("Loaded state: %d instructor(s), %d course(s)", len(state.instructors), len(state.courses))
    return state


def dumps_state(state: AppState, *, indent: int | None = 2) -> str:
    return json.dumps(state_to_dict(state), indent=indent, ensure_ascii=False)


def loads_state(text: str) -> AppState:
    try:
        data = json.loads(text or "")
    except json.JSONDecodeError as e:
        raise ValueError("Invalid JSON") from e
    return state_from_dict(data)


def load_state_from_json(path: str | Path) -> AppState:
    """Load an `AppState` from a JSON file."""

    with open(path, "r", encoding="utf-8") as f:
        return loads_state(f.read())


def save_state_to_json(path: str | Path, state: AppState) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps_state(state))
