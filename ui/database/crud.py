"""CRUD operations for the Streamlit UI.

All DB access is centralized here so pages remain clean. Rows are converted to
and from the `scheduling` dataclasses at this boundary.

We use simple `sqlite3` + parameterized queries.

"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Dict, List, Optional, Sequence

from scheduling.models import (
    AppState,
    Course,
    Instructor,
    Placement,
    Schedule,
    TimetableSettings,
    UnscheduledEntry,
)
from scheduling.availability import normalize_availability


logger = logging.getLogger(__name__)


# -----------------
# Helper utilities
# -----------------


def _rows(conn: sqlite3.Connection, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    cur = conn.execute(query, params)
    return [dict(r) for r in cur.fetchall()]


def _row(conn: sqlite3.Connection, query: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
    cur = conn.execute(query, params)
    r = cur.fetchone()
    return dict(r) if r is not None else None


def _instructor_from_row(r: Dict[str, Any]) -> Instructor:
    raw = json.loads(r.get("availability_json") or "[]")
    return Instructor(
        instructor_id=r["instructor_id"],
        name=r["name"],
        availability=tuple(tuple(bool(v) for v in row) for row in raw),
    )


def _course_from_row(r: Dict[str, Any]) -> Course:
    return Course(
        course_id=r["course_id"],
        code=r["code"],
        title=r.get("title") or "",
        instructor_id=r.get("instructor_id") or "",
        sessions_per_week=int(r["sessions_per_week"]),
        duration=int(r["duration"]),
        earliest_hour=int(r["earliest_hour"]),
        latest_hour=int(r["latest_hour"]),
        preferred_days=tuple(json.loads(r.get("preferred_days_json") or "[]")),
        notes=r.get("notes") or "",
    )


# --------
# Settings
# --------


def get_settings(conn: sqlite3.Connection) -> TimetableSettings:
    s = _row(conn, "SELECT * FROM settings WHERE id=1")
    assert s is not None
    return TimetableSettings(
        days=tuple(json.loads(s["day_names_json"]) if s.get("day_names_json") else ()),
        start_hour=int(s["start_hour"]),
        end_hour=int(s["end_hour"]),
    )


def update_settings(conn: sqlite3.Connection, settings: TimetableSettings, *, version: int = 1) -> None:
    conn.execute(
        """
        UPDATE settings
        SET version=?,
            day_names_json=?,
            start_hour=?,
            end_hour=?,
            updated_at=datetime('now')
        WHERE id=1
        """,
        (int(version), json.dumps(list(settings.days)), int(settings.start_hour), int(settings.end_hour)),
    )


# -----------
# Instructors
# -----------


def list_instructors(conn: sqlite3.Connection) -> List[Instructor]:
    rows = _rows(conn, "SELECT * FROM instructors ORDER BY position, instructor_id")
    return [_instructor_from_row(r) for r in rows]


def get_instructor(conn: sqlite3.Connection, instructor_id: str) -> Optional[Instructor]:
    r = _row(conn, "SELECT * FROM instructors WHERE instructor_id=?", (instructor_id,))
    return _instructor_from_row(r) if r is not None else None


def upsert_instructor(conn: sqlite3.Connection, instructor: Instructor) -> None:
    conn.execute(
        """
        INSERT INTO instructors (instructor_id, name, position, availability_json)
        VALUES (?, ?, (SELECT COALESCE(MAX(position), 0) + 1 FROM instructors), ?)
        ON CONFLICT(instructor_id) DO UPDATE SET
            name=excluded.name,
            availability_json=excluded.availability_json
        """,
        (
            instructor.instructor_id,
            instructor.name,
            json.dumps([list(row) for row in instructor.availability]),
        ),
    )


def delete_instructor(conn: sqlite3.Connection, instructor_id: str) -> None:
    conn.execute("DELETE FROM instructors WHERE instructor_id=?", (instructor_id,))
    # courses taught by this instructor become unassigned
    conn.execute("UPDATE courses SET instructor_id='' WHERE instructor_id=?", (instructor_id,))


# -------
# Courses
# -------


def list_courses(conn: sqlite3.Connection) -> List[Course]:
    rows = _rows(conn, "SELECT * FROM courses ORDER BY position, course_id")
    return [_course_from_row(r) for r in rows]


def get_course(conn: sqlite3.Connection, course_id: str) -> Optional[Course]:
    r = _row(conn, "SELECT * FROM courses WHERE course_id=?", (course_id,))
    return _course_from_row(r) if r is not None else None


def upsert_course(conn: sqlite3.Connection, course: Course) -> None:
    conn.execute(
        """
        INSERT INTO courses (
            course_id, code, title, instructor_id, sessions_per_week, duration,
            earliest_hour, latest_hour, preferred_days_json, notes, position
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, (SELECT COALESCE(MAX(position), 0) + 1 FROM courses))
        ON CONFLICT(course_id) DO UPDATE SET
            code=excluded.code,
            title=excluded.title,
            instructor_id=excluded.instructor_id,
            sessions_per_week=excluded.sessions_per_week,
            duration=excluded.duration,
            earliest_hour=excluded.earliest_hour,
            latest_hour=excluded.latest_hour,
            preferred_days_json=excluded.preferred_days_json,
            notes=excluded.notes
        """,
        (
            course.course_id,
            course.code,
            course.title,
            course.instructor_id or "",
            int(course.sessions_per_week),
            int(course.duration),
            int(course.earliest_hour),
            int(course.latest_hour),
            json.dumps(list(course.preferred_days)),
            course.notes,
        ),
    )


def delete_course(conn: sqlite3.Connection, course_id: str) -> None:
    conn.execute("DELETE FROM courses WHERE course_id=?", (course_id,))


# --------
# Schedule
# --------


def get_schedule(conn: sqlite3.Connection) -> Schedule:
    placements = [
        Placement(
            placement_id=r["placement_id"],
            course_id=r["course_id"],
            instructor_id=r["instructor_id"] or "",
            day=r["day"],
            start_hour=int(r["start_hour"]),
            duration=int(r["duration"]),
        )
        for r in _rows(conn, "SELECT * FROM placements ORDER BY position")
    ]
    unscheduled = [
        UnscheduledEntry(course_id=r["course_id"], remaining=int(r["remaining"]), reason=r["reason"])
        for r in _rows(conn, "SELECT * FROM unscheduled ORDER BY entry_id")
    ]
    return Schedule(placements=tuple(placements), unscheduled=tuple(unscheduled))


def get_schedule_meta(conn: sqlite3.Connection) -> Dict[str, Any]:
    m = _row(conn, "SELECT input_hash, generated_at FROM schedule_meta WHERE id=1")
    return m or {"input_hash": None, "generated_at": None}


def replace_schedule(conn: sqlite3.Connection, schedule: Schedule, *, input_hash: Optional[str] = None) -> None:
    """Swap the stored schedule for ``schedule`` (all rows replaced)."""

    conn.execute("DELETE FROM placements")
    conn.execute("DELETE FROM unscheduled")
    conn.executemany(
        """
        INSERT INTO placements (placement_id, position, course_id, instructor_id, day, start_hour, duration)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (p.placement_id, i, p.course_id, p.instructor_id, p.day, int(p.start_hour), int(p.duration))
            for i, p in enumerate(schedule.placements)
        ],
    )
    conn.executemany(
        "INSERT INTO unscheduled (course_id, remaining, reason) VALUES (?, ?, ?)",
        [(u.course_id, int(u.remaining), u.reason) for u in schedule.unscheduled],
    )
    conn.execute(
        "UPDATE schedule_meta SET input_hash=?, generated_at=CASE WHEN ? IS NULL THEN NULL ELSE datetime('now') END WHERE id=1",
        (input_hash, input_hash),
    )


def clear_schedule(conn: sqlite3.Connection) -> None:
    replace_schedule(conn, Schedule())


# -------------
# Whole state
# -------------


def load_state(conn: sqlite3.Connection) -> AppState:
    """Read everything into an `AppState`; availability is normalized on the way in."""

    s = _row(conn, "SELECT version FROM settings WHERE id=1") or {}
    settings = get_settings(conn)
    state = AppState(settings=settings, version=int(s.get("version") or 1))
    state.instructors = {i.instructor_id: normalize_availability(i, settings) for i in list_instructors(conn)}
    state.courses = {c.course_id: c for c in list_courses(conn)}
    state.schedule = get_schedule(conn)
    return state


def save_state(conn: sqlite3.Connection, state: AppState, *, input_hash: Optional[str] = None) -> None:
    """Overwrite the stored state with ``state``."""

    update_settings(conn, state.settings, version=state.version)
    conn.execute("DELETE FROM instructors")
    conn.execute("DELETE FROM courses")
    for inst in state.instructors.values():
        upsert_instructor(conn, inst)
    for course in state.courses.values():
        upsert_course(conn, course)
    replace_schedule(conn, state.schedule, input_hash=input_hash)
    logger.info("Saved state: %d instructor(s), %d course(s)", len(state.instructors), len(state.courses))


def clear_all(conn: sqlite3.Connection) -> None:
    """Reset settings to defaults and delete instructors, courses and schedule."""

    save_state(conn, AppState())
