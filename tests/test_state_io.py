from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.models import REASON_INSTRUCTOR_MISSING, AppState, Course, Instructor, TimetableSettings
from scheduling.state import build_sample_state, run_scheduler
from scheduling.state_io import (
    dumps_state,
    load_state_from_json,
    loads_state,
    save_state_to_json,
    state_from_dict,
    state_to_dict,
)


def _doc(**overrides):
    doc = {
        "version": 1,
        "settings": {"days": ["Mon", "Tue"], "startHour": 8, "endHour": 12},
        "instructors": [{"id": "I1", "name": "Ada", "availability": [[True, False]]}],
        "courses": [
            {
                "id": "C1",
                "code": "CSC1",
                "title": "Intro",
                "instructorId": "I1",
                "sessionsPerWeek": 2,
                "duration": 1,
                "preferredDays": ["Tue"],
                "earliestHour": 8,
                "latestHour": 12,
                "notes": "",
            }
        ],
    }
    doc.update(overrides)
    return doc


def test_document_uses_camel_case_keys() -> None:
    state = build_sample_state()
    run_scheduler(state)

    doc = state_to_dict(state)

    assert set(doc) == {"version", "settings", "instructors", "courses", "schedule"}
    assert doc["settings"] == {"days": ["Mon", "Tue", "Wed", "Thu", "Fri"], "startHour": 8, "endHour": 18}
    assert set(doc["courses"][0]) >= {"instructorId", "sessionsPerWeek", "earliestHour", "latestHour", "preferredDays"}
    assert set(doc["schedule"]["placements"][0]) == {"id", "courseId", "instructorId", "day", "startHour", "duration"}


def test_round_trip_keeps_everything() -> None:
    state = build_sample_state()
    run_scheduler(state)

    again = loads_state(dumps_state(state))

    assert again == state


def test_missing_required_fields_are_rejected() -> None:
    for key in ("settings", "instructors", "courses"):
        doc = _doc()
        del doc[key]
        with pytest.raises(ValueError, match="Missing required fields"):
            state_from_dict(doc)


def test_invalid_json_is_rejected() -> None:
    with pytest.raises(ValueError, match="Invalid JSON"):
        loads_state("{not json")
    with pytest.raises(ValueError, match="Invalid JSON"):
        loads_state("[1, 2]")


def test_import_sanitizes_instructors_and_courses() -> None:
    doc = _doc()
    doc["courses"][0].update({"sessionsPerWeek": 99, "duration": 1.5, "preferredDays": ["Tue", "Sun"]})

    state = state_from_dict(doc)

    # short availability padded with True, missing day added
    assert state.instructors["I1"].availability == ((True, False, True, True), (True, True, True, True))
    course = state.courses["C1"]
    assert course.sessions_per_week == 10
    assert course.duration == 1
    assert course.preferred_days == ("Tue",)


def test_import_keeps_dangling_instructor_for_the_scheduler_to_report() -> None:
    doc = _doc()
    doc["courses"][0]["instructorId"] = "GHOST"

    state = state_from_dict(doc)
    schedule = run_scheduler(state)

    assert state.courses["C1"].instructor_id == "GHOST"
    assert schedule.placements == ()
    assert schedule.unscheduled[0].reason == REASON_INSTRUCTOR_MISSING
    assert schedule.unscheduled[0].remaining == 2


def test_import_drops_placements_outside_the_grid() -> None:
    doc = _doc(
        schedule={
            "placements": [
                {"id": "P0001", "courseId": "C1", "instructorId": "I1", "day": "Mon", "startHour": 8, "duration": 1},
                {"id": "P0002", "courseId": "C1", "instructorId": "I1", "day": "Sat", "startHour": 8, "duration": 1},
                {"id": "P0003", "courseId": "C1", "instructorId": "I1", "day": "Tue", "startHour": 11, "duration": 2},
            ],
            "unscheduled": [{"courseId": "C1", "remaining": 1, "reason": "No feasible slots with current constraints"}],
        }
    )

    state = state_from_dict(doc)

    assert [p.placement_id for p in state.schedule.placements] == ["P0001"]
    assert len(state.schedule.unscheduled) == 1


def test_file_save_and_load(tmp_path: Path) -> None:
    state = build_sample_state()
    path = tmp_path / "state.json"

    save_state_to_json(path, state)

    assert json.loads(path.read_text(encoding="utf-8"))["version"] == 1
    assert load_state_from_json(path) == state


def test_short_grid_settings_round_trip() -> None:
    state = AppState(settings=TimetableSettings(days=("Mon", "Tue"), start_hour=8, end_hour=12))

    again = loads_state(dumps_state(state))

    assert again.settings == TimetableSettings(days=("Mon", "Tue"), start_hour=8, end_hour=12)


def test_empty_title_and_name_round_trip() -> None:
    settings = TimetableSettings()
    state = AppState(
        settings=settings,
        instructors={"I1": Instructor("I1", "", availability=((True,) * 10,) * 5)},
        courses={"C1": Course(course_id="C1", code="X", title="", instructor_id="I1", sessions_per_week=2)},
    )

    again = loads_state(dumps_state(state))

    assert again.instructors["I1"].name == ""
    assert again.courses["C1"].title == ""
    assert again == state
