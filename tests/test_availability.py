from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.availability import (
    is_available,
    make_default_availability,
    normalize_availability,
    set_slot,
)
from scheduling.models import Instructor, TimetableSettings


SETTINGS = TimetableSettings(days=("Mon", "Tue", "Wed"), start_hour=8, end_hour=12)


def test_default_availability_is_all_true() -> None:
    av = make_default_availability(SETTINGS)
    assert len(av) == 3
    assert all(len(row) == 4 and all(row) for row in av)


def test_normalize_pads_truncates_and_coerces() -> None:
    raw = [
        [1, 0],  # too short, ints
        [True, True, False, True, False, False],  # too long
    ]  # missing third day
    inst = normalize_availability(Instructor("I1", "A", availability=raw), SETTINGS)

    assert inst.availability == (
        (True, False, True, True),
        (True, True, False, True),
        (True, True, True, True),
    )
    assert all(type(v) is bool for row in inst.availability for v in row)


def test_normalize_replaces_non_list_availability() -> None:
    inst = normalize_availability(Instructor("I1", "A", availability=None), SETTINGS)
    assert inst.availability == make_default_availability(SETTINGS)


def test_normalize_is_idempotent() -> None:
    raw = [[False], [True, False, True, True, True], "junk"]
    once = normalize_availability(Instructor("I1", "A", availability=raw), SETTINGS)
    twice = normalize_availability(once, SETTINGS)
    assert once == twice


def test_is_available_without_instructor_or_row_fails_open() -> None:
    assert is_available(None, 0, 0, 4)
    short = Instructor("I1", "A", availability=((False, False, False, False),))
    # no row for day 2
    assert is_available(short, 2, 0, 4)


def test_is_available_checks_every_covered_hour() -> None:
    inst = set_slot(normalize_availability(Instructor("I1", "A"), SETTINGS), 1, 2, False)

    assert is_available(inst, 1, 0, 2)
    assert not is_available(inst, 1, 1, 2)
    assert not is_available(inst, 1, 2, 1)
    assert is_available(inst, 1, 3, 1)
    assert is_available(inst, 0, 0, 4)
