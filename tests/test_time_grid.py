from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.grid import TimeGrid
from scheduling.models import TimetableSettings


def test_grid_dimensions_follow_settings() -> None:
    grid = TimeGrid.for_settings(TimetableSettings(days=("Mon", "Tue", "Wed"), start_hour=8, end_hour=12))
    assert grid.day_count == 3
    assert grid.hours_count == 4
    assert grid.occupied_count() == 0


def test_place_marks_consecutive_cells() -> None:
    grid = TimeGrid(2, 5)
    assert grid.is_free(0, 1, 3)

    grid.place(0, 1, 3, "P0001")

    assert [grid.occupant(0, h) for h in range(5)] == [None, "P0001", "P0001", "P0001", None]
    assert not grid.is_free(0, 0, 2)
    assert not grid.is_free(0, 3, 1)
    assert grid.is_free(0, 4, 1)
    # other days untouched
    assert grid.is_free(1, 0, 5)
    assert grid.occupied_count() == 3


def test_is_free_has_no_side_effect() -> None:
    grid = TimeGrid(1, 3)
    before = grid.rows()
    grid.is_free(0, 0, 3)
    assert grid.rows() == before


def test_place_on_occupied_cell_is_a_logic_error() -> None:
    grid = TimeGrid(1, 4)
    grid.place(0, 1, 2, "A")
    with pytest.raises(AssertionError):
        grid.place(0, 2, 1, "B")
    # nothing was overwritten
    assert grid.occupant(0, 2) == "A"


def test_in_bounds() -> None:
    grid = TimeGrid(2, 4)
    assert grid.in_bounds(0, 0, 4)
    assert not grid.in_bounds(0, 1, 4)
    assert not grid.in_bounds(0, -1, 1)
    assert not grid.in_bounds(2, 0, 1)
