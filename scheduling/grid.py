"""Occupancy grid used during a single scheduling run."""

from __future__ import annotations

from typing import List, Optional

from .models import TimetableSettings


class TimeGrid:
    """One cell per (day index, hour offset) holding a placement id or None.

    The grid is built empty at the start of each run and thrown away at the
    end; it is never persisted.
    """

    def __init__(self, day_count: int, hours_count: int):
        self.day_count = int(day_count)
        self.hours_count = int(hours_count)
        self._cells: List[List[Optional[str]]] = [[None] * self.hours_count for _ in range(self.day_count)]

    @classmethod
    def for_settings(cls, settings: TimetableSettings) -> "TimeGrid":
        return cls(len(settings.days), settings.hours_count)

    def in_bounds(self, day_idx: int, hour_offset: int, duration: int = 1) -> bool:
        if day_idx < 0 or day_idx >= self.day_count:
            return False
        return hour_offset >= 0 and hour_offset + int(duration) <= self.hours_count

    def occupant(self, day_idx: int, hour_offset: int) -> Optional[str]:
        return self._cells[day_idx][hour_offset]

    def is_free(self, day_idx: int, hour_offset: int, duration: int) -> bool:
        row = self._cells[day_idx]
        for k in range(int(duration)):
            if row[hour_offset + k] is not None:
                return False
        return True

    def place(self, day_idx: int, hour_offset: int, duration: int, placement_id: str) -> None:
        # Caller checks is_free first; overwriting a cell is a scheduler bug.
        assert self.is_free(day_idx, hour_offset, duration), (
            f"cells {day_idx}:{hour_offset}+{duration} already occupied"
        )
        row = self._cells[day_idx]
        for k in range(int(duration)):
            row[hour_offset + k] = placement_id

    def occupied_count(self) -> int:
        return sum(1 for row in self._cells for cell in row if cell is not None)

    def rows(self) -> List[List[Optional[str]]]:
        """Copy of the cell table (rows=days, cols=hour offsets)."""

        return [list(row) for row in self._cells]
