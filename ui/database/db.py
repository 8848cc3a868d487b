"""SQLite database connection + schema initialization.

The timetable data (settings, instructors, courses, last generated schedule)
lives in a local SQLite file so it persists between restarts. The schema is
created on first run and foreign keys are enabled.

"""

from __future__ import annotations

import os
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


DEFAULT_DB_FILENAME = "personatable.db"
DB_PATH_ENV = "PERSONATABLE_DB"


@dataclass(frozen=True)
class DBConfig:
    """Database configuration for the app."""

    db_path: Path


def default_db_path() -> Path:
    """Resolve DB path.

    Uses `PERSONATABLE_DB` env var if set, else stores under `ui/database/`.
    """

    override = os.getenv(DB_PATH_ENV)
    if override:
        return Path(override).expanduser().resolve()

    return (Path(__file__).resolve().parent / DEFAULT_DB_FILENAME).resolve()


def get_connection(config: Optional[DBConfig] = None) -> sqlite3.Connection:
    """Create a SQLite connection with sane defaults."""

    db_path = (config.db_path if config else default_db_path())
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row

    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Create all required tables if they do not exist."""

    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS settings (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            version INTEGER NOT NULL DEFAULT 1,
            day_names_json TEXT NOT NULL DEFAULT '["Mon","Tue","Wed","Thu","Fri"]',
            start_hour INTEGER NOT NULL DEFAULT 8 CHECK (start_hour BETWEEN 0 AND 23),
            end_hour INTEGER NOT NULL DEFAULT 18 CHECK (end_hour BETWEEN 1 AND 24),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        INSERT OR IGNORE INTO settings (id) VALUES (1);

        CREATE TABLE IF NOT EXISTS instructors (
            instructor_id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            position INTEGER NOT NULL DEFAULT 0,
            availability_json TEXT NOT NULL DEFAULT '[]'
        );

        -- instructor_id is a soft reference: imports may carry dangling ids
        CREATE TABLE IF NOT EXISTS courses (
            course_id TEXT PRIMARY KEY,
            code TEXT NOT NULL,
            title TEXT NOT NULL DEFAULT '',
            instructor_id TEXT NOT NULL DEFAULT '',
            sessions_per_week INTEGER NOT NULL DEFAULT 2 CHECK (sessions_per_week BETWEEN 1 AND 10),
            duration INTEGER NOT NULL DEFAULT 1 CHECK (duration BETWEEN 1 AND 4),
            earliest_hour INTEGER NOT NULL,
            latest_hour INTEGER NOT NULL,
            preferred_days_json TEXT NOT NULL DEFAULT '[]',
            notes TEXT NOT NULL DEFAULT '',
            position INTEGER NOT NULL DEFAULT 0
        );

        -- -----------------------------
        -- Last generated schedule
        -- -----------------------------

        CREATE TABLE IF NOT EXISTS placements (
            placement_id TEXT PRIMARY KEY,
            position INTEGER NOT NULL,
            course_id TEXT NOT NULL,
            instructor_id TEXT NOT NULL DEFAULT '',
            day TEXT NOT NULL,
            start_hour INTEGER NOT NULL,
            duration INTEGER NOT NULL CHECK (duration > 0)
        );

        CREATE TABLE IF NOT EXISTS unscheduled (
            entry_id INTEGER PRIMARY KEY AUTOINCREMENT,
            course_id TEXT NOT NULL,
            remaining INTEGER NOT NULL,
            reason TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS schedule_meta (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            input_hash TEXT,
            generated_at TEXT
        );

        INSERT OR IGNORE INTO schedule_meta (id) VALUES (1);

        CREATE INDEX IF NOT EXISTS idx_placements_day ON placements(day, start_hour);
        """
    )
    conn.commit()


class db_session:
    """Context manager that opens a connection and ensures schema exists."""

    def __init__(self, config: Optional[DBConfig] = None):
        self._config = config
        self._conn: Optional[sqlite3.Connection] = None

    def __enter__(self) -> sqlite3.Connection:
        self._conn = get_connection(self._config)
        init_db(self._conn)
        return self._conn

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._conn is not None
        if exc_type is None:
            self._conn.commit()
        else:
            self._conn.rollback()
        self._conn.close()
        self._conn = None
