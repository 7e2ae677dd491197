"""
db.py
SQLite helpers + key-value persistence of the registry state
(student list and recycled control numbers, stored as JSON blobs).
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from errors import PersistenceError
from models import Student

log = logging.getLogger("membership.db")

DB_FILE = Path(os.getenv("MEMBERSHIP_DB_FILE", Path(__file__).with_name("membership.db")))

STUDENTS_KEY = "membership_students"
DELETED_CONTROL_NUMBERS_KEY = "membership_deleted_control_numbers"


@contextmanager
def get_conn():
    conn = sqlite3.connect(DB_FILE, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def execute(sql: str, params: tuple = ()) -> int:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.lastrowid


def executemany(sql: str, seq_of_params: list[tuple]) -> None:
    with get_conn() as conn:
        conn.executemany(sql, seq_of_params)


def fetch_one(sql: str, params: tuple = ()):
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.fetchone()


def _create_tables() -> None:
    execute(
        """
        CREATE TABLE IF NOT EXISTS app_settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        """
    )


def _get_setting(key: str, default: str | None = None) -> str | None:
    row = fetch_one("SELECT value FROM app_settings WHERE key = ?", (key,))
    if row:
        return str(row["value"])
    return default


def init_db() -> None:
    """Create the key-value table if needed."""
    try:
        _create_tables()
    except sqlite3.Error as e:
        raise PersistenceError(f"Could not open storage at {DB_FILE}: {e}") from e


def save_state(students: list[Student], deleted_control_numbers: list[str]) -> None:
    """Write both values in one transaction."""
    payload = [
        (STUDENTS_KEY, json.dumps([s.to_dict() for s in students])),
        (DELETED_CONTROL_NUMBERS_KEY, json.dumps(list(deleted_control_numbers))),
    ]
    try:
        _create_tables()
        executemany(
            """
            INSERT INTO app_settings(key, value) VALUES(?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value
            """,
            payload,
        )
    except sqlite3.Error as e:
        log.exception("Failed to save membership state")
        raise PersistenceError("Failed to save data to storage.") from e


def _load_json_list(key: str) -> list:
    raw = _get_setting(key)
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        log.warning("Stored value for %s is not valid JSON; ignoring it", key)
        return []
    if not isinstance(data, list):
        log.warning("Stored value for %s is not a list; ignoring it", key)
        return []
    return data


def load_state() -> tuple[list[Student], list[str]]:
    """
    Load (students, deleted_control_numbers). Missing or unreadable state
    yields empty lists.
    """
    try:
        _create_tables()
        raw_students = _load_json_list(STUDENTS_KEY)
        raw_deleted = _load_json_list(DELETED_CONTROL_NUMBERS_KEY)
    except sqlite3.Error:
        log.warning("Failed to load membership state from %s", DB_FILE, exc_info=True)
        return [], []

    students = [Student.from_dict(d) for d in raw_students if isinstance(d, dict)]
    deleted = sorted(str(cn) for cn in raw_deleted if cn)
    return students, deleted


def clear_state() -> None:
    try:
        _create_tables()
        executemany(
            "DELETE FROM app_settings WHERE key = ?",
            [(STUDENTS_KEY,), (DELETED_CONTROL_NUMBERS_KEY,)],
        )
    except sqlite3.Error as e:
        log.exception("Failed to clear membership state")
        raise PersistenceError("Failed to clear storage.") from e
