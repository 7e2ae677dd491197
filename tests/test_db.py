import pytest

import db
from errors import PersistenceError
from models import Student


def sample() -> Student:
    return Student(
        id="abc",
        name="Ana, Reyes",
        student_number="2024-001",
        school_year="1st Year",
        membership_fee=20.0,
        control_number="CN-01-05-001",
        registration_date="2024-01-05",
    )


def test_load_state_without_prior_data_is_empty(tmp_db) -> None:
    assert db.load_state() == ([], [])


def test_save_and_load_round_trip(tmp_db) -> None:
    db.save_state([sample()], ["CN-01-05-003", "CN-01-05-002"])

    students, deleted = db.load_state()

    assert students == [sample()]
    assert deleted == ["CN-01-05-002", "CN-01-05-003"]


def test_unreadable_blob_loads_as_empty(tmp_db) -> None:
    db.save_state([sample()], [])
    db.execute("UPDATE app_settings SET value = ? WHERE key = ?", ("{not json", db.STUDENTS_KEY))

    students, deleted = db.load_state()

    assert students == []
    assert deleted == []


def test_clear_state_removes_both_keys(tmp_db) -> None:
    db.save_state([sample()], ["CN-01-05-002"])
    db.clear_state()
    assert db.load_state() == ([], [])


def test_save_failure_raises_persistence_error(tmp_path, monkeypatch) -> None:
    # A directory cannot be opened as a database file.
    monkeypatch.setattr(db, "DB_FILE", tmp_path)

    with pytest.raises(PersistenceError):
        db.save_state([sample()], [])
    assert db.load_state() == ([], [])
