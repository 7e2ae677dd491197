"""
actions.py
UI-facing operations: call the registry, turn typed errors into a
message + severity the page can show. No Streamlit imports here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

import db
import utils
from errors import MembershipError, PersistenceError
from models import FilterState
from query import filter_students
from registry import Registry

log = logging.getLogger("membership.actions")

SUCCESS = "success"
ERROR = "error"


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    message: str
    severity: str
    payload: Any = None

    @classmethod
    def success(cls, message: str, payload: Any = None) -> "ActionResult":
        return cls(True, message, SUCCESS, payload)

    @classmethod
    def error(cls, message: str) -> "ActionResult":
        return cls(False, message, ERROR)


class SubmissionGuard:
    """Operation-in-flight flag; a second submit while one runs is ignored."""

    def __init__(self):
        self.in_flight = False

    def run(self, fn: Callable[..., ActionResult], *args, **kwargs) -> ActionResult | None:
        if self.in_flight:
            log.info("Ignoring %s: a submission is already in progress", getattr(fn, "__name__", fn))
            return None
        self.in_flight = True
        try:
            return fn(*args, **kwargs)
        finally:
            self.in_flight = False


def _not_saved(done: str, err: PersistenceError) -> ActionResult:
    return ActionResult.error(f"{done} for this session, but it could not be saved: {err}")


def register_student(registry: Registry, name, student_number, school_year, membership_fee, today=None) -> ActionResult:
    try:
        student = registry.create(name, student_number, school_year, membership_fee, today=today)
    except PersistenceError as e:
        return _not_saved("Student registered", e)
    except MembershipError as e:
        return ActionResult.error(str(e))
    return ActionResult.success(
        f"Student registered successfully! Control Number: {student.control_number}", student
    )


def update_student(registry: Registry, student_id: str, name, student_number, school_year, membership_fee) -> ActionResult:
    try:
        student = registry.update(student_id, name, student_number, school_year, membership_fee)
    except PersistenceError as e:
        return _not_saved("Student updated", e)
    except MembershipError as e:
        return ActionResult.error(str(e))
    return ActionResult.success("Student updated successfully!", student)


def delete_student(registry: Registry, student_id: str) -> ActionResult:
    try:
        student = registry.delete(student_id)
    except PersistenceError as e:
        return _not_saved("Student deleted", e)
    except MembershipError as e:
        return ActionResult.error(str(e))
    return ActionResult.success("Student deleted successfully!", student)


def delete_all_students(registry: Registry) -> ActionResult:
    try:
        registry.clear_all()
    except PersistenceError as e:
        return _not_saved("All students deleted", e)
    return ActionResult.success("All students deleted successfully!")


def export_csv(registry: Registry, flt: FilterState, today=None) -> ActionResult:
    """Export the filtered view; payload is (filename, utf-8 bytes)."""
    students = filter_students(registry.students, flt)
    if not students:
        return ActionResult.error("No data to save!")
    data = utils.students_to_csv_bytes(students)
    log.info("Exported %d students", len(students))
    return ActionResult.success(
        f"CSV file saved successfully! {len(students)} records exported.",
        (utils.export_filename(today), data),
    )


def import_csv(registry: Registry, filename: str, content: bytes, mime_type: str | None = None) -> ActionResult:
    """Replace the whole registry with the contents of a CSV upload (all or nothing)."""
    if not utils.is_csv_upload(filename, mime_type):
        return ActionResult.error("Please select a valid CSV file!")
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return ActionResult.error("Failed to load CSV file. Please check the file format and try again.")

    try:
        loaded = registry.replace_all(utils.csv_text_to_students(text))
    except PersistenceError as e:
        return _not_saved("Students loaded", e)
    except MembershipError as e:
        log.warning("Rejected import of %s: %s", filename, e)
        return ActionResult.error(str(e))
    return ActionResult.success(f"Successfully loaded {len(loaded)} students from CSV file!", loaded)


def clear_storage(registry: Registry) -> ActionResult:
    """Remove persisted state and reset the in-memory registry."""
    try:
        db.clear_state()
    except PersistenceError as e:
        return ActionResult.error(str(e))
    registry.reset()
    return ActionResult.success("Storage cleared successfully!")


def insert_sample_data(registry: Registry) -> ActionResult:
    try:
        created = utils.insert_sample_data(registry)
    except PersistenceError as e:
        return _not_saved("Sample data inserted", e)
    except MembershipError as e:
        return ActionResult.error(str(e))
    return ActionResult.success(f"Inserted {len(created)} sample students.", created)
