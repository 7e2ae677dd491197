"""
registry.py
In-memory owner of the student list and the recycled control-number pool.

Every mutation validates first and only then touches state, so a failed
operation leaves the registry unchanged. After a successful mutation the
`persist` callback receives (students, deleted_control_numbers); if it raises
PersistenceError the in-memory change is kept and the error propagates.
"""

from __future__ import annotations

import bisect
import dataclasses
import logging
from datetime import date
from typing import Callable, Iterable, Optional

import control_numbers
from errors import DuplicateError, NotFoundError
from models import Student, new_id
from utils import clean_student_input

log = logging.getLogger("membership.registry")

PersistCallback = Callable[[list, list], None]


class Registry:
    def __init__(
        self,
        students: Iterable[Student] = (),
        deleted_control_numbers: Iterable[str] = (),
        persist: Optional[PersistCallback] = None,
    ):
        self._students: list[Student] = list(students)
        self._deleted: list[str] = sorted(deleted_control_numbers)
        self._persist = persist

    # ---------- read access ----------

    @property
    def students(self) -> list[Student]:
        return list(self._students)

    @property
    def deleted_control_numbers(self) -> list[str]:
        return list(self._deleted)

    def __len__(self) -> int:
        return len(self._students)

    def get(self, student_id: str) -> Student:
        for s in self._students:
            if s.id == student_id:
                return s
        raise NotFoundError(student_id)

    def has_student_number(self, student_number: str, exclude_id: str | None = None) -> bool:
        return any(
            s.student_number == student_number and s.id != exclude_id
            for s in self._students
        )

    # ---------- mutations ----------

    def create(self, name, student_number, school_year, membership_fee, today: date | None = None) -> Student:
        fields = clean_student_input(name, student_number, school_year, membership_fee)
        if self.has_student_number(fields["student_number"]):
            raise DuplicateError([fields["student_number"]])

        today = today or date.today()
        cn = control_numbers.allocate(
            today, (s.control_number for s in self._students), self._deleted
        )
        student = Student(
            id=new_id(),
            control_number=cn,
            registration_date=today.isoformat(),
            **fields,
        )

        if self._deleted and self._deleted[0] == cn:
            self._deleted.pop(0)
        self._students.append(student)
        log.info("Registered %s as %s", student.student_number, cn)
        self._save()
        return student

    def update(self, student_id: str, name, student_number, school_year, membership_fee) -> Student:
        idx = self._index_of(student_id)
        fields = clean_student_input(name, student_number, school_year, membership_fee)
        if self.has_student_number(fields["student_number"], exclude_id=student_id):
            raise DuplicateError([fields["student_number"]])

        updated = dataclasses.replace(self._students[idx], **fields)
        self._students[idx] = updated
        log.info("Updated %s (%s)", updated.student_number, updated.control_number)
        self._save()
        return updated

    def delete(self, student_id: str) -> Student:
        idx = self._index_of(student_id)
        removed = self._students.pop(idx)
        if removed.control_number:
            bisect.insort(self._deleted, removed.control_number)
        log.info("Deleted %s, recycling %s", removed.student_number, removed.control_number)
        self._save()
        return removed

    def clear_all(self) -> None:
        """Drop every record and the recycle pool (full reset, nothing recycled)."""
        self._students = []
        self._deleted = []
        log.info("Cleared all students")
        self._save()

    def replace_all(self, students: Iterable[Student]) -> list[Student]:
        """
        Bulk import. Records without a name or student number are dropped
        silently; duplicate student numbers within the batch reject the whole
        batch.
        """
        batch = [s for s in students if s.name and s.student_number]

        seen: set[str] = set()
        duplicates: list[str] = []
        for s in batch:
            if s.student_number in seen:
                duplicates.append(s.student_number)
            else:
                seen.add(s.student_number)
        if duplicates:
            raise DuplicateError(
                duplicates,
                f"Found duplicate student numbers in CSV: {', '.join(duplicates)}. "
                "Please fix the CSV file and try again.",
            )

        self._students = batch
        self._deleted = []
        log.info("Replaced registry with %d imported students", len(batch))
        self._save()
        return list(batch)

    def reset(self) -> None:
        """Empty in-memory state without notifying persistence."""
        self._students = []
        self._deleted = []

    # ---------- internals ----------

    def _index_of(self, student_id: str) -> int:
        for idx, s in enumerate(self._students):
            if s.id == student_id:
                return idx
        raise NotFoundError(student_id)

    def _save(self) -> None:
        if self._persist is not None:
            self._persist(list(self._students), list(self._deleted))
