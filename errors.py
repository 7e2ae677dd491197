"""
errors.py
Typed errors raised by the registry, codec and storage layers.
"""

from __future__ import annotations


class MembershipError(Exception):
    """Base class; str(err) is shown to the user as-is."""


class ValidationError(MembershipError):
    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"{field} is required.")


class DuplicateError(MembershipError):
    def __init__(self, values: list[str], message: str | None = None):
        self.values = list(values)
        if message is None:
            if len(self.values) == 1:
                message = f"Student number already exists: {self.values[0]}"
            else:
                message = f"Duplicate student numbers: {', '.join(self.values)}"
        super().__init__(message)


class NotFoundError(MembershipError):
    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__("Student not found!")


class PersistenceError(MembershipError):
    pass


class ImportFormatError(MembershipError):
    def __init__(self, message: str, missing_columns: list[str] | None = None):
        self.missing_columns = list(missing_columns or [])
        super().__init__(message)


class ControlNumberExhaustedError(MembershipError):
    def __init__(self, month: int, day: int):
        self.month = month
        self.day = day
        super().__init__(f"No control numbers left for {month:02d}-{day:02d} (limit 999 per day).")
