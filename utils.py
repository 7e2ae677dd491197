"""
utils.py
Validation, dates, CSV import/export projection, sample data.
"""

from __future__ import annotations

import math
import re
from datetime import date
from typing import TYPE_CHECKING, Iterable

import csv_codec
from errors import ImportFormatError, ValidationError
from models import CSV_HEADERS, Student, new_id

if TYPE_CHECKING:
    from registry import Registry

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_fee(value) -> float:
    """Strict fee parsing for form input: finite and >= 0, else ValidationError."""
    try:
        fee = float(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("Membership fee", "Membership fee must be numeric.")
    if not math.isfinite(fee):
        raise ValidationError("Membership fee", "Membership fee must be numeric.")
    if fee < 0:
        raise ValidationError("Membership fee", "Membership fee cannot be negative.")
    return fee


def parse_fee_lenient(value) -> float:
    """Fee from imported text: leading numeric prefix, anything else counts as 0."""
    m = _LEADING_NUMBER.match(str(value or ""))
    if not m:
        return 0.0
    fee = float(m.group(0))
    return fee if math.isfinite(fee) else 0.0


def format_fee(fee) -> str:
    try:
        value = float(fee or 0)
    except (TypeError, ValueError):
        return "0"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def clean_student_input(name, student_number, school_year, membership_fee) -> dict:
    """
    Trim and validate raw form values. Raises ValidationError for the first
    missing/invalid field, in form order.
    """
    name = str(name or "").strip()
    student_number = str(student_number or "").strip()
    school_year = str(school_year or "").strip()

    if not name:
        raise ValidationError("Name")
    if not student_number:
        raise ValidationError("Student number")
    if not school_year:
        raise ValidationError("Year level")
    if membership_fee is None or str(membership_fee).strip() == "":
        raise ValidationError("Membership fee")
    fee = parse_fee(membership_fee)

    return {
        "name": name,
        "student_number": student_number,
        "school_year": school_year,
        "membership_fee": fee,
    }


# ---------- CSV export/import ----------

def student_to_row(s: Student) -> list[str]:
    return [
        s.control_number,
        s.name,
        s.student_number,
        s.school_year,
        format_fee(s.membership_fee),
        s.registration_date,
    ]


def students_to_csv(students: Iterable[Student]) -> str:
    return csv_codec.encode(CSV_HEADERS, (student_to_row(s) for s in students))


def students_to_csv_bytes(students: Iterable[Student]) -> bytes:
    return students_to_csv(students).encode("utf-8")


def export_filename(today: date | None = None) -> str:
    return f"membership_data_{(today or date.today()).isoformat()}.csv"


def is_csv_upload(filename: str, mime_type: str | None = None) -> bool:
    return mime_type == "text/csv" or filename.lower().endswith(".csv")


def csv_text_to_students(text: str) -> list[Student]:
    """
    Decode import text into Student objects (fresh ids, no validation of
    duplicates; that is the registry's job).
    """
    rows = csv_codec.decode(text)
    if not rows:
        raise ImportFormatError("The CSV file appears to be empty or invalid!")

    missing = [col for col in CSV_HEADERS if col not in rows[0]]
    if missing:
        raise ImportFormatError(
            f"CSV file is missing required columns: {', '.join(missing)}",
            missing_columns=missing,
        )

    return [
        Student(
            id=new_id(),
            name=row.get("Name", ""),
            student_number=row.get("Student Number", ""),
            school_year=row.get("Year Level", ""),
            membership_fee=parse_fee_lenient(row.get("Fee", "")),
            control_number=row.get("Control Number", ""),
            registration_date=row.get("Date", ""),
        )
        for row in rows
    ]


def insert_sample_data(registry: "Registry") -> list[Student]:
    """
    Register a few sample students through the normal create path
    (skips any whose student number is already taken).
    """
    samples = [
        ("Juan Dela Cruz", "2024-0001", "1st Year", 20),
        ("Maria Santos", "2023-0142", "2nd Year", 20),
        ("Jose Smith", "2022-0387", "3rd Year", 15),
        ("Ana Reyes", "2021-0056", "4th Year", 0),
    ]
    created = []
    for name, number, year, fee in samples:
        if registry.has_student_number(number):
            continue
        created.append(registry.create(name, number, year, fee))
    return created
