"""
models.py
Lightweight domain helpers (year levels, dataclasses).
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field

# Fixed categories used by the statistics breakdown
YEAR_LEVELS = ("1st Year", "2nd Year", "3rd Year", "4th Year")

DEFAULT_MEMBERSHIP_FEE = 20

# Export/import header row (order matters for export only)
CSV_HEADERS = ["Control Number", "Name", "Student Number", "Year Level", "Fee", "Date"]


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Student:
    id: str
    name: str
    student_number: str
    school_year: str
    membership_fee: float
    control_number: str
    registration_date: str  # YYYY-MM-DD

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Student":
        try:
            fee = float(data.get("membership_fee") or 0)
        except (TypeError, ValueError):
            fee = 0.0
        return cls(
            id=str(data.get("id") or new_id()),
            name=str(data.get("name") or ""),
            student_number=str(data.get("student_number") or ""),
            school_year=str(data.get("school_year") or ""),
            membership_fee=fee,
            control_number=str(data.get("control_number") or ""),
            registration_date=str(data.get("registration_date") or ""),
        )


@dataclass(frozen=True)
class Statistics:
    total_members: int
    total_revenue: float
    year_counts: dict[str, int] = field(default_factory=dict)


@dataclass
class FilterState:
    search: str = ""
    year: str = ""  # "" means all years
