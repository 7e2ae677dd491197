"""
query.py
Search/filter over the student list and derived statistics.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from models import CSV_HEADERS, YEAR_LEVELS, FilterState, Statistics, Student


def matches(student: Student, flt: FilterState) -> bool:
    term = (flt.search or "").strip().lower()
    if term and not (
        term in student.name.lower()
        or term in student.student_number.lower()
        or term in student.control_number.lower()
    ):
        return False
    if flt.year and student.school_year != flt.year:
        return False
    return True


def filter_students(students: Iterable[Student], flt: FilterState | None = None) -> list[Student]:
    flt = flt or FilterState()
    return [s for s in students if matches(s, flt)]


def calculate_stats(students: Iterable[Student]) -> Statistics:
    """
    Count, revenue and per-year breakdown. Non-numeric fees count as 0;
    years outside YEAR_LEVELS are counted in the totals but not the breakdown.
    """
    students = list(students)
    fees = pd.to_numeric(pd.Series([s.membership_fee for s in students], dtype=object), errors="coerce")
    total_revenue = float(fees.fillna(0).sum())

    years = pd.Series([s.school_year for s in students], dtype=object)
    counts = years.value_counts().reindex(list(YEAR_LEVELS), fill_value=0)

    return Statistics(
        total_members=len(students),
        total_revenue=total_revenue,
        year_counts={year: int(counts[year]) for year in YEAR_LEVELS},
    )


def students_to_frame(students: Iterable[Student]) -> pd.DataFrame:
    rows = [
        {
            "id": s.id,
            "Control Number": s.control_number,
            "Name": s.name,
            "Student Number": s.student_number,
            "Year Level": s.school_year,
            "Fee": s.membership_fee,
            "Date": s.registration_date,
        }
        for s in students
    ]
    if not rows:
        return pd.DataFrame(columns=["id"] + CSV_HEADERS)
    return pd.DataFrame(rows)


def year_counts_frame(stats: Statistics) -> pd.DataFrame:
    return pd.DataFrame(
        {"Year Level": list(stats.year_counts.keys()), "Members": list(stats.year_counts.values())}
    ).set_index("Year Level")


def format_revenue(amount: float) -> str:
    return f"₱{amount:,.2f}"
