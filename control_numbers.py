"""
control_numbers.py
Control number allocation: CN-MM-DD-NNN, recycled numbers first.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from errors import ControlNumberExhaustedError

MAX_SEQUENCE = 999


def format_control_number(month: int, day: int, seq: int) -> str:
    return f"CN-{month:02d}-{day:02d}-{seq:03d}"


def allocate(current_date: date | None, existing: Iterable[str], recycle_pool: Sequence[str]) -> str:
    """
    Return the next control number.

    The pool is assumed sorted ascending; its head is returned as-is and the
    caller is responsible for removing it once the record is stored. Without
    recycled numbers the first free sequence for the date is used.
    """
    if recycle_pool:
        return recycle_pool[0]

    d = current_date or date.today()
    taken = set(existing)
    for seq in range(1, MAX_SEQUENCE + 1):
        candidate = format_control_number(d.month, d.day, seq)
        if candidate not in taken:
            return candidate
    raise ControlNumberExhaustedError(d.month, d.day)
