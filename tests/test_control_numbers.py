from datetime import date

import pytest

import control_numbers
from errors import ControlNumberExhaustedError


def test_allocate_next_sequence_for_date() -> None:
    existing = ["CN-03-10-001", "CN-03-10-002"]
    assert control_numbers.allocate(date(2024, 3, 10), existing, []) == "CN-03-10-003"


def test_allocate_starts_at_one_and_fills_gaps() -> None:
    assert control_numbers.allocate(date(2024, 3, 10), [], []) == "CN-03-10-001"
    existing = ["CN-03-10-001", "CN-03-10-003"]
    assert control_numbers.allocate(date(2024, 3, 10), existing, []) == "CN-03-10-002"


def test_allocate_ignores_numbers_from_other_days() -> None:
    existing = ["CN-03-11-001", "CN-04-10-001"]
    assert control_numbers.allocate(date(2024, 3, 10), existing, []) == "CN-03-10-001"


def test_allocate_prefers_head_of_recycle_pool() -> None:
    pool = ["CN-01-05-001", "CN-01-05-002"]
    assert control_numbers.allocate(date(2024, 3, 10), [], pool) == "CN-01-05-001"
    # The pool itself is left for the caller to update.
    assert pool == ["CN-01-05-001", "CN-01-05-002"]


def test_allocate_raises_when_day_is_exhausted() -> None:
    existing = [control_numbers.format_control_number(3, 10, n) for n in range(1, 1000)]
    with pytest.raises(ControlNumberExhaustedError):
        control_numbers.allocate(date(2024, 3, 10), existing, [])
