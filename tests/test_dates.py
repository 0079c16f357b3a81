from datetime import date

import pytest

from tracker.dates import (
    current_month_key,
    month_keys_back,
    next_recurrence_date,
    shift_month_key,
    today_iso,
)


def test_current_month_key_zero_pads():
    assert current_month_key(date(2025, 3, 9)) == "2025-03"
    assert current_month_key(date(2025, 11, 30)) == "2025-11"


def test_current_month_key_defaults_to_today():
    assert current_month_key() == date.today().isoformat()[:7]
    assert today_iso() == date.today().isoformat()


@pytest.mark.parametrize("last, freq, expected", [
    ("2025-01-15", "weekly", "2025-01-22"),
    ("2025-12-29", "weekly", "2026-01-05"),
    ("2025-01-15", "monthly", "2025-02-15"),
    ("2025-12-10", "monthly", "2026-01-10"),
    ("2025-06-01", "yearly", "2026-06-01"),
])
def test_next_recurrence_date_plain_steps(last, freq, expected):
    assert next_recurrence_date(last, freq) == expected


def test_monthly_step_overflows_instead_of_clamping():
    assert next_recurrence_date("2025-01-31", "monthly") == "2025-03-03"
    assert next_recurrence_date("2024-01-31", "monthly") == "2024-03-02"  # leap year
    assert next_recurrence_date("2025-03-31", "monthly") == "2025-05-01"


def test_yearly_step_from_leap_day_overflows():
    assert next_recurrence_date("2024-02-29", "yearly") == "2025-03-01"


@pytest.mark.parametrize("freq", [None, "none", "daily", ""])
def test_unknown_frequency_returns_input_unchanged(freq):
    for d in ("2025-01-31", "1999-12-31", "2024-02-29"):
        assert next_recurrence_date(d, freq) == d


def test_shift_month_key_crosses_years():
    assert shift_month_key("2025-01", -1) == "2024-12"
    assert shift_month_key("2025-11", 3) == "2026-02"
    assert shift_month_key("2025-05", 0) == "2025-05"


def test_month_keys_back_oldest_first():
    keys = month_keys_back(6, date(2025, 2, 14))
    assert keys == ["2024-09", "2024-10", "2024-11", "2024-12", "2025-01", "2025-02"]
