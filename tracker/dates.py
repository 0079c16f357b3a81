from datetime import date, timedelta
from typing import List, Optional

from tracker.domain import MONTHLY, WEEKLY, YEARLY


def today_iso(today: Optional[date] = None) -> str:
    return (today or date.today()).isoformat()


def current_month_key(today: Optional[date] = None) -> str:
    """Return the "YYYY-MM" key of the month containing ``today``."""
    d = today or date.today()
    return f"{d.year:04d}-{d.month:02d}"


def _rollover(year: int, month: int, day: int) -> date:
    # Days past the end of the month spill into the next one:
    # 2025-02-31 becomes 2025-03-03.
    return date(year, month, 1) + timedelta(days=day - 1)


def next_recurrence_date(last_date: str, frequency: Optional[str]) -> str:
    """Advance an ISO date by one recurrence period.

    Weekly adds 7 days, monthly adds one calendar month and yearly one
    calendar year. Month and year steps keep the day number and let it
    overflow into the following month instead of clamping, so
    ``2025-01-31`` plus a month is ``2025-03-03``.

    Any other frequency (``None``, ``"none"``, unknown strings) returns
    ``last_date`` unchanged.
    """
    if frequency not in (WEEKLY, MONTHLY, YEARLY):
        return last_date

    d = date.fromisoformat(last_date)
    if frequency == WEEKLY:
        return (d + timedelta(days=7)).isoformat()
    if frequency == MONTHLY:
        year, month = divmod(d.month, 12)
        return _rollover(d.year + year, month + 1, d.day).isoformat()
    return _rollover(d.year + 1, d.month, d.day).isoformat()


def shift_month_key(month_key: str, offset: int) -> str:
    year, month = (int(p) for p in month_key.split("-"))
    index = year * 12 + (month - 1) + offset
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def month_keys_back(count: int, today: Optional[date] = None) -> List[str]:
    """Month keys of the last ``count`` months, oldest first, current month last."""
    current = current_month_key(today)
    return [shift_month_key(current, -i) for i in range(count - 1, -1, -1)]
