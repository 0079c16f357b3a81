from collections import defaultdict
from datetime import date
from typing import Iterable, List, NamedTuple, Optional, Tuple

from tracker.dates import current_month_key, month_keys_back
from tracker.domain import EXPENSE, INCOME, Category, Transaction
from tracker.summary import in_month


class CategoryShare(NamedTuple):
    name: str
    color: str
    amount: float
    share: float  # percent of the kind's monthly total


class MonthTrend(NamedTuple):
    month: str
    income: float
    expenses: float


def category_breakdown(
    trans: Iterable[Transaction],
    cats: Iterable[Category],
    kind: str,
    today: Optional[date] = None,
) -> List[CategoryShare]:
    """Current-month totals per category of ``kind``, largest first.

    Categories with nothing booked this month are left out.
    """
    monthly = in_month(trans, current_month_key(today))
    rows = []
    for c in cats:
        if c.type != kind:
            continue
        amount = sum(t.amount for t in monthly if t.category == c.name and t.type == kind)
        if amount > 0:
            rows.append((c, amount))

    total = sum(amount for _, amount in rows)
    rows.sort(key=lambda item: item[1], reverse=True)
    return [CategoryShare(c.name, c.color, amount, amount / total * 100) for c, amount in rows]


def monthly_trends(
    trans: Iterable[Transaction], months: int = 6, today: Optional[date] = None
) -> List[MonthTrend]:
    totals = defaultdict(lambda: {INCOME: 0.0, EXPENSE: 0.0})
    for t in trans:
        totals[t.date[:7]][t.type] += t.amount

    return [
        MonthTrend(m, totals[m][INCOME], totals[m][EXPENSE])
        for m in month_keys_back(months, today)
    ]


def orphaned_transactions(
    trans: Iterable[Transaction], cats: Iterable[Category]
) -> Tuple[Transaction, ...]:
    """Transactions whose category name and type match no category."""
    keys = {(c.name, c.type) for c in cats}
    return tuple(t for t in trans if (t.category, t.type) not in keys)
