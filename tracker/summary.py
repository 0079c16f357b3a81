from datetime import date
from functools import reduce
from typing import Iterable, Optional, Tuple

from tracker.dates import current_month_key
from tracker.domain import (
    EXPENSE,
    INCOME,
    BudgetStatus,
    Category,
    FinancialSummary,
    Transaction,
)


def total_of(trans: Iterable[Transaction], kind: str) -> float:
    return reduce(lambda acc, t: acc + t.amount if t.type == kind else acc, trans, 0)


def in_month(trans: Iterable[Transaction], month_key: str) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.date.startswith(month_key), trans))


def is_budgeted(c: Category) -> bool:
    return c.type == EXPENSE and c.budget is not None and c.budget > 0


def budget_status(
    monthly: Tuple[Transaction, ...], categories: Iterable[Category]
) -> Tuple[BudgetStatus, ...]:
    statuses = []
    for c in filter(is_budgeted, categories):
        spent = total_of((t for t in monthly if t.category == c.name), EXPENSE)
        statuses.append(BudgetStatus(c.id, spent, c.budget, spent / c.budget * 100))
    return tuple(statuses)


def compute_summary(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    today: Optional[date] = None,
) -> FinancialSummary:
    """Aggregate transactions into all-time and current-month figures.

    Totals cover the whole history; monthly figures and budget usage only
    count transactions dated in the month containing ``today``. Budget
    entries follow category order, one per expense category with a
    positive budget.
    """
    trans = tuple(transactions)
    monthly = in_month(trans, current_month_key(today))

    total_income = total_of(trans, INCOME)
    total_expenses = total_of(trans, EXPENSE)
    monthly_income = total_of(monthly, INCOME)
    monthly_expenses = total_of(monthly, EXPENSE)

    return FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        savings=monthly_income - monthly_expenses,
        budget_status=budget_status(monthly, categories),
    )


def savings_rate(summary: FinancialSummary) -> float:
    if summary.monthly_income <= 0:
        return 0.0
    return summary.savings / summary.monthly_income * 100


def over_budget(summary: FinancialSummary) -> Tuple[BudgetStatus, ...]:
    return tuple(b for b in summary.budget_status if b.percentage > 100)


def near_limit(summary: FinancialSummary, threshold: float = 80.0) -> Tuple[BudgetStatus, ...]:
    return tuple(b for b in summary.budget_status if threshold < b.percentage <= 100)


def remaining(status: BudgetStatus) -> float:
    return status.budget - status.spent
