from dataclasses import dataclass
from typing import Optional, Tuple

INCOME = "income"
EXPENSE = "expense"

NONE = "none"
WEEKLY = "weekly"
MONTHLY = "monthly"
YEARLY = "yearly"


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str                      # display hint, e.g. "#EF4444"
    type: str                       # "income" or "expense"
    budget: Optional[float] = None  # monthly limit, expense categories only


@dataclass(frozen=True)
class Transaction:
    id: str
    type: str         # "income" or "expense"
    amount: float     # always positive, sign comes from type
    category: str     # category name
    description: str
    date: str         # "2025-01-15"
    recurring: Optional[str] = None  # "none", "weekly", "monthly", "yearly"
    next_due: Optional[str] = None

    @property
    def is_recurring(self) -> bool:
        return bool(self.recurring) and self.recurring != NONE


@dataclass(frozen=True)
class BudgetStatus:
    category_id: str
    spent: float
    budget: float
    percentage: float  # unclamped, may exceed 100


@dataclass(frozen=True)
class FinancialSummary:
    total_income: float
    total_expenses: float
    balance: float
    monthly_income: float
    monthly_expenses: float
    savings: float
    budget_status: Tuple[BudgetStatus, ...] = ()


EMPTY_SUMMARY = FinancialSummary(0, 0, 0, 0, 0, 0, ())
