from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, Generic, Iterable, TypeVar

from tracker.domain import BudgetStatus, Category, Transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):
    """Result of an operation that can fail without raising.

    ``Right`` carries the value, ``Left`` an error dict with at least an
    ``"error"`` code.
    """

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Left(self._error)

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def safe_category(cats: Iterable[Category], cat_id: str) -> Maybe[Category]:
    for cat in cats:
        if cat.id == cat_id:
            return Some(cat)
    return Nothing()


def safe_transaction(trans: Iterable[Transaction], tid: str) -> Maybe[Transaction]:
    for t in trans:
        if t.id == tid:
            return Some(t)
    return Nothing()


def validate_transaction(
    t: Transaction,
    cats: Iterable[Category],
) -> Either[dict, Transaction]:

    if t.amount <= 0:
        return Left({
            "error": "invalid_amount",
            "message": f"Amount must be positive, got {t.amount}",
            "amount": t.amount
        })

    try:
        date.fromisoformat(t.date)
    except ValueError:
        return Left({
            "error": "invalid_date",
            "message": f"Date {t.date!r} is not a YYYY-MM-DD date",
            "date": t.date
        })

    named = [c for c in cats if c.name == t.category]
    if not named:
        return Left({
            "error": "category_not_found",
            "message": f"Category {t.category} does not exist",
            "category": t.category
        })

    if not any(c.type == t.type for c in named):
        return Left({
            "error": "category_type_mismatch",
            "message": f"Category {t.category} is not an {t.type} category",
            "category_type": named[0].type,
            "transaction_type": t.type
        })

    return Right(t)


def check_budget(status: BudgetStatus) -> Either[dict, BudgetStatus]:
    if status.percentage > 100:
        return Left({
            "error": "budget_exceeded",
            "message": f"Budget limit exceeded for category {status.category_id}",
            "category_id": status.category_id,
            "limit": status.budget,
            "spent": status.spent,
            "over_budget": status.spent - status.budget
        })

    return Right(status)
