import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Callable, FrozenSet, Iterable, NamedTuple, Optional, Tuple

from tracker import transforms
from tracker.domain import Category, FinancialSummary, Transaction
from tracker.events import (
    BUDGET_ALERT,
    CATEGORY_ADDED,
    CATEGORY_DELETED,
    CATEGORY_UPDATED,
    RECURRING_PROCESSED,
    TRANSACTION_ADDED,
    TRANSACTION_DELETED,
    TRANSACTION_UPDATED,
    EventBus,
    budget_alert_handler,
)
from tracker.functional import (
    Either,
    Left,
    Right,
    safe_category,
    safe_transaction,
    validate_transaction,
)
from tracker.recurrence import process_recurring
from tracker.summary import compute_summary, over_budget

logger = logging.getLogger(__name__)


class Snapshot(NamedTuple):
    transactions: Tuple[Transaction, ...]
    categories: Tuple[Category, ...]
    summary: FinancialSummary


def default_bus() -> EventBus:
    bus = EventBus()
    bus.subscribe(BUDGET_ALERT, budget_alert_handler)
    return bus


class FinanceStore:
    """Single owner of the transaction and category collections.

    Collections are immutable tuples that get replaced on every mutation,
    after which the summary is recomputed and an event is published.
    Lookups by an unknown id return ``Left`` and change nothing.
    """

    def __init__(
        self,
        categories: Iterable[Category] = (),
        transactions: Iterable[Transaction] = (),
        bus: Optional[EventBus] = None,
        id_factory: Callable[[], str] = transforms.generate_id,
        clock: Callable[[], date] = date.today,
    ):
        self.bus = bus if bus is not None else default_bus()
        self._id_factory = id_factory
        self._clock = clock
        self._categories: Tuple[Category, ...] = tuple(categories)
        self._transactions: Tuple[Transaction, ...] = tuple(transactions)
        self._summary = compute_summary(self._transactions, self._categories, self._clock())
        self._over: FrozenSet[str] = frozenset(b.category_id for b in over_budget(self._summary))

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._transactions

    @property
    def categories(self) -> Tuple[Category, ...]:
        return self._categories

    @property
    def summary(self) -> FinancialSummary:
        return self._summary

    def snapshot(self) -> Snapshot:
        return Snapshot(self._transactions, self._categories, self._summary)

    def _recompute(self) -> FinancialSummary:
        """Recompute the summary and alert on categories that just went over budget."""
        summary = compute_summary(self._transactions, self._categories, self._clock())
        names = {c.id: c.name for c in self._categories}
        over = over_budget(summary)
        for status in over:
            if status.category_id in self._over:
                continue
            payload = asdict(status)
            payload["category_name"] = names.get(status.category_id, status.category_id)
            self.bus.publish(BUDGET_ALERT, payload)
        self._over = frozenset(b.category_id for b in over)
        return summary

    def _commit(self, event: str, payload: dict,
                transactions: Optional[Tuple[Transaction, ...]] = None,
                categories: Optional[Tuple[Category, ...]] = None) -> None:
        if transactions is not None:
            self._transactions = transactions
        if categories is not None:
            self._categories = categories
        self._summary = self._recompute()
        logger.debug("%s %s", event, payload)
        self.bus.publish(event, payload)

    # transactions

    def add_transaction(self, fields: dict) -> Transaction:
        transactions = transforms.add_transaction(self._transactions, fields, self._id_factory)
        added = transactions[0]
        self._commit(TRANSACTION_ADDED, asdict(added), transactions=transactions)
        return added

    def try_add_transaction(self, fields: dict) -> Either[dict, Transaction]:
        """Add a transaction only if it passes ``validate_transaction``."""
        transactions = transforms.add_transaction(self._transactions, fields, self._id_factory)
        checked = validate_transaction(transactions[0], self._categories)
        if checked.is_left():
            logger.warning("Rejected transaction: %s", checked.get_error()["message"])
            return checked
        self._commit(TRANSACTION_ADDED, asdict(transactions[0]), transactions=transactions)
        return checked

    def update_transaction(self, tid: str, **updates: Any) -> Either[dict, Transaction]:
        if safe_transaction(self._transactions, tid).is_none():
            return self._not_found("transaction", tid)
        transactions = transforms.update_transaction(self._transactions, tid, updates)
        updated = safe_transaction(transactions, tid).get_or_else(None)
        self._commit(TRANSACTION_UPDATED, asdict(updated), transactions=transactions)
        return Right(updated)

    def delete_transaction(self, tid: str) -> Either[dict, Transaction]:
        found = safe_transaction(self._transactions, tid)
        if found.is_none():
            return self._not_found("transaction", tid)
        transactions = transforms.delete_transaction(self._transactions, tid)
        self._commit(TRANSACTION_DELETED, {"id": tid}, transactions=transactions)
        return Right(found.get_or_else(None))

    # categories

    def add_category(self, fields: dict) -> Category:
        categories = transforms.add_category(self._categories, fields, self._id_factory)
        added = categories[-1]
        self._commit(CATEGORY_ADDED, asdict(added), categories=categories)
        return added

    def update_category(self, cid: str, **updates: Any) -> Either[dict, Category]:
        found = safe_category(self._categories, cid)
        if found.is_none():
            return self._not_found("category", cid)
        old = found.get_or_else(None)
        categories = transforms.update_category(self._categories, cid, updates)
        new = safe_category(categories, cid).get_or_else(None)

        transactions = self._transactions
        if new.name != old.name or new.type != old.type:
            # Keep history attached to the renamed category.
            transactions = transforms.rename_category_references(
                transactions, old.name, new.name, old.type
            )
            if new.type != old.type:
                logger.warning("Category %s changed type from %s to %s",
                               cid, old.type, new.type)
        self._commit(CATEGORY_UPDATED, asdict(new),
                     transactions=transactions, categories=categories)
        return Right(new)

    def delete_category(self, cid: str) -> Either[dict, Category]:
        found = safe_category(self._categories, cid)
        if found.is_none():
            return self._not_found("category", cid)
        categories = transforms.delete_category(self._categories, cid)
        self._commit(CATEGORY_DELETED, {"id": cid}, categories=categories)
        return Right(found.get_or_else(None))

    # recurrence

    def process_recurring_transactions(self, today: Optional[date] = None) -> Tuple[Transaction, ...]:
        """Book due recurring transactions; returns the newly created ones."""
        result = process_recurring(self._transactions, today or self._clock(), self._id_factory)
        if result.created:
            self._commit(RECURRING_PROCESSED,
                         {"created": [t.id for t in result.created]},
                         transactions=result.transactions)
        return result.created

    def _not_found(self, kind: str, key: str) -> Left:
        logger.warning("No %s with id %s", kind, key)
        return Left({
            "error": f"{kind}_not_found",
            "message": f"{kind.capitalize()} with ID {key} does not exist",
            "id": key,
        })
