from datetime import date
from itertools import count

from tracker.domain import Category, Transaction
from tracker.events import (
    BUDGET_ALERT,
    CATEGORY_UPDATED,
    RECURRING_PROCESSED,
    TRANSACTION_ADDED,
    EventBus,
)
from tracker.functional import Left, Right
from tracker.store import FinanceStore


def make_store(transactions=(), bus=None):
    cats = (
        Category("c1", "Salary", "#10B981", "income"),
        Category("c2", "Groceries", "#EF4444", "expense", 400),
    )
    n = count(1)
    return FinanceStore(
        cats,
        transactions,
        bus=bus if bus is not None else EventBus(),
        id_factory=lambda: f"id{next(n)}",
        clock=lambda: date(2025, 1, 15),
    )


def expense(amount, day="2025-01-10"):
    return {"type": "expense", "amount": amount, "category": "Groceries",
            "description": "food", "date": day}


def test_summary_recomputed_after_each_mutation():
    store = make_store()
    assert store.summary.total_expenses == 0

    added = store.add_transaction(expense(100))
    assert added.id == "id1"
    assert store.transactions == (added,)
    assert store.summary.monthly_expenses == 100
    assert store.summary.budget_status[0].percentage == 25.0

    assert store.update_transaction("id1", amount=500) == Right(store.transactions[0])
    assert store.summary.budget_status[0].percentage == 125.0

    deleted = store.delete_transaction("id1")
    assert deleted.is_right()
    assert store.summary.total_expenses == 0


def test_missing_ids_return_left_and_change_nothing():
    store = make_store()
    store.add_transaction(expense(10))
    before = store.snapshot()

    result = store.update_transaction("ghost", amount=1)
    assert isinstance(result, Left)
    assert result.get_error()["error"] == "transaction_not_found"
    assert store.delete_transaction("ghost").get_error()["id"] == "ghost"
    assert store.update_category("ghost", budget=1).get_error()["error"] == "category_not_found"
    assert store.delete_category("ghost").is_left()
    assert store.snapshot() == before


def test_snapshot_is_immutable_view():
    store = make_store()
    snap = store.snapshot()
    store.add_transaction(expense(10))
    assert snap.transactions == ()
    assert len(store.snapshot().transactions) == 1


def test_category_rename_carries_transactions_along():
    store = make_store()
    store.add_transaction(expense(300))
    store.update_category("c2", name="Food")

    assert store.transactions[0].category == "Food"
    assert store.summary.budget_status[0].spent == 300


def test_add_and_delete_category():
    store = make_store()
    cat = store.add_category({"name": "Fun", "color": "#00f", "type": "expense", "budget": 50})
    assert store.categories[-1] == cat
    assert [b.category_id for b in store.summary.budget_status] == ["c2", cat.id]

    store.delete_category(cat.id)
    assert [b.category_id for b in store.summary.budget_status] == ["c2"]


def test_events_published_for_mutations():
    bus = EventBus()
    seen = []
    bus.subscribe(TRANSACTION_ADDED, lambda e, p: seen.append(e.name) or {})
    bus.subscribe(CATEGORY_UPDATED, lambda e, p: seen.append(p["name"]) or {})
    store = make_store(bus=bus)

    store.add_transaction(expense(10))
    store.update_category("c2", name="Food")
    assert seen == [TRANSACTION_ADDED, "Food"]


def test_budget_alert_published_when_over_budget():
    bus = EventBus()
    alerts = []
    bus.subscribe(BUDGET_ALERT, lambda e, p: alerts.append(p) or {})
    store = make_store(bus=bus)

    store.add_transaction(expense(350))
    assert alerts == []
    store.add_transaction(expense(100))
    assert alerts[-1]["category_id"] == "c2"
    assert alerts[-1]["category_name"] == "Groceries"
    assert alerts[-1]["percentage"] == 112.5


def test_default_bus_has_budget_alert_handler():
    store = FinanceStore()
    assert store.bus.publish(BUDGET_ALERT, {"spent": 5, "budget": 4, "category_id": "x"})[0]["over_budget"] == 1


def test_process_recurring_transactions_uses_clock():
    template = Transaction("t1", "income", 5000, "Salary", "pay", "2024-12-01", "monthly", "2025-01-01")
    bus = EventBus()
    events = []
    bus.subscribe(RECURRING_PROCESSED, lambda e, p: events.append(p) or {})
    store = make_store((template,), bus=bus)

    created = store.process_recurring_transactions()
    assert len(created) == 1
    assert created[0].date == "2025-01-15"
    assert created[0].next_due == "2025-02-15"
    assert len(store.transactions) == 2
    assert store.transactions[0] == created[0]
    assert store.transactions[1].next_due == "2025-02-15"
    assert store.summary.monthly_income == 5000
    assert events == [{"created": [created[0].id]}]

    assert store.process_recurring_transactions() == ()
    assert len(store.transactions) == 2


def test_process_recurring_transactions_explicit_today():
    template = Transaction("t1", "income", 5000, "Salary", "pay", "2025-01-01", "weekly", "2025-01-01")
    store = make_store((template,))
    created = store.process_recurring_transactions(date(2025, 1, 3))
    assert created[0].next_due == "2025-01-10"


def test_try_add_transaction_rejects_invalid_and_keeps_state():
    store = make_store()
    before = store.snapshot()

    result = store.try_add_transaction({**expense(5.0), "category": ""})
    assert result.get_error()["error"] == "category_not_found"
    assert store.snapshot() == before
    assert store.summary.total_expenses == 0

    result = store.try_add_transaction({**expense(5.0), "type": "income"})
    assert result.get_error()["error"] == "category_type_mismatch"
    assert store.transactions == ()


def test_try_add_transaction_commits_valid():
    store = make_store()
    result = store.try_add_transaction(expense(40))
    assert result == Right(store.transactions[0])
    assert store.summary.monthly_expenses == 40


def test_budget_alert_only_when_category_crosses_limit():
    bus = EventBus()
    alerts = []
    bus.subscribe(BUDGET_ALERT, lambda e, p: alerts.append(p["category_id"]) or {})
    over = Transaction("t0", "expense", 450, "Groceries", "", "2025-01-02")
    store = make_store((over,), bus=bus)
    assert alerts == []

    store.add_transaction({"type": "income", "amount": 100, "category": "Salary",
                           "description": "", "date": "2025-01-05"})
    store.add_transaction(expense(10))
    assert alerts == []

    store.delete_transaction("t0")
    store.add_transaction(expense(500))
    assert alerts == ["c2"]
