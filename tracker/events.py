import logging
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = [
    'EventBus', 'Event',
    'TRANSACTION_ADDED', 'TRANSACTION_UPDATED', 'TRANSACTION_DELETED',
    'CATEGORY_ADDED', 'CATEGORY_UPDATED', 'CATEGORY_DELETED',
    'RECURRING_PROCESSED', 'BUDGET_ALERT', 'budget_alert_handler',
]

logger = logging.getLogger(__name__)


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )

        results = []
        for handler in list(self._subscribers[name]):
            results.append(handler(event, payload))
        return results

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


TRANSACTION_ADDED = "TRANSACTION_ADDED"
TRANSACTION_UPDATED = "TRANSACTION_UPDATED"
TRANSACTION_DELETED = "TRANSACTION_DELETED"
CATEGORY_ADDED = "CATEGORY_ADDED"
CATEGORY_UPDATED = "CATEGORY_UPDATED"
CATEGORY_DELETED = "CATEGORY_DELETED"
RECURRING_PROCESSED = "RECURRING_PROCESSED"
BUDGET_ALERT = "BUDGET_ALERT"


def budget_alert_handler(event: Event, payload: dict) -> dict:
    spent = payload.get("spent", 0)
    budget = payload.get("budget", 0)
    category = payload.get("category_name") or payload.get("category_id", "")

    if budget > 0 and spent > budget:
        message = f"Budget exceeded for {category}: {spent:,.2f} / {budget:,.2f}"
        logger.warning(message)
        return {"alert": message, "over_budget": spent - budget}
    return {}
