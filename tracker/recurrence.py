import logging
from dataclasses import replace
from datetime import date
from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple

from tracker.dates import next_recurrence_date, today_iso
from tracker.domain import Transaction
from tracker.transforms import generate_id

logger = logging.getLogger(__name__)


class RecurrenceResult(NamedTuple):
    transactions: Tuple[Transaction, ...]
    created: Tuple[Transaction, ...]


def advances(t: Transaction, today: str) -> bool:
    return next_recurrence_date(today, t.recurring) > today


def is_due(t: Transaction, today: str) -> bool:
    # ISO dates are fixed width, so string order is date order.
    return t.is_recurring and bool(t.next_due) and t.next_due <= today


def due_transactions(trans: Iterable[Transaction], today: date) -> Tuple[Transaction, ...]:
    """Templates to book on ``today``.

    A template whose frequency cannot move ``next_due`` past ``today``
    (an unrecognised value such as ``"daily"``) is skipped, otherwise it
    would be booked again on every call.
    """
    day = today_iso(today)
    due = []
    for t in trans:
        if not is_due(t, day):
            continue
        if not advances(t, day):
            logger.warning("Skipping %s: unknown recurrence %r", t.id, t.recurring)
            continue
        due.append(t)
    return tuple(due)


def process_recurring(
    trans: Tuple[Transaction, ...],
    today: Optional[date] = None,
    id_factory: Callable[[], str] = generate_id,
) -> RecurrenceResult:
    """Materialize one occurrence of every due recurring template.

    Each due template spawns a copy dated ``today`` with a fresh id; the
    copies are prepended, most recent first. The template keeps its id and
    date and gets the same ``next_due`` as its copy, one period after
    ``today``. A template that fell several periods behind still produces
    a single occurrence, and a second call for the same day creates nothing
    because every booked template's ``next_due`` now lies after ``today``.
    """
    today = today or date.today()
    day = today_iso(today)
    advanced: dict = {}
    created: List[Transaction] = []

    for t in due_transactions(trans, today):
        next_due = next_recurrence_date(day, t.recurring)
        advanced[t.id] = next_due
        created.append(replace(t, id=id_factory(), date=day, next_due=next_due))
        logger.info("Recurring %s '%s' materialized for %s, next due %s",
                    t.recurring, t.description, day, next_due)

    if not created:
        return RecurrenceResult(trans, ())

    updated = tuple(
        replace(t, next_due=advanced[t.id]) if t.id in advanced else t for t in trans
    )
    # Later occurrences end up first, matching repeated single prepends.
    return RecurrenceResult(tuple(reversed(created)) + updated, tuple(created))
