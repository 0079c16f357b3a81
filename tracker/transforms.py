import json
import logging
import random
import string
from dataclasses import asdict, fields, replace
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from tracker.domain import Category, Transaction

logger = logging.getLogger(__name__)

ID_ALPHABET = string.digits + string.ascii_lowercase
ID_LENGTH = 9


def generate_id(rng: Optional[random.Random] = None) -> str:
    """Random base-36 id, 9 characters. Collisions are possible but unlikely."""
    return "".join((rng or random).choices(ID_ALPHABET, k=ID_LENGTH))


def _transaction_from_json(t: Mapping[str, Any]) -> Transaction:
    return Transaction(
        id=t["id"],
        type=t["type"],
        amount=float(t["amount"]),
        category=t["category"],
        description=t.get("description", ""),
        date=t["date"],
        recurring=t.get("recurring"),
        next_due=t.get("next_due", t.get("nextDue")),
    )


def _category_from_json(c: Mapping[str, Any]) -> Category:
    budget = c.get("budget")
    return Category(
        id=c["id"],
        name=c["name"],
        color=c.get("color", ""),
        type=c["type"],
        budget=float(budget) if budget is not None else None,
    )


def load_seed(path: str) -> Tuple[Tuple[Category, ...], Tuple[Transaction, ...]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    categories = tuple(_category_from_json(c) for c in data.get("categories", []))
    transactions = tuple(_transaction_from_json(t) for t in data.get("transactions", []))
    logger.debug("Loaded %d categories and %d transactions from %s",
                 len(categories), len(transactions), path)
    return categories, transactions


def dump_seed(
    path: str, categories: Tuple[Category, ...], transactions: Tuple[Transaction, ...]
) -> None:
    data = {
        "categories": [asdict(c) for c in categories],
        "transactions": [asdict(t) for t in transactions],
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def _merge(obj, updates: Mapping[str, Any]):
    allowed = {f.name for f in fields(obj)} - {"id"}
    ignored = set(updates) - allowed
    if ignored:
        logger.warning("Ignoring non-updatable fields %s for %s", sorted(ignored), obj.id)
    return replace(obj, **{k: v for k, v in updates.items() if k in allowed})


def add_transaction(
    trans: Tuple[Transaction, ...],
    new_fields: Mapping[str, Any],
    id_factory: Callable[[], str] = generate_id,
) -> Tuple[Transaction, ...]:
    data: Dict[str, Any] = {k: v for k, v in new_fields.items() if k != "id"}
    return (Transaction(id=id_factory(), **data),) + trans


def update_transaction(
    trans: Tuple[Transaction, ...], tid: str, updates: Mapping[str, Any]
) -> Tuple[Transaction, ...]:
    return tuple(_merge(t, updates) if t.id == tid else t for t in trans)


def delete_transaction(trans: Tuple[Transaction, ...], tid: str) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.id != tid, trans))


def add_category(
    cats: Tuple[Category, ...],
    new_fields: Mapping[str, Any],
    id_factory: Callable[[], str] = generate_id,
) -> Tuple[Category, ...]:
    data: Dict[str, Any] = {k: v for k, v in new_fields.items() if k != "id"}
    return cats + (Category(id=id_factory(), **data),)


def update_category(
    cats: Tuple[Category, ...], cid: str, updates: Mapping[str, Any]
) -> Tuple[Category, ...]:
    return tuple(_merge(c, updates) if c.id == cid else c for c in cats)


def delete_category(cats: Tuple[Category, ...], cid: str) -> Tuple[Category, ...]:
    return tuple(filter(lambda c: c.id != cid, cats))


def rename_category_references(
    trans: Tuple[Transaction, ...], old_name: str, new_name: str, kind: str
) -> Tuple[Transaction, ...]:
    """Point transactions of ``kind`` filed under ``old_name`` at ``new_name``."""
    return tuple(
        replace(t, category=new_name) if t.category == old_name and t.type == kind else t
        for t in trans
    )
