"""Duplicate removal for extracted transactions.

Two transactions are the same spend when they share the normalized date and
merchant and their amounts differ by less than one paisa/cent.
"""

from typing import Dict, Iterable, List, Tuple

from .models import Transaction

AMOUNT_TOLERANCE = 0.01


def is_duplicate(a: Transaction, b: Transaction) -> bool:
    return (
        a.date == b.date
        and a.normalized_merchant == b.normalized_merchant
        and abs(a.amount - b.amount) < AMOUNT_TOLERANCE
    )


def remove_duplicates(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Drop later duplicates, keeping the first occurrence in input order."""
    unique: List[Transaction] = []
    seen: Dict[Tuple[str, str], List[float]] = {}

    for txn in transactions:
        key = (txn.date, txn.normalized_merchant)
        amounts = seen.setdefault(key, [])
        if any(abs(amount - txn.amount) < AMOUNT_TOLERANCE for amount in amounts):
            continue
        amounts.append(txn.amount)
        unique.append(txn)

    return unique


def merge_results(*batches: Iterable[Transaction]) -> List[Transaction]:
    """Concatenate several extraction passes and deduplicate across them."""
    combined: List[Transaction] = []
    for batch in batches:
        combined.extend(batch)
    return remove_duplicates(combined)
