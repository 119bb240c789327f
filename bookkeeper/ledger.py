"""
Session list operations.

The views hold one list of records per page. These functions perform the
changes the user can make to that list (add, edit, delete, mark paid,
bulk status change) and always return a new list; the input is never
mutated. Any change to a record refreshes its `updated_at`.

Only additions reach the record store (through append_*). Edits, deletes
and status changes live in the session list alone.
"""

from datetime import datetime
from typing import Iterable, Optional, TypeVar

from bookkeeper.models.records import (
    Bill,
    BillStatus,
    Transaction,
    TransactionStatus,
    utc_now,
)


RecordT = TypeVar("RecordT", Transaction, Bill)


def add_record(records: list[RecordT], record: RecordT) -> list[RecordT]:
    """New records go to the top of the list."""
    return [record] + list(records)


def delete_records(records: list[RecordT], ids: Iterable[str]) -> list[RecordT]:
    """Drop every record whose id is in `ids`."""
    doomed = set(ids)
    return [r for r in records if r.id not in doomed]


def replace_record(
    records: list[RecordT],
    record: RecordT,
    now: Optional[datetime] = None,
) -> list[RecordT]:
    """
    Swap in an edited record, keeping its position.

    `id` and `created_at` of the stored record are kept.

    Raises:
        KeyError: If no record with that id is in the list
    """
    now = now or utc_now()
    result = []
    found = False
    for existing in records:
        if existing.id == record.id:
            result.append(record.model_copy(update={
                "created_at": existing.created_at,
                "updated_at": now,
            }))
            found = True
        else:
            result.append(existing)
    if not found:
        raise KeyError(record.id)
    return result


def mark_bill_paid(
    bills: list[Bill],
    bill_id: str,
    now: Optional[datetime] = None,
) -> list[Bill]:
    """Set one bill to PAID. Unknown ids leave the list unchanged."""
    now = now or utc_now()
    return [
        b.model_copy(update={"status": BillStatus.PAID, "updated_at": now})
        if b.id == bill_id
        else b
        for b in bills
    ]


def set_transaction_status(
    transactions: list[Transaction],
    ids: Iterable[str],
    status: TransactionStatus,
    now: Optional[datetime] = None,
) -> list[Transaction]:
    """Bulk mark-completed / mark-pending for the selected transactions."""
    now = now or utc_now()
    selected = set(ids)
    return [
        t.model_copy(update={"status": status, "updated_at": now})
        if t.id in selected
        else t
        for t in transactions
    ]
