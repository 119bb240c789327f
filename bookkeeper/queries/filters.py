"""
Filter and Sort Engine

A filter is a set of predicates combined with AND: a record is kept only
when every active predicate matches it. Discriminators (type, status,
category) default to the "all" sentinel, which switches them off.

Sorting is driven by a SortState (field + direction). Descending order is
the exact reverse of ascending order, including among equal elements.
"""

from datetime import date
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

from bookkeeper.models.records import Bill, Transaction
from bookkeeper.queries.aggregates import effective_status


ALL = "all"

RecordT = TypeVar("RecordT", Transaction, Bill)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class TransactionSortField(str, Enum):
    DATE = "date"
    AMOUNT = "amount"
    CATEGORY = "category"


class BillSortField(str, Enum):
    DUE_DATE = "due_date"
    AMOUNT = "amount"
    TITLE = "title"


# =============================================================================
# FILTERS
# =============================================================================

class _DateRangeFilter(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    search: str = ""
    start: Optional[date] = None
    end: Optional[date] = None

    @model_validator(mode="before")
    @classmethod
    def blank_dates_are_unset(cls, data: Any) -> Any:
        # Date inputs post "" when cleared
        if isinstance(data, dict):
            data = dict(data)
            for key in ("start", "end"):
                if data.get(key) == "":
                    data[key] = None
        return data

    def _matches_range(self, value: date) -> bool:
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True

    def _matches_search(self, *fields: str) -> bool:
        if not self.search:
            return True
        term = self.search.lower()
        return any(term in field.lower() for field in fields)


class TransactionFilter(_DateRangeFilter):
    """Filter state of the transactions view."""

    type: str = ALL
    status: str = ALL
    category: str = ALL

    @property
    def has_active_filters(self) -> bool:
        return bool(
            self.search
            or self.start
            or self.end
            or self.type != ALL
            or self.status != ALL
            or self.category != ALL
        )

    def matches(self, transaction: Transaction) -> bool:
        """True when every active predicate accepts the transaction."""
        return (
            self._matches_search(transaction.description, transaction.category)
            and self._matches_range(transaction.date)
            and (self.type == ALL or transaction.type.value == self.type)
            and (self.status == ALL or transaction.status.value == self.status)
            and (self.category == ALL or transaction.category == self.category)
        )


class BillFilter(_DateRangeFilter):
    """
    Filter state of the bills view.

    Status is compared against the effective status, so "overdue" also
    selects pending bills whose due date has passed, and "pending" does not.
    """

    status: str = ALL
    category: str = ALL

    @property
    def has_active_filters(self) -> bool:
        return bool(
            self.search
            or self.start
            or self.end
            or self.status != ALL
            or self.category != ALL
        )

    def matches(self, bill: Bill, today: Optional[date] = None) -> bool:
        """True when every active predicate accepts the bill."""
        return (
            self._matches_search(bill.title, bill.description, bill.category)
            and self._matches_range(bill.due_date)
            and (self.status == ALL or effective_status(bill, today).value == self.status)
            and (self.category == ALL or bill.category == self.category)
        )


def filter_transactions(
    transactions: list[Transaction],
    criteria: TransactionFilter,
) -> list[Transaction]:
    """Transactions matching all active predicates, in input order."""
    return [t for t in transactions if criteria.matches(t)]


def filter_bills(
    bills: list[Bill],
    criteria: BillFilter,
    today: Optional[date] = None,
) -> list[Bill]:
    """Bills matching all active predicates, in input order."""
    today = today or date.today()
    return [b for b in bills if criteria.matches(b, today)]


# =============================================================================
# SORTING
# =============================================================================

class SortState(BaseModel):
    """Current sort column and direction of a list view."""
    model_config = ConfigDict(frozen=True)

    field: str
    direction: SortDirection = SortDirection.ASC


# Transaction lists open newest first, bill lists soonest due first.
# Switching to another column resets to the list's own default direction.
TRANSACTION_SORT_DEFAULT = SortState(
    field=TransactionSortField.DATE.value,
    direction=SortDirection.DESC,
)
BILL_SORT_DEFAULT = SortState(
    field=BillSortField.DUE_DATE.value,
    direction=SortDirection.ASC,
)


def toggle_sort(
    state: SortState,
    field: str,
    default_direction: SortDirection,
) -> SortState:
    """
    Next sort state after a column header is clicked.

    Same column flips the direction; a new column starts at the list's
    default direction.
    """
    if state.field == field:
        return SortState(field=field, direction=state.direction.flipped())
    return SortState(field=field, direction=default_direction)


def _amount_key(record) -> float:
    return float(record.amount)


def sort_records(
    records: list[RecordT],
    key: Callable[[RecordT], Any],
    direction: SortDirection,
) -> list[RecordT]:
    """Stable ascending sort, reversed wholesale for descending."""
    ordered = sorted(records, key=key)
    if direction is SortDirection.DESC:
        ordered.reverse()
    return ordered


_TRANSACTION_KEYS: dict[str, Callable[[Transaction], Any]] = {
    TransactionSortField.DATE.value: lambda t: t.date,
    TransactionSortField.AMOUNT.value: _amount_key,
    TransactionSortField.CATEGORY.value: lambda t: t.category,
}

_BILL_KEYS: dict[str, Callable[[Bill], Any]] = {
    BillSortField.DUE_DATE.value: lambda b: b.due_date,
    BillSortField.AMOUNT.value: _amount_key,
    BillSortField.TITLE.value: lambda b: b.title,
}


def sort_transactions(
    transactions: list[Transaction],
    state: SortState = TRANSACTION_SORT_DEFAULT,
) -> list[Transaction]:
    """
    Order transactions by date, amount or category.

    Raises:
        ValueError: If the sort field is not one of the transaction columns
    """
    try:
        key = _TRANSACTION_KEYS[state.field]
    except KeyError:
        raise ValueError(f"Cannot sort transactions by {state.field!r}")
    return sort_records(transactions, key, state.direction)


def sort_bills(
    bills: list[Bill],
    state: SortState = BILL_SORT_DEFAULT,
) -> list[Bill]:
    """
    Order bills by due date, amount or title.

    Raises:
        ValueError: If the sort field is not one of the bill columns
    """
    try:
        key = _BILL_KEYS[state.field]
    except KeyError:
        raise ValueError(f"Cannot sort bills by {state.field!r}")
    return sort_records(bills, key, state.direction)
