"""
Abstract Record Store Interface

The dashboard only ever needs four storage operations: read every
transaction, read every bill, and append one of each. Keeping them behind
an interface lets us:
1. Run against Google Sheets in production
2. Use in-memory storage for tests and offline demos
3. Keep aggregation and filtering code unaware of where records live

Failure contract (shared by all implementations):
- fetch_* never raises; on failure it returns the fixed sample data
- append_* never raises; it returns the locally built record together
  with a `persisted` flag
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from bookkeeper.models.records import (
    AppendResult,
    Bill,
    BillDraft,
    Transaction,
    TransactionDraft,
    utc_now,
)


TRANSACTION_ID_PREFIX = "trans"
BILL_ID_PREFIX = "bill"


def make_record_id(prefix: str, now: Optional[datetime] = None) -> str:
    """Build `<prefix>_<epoch milliseconds>`."""
    now = now or utc_now()
    return f"{prefix}_{int(now.timestamp() * 1000)}"


def build_transaction(
    draft: TransactionDraft,
    now: Optional[datetime] = None,
) -> Transaction:
    """Turn a validated draft into a new transaction with id and timestamps."""
    now = now or utc_now()
    return Transaction(
        id=make_record_id(TRANSACTION_ID_PREFIX, now),
        created_at=now,
        updated_at=now,
        **draft.to_fields(),
    )


def build_bill(draft: BillDraft, now: Optional[datetime] = None) -> Bill:
    """Turn a validated draft into a new bill with id and timestamps."""
    now = now or utc_now()
    return Bill(
        id=make_record_id(BILL_ID_PREFIX, now),
        created_at=now,
        updated_at=now,
        **draft.to_fields(),
    )


class RecordStore(ABC):
    """
    Abstract interface for transaction and bill storage.

    Any storage implementation (Google Sheets, in-memory, ...)
    must implement these methods.
    """

    @abstractmethod
    async def fetch_transactions(self) -> list[Transaction]:
        """
        Read all transactions.

        Returns:
            Every stored transaction, or the sample transactions if the
            backend could not be read
        """
        pass

    @abstractmethod
    async def fetch_bills(self) -> list[Bill]:
        """
        Read all due bills.

        Returns:
            Every stored bill, or the sample bills if the backend could
            not be read
        """
        pass

    @abstractmethod
    async def append_transaction(self, draft: TransactionDraft) -> AppendResult:
        """
        Create a transaction from a validated draft and try to persist it.

        Args:
            draft: A draft that passed validate_transaction_draft

        Returns:
            AppendResult whose record is kept by the caller regardless
            of `persisted`
        """
        pass

    @abstractmethod
    async def append_bill(self, draft: BillDraft) -> AppendResult:
        """
        Create a bill from a validated draft and try to persist it.

        Args:
            draft: A draft that passed validate_bill_draft

        Returns:
            AppendResult whose record is kept by the caller regardless
            of `persisted`
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Sheet or spreadsheet not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
