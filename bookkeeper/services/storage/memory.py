"""
In-memory record store.

Used by tests and by the dashboard when no spreadsheet is configured.
Behaves like the Sheets store: appends return the local record, and an
optional `fail_writes` switch simulates a backend that rejects writes.
"""

from datetime import datetime
from typing import Callable, Optional

from bookkeeper.logging_config import get_logger
from bookkeeper.models.records import (
    AppendResult,
    Bill,
    BillDraft,
    Transaction,
    TransactionDraft,
    utc_now,
)
from bookkeeper.services.storage.interface import (
    RecordStore,
    StorageError,
    build_bill,
    build_transaction,
)
from bookkeeper.services.storage.sample_data import (
    sample_bills,
    sample_transactions,
)


logger = get_logger(__name__)


class InMemoryRecordStore(RecordStore):
    """Record store backed by two Python lists."""

    def __init__(
        self,
        transactions: Optional[list[Transaction]] = None,
        bills: Optional[list[Bill]] = None,
        clock: Callable[[], datetime] = utc_now,
        fail_writes: bool = False,
    ):
        self._transactions = list(transactions or [])
        self._bills = list(bills or [])
        self._clock = clock
        self.fail_writes = fail_writes

    @classmethod
    def with_sample_data(cls, **kwargs) -> "InMemoryRecordStore":
        """A store pre-filled with the fixed sample records."""
        return cls(
            transactions=sample_transactions(),
            bills=sample_bills(),
            **kwargs,
        )

    async def fetch_transactions(self) -> list[Transaction]:
        return [t.model_copy() for t in self._transactions]

    async def fetch_bills(self) -> list[Bill]:
        return [b.model_copy() for b in self._bills]

    def _write(self, rows: list, record) -> None:
        if self.fail_writes:
            raise StorageError("In-memory store is rejecting writes")
        rows.append(record)

    async def append_transaction(self, draft: TransactionDraft) -> AppendResult:
        transaction = build_transaction(draft, self._clock())
        try:
            self._write(self._transactions, transaction)
        except StorageError as e:
            logger.warning(
                "record_append_failed",
                entity="transaction",
                record_id=transaction.id,
                error=str(e),
            )
            return AppendResult(record=transaction, persisted=False, error_message=str(e))
        return AppendResult(record=transaction, persisted=True)

    async def append_bill(self, draft: BillDraft) -> AppendResult:
        bill = build_bill(draft, self._clock())
        try:
            self._write(self._bills, bill)
        except StorageError as e:
            logger.warning(
                "record_append_failed",
                entity="bill",
                record_id=bill.id,
                error=str(e),
            )
            return AppendResult(record=bill, persisted=False, error_message=str(e))
        return AppendResult(record=bill, persisted=True)
