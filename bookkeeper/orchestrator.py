"""
Main Orchestrator for the Bookkeeping Dashboard

Ties the record store to validation, the session-list operations and the
aggregations. Each flow serves one page:
1. TransactionFlow - dashboard and transactions pages
2. BillFlow - due bills page
3. ReportFlow - reports page

The flows hold the store and settings only. Record lists are passed in and
returned, so a page keeps whatever list it is showing and nothing else.

Writes are optimistic: a saved record is always added to the page's list,
even when the remote append failed (the AppendResult says so).
"""

import asyncio
from datetime import date, datetime
from typing import Iterable, Optional

from pydantic import BaseModel

from bookkeeper import ledger
from bookkeeper.config import AppSettings, get_settings
from bookkeeper.logging_config import get_logger
from bookkeeper.models.metrics import BillStats, ReportMetrics, TransactionStats
from bookkeeper.models.records import (
    AppendResult,
    Bill,
    BillDraft,
    Transaction,
    TransactionDraft,
    TransactionStatus,
)
from bookkeeper.queries import (
    BILL_SORT_DEFAULT,
    TRANSACTION_SORT_DEFAULT,
    BillFilter,
    ReportPeriod,
    SortState,
    TransactionFilter,
    bill_stats,
    filter_bills,
    filter_by_period,
    filter_transactions,
    report_metrics,
    sort_bills,
    sort_transactions,
    transaction_stats,
)
from bookkeeper.services.storage import (
    GoogleSheetsRecordStore,
    InMemoryRecordStore,
    RecordStore,
)
from bookkeeper.validation import (
    ValidationErrors,
    validate_bill_draft,
    validate_transaction_draft,
)


logger = get_logger(__name__)

RECENT_TRANSACTIONS_LIMIT = 10


class SaveOutcome(BaseModel):
    """
    Result of submitting a form.

    Either `errors` is non-empty (nothing was written and `records` is the
    unchanged list) or `result` holds the append outcome and `records`
    has the new record on top.
    """
    errors: ValidationErrors = {}
    result: Optional[AppendResult] = None
    records: list

    @property
    def saved(self) -> bool:
        return not self.errors and self.result is not None


class TransactionView(BaseModel):
    """What the transactions page renders."""

    transactions: list[Transaction]
    stats: TransactionStats


class BillView(BaseModel):
    """What the bills page renders."""

    bills: list[Bill]
    stats: BillStats


class TransactionFlow:
    """Loading, saving and editing transactions."""

    def __init__(self, store: RecordStore):
        self._store = store

    async def load(self) -> list[Transaction]:
        transactions = await self._store.fetch_transactions()
        logger.info("transactions_loaded", count=len(transactions))
        return transactions

    async def save(
        self,
        transactions: list[Transaction],
        draft: TransactionDraft,
    ) -> SaveOutcome:
        """Validate the draft and, if it passes, append and prepend it."""
        errors = validate_transaction_draft(draft)
        if errors:
            logger.info("transaction_draft_rejected", fields=sorted(errors))
            return SaveOutcome(errors=errors, records=list(transactions))

        result = await self._store.append_transaction(draft)
        if not result.persisted:
            logger.warning(
                "transaction_kept_locally",
                record_id=result.record.id,
                error=result.error_message,
            )
        return SaveOutcome(
            result=result,
            records=ledger.add_record(transactions, result.record),
        )

    def update(
        self,
        transactions: list[Transaction],
        transaction_id: str,
        draft: TransactionDraft,
        now: Optional[datetime] = None,
    ) -> SaveOutcome:
        """
        Apply an edit to the session list. Not written to the store.

        Raises:
            KeyError: If the transaction is not in the list
        """
        errors = validate_transaction_draft(draft)
        if errors:
            return SaveOutcome(errors=errors, records=list(transactions))

        edited = Transaction(id=transaction_id, **draft.to_fields())
        records = ledger.replace_record(transactions, edited, now)
        logger.info("transaction_edited_locally", record_id=transaction_id)
        return SaveOutcome(records=records)

    def delete(
        self,
        transactions: list[Transaction],
        ids: Iterable[str],
    ) -> list[Transaction]:
        ids = list(ids)
        logger.info("transactions_deleted_locally", record_ids=ids)
        return ledger.delete_records(transactions, ids)

    def set_status(
        self,
        transactions: list[Transaction],
        ids: Iterable[str],
        status: TransactionStatus,
        now: Optional[datetime] = None,
    ) -> list[Transaction]:
        ids = list(ids)
        logger.info("transaction_status_changed", record_ids=ids, status=status.value)
        return ledger.set_transaction_status(transactions, ids, status, now)

    def view(
        self,
        transactions: list[Transaction],
        criteria: Optional[TransactionFilter] = None,
        sort: SortState = TRANSACTION_SORT_DEFAULT,
        today: Optional[date] = None,
    ) -> TransactionView:
        """Filter, sort and summarise; stats cover the filtered list."""
        criteria = criteria or TransactionFilter()
        filtered = filter_transactions(transactions, criteria)
        return TransactionView(
            transactions=sort_transactions(filtered, sort),
            stats=transaction_stats(filtered, today),
        )

    @staticmethod
    def recent(
        transactions: list[Transaction],
        limit: int = RECENT_TRANSACTIONS_LIMIT,
    ) -> list[Transaction]:
        """The dashboard's recent list: the first `limit` of the session list."""
        return list(transactions[:limit])


class BillFlow:
    """Loading, saving and settling due bills."""

    def __init__(self, store: RecordStore, settings: Optional[AppSettings] = None):
        self._store = store
        self._settings = settings or AppSettings()

    async def load(self) -> list[Bill]:
        bills = await self._store.fetch_bills()
        logger.info("bills_loaded", count=len(bills))
        return bills

    async def save(self, bills: list[Bill], draft: BillDraft) -> SaveOutcome:
        """Validate the draft and, if it passes, append and prepend it."""
        errors = validate_bill_draft(draft)
        if errors:
            logger.info("bill_draft_rejected", fields=sorted(errors))
            return SaveOutcome(errors=errors, records=list(bills))

        result = await self._store.append_bill(draft)
        if not result.persisted:
            logger.warning(
                "bill_kept_locally",
                record_id=result.record.id,
                error=result.error_message,
            )
        return SaveOutcome(result=result, records=ledger.add_record(bills, result.record))

    def update(
        self,
        bills: list[Bill],
        bill_id: str,
        draft: BillDraft,
        now: Optional[datetime] = None,
    ) -> SaveOutcome:
        """
        Apply an edit to the session list. Not written to the store.

        Raises:
            KeyError: If the bill is not in the list
        """
        errors = validate_bill_draft(draft)
        if errors:
            return SaveOutcome(errors=errors, records=list(bills))

        edited = Bill(id=bill_id, **draft.to_fields())
        records = ledger.replace_record(bills, edited, now)
        logger.info("bill_edited_locally", record_id=bill_id)
        return SaveOutcome(records=records)

    def delete(self, bills: list[Bill], ids: Iterable[str]) -> list[Bill]:
        ids = list(ids)
        logger.info("bills_deleted_locally", record_ids=ids)
        return ledger.delete_records(bills, ids)

    def mark_paid(
        self,
        bills: list[Bill],
        bill_id: str,
        now: Optional[datetime] = None,
    ) -> list[Bill]:
        logger.info("bill_marked_paid", record_id=bill_id)
        return ledger.mark_bill_paid(bills, bill_id, now)

    def view(
        self,
        bills: list[Bill],
        criteria: Optional[BillFilter] = None,
        sort: SortState = BILL_SORT_DEFAULT,
        today: Optional[date] = None,
    ) -> BillView:
        """
        Filter and sort the table; stats always cover every bill.

        Pass the same `today` used for status badges so lateness agrees.
        """
        today = today or date.today()
        criteria = criteria or BillFilter()
        filtered = filter_bills(bills, criteria, today)
        return BillView(
            bills=sort_bills(filtered, sort),
            stats=bill_stats(bills, today, self._settings.due_soon_days),
        )


class ReportFlow:
    """Report figures over a selected period."""

    def __init__(self, store: RecordStore):
        self._store = store

    async def load(self) -> tuple[list[Transaction], list[Bill]]:
        """Fetch transactions and bills concurrently."""
        transactions, bills = await asyncio.gather(
            self._store.fetch_transactions(),
            self._store.fetch_bills(),
        )
        logger.info(
            "report_data_loaded",
            transactions=len(transactions),
            bills=len(bills),
        )
        return transactions, bills

    def metrics(
        self,
        transactions: list[Transaction],
        bills: list[Bill],
        period: ReportPeriod,
        year: int,
        month: int,
    ) -> ReportMetrics:
        """Transactions are limited to the period; bills are not."""
        in_period = filter_by_period(transactions, period, year, month)
        return report_metrics(in_period, bills)


def create_store(use_storage: bool = True) -> RecordStore:
    """
    Pick the record store.

    Falls back to the in-memory sample store when storage is disabled or
    the Sheets settings are missing.
    """
    if not use_storage or get_settings().app.use_sample_data:
        return InMemoryRecordStore.with_sample_data()

    try:
        return GoogleSheetsRecordStore()
    except Exception as e:
        logger.warning("sheets_store_unavailable", error=str(e), fallback="sample_data")
        return InMemoryRecordStore.with_sample_data()


def create_app_components(
    use_storage: bool = True,
) -> tuple[TransactionFlow, BillFlow, ReportFlow]:
    """
    Factory function to create all app components.

    Args:
        use_storage: If False, run on in-memory sample data

    Returns:
        Tuple of (transaction_flow, bill_flow, report_flow)
    """
    store = create_store(use_storage)
    settings = get_settings().app
    return (
        TransactionFlow(store),
        BillFlow(store, settings),
        ReportFlow(store),
    )
