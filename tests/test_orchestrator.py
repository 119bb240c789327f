"""
Integration tests for the page flows.

Every flow runs against the in-memory store; no spreadsheet is touched.
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from bookkeeper.config import AppSettings, get_settings, validate_all_settings
from bookkeeper.models import (
    Bill,
    BillDraft,
    BillStatus,
    TransactionDraft,
    TransactionStatus,
)
from bookkeeper.orchestrator import (
    RECENT_TRANSACTIONS_LIMIT,
    BillFlow,
    ReportFlow,
    TransactionFlow,
    create_app_components,
    create_store,
)
from bookkeeper.queries import (
    BillFilter,
    ReportPeriod,
    SortDirection,
    SortState,
    TransactionFilter,
    effective_status,
)
from bookkeeper.services.storage import InMemoryRecordStore


NOW = datetime(2024, 1, 20, 12, 0, tzinfo=timezone.utc)
TODAY = date(2024, 1, 20)


def valid_transaction_draft():
    return TransactionDraft(
        date="2024-01-20",
        description="Printer Ink",
        category="Office Expenses",
        amount="1200",
    )


def valid_bill_draft():
    return BillDraft(
        title="Internet",
        description="Fibre plan",
        amount="1999",
        due_date="2024-01-28",
        category="Internet",
    )


@pytest.fixture
def store():
    return InMemoryRecordStore.with_sample_data(clock=lambda: NOW)


class TestTransactionFlow:
    """Tests for loading, saving and editing transactions."""

    @pytest.mark.asyncio
    async def test_load(self, store):
        """Test the sample store loads five transactions."""
        transactions = await TransactionFlow(store).load()
        assert len(transactions) == 5

    @pytest.mark.asyncio
    async def test_invalid_draft_is_not_saved(self, store):
        """Test that validation blocks the write."""
        flow = TransactionFlow(store)
        transactions = await flow.load()

        outcome = await flow.save(transactions, TransactionDraft(amount="0"))

        assert not outcome.saved
        assert "amount" in outcome.errors
        assert outcome.records == transactions
        assert len(await store.fetch_transactions()) == 5

    @pytest.mark.asyncio
    async def test_valid_draft_is_prepended(self, store):
        """Test a saved transaction lands on top and in the store."""
        flow = TransactionFlow(store)
        transactions = await flow.load()

        outcome = await flow.save(transactions, valid_transaction_draft())

        assert outcome.saved
        assert outcome.result.persisted
        assert outcome.records[0] is outcome.result.record
        assert outcome.records[0].amount == Decimal("1200")
        assert len(await store.fetch_transactions()) == 6

    @pytest.mark.asyncio
    async def test_failed_write_is_kept_locally(self, store):
        """Test the optimistic write when the store rejects it."""
        store.fail_writes = True
        flow = TransactionFlow(store)
        transactions = await flow.load()

        outcome = await flow.save(transactions, valid_transaction_draft())

        assert outcome.saved
        assert not outcome.result.persisted
        assert len(outcome.records) == 6
        assert len(await store.fetch_transactions()) == 5

    @pytest.mark.asyncio
    async def test_update_is_local(self, store):
        """Test edits change the session list only."""
        flow = TransactionFlow(store)
        transactions = await flow.load()
        draft = TransactionDraft.from_record(transactions[0])
        draft.description = "Edited"

        outcome = flow.update(transactions, "trans_1", draft, NOW)

        assert outcome.records[0].description == "Edited"
        assert outcome.records[0].updated_at == NOW
        assert outcome.result is None
        assert (await store.fetch_transactions())[0].description == "Office Supplies Purchase"

    @pytest.mark.asyncio
    async def test_update_rejects_invalid_draft(self, store):
        """Test edits go through the same validation."""
        flow = TransactionFlow(store)
        transactions = await flow.load()
        outcome = flow.update(transactions, "trans_1", TransactionDraft(), NOW)
        assert set(outcome.errors) == {"description", "category", "amount", "date"}

    def test_update_unknown_id(self):
        """Test editing a transaction that is not in the list."""
        flow = TransactionFlow(InMemoryRecordStore())
        with pytest.raises(KeyError):
            flow.update([], "missing", valid_transaction_draft(), NOW)

    @pytest.mark.asyncio
    async def test_delete_and_bulk_status(self, store):
        """Test local delete and bulk mark-completed."""
        flow = TransactionFlow(store)
        transactions = await flow.load()

        remaining = flow.delete(transactions, ["trans_1"])
        assert [t.id for t in remaining][0] == "trans_2"

        completed = flow.set_status(remaining, ["trans_4"], TransactionStatus.COMPLETED, NOW)
        assert all(t.status == TransactionStatus.COMPLETED for t in completed)

    @pytest.mark.asyncio
    async def test_view_stats_follow_filter(self, store):
        """Test stats are computed over the filtered list."""
        flow = TransactionFlow(store)
        transactions = await flow.load()

        view = flow.view(
            transactions,
            TransactionFilter(type="expense"),
            SortState(field="amount", direction=SortDirection.DESC),
            date(2024, 1, 20),
        )

        assert [t.id for t in view.transactions] == ["trans_5", "trans_3", "trans_1"]
        assert view.stats.total_income == 0
        assert view.stats.total_expenses == Decimal("14200")

    def test_recent_limit(self):
        """Test the dashboard shows the first ten transactions."""
        assert TransactionFlow.recent(list(range(25))) == list(range(RECENT_TRANSACTIONS_LIMIT))
        assert TransactionFlow.recent([1, 2]) == [1, 2]


class TestBillFlow:
    """Tests for the due bills flow."""

    @pytest.mark.asyncio
    async def test_save_bill(self, store):
        """Test a saved bill is prepended."""
        flow = BillFlow(store)
        bills = await flow.load()

        outcome = await flow.save(bills, valid_bill_draft())

        assert outcome.saved
        assert outcome.records[0].title == "Internet"
        assert outcome.records[0].status == BillStatus.PENDING

    @pytest.mark.asyncio
    async def test_bill_missing_description(self, store):
        """Test a bill without a description is rejected."""
        flow = BillFlow(store)
        bills = await flow.load()
        draft = valid_bill_draft()
        draft.description = ""

        outcome = await flow.save(bills, draft)

        assert outcome.errors == {"description": "Description is required"}
        assert len(await store.fetch_bills()) == 4

    @pytest.mark.asyncio
    async def test_mark_paid(self, store):
        """Test settling a bill."""
        flow = BillFlow(store)
        bills = flow.mark_paid(await flow.load(), "bill_1", NOW)
        assert bills[0].status == BillStatus.PAID
        assert flow.view(bills, today=TODAY).stats.paid_this_month_count == 1

    @pytest.mark.asyncio
    async def test_view_stats_cover_all_bills(self, store):
        """Test filtering the table leaves the stats untouched."""
        flow = BillFlow(store)
        bills = await flow.load()

        view = flow.view(bills, BillFilter(category="Rent"), today=TODAY)

        assert [b.id for b in view.bills] == ["bill_3"]
        assert view.stats.total_outstanding == Decimal("41300")
        # bill_3 is stored overdue; bill_1 (due Jan 25) is due soon
        assert view.stats.overdue_count == 1
        assert view.stats.due_soon_count == 1

    @pytest.mark.asyncio
    async def test_due_soon_window_from_settings(self, store):
        """Test the configured reminder window."""
        flow = BillFlow(store, AppSettings(due_soon_days=10))
        view = flow.view(await flow.load(), today=TODAY)
        assert view.stats.due_soon_count == 2

    @pytest.mark.asyncio
    async def test_default_sort_soonest_first(self, store):
        """Test bills open sorted by due date ascending."""
        flow = BillFlow(store)
        view = flow.view(await flow.load(), today=TODAY)
        assert [b.id for b in view.bills] == ["bill_3", "bill_1", "bill_2", "bill_4"]

    @pytest.mark.parametrize("due,status,overdue_count", [
        (date(2024, 2, 29), BillStatus.OVERDUE, 1),
        (date(2024, 3, 1), BillStatus.PENDING, 0),
    ])
    def test_stats_agree_with_status_on_boundary(self, due, status, overdue_count):
        """Test the overdue count and the status badge judge the same day."""
        today = date(2024, 3, 1)
        bill = Bill(id="b", title="Rent", amount=Decimal("100"), due_date=due)
        view = BillFlow(InMemoryRecordStore()).view([bill], today=today)

        assert effective_status(bill, today) == status
        assert view.stats.overdue_count == overdue_count


class TestReportFlow:
    """Tests for the reports flow."""

    @pytest.mark.asyncio
    async def test_load_both_lists(self, store):
        """Test the concurrent fetch."""
        transactions, bills = await ReportFlow(store).load()
        assert (len(transactions), len(bills)) == (5, 4)

    @pytest.mark.asyncio
    async def test_monthly_metrics(self, store):
        """Test report figures over the sample month."""
        flow = ReportFlow(store)
        transactions, bills = await flow.load()

        metrics = flow.metrics(transactions, bills, ReportPeriod.MONTHLY, 2024, 1)

        assert metrics.total_revenue == Decimal("25000")
        assert metrics.total_expenses == Decimal("14200")
        assert metrics.net_income == Decimal("10800")
        assert metrics.profit_margin == pytest.approx(43.2)
        assert metrics.outstanding_bills == Decimal("41300")
        assert metrics.average_transaction_value == Decimal("10840")
        assert metrics.top_expense_category.name == "Marketing"

    @pytest.mark.asyncio
    async def test_empty_period(self, store):
        """Test a period with no transactions still reports bills."""
        flow = ReportFlow(store)
        transactions, bills = await flow.load()

        metrics = flow.metrics(transactions, bills, ReportPeriod.YEARLY, 2023, 1)

        assert metrics.total_revenue == 0
        assert metrics.profit_margin == 0.0
        assert metrics.outstanding_bills == Decimal("41300")


class TestComponents:
    """Tests for the component factory."""

    @pytest.fixture(autouse=True)
    def no_sheets_env(self, monkeypatch):
        for name in (
            "GOOGLE_SHEETS_CREDENTIALS_PATH",
            "GOOGLE_SHEETS_SPREADSHEET_ID",
            "USE_SAMPLE_DATA",
        ):
            monkeypatch.delenv(name, raising=False)
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_settings_status_without_sheets(self):
        """Test the connection status report."""
        status = validate_all_settings()
        assert status["app"] is True
        assert status["google_sheets"] is False
        assert "google_sheets_error" in status

    def test_storage_disabled(self):
        """Test the offline store."""
        assert isinstance(create_store(use_storage=False), InMemoryRecordStore)

    def test_missing_sheets_config_falls_back(self):
        """Test that unconfigured Sheets falls back to sample data."""
        assert isinstance(create_store(use_storage=True), InMemoryRecordStore)

    def test_sample_data_setting(self, monkeypatch):
        """Test USE_SAMPLE_DATA skips Sheets entirely."""
        monkeypatch.setenv("USE_SAMPLE_DATA", "true")
        assert isinstance(create_store(use_storage=True), InMemoryRecordStore)

    @pytest.mark.asyncio
    async def test_components_share_a_store(self):
        """Test the factory wires all three flows."""
        transaction_flow, bill_flow, report_flow = create_app_components(use_storage=False)
        transactions = await transaction_flow.load()
        outcome = await transaction_flow.save(transactions, valid_transaction_draft())
        report_transactions, _ = await report_flow.load()
        assert outcome.result.record.id in [t.id for t in report_transactions]
        assert isinstance(bill_flow, BillFlow)
