"""Tests for the summary statistics."""

import pytest
import time
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from bookkeeper.models import Bill, BillStatus, Transaction, TransactionStatus, TransactionType
from bookkeeper.queries import (
    bill_stats,
    days_until_due,
    effective_status,
    health_gauge,
    health_rating,
    health_score,
    is_due_soon,
    is_overdue,
    monthly_series,
    profit_margin,
    report_metrics,
    top_expense_category,
    transaction_stats,
)


TODAY = date(2024, 1, 20)
NOW = datetime(2024, 1, 20, 12, 0, tzinfo=timezone.utc)


def make_transaction(
    id,
    amount,
    type=TransactionType.EXPENSE,
    status=TransactionStatus.COMPLETED,
    category="Office Expenses",
    on=TODAY,
):
    return Transaction(
        id=id,
        date=on,
        description=f"Transaction {id}",
        category=category,
        amount=Decimal(amount),
        type=type,
        status=status,
    )


def make_bill(id, amount, due, status=BillStatus.PENDING, updated_at=NOW):
    return Bill(
        id=id,
        title=f"Bill {id}",
        amount=Decimal(amount),
        due_date=due,
        status=status,
        category="Utilities",
        updated_at=updated_at,
    )


class TestTransactionStats:
    """Tests for transaction_stats."""

    def test_income_minus_expenses(self):
        """Test the basic 100 / 40 / 60 scenario."""
        stats = transaction_stats(
            [
                make_transaction("1", "100", TransactionType.INCOME),
                make_transaction("2", "40", TransactionType.EXPENSE),
            ],
            TODAY,
        )
        assert stats.total_income == Decimal("100")
        assert stats.total_expenses == Decimal("40")
        assert stats.net_profit == Decimal("60")

    def test_empty_list_gives_zeros(self):
        """Test that no transactions means all-zero stats."""
        stats = transaction_stats([], TODAY)
        assert stats.total_income == 0
        assert stats.total_expenses == 0
        assert stats.net_profit == 0
        assert stats.pending_amount == 0
        assert stats.transaction_count == 0

    def test_pending_excluded_from_totals(self):
        """Test that pending amounts are summed separately."""
        stats = transaction_stats(
            [
                make_transaction("1", "100", TransactionType.INCOME),
                make_transaction("2", "50", TransactionType.INCOME, TransactionStatus.PENDING),
                make_transaction("3", "30", TransactionType.EXPENSE, TransactionStatus.PENDING),
            ],
            TODAY,
        )
        assert stats.total_income == Decimal("100")
        assert stats.total_expenses == Decimal("0")
        assert stats.pending_amount == Decimal("80")
        assert stats.pending_count == 2
        assert stats.completed_count == 1

    def test_net_profit_is_exact(self):
        """Test that decimal amounts do not drift."""
        stats = transaction_stats(
            [
                make_transaction("1", "0.10", TransactionType.INCOME),
                make_transaction("2", "0.20", TransactionType.INCOME),
                make_transaction("3", "0.30", TransactionType.EXPENSE),
            ],
            TODAY,
        )
        assert stats.net_profit == Decimal("0")

    def test_monthly_figures_use_current_month(self):
        """Test that only this calendar month counts toward monthly figures."""
        stats = transaction_stats(
            [
                make_transaction("1", "100", TransactionType.INCOME, on=date(2024, 1, 2)),
                make_transaction("2", "70", TransactionType.INCOME, on=date(2023, 12, 31)),
                make_transaction("3", "20", TransactionType.EXPENSE, on=date(2023, 1, 5)),
            ],
            TODAY,
        )
        assert stats.monthly_income == Decimal("100")
        assert stats.monthly_expenses == Decimal("0")
        assert stats.total_income == Decimal("170")


class TestBillStatus:
    """Tests for lateness and due-soon rules."""

    def test_pending_bill_due_yesterday_is_overdue(self):
        """Test that lateness is derived from the due date."""
        bill = make_bill("1", "100", TODAY - timedelta(days=1))
        assert is_overdue(bill, TODAY)
        assert effective_status(bill, TODAY) == BillStatus.OVERDUE
        assert bill_stats([bill], TODAY).overdue_count == 1

    def test_bill_due_today_is_not_overdue(self):
        """Test that a bill is not late on its due date."""
        bill = make_bill("1", "100", TODAY)
        assert not is_overdue(bill, TODAY)
        assert effective_status(bill, TODAY) == BillStatus.PENDING

    def test_paid_bill_is_never_overdue(self):
        """Test that paid bills are not late."""
        bill = make_bill("1", "100", TODAY - timedelta(days=30), BillStatus.PAID)
        assert not is_overdue(bill, TODAY)

    def test_stored_overdue_is_overdue(self):
        """Test that an explicit overdue status counts even before the date."""
        bill = make_bill("1", "100", TODAY + timedelta(days=3), BillStatus.OVERDUE)
        assert is_overdue(bill, TODAY)

    @pytest.mark.parametrize("offset,expected", [
        (-1, False),
        (0, True),
        (7, True),
        (8, False),
    ])
    def test_due_soon_window(self, offset, expected):
        """Test the inclusive due-soon window."""
        bill = make_bill("1", "100", TODAY + timedelta(days=offset))
        assert is_due_soon(bill, TODAY) is expected

    def test_days_until_due(self):
        """Test signed day counts."""
        assert days_until_due(make_bill("1", "1", date(2024, 1, 17)), TODAY) == -3
        assert days_until_due(make_bill("2", "1", date(2024, 1, 25)), TODAY) == 5


class TestBillStats:
    """Tests for bill_stats."""

    def test_outstanding_excludes_paid(self):
        """Test the outstanding total."""
        stats = bill_stats(
            [
                make_bill("1", "100", TODAY + timedelta(days=2)),
                make_bill("2", "50", TODAY - timedelta(days=2), BillStatus.OVERDUE),
                make_bill("3", "900", TODAY, BillStatus.PAID),
            ],
            TODAY,
        )
        assert stats.total_outstanding == Decimal("150")
        assert stats.overdue_count == 1
        assert stats.due_soon_count == 1

    def test_paid_this_month_uses_update_time(self):
        """Test that bills paid in an earlier month are not counted."""
        stats = bill_stats(
            [
                make_bill("1", "100", TODAY, BillStatus.PAID, updated_at=NOW),
                make_bill(
                    "2", "100", TODAY, BillStatus.PAID,
                    updated_at=datetime(2023, 12, 30, tzinfo=timezone.utc),
                ),
            ],
            TODAY,
        )
        assert stats.paid_this_month_count == 1

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
    def test_paid_this_month_reads_update_time_locally(self, monkeypatch):
        """Test that payment times are bucketed by local calendar month."""
        monkeypatch.setenv("TZ", "AOE+12")
        time.tzset()
        try:
            # 06:00 UTC on Feb 1 is still Jan 31 twelve hours west
            paid = make_bill(
                "1", "100", TODAY, BillStatus.PAID,
                updated_at=datetime(2024, 2, 1, 6, 0, tzinfo=timezone.utc),
            )
            assert bill_stats([paid], date(2024, 1, 31)).paid_this_month_count == 1
            assert bill_stats([paid], date(2024, 2, 1)).paid_this_month_count == 0
        finally:
            monkeypatch.undo()
            time.tzset()

    def test_custom_due_soon_window(self):
        """Test the configurable window."""
        bills = [make_bill("1", "100", TODAY + timedelta(days=5))]
        assert bill_stats(bills, TODAY, due_soon_days=3).due_soon_count == 0
        assert bill_stats(bills, TODAY, due_soon_days=5).due_soon_count == 1

    def test_empty_list_gives_zeros(self):
        """Test that no bills means all-zero stats."""
        stats = bill_stats([], TODAY)
        assert stats.total_outstanding == 0
        assert stats.overdue_count == 0


class TestReportMetrics:
    """Tests for report figures."""

    def test_profit_margin_zero_revenue(self):
        """Test that no revenue gives a zero margin, not a division error."""
        assert profit_margin(Decimal("-40"), Decimal("0")) == 0.0

    def test_profit_margin_can_be_negative(self):
        """Test that losses give a negative margin."""
        assert profit_margin(Decimal("-50"), Decimal("100")) == pytest.approx(-50.0)

    def test_report_metrics(self):
        """Test the full report over mixed records."""
        metrics = report_metrics(
            [
                make_transaction("1", "100", TransactionType.INCOME),
                make_transaction("2", "40", category="Marketing"),
                make_transaction("3", "10", status=TransactionStatus.PENDING),
            ],
            [
                make_bill("1", "75", TODAY),
                make_bill("2", "25", TODAY, BillStatus.PAID),
            ],
        )
        assert metrics.total_revenue == Decimal("100")
        assert metrics.total_expenses == Decimal("40")
        assert metrics.net_income == Decimal("60")
        assert metrics.profit_margin == pytest.approx(60.0)
        assert metrics.outstanding_bills == Decimal("75")
        assert metrics.average_transaction_value == Decimal("50")
        assert metrics.top_expense_category.name == "Marketing"

    def test_report_metrics_empty(self):
        """Test that an empty report is all zeros."""
        metrics = report_metrics([], [])
        assert metrics.average_transaction_value == 0
        assert metrics.profit_margin == 0.0
        assert metrics.top_expense_category is None

    def test_top_category_counts_pending_expenses(self):
        """Test that every expense counts toward the top category."""
        top = top_expense_category([
            make_transaction("1", "30", category="Travel"),
            make_transaction("2", "50", status=TransactionStatus.PENDING, category="Rent"),
        ])
        assert top.name == "Rent"
        assert top.amount == Decimal("50")

    def test_top_category_tie_goes_to_first_seen(self):
        """Test the tie-break."""
        top = top_expense_category([
            make_transaction("1", "30", category="Travel"),
            make_transaction("2", "30", category="Software"),
        ])
        assert top.name == "Travel"

    def test_top_category_ignores_income(self):
        """Test that income categories never win."""
        top = top_expense_category([
            make_transaction("1", "999", TransactionType.INCOME, category="Consulting"),
        ])
        assert top is None


class TestHealth:
    """Tests for the health gauge and score."""

    @pytest.mark.parametrize("margin,expected", [
        (-10.0, 0.0),
        (42.5, 42.5),
        (150.0, 100.0),
    ])
    def test_gauge_is_clamped(self, margin, expected):
        """Test the gauge stays within 0..100."""
        assert health_gauge(margin) == expected

    @pytest.mark.parametrize("margin,expected", [
        (-5.0, 0),
        (42.4, 42),
        (42.5, 43),
        (150.0, 150),
    ])
    def test_score_rounds_half_up(self, margin, expected):
        """Test the whole-number score."""
        assert health_score(margin) == expected

    @pytest.mark.parametrize("margin,expected", [
        (43.2, "Excellent"),
        (20.0, "Excellent"),
        (19.9, "Good"),
        (10.0, "Good"),
        (9.9, "Needs Improvement"),
        (-12.0, "Needs Improvement"),
    ])
    def test_rating_thresholds(self, margin, expected):
        """Test the label shown with the score."""
        assert health_rating(margin) == expected


class TestMonthlySeries:
    """Tests for the monthly chart data."""

    def test_months_are_oldest_first(self):
        """Test month keys and ordering."""
        series = monthly_series([], months=3, today=date(2024, 3, 15))
        assert [point["month"] for point in series] == ["2024-01", "2024-02", "2024-03"]

    def test_series_crosses_year_boundary(self):
        """Test months before January roll back a year."""
        series = monthly_series([], months=2, today=date(2024, 1, 10))
        assert [point["month"] for point in series] == ["2023-12", "2024-01"]

    def test_series_sums_completed_only(self):
        """Test per-month totals."""
        series = monthly_series(
            [
                make_transaction("1", "100", TransactionType.INCOME, on=date(2024, 1, 5)),
                make_transaction("2", "30", on=date(2024, 1, 6)),
                make_transaction(
                    "3", "500", TransactionType.INCOME, TransactionStatus.PENDING,
                    on=date(2024, 1, 7),
                ),
            ],
            months=1,
            today=date(2024, 1, 20),
        )
        assert series == [{
            "month": "2024-01",
            "income": Decimal("100"),
            "expenses": Decimal("30"),
            "net": Decimal("70"),
        }]
