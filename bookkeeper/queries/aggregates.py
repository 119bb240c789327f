"""
Aggregation Functions

Summary statistics for the dashboard, transactions, bills and reports
views. Every function is pure: it takes the full record list plus an
explicit "today"/"now" and returns a metrics model. Empty lists give zeros.

Lateness has exactly one definition, is_overdue(). Stats, status badges,
status filters and due-date labels all go through it.
"""

import math
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from bookkeeper.models.metrics import (
    BillStats,
    CategoryTotal,
    ReportMetrics,
    TransactionStats,
)
from bookkeeper.models.records import (
    Bill,
    BillStatus,
    Transaction,
    TransactionStatus,
    TransactionType,
)


DUE_SOON_DAYS = 7

ZERO = Decimal("0")


# =============================================================================
# BILL STATUS
# =============================================================================

def is_overdue(bill: Bill, today: Optional[date] = None) -> bool:
    """
    Is this bill late?

    True for an explicit OVERDUE status, and for a PENDING bill whose due
    date is before today even though its stored status still says pending.
    """
    today = today or date.today()
    if bill.status == BillStatus.OVERDUE:
        return True
    return bill.status == BillStatus.PENDING and bill.due_date < today


def effective_status(bill: Bill, today: Optional[date] = None) -> BillStatus:
    """Stored status, upgraded to OVERDUE for late pending bills."""
    if is_overdue(bill, today):
        return BillStatus.OVERDUE
    return bill.status


def is_due_soon(
    bill: Bill,
    today: Optional[date] = None,
    window_days: int = DUE_SOON_DAYS,
) -> bool:
    """Pending and due between today and `window_days` from now, inclusive."""
    today = today or date.today()
    return (
        bill.status == BillStatus.PENDING
        and today <= bill.due_date <= today + timedelta(days=window_days)
    )


def days_until_due(bill: Bill, today: Optional[date] = None) -> int:
    """Calendar days until the due date; negative once it has passed."""
    today = today or date.today()
    return (bill.due_date - today).days


# =============================================================================
# TRANSACTIONS
# =============================================================================

def _sum(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def _same_month(value: date, today: date) -> bool:
    return value.year == today.year and value.month == today.month


def _local_day(moment: datetime) -> date:
    return moment.astimezone().date()


def _completed_total(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
) -> Decimal:
    return _sum(
        t.amount
        for t in transactions
        if t.type == transaction_type and t.status == TransactionStatus.COMPLETED
    )


def transaction_stats(
    transactions: list[Transaction],
    today: Optional[date] = None,
) -> TransactionStats:
    """
    Income/expense figures for the transactions and dashboard views.

    Only completed transactions count toward income and expenses; pending
    ones are summed separately. Monthly figures use the calendar month and
    year of `today`.
    """
    today = today or date.today()

    total_income = _completed_total(transactions, TransactionType.INCOME)
    total_expenses = _completed_total(transactions, TransactionType.EXPENSE)

    this_month = [t for t in transactions if _same_month(t.date, today)]
    pending = [t for t in transactions if t.status == TransactionStatus.PENDING]

    return TransactionStats(
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=total_income - total_expenses,
        pending_amount=_sum(t.amount for t in pending),
        monthly_income=_completed_total(this_month, TransactionType.INCOME),
        monthly_expenses=_completed_total(this_month, TransactionType.EXPENSE),
        transaction_count=len(transactions),
        completed_count=len(transactions) - len(pending),
        pending_count=len(pending),
    )


# =============================================================================
# BILLS
# =============================================================================

def bill_stats(
    bills: list[Bill],
    today: Optional[date] = None,
    due_soon_days: int = DUE_SOON_DAYS,
) -> BillStats:
    """
    Reminder figures for the bills view.

    `today` is the same local date the status badges use. "Paid this
    month" uses the bill's last update time, which is when it was marked
    paid, read in local time.
    """
    today = today or date.today()

    return BillStats(
        total_outstanding=_sum(b.amount for b in bills if b.status != BillStatus.PAID),
        overdue_count=sum(1 for b in bills if is_overdue(b, today)),
        due_soon_count=sum(1 for b in bills if is_due_soon(b, today, due_soon_days)),
        paid_this_month_count=sum(
            1
            for b in bills
            if b.status == BillStatus.PAID and _same_month(_local_day(b.updated_at), today)
        ),
    )


# =============================================================================
# REPORTS
# =============================================================================

def top_expense_category(transactions: list[Transaction]) -> Optional[CategoryTotal]:
    """
    Category with the largest summed expense amount.

    Every expense counts, pending included. Ties go to the category seen
    first in input order.
    """
    totals: dict[str, Decimal] = {}
    for t in transactions:
        if t.type == TransactionType.EXPENSE:
            totals[t.category] = totals.get(t.category, ZERO) + t.amount

    best: Optional[CategoryTotal] = None
    for name, amount in totals.items():
        if best is None or amount > best.amount:
            best = CategoryTotal(name=name, amount=amount)
    return best


def profit_margin(net_income: Decimal, total_revenue: Decimal) -> float:
    """Net income as a percentage of revenue; 0 when there is no revenue."""
    if total_revenue <= 0:
        return 0.0
    return float(net_income / total_revenue * 100)


def report_metrics(
    transactions: list[Transaction],
    bills: list[Bill],
) -> ReportMetrics:
    """Figures for the reports view, from transactions and bills together."""
    total_revenue = _completed_total(transactions, TransactionType.INCOME)
    total_expenses = _completed_total(transactions, TransactionType.EXPENSE)
    net_income = total_revenue - total_expenses

    if transactions:
        average = _sum(t.amount for t in transactions) / len(transactions)
    else:
        average = ZERO

    return ReportMetrics(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_income=net_income,
        profit_margin=profit_margin(net_income, total_revenue),
        outstanding_bills=_sum(b.amount for b in bills if b.status != BillStatus.PAID),
        average_transaction_value=average,
        top_expense_category=top_expense_category(transactions),
    )


def health_gauge(margin: float) -> float:
    """Profit margin clamped to 0..100 for the health gauge arc."""
    return min(max(margin, 0.0), 100.0)


def health_score(margin: float) -> int:
    """Whole-number health score shown inside the gauge (half rounds up)."""
    return int(math.floor(max(margin, 0.0) + 0.5))


def health_rating(margin: float) -> str:
    """Label shown under the health score."""
    if margin >= 20:
        return "Excellent"
    if margin >= 10:
        return "Good"
    return "Needs Improvement"


def monthly_series(
    transactions: list[Transaction],
    months: int = 6,
    today: Optional[date] = None,
) -> list[dict]:
    """
    Completed income and expenses for the last `months` calendar months,
    oldest first: [{month: "2024-01", income, expenses, net}, ...].
    """
    today = today or date.today()
    keys = []
    year, month = today.year, today.month
    for _ in range(months):
        keys.append((year, month))
        year, month = (year - 1, 12) if month == 1 else (year, month - 1)
    keys.reverse()

    series = []
    for year, month in keys:
        in_month = [
            t for t in transactions
            if t.date.year == year and t.date.month == month
        ]
        income = _completed_total(in_month, TransactionType.INCOME)
        expenses = _completed_total(in_month, TransactionType.EXPENSE)
        series.append({
            "month": f"{year:04d}-{month:02d}",
            "income": income,
            "expenses": expenses,
            "net": income - expenses,
        })
    return series
