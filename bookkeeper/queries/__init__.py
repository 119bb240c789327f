"""Aggregation, filtering, sorting and reporting over record lists."""

from bookkeeper.queries.aggregates import (
    DUE_SOON_DAYS,
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
from bookkeeper.queries.export import export_filename, export_transactions_csv
from bookkeeper.queries.filters import (
    ALL,
    BILL_SORT_DEFAULT,
    TRANSACTION_SORT_DEFAULT,
    BillFilter,
    BillSortField,
    SortDirection,
    SortState,
    TransactionFilter,
    TransactionSortField,
    filter_bills,
    filter_transactions,
    sort_bills,
    sort_transactions,
    toggle_sort,
)
from bookkeeper.queries.periods import (
    ReportPeriod,
    filter_by_period,
    last_month_range,
    this_month_range,
    unique_categories,
)

__all__ = [
    # Aggregates
    "DUE_SOON_DAYS",
    "bill_stats",
    "days_until_due",
    "effective_status",
    "health_gauge",
    "health_rating",
    "health_score",
    "is_due_soon",
    "is_overdue",
    "monthly_series",
    "profit_margin",
    "report_metrics",
    "top_expense_category",
    "transaction_stats",
    # Filters and sorting
    "ALL",
    "BILL_SORT_DEFAULT",
    "TRANSACTION_SORT_DEFAULT",
    "BillFilter",
    "BillSortField",
    "SortDirection",
    "SortState",
    "TransactionFilter",
    "TransactionSortField",
    "filter_bills",
    "filter_transactions",
    "sort_bills",
    "sort_transactions",
    "toggle_sort",
    # Periods
    "ReportPeriod",
    "filter_by_period",
    "last_month_range",
    "this_month_range",
    "unique_categories",
    # Export
    "export_filename",
    "export_transactions_csv",
]
