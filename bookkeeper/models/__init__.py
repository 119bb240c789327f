"""
Data Models Package

This package contains all Pydantic models used by the bookkeeping dashboard.
All records flowing through the system conform to these schemas.
"""

from bookkeeper.models.category import (
    BILL_CATEGORIES,
    TRANSACTION_CATEGORIES,
    Category,
    categories_for,
    category_color,
)
from bookkeeper.models.metrics import (
    BillStats,
    CategoryTotal,
    ReportMetrics,
    TransactionStats,
)
from bookkeeper.models.records import (
    AppendResult,
    Bill,
    BillDraft,
    BillStatus,
    Record,
    Transaction,
    TransactionDraft,
    TransactionStatus,
    TransactionType,
    utc_now,
)

__all__ = [
    # Records
    "AppendResult",
    "Bill",
    "BillDraft",
    "BillStatus",
    "Record",
    "Transaction",
    "TransactionDraft",
    "TransactionStatus",
    "TransactionType",
    "utc_now",
    # Categories
    "BILL_CATEGORIES",
    "TRANSACTION_CATEGORIES",
    "Category",
    "categories_for",
    "category_color",
    # Metrics
    "BillStats",
    "CategoryTotal",
    "ReportMetrics",
    "TransactionStats",
]
