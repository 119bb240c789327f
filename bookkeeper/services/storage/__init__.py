"""
Storage Services Package

Provides the abstract record store and its implementations.
Google Sheets is the production backend; the in-memory store serves tests
and offline runs.
"""

from bookkeeper.services.storage.interface import (
    BILL_ID_PREFIX,
    TRANSACTION_ID_PREFIX,
    ConnectionError,
    NotFoundError,
    RecordStore,
    StorageError,
    build_bill,
    build_transaction,
    make_record_id,
)
from bookkeeper.services.storage.google_sheets import (
    BILL_COLUMNS,
    TRANSACTION_COLUMNS,
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
)
from bookkeeper.services.storage.memory import InMemoryRecordStore
from bookkeeper.services.storage.sample_data import (
    sample_bills,
    sample_transactions,
)

__all__ = [
    # Interface
    "RecordStore",
    "build_bill",
    "build_transaction",
    "make_record_id",
    "BILL_ID_PREFIX",
    "TRANSACTION_ID_PREFIX",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Google Sheets implementation
    "BILL_COLUMNS",
    "TRANSACTION_COLUMNS",
    "GoogleSheetsClient",
    "GoogleSheetsRecordStore",
    # In-memory implementation
    "InMemoryRecordStore",
    # Fallback data
    "sample_bills",
    "sample_transactions",
]
