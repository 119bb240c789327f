"""
CSV export of the (filtered) transaction list.
"""

import io
from datetime import date
from typing import Optional

import pandas as pd

from bookkeeper.logging_config import get_logger
from bookkeeper.models.records import Transaction


logger = get_logger(__name__)

EXPORT_COLUMNS = ["Date", "Description", "Category", "Amount", "Type", "Status"]


def transactions_frame(transactions: list[Transaction]) -> pd.DataFrame:
    """One row per transaction with the export column names."""
    data = [
        {
            "Date": t.date.isoformat(),
            "Description": t.description,
            "Category": t.category,
            "Amount": float(t.amount),
            "Type": t.type.value,
            "Status": t.status.value,
        }
        for t in transactions
    ]
    return pd.DataFrame(data, columns=EXPORT_COLUMNS)


def export_transactions_csv(transactions: list[Transaction]) -> str:
    """
    Render transactions as CSV text.

    An empty list still produces the header row.
    """
    buffer = io.StringIO()
    transactions_frame(transactions).to_csv(buffer, index=False)
    logger.info("transactions_exported", format="csv", count=len(transactions))
    return buffer.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    """Download name, e.g. transactions_2024-01-31.csv."""
    today = today or date.today()
    return f"transactions_{today.isoformat()}.csv"
