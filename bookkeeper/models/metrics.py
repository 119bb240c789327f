"""
Derived metric models.

These are the outputs of the aggregation functions in
bookkeeper.queries.aggregates. They carry no behaviour beyond
a few presentation-oriented properties.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class TransactionStats(BaseModel):
    """Summary figures for a list of transactions."""

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    net_profit: Decimal = Decimal("0")
    pending_amount: Decimal = Decimal("0")
    monthly_income: Decimal = Decimal("0")
    monthly_expenses: Decimal = Decimal("0")
    transaction_count: int = Field(default=0, ge=0)
    completed_count: int = Field(default=0, ge=0)
    pending_count: int = Field(default=0, ge=0)

    @property
    def is_profitable(self) -> bool:
        return self.net_profit >= 0


class BillStats(BaseModel):
    """Reminder figures for a list of bills."""

    total_outstanding: Decimal = Decimal("0")
    overdue_count: int = Field(default=0, ge=0)
    due_soon_count: int = Field(default=0, ge=0)
    paid_this_month_count: int = Field(default=0, ge=0)


class CategoryTotal(BaseModel):
    """Summed amount for one category."""

    name: str
    amount: Decimal


class ReportMetrics(BaseModel):
    """Report figures derived from transactions and bills together."""

    total_revenue: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    net_income: Decimal = Decimal("0")
    # Percentage, not clamped
    profit_margin: float = 0.0
    outstanding_bills: Decimal = Decimal("0")
    average_transaction_value: Decimal = Decimal("0")
    top_expense_category: Optional[CategoryTotal] = None
