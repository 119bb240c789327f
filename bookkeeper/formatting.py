"""
Display formatting for amounts, percentages, due dates and categories.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from bookkeeper.models.category import category_color
from bookkeeper.models.records import Bill, TransactionType
from bookkeeper.queries.aggregates import days_until_due, is_overdue


DEFAULT_CURRENCY_SYMBOL = "₱"

Number = Union[Decimal, float, int]


def format_currency(amount: Number, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Absolute amount with thousands separators and two decimals: ₱1,234.50."""
    value = abs(Decimal(str(amount))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{symbol}{value:,.2f}"


def format_signed_amount(
    amount: Number,
    transaction_type: TransactionType,
    symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> str:
    """Expenses show as -₱…, income as +₱…."""
    sign = "-" if transaction_type == TransactionType.EXPENSE else "+"
    return f"{sign}{format_currency(amount, symbol)}"


def format_percentage(value: float) -> str:
    """One decimal place: 12.5%."""
    return f"{value:.1f}%"


def due_label(bill: Bill, today: Optional[date] = None) -> str:
    """Relative due-date text for the bills table."""
    days = days_until_due(bill, today)
    if days < 0:
        return f"{abs(days)} days overdue"
    if is_overdue(bill, today):
        return "Overdue"
    if days == 0:
        return "Due today"
    if days == 1:
        return "Due tomorrow"
    return f"{days} days left"


def category_style(name: str) -> str:
    """CSS for a category cell in a styled table."""
    return f"color: {category_color(name)}; font-weight: 600"
