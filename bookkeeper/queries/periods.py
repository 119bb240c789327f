"""
Report periods and quick date ranges.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Optional

from bookkeeper.models.records import Transaction


class ReportPeriod(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def label(self) -> str:
        return {
            ReportPeriod.MONTHLY: "This Month",
            ReportPeriod.QUARTERLY: "This Quarter",
            ReportPeriod.YEARLY: "This Year",
        }[self]


def quarter_of(month: int) -> int:
    """Quarter number (1-4) of a 1-based month."""
    return (month - 1) // 3 + 1


def in_period(value: date, period: ReportPeriod, year: int, month: int) -> bool:
    """
    Does `value` fall inside the selected report period?

    `month` is 1-based. For quarterly reports it picks the quarter that
    contains that month; yearly reports ignore it.
    """
    if value.year != year:
        return False
    if period == ReportPeriod.YEARLY:
        return True
    if period == ReportPeriod.MONTHLY:
        return value.month == month
    return quarter_of(value.month) == quarter_of(month)


def filter_by_period(
    transactions: list[Transaction],
    period: ReportPeriod,
    year: int,
    month: int,
) -> list[Transaction]:
    """
    Transactions dated inside the report period.

    Raises:
        ValueError: If month is not between 1 and 12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    return [t for t in transactions if in_period(t.date, period, year, month)]


def this_month_range(today: Optional[date] = None) -> tuple[date, date]:
    """First day of the current month through today."""
    today = today or date.today()
    return today.replace(day=1), today


def last_month_range(today: Optional[date] = None) -> tuple[date, date]:
    """First through last day of the previous calendar month."""
    today = today or date.today()
    end = today.replace(day=1) - timedelta(days=1)
    return end.replace(day=1), end


def unique_categories(transactions: list[Transaction]) -> list[str]:
    """Distinct categories in first-seen order, for the category dropdown."""
    return list(dict.fromkeys(t.category for t in transactions))
