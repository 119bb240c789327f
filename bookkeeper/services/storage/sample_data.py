"""
Fixed sample records.

Returned by every store when the backend cannot be read, and used to seed
the in-memory store for offline demos. The lists are rebuilt on each call
so callers may mutate what they get back.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from bookkeeper.models.records import (
    Bill,
    BillStatus,
    Transaction,
    TransactionStatus,
    TransactionType,
)


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def sample_transactions() -> list[Transaction]:
    """The five fallback transactions."""
    return [
        Transaction(
            id="trans_1",
            date=date(2024, 1, 15),
            description="Office Supplies Purchase",
            category="Office Expenses",
            amount=Decimal("2500.00"),
            type=TransactionType.EXPENSE,
            status=TransactionStatus.COMPLETED,
            created_at=_ts("2024-01-15T10:30:00"),
            updated_at=_ts("2024-01-15T10:30:00"),
        ),
        Transaction(
            id="trans_2",
            date=date(2024, 1, 14),
            description="Client Payment - Website Development",
            category="Service Revenue",
            amount=Decimal("25000.00"),
            type=TransactionType.INCOME,
            status=TransactionStatus.COMPLETED,
            created_at=_ts("2024-01-14T14:20:00"),
            updated_at=_ts("2024-01-14T14:20:00"),
        ),
        Transaction(
            id="trans_3",
            date=date(2024, 1, 13),
            description="Internet & Phone Bills",
            category="Utilities",
            amount=Decimal("3200.00"),
            type=TransactionType.EXPENSE,
            status=TransactionStatus.COMPLETED,
            created_at=_ts("2024-01-13T09:15:00"),
            updated_at=_ts("2024-01-13T09:15:00"),
        ),
        Transaction(
            id="trans_4",
            date=date(2024, 1, 12),
            description="Consulting Services",
            category="Service Revenue",
            amount=Decimal("15000.00"),
            type=TransactionType.INCOME,
            status=TransactionStatus.PENDING,
            created_at=_ts("2024-01-12T16:45:00"),
            updated_at=_ts("2024-01-12T16:45:00"),
        ),
        Transaction(
            id="trans_5",
            date=date(2024, 1, 11),
            description="Marketing Campaign",
            category="Marketing",
            amount=Decimal("8500.00"),
            type=TransactionType.EXPENSE,
            status=TransactionStatus.COMPLETED,
            created_at=_ts("2024-01-11T11:30:00"),
            updated_at=_ts("2024-01-11T11:30:00"),
        ),
    ]


def sample_bills() -> list[Bill]:
    """The four fallback bills."""
    return [
        Bill(
            id="bill_1",
            title="Electricity Bill",
            description="Monthly electricity bill for office",
            amount=Decimal("4500.00"),
            due_date=date(2024, 1, 25),
            status=BillStatus.PENDING,
            category="Utilities",
            created_at=_ts("2024-01-10T08:00:00"),
            updated_at=_ts("2024-01-10T08:00:00"),
        ),
        Bill(
            id="bill_2",
            title="Software License Renewal",
            description="Annual software license renewal",
            amount=Decimal("12000.00"),
            due_date=date(2024, 1, 30),
            status=BillStatus.PENDING,
            category="Software",
            created_at=_ts("2024-01-05T10:00:00"),
            updated_at=_ts("2024-01-05T10:00:00"),
        ),
        Bill(
            id="bill_3",
            title="Office Rent",
            description="Monthly office rent payment",
            amount=Decimal("18000.00"),
            due_date=date(2024, 1, 20),
            status=BillStatus.OVERDUE,
            category="Rent",
            created_at=_ts("2024-01-01T09:00:00"),
            updated_at=_ts("2024-01-01T09:00:00"),
        ),
        Bill(
            id="bill_4",
            title="Insurance Premium",
            description="Quarterly insurance premium",
            amount=Decimal("6800.00"),
            due_date=date(2024, 2, 5),
            status=BillStatus.PENDING,
            category="Insurance",
            created_at=_ts("2024-01-08T12:00:00"),
            updated_at=_ts("2024-01-08T12:00:00"),
        ),
    ]
