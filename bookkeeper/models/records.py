"""
Core Record Models for the Bookkeeping Dashboard

These models define the schemas for everything held in a session list:
1. Transactions (income/expense entries)
2. Due bills (payment reminders)
3. Drafts (unsaved form input, validated before it becomes a record)

Amounts are never negative. The direction of money is carried by the
transaction type, not by the sign of the amount.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


CalendarDate = date


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money for a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    """Settlement status of a transaction."""
    COMPLETED = "completed"
    PENDING = "pending"


class BillStatus(str, Enum):
    """
    Stored status of a due bill.

    OVERDUE is also derived: a PENDING bill past its due date is treated as
    overdue everywhere lateness is evaluated (see queries.aggregates.is_overdue).
    """
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


# =============================================================================
# RECORDS
# =============================================================================

class Transaction(BaseModel):
    """A single income or expense entry."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque identifier, unique within a collection"
    )
    date: CalendarDate = Field(
        ...,
        description="Date the transaction took place"
    )
    description: str = Field(default="")
    category: str = Field(default="")
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative amount; direction comes from type"
    )
    type: TransactionType = TransactionType.EXPENSE
    status: TransactionStatus = TransactionStatus.COMPLETED

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Bill(BaseModel):
    """An upcoming (or settled) payment obligation."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque identifier, unique within a collection"
    )
    title: str = Field(default="")
    description: str = Field(default="")
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount due"
    )
    due_date: CalendarDate = Field(
        ...,
        description="Date the payment is due"
    )
    status: BillStatus = BillStatus.PENDING
    category: str = Field(default="")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


Record = Union[Transaction, Bill]


class AppendResult(BaseModel):
    """
    Outcome of appending a record to the store.

    The record is always the locally constructed one; `persisted` tells
    whether the remote write went through.
    """

    record: Record
    persisted: bool
    error_message: Optional[str] = None


# =============================================================================
# DRAFTS - raw form input
# =============================================================================

def _parse_amount(raw: str) -> Optional[Decimal]:
    """Parse a typed amount; None when empty or not a finite number."""
    if not raw or not raw.strip():
        return None
    try:
        value = Decimal(raw.strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def _parse_date(raw: str) -> Optional[CalendarDate]:
    if not raw or not raw.strip():
        return None
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError:
        return None


class _Draft(BaseModel):
    """Shared coercion for drafts: numbers and dates arrive as form strings."""

    @field_validator("amount", mode="before", check_fields=False)
    @classmethod
    def coerce_amount(cls, v):
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("date", "due_date", mode="before", check_fields=False)
    @classmethod
    def coerce_date(cls, v):
        if v is None:
            return ""
        if isinstance(v, date):
            return v.isoformat()
        return v

    @property
    def parsed_amount(self) -> Optional[Decimal]:
        return _parse_amount(self.amount)


class TransactionDraft(_Draft):
    """Unsaved transaction exactly as entered in the form."""

    date: str = ""
    description: str = ""
    category: str = ""
    amount: str = ""
    type: TransactionType = TransactionType.EXPENSE
    status: TransactionStatus = TransactionStatus.COMPLETED

    @property
    def parsed_date(self) -> Optional[CalendarDate]:
        return _parse_date(self.date)

    @classmethod
    def blank(cls, today: Optional[CalendarDate] = None) -> "TransactionDraft":
        """A new-transaction form, dated today."""
        today = today or date.today()
        return cls(date=today.isoformat())

    @classmethod
    def from_record(cls, transaction: Transaction) -> "TransactionDraft":
        """Pre-fill the form for editing an existing transaction."""
        return cls(
            date=transaction.date.isoformat(),
            description=transaction.description,
            category=transaction.category,
            amount=str(transaction.amount),
            type=transaction.type,
            status=transaction.status,
        )

    def to_fields(self) -> dict:
        """
        Typed record fields for a draft that passed validation.

        Raises:
            ValueError: If amount or date cannot be parsed
        """
        amount = self.parsed_amount
        parsed_date = self.parsed_date
        if amount is None or parsed_date is None:
            raise ValueError("Draft has an unparseable amount or date")
        return {
            "date": parsed_date,
            "description": self.description.strip(),
            "category": self.category,
            "amount": amount,
            "type": self.type,
            "status": self.status,
        }


class BillDraft(_Draft):
    """Unsaved bill exactly as entered in the form."""

    title: str = ""
    description: str = ""
    amount: str = ""
    due_date: str = ""
    category: str = ""
    status: BillStatus = BillStatus.PENDING

    @property
    def parsed_due_date(self) -> Optional[CalendarDate]:
        return _parse_date(self.due_date)

    @classmethod
    def blank(cls, today: Optional[CalendarDate] = None) -> "BillDraft":
        """A new-bill form, due tomorrow."""
        today = today or date.today()
        return cls(due_date=(today + timedelta(days=1)).isoformat())

    @classmethod
    def from_record(cls, bill: Bill) -> "BillDraft":
        """Pre-fill the form for editing an existing bill."""
        return cls(
            title=bill.title,
            description=bill.description,
            amount=str(bill.amount),
            due_date=bill.due_date.isoformat(),
            category=bill.category,
            status=bill.status,
        )

    def to_fields(self) -> dict:
        """
        Typed record fields for a draft that passed validation.

        Raises:
            ValueError: If amount or due date cannot be parsed
        """
        amount = self.parsed_amount
        due_date = self.parsed_due_date
        if amount is None or due_date is None:
            raise ValueError("Draft has an unparseable amount or due date")
        return {
            "title": self.title.strip(),
            "description": self.description.strip(),
            "amount": amount,
            "due_date": due_date,
            "status": self.status,
            "category": self.category,
        }
