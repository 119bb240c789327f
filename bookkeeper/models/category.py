"""
Category reference lists.

Categories are static labels that drive the selection widgets. They are
not persisted separately; records store the category name as free text.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from bookkeeper.models.records import TransactionType


class Category(BaseModel):
    """A selectable category with its display colour."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: TransactionType
    color: str = Field(..., pattern="^#[0-9A-Fa-f]{6}$")
    icon: Optional[str] = None


TRANSACTION_CATEGORIES: tuple[Category, ...] = (
    Category(name="Service Revenue", type=TransactionType.INCOME, color="#10B981"),
    Category(name="Product Sales", type=TransactionType.INCOME, color="#3B82F6"),
    Category(name="Consulting", type=TransactionType.INCOME, color="#8B5CF6"),
    Category(name="Office Expenses", type=TransactionType.EXPENSE, color="#EF4444"),
    Category(name="Marketing", type=TransactionType.EXPENSE, color="#F59E0B"),
    Category(name="Utilities", type=TransactionType.EXPENSE, color="#6B7280"),
    Category(name="Travel", type=TransactionType.EXPENSE, color="#EC4899"),
    Category(name="Software", type=TransactionType.EXPENSE, color="#14B8A6"),
)

# Every bill is money going out
BILL_CATEGORIES: tuple[Category, ...] = (
    Category(name="Utilities", type=TransactionType.EXPENSE, color="#10B981", icon="flashlight"),
    Category(name="Rent", type=TransactionType.EXPENSE, color="#3B82F6", icon="home"),
    Category(name="Insurance", type=TransactionType.EXPENSE, color="#8B5CF6", icon="shield-check"),
    Category(name="Software", type=TransactionType.EXPENSE, color="#F59E0B", icon="computer"),
    Category(name="Internet", type=TransactionType.EXPENSE, color="#EF4444", icon="wifi"),
    Category(name="Phone", type=TransactionType.EXPENSE, color="#EC4899", icon="phone"),
    Category(name="Maintenance", type=TransactionType.EXPENSE, color="#14B8A6", icon="tools"),
    Category(name="Subscription", type=TransactionType.EXPENSE, color="#6B7280", icon="refresh"),
)


def categories_for(transaction_type: TransactionType) -> list[Category]:
    """Transaction categories offered for the given type."""
    return [c for c in TRANSACTION_CATEGORIES if c.type == transaction_type]


def category_color(name: str, default: str = "#6B7280") -> str:
    """Display colour for a category name, looking at transaction categories first."""
    for category in TRANSACTION_CATEGORIES + BILL_CATEGORIES:
        if category.name == name:
            return category.color
    return default
