"""Form validation package."""

from bookkeeper.validation.validator import (
    ValidationErrors,
    is_valid,
    validate_bill_draft,
    validate_transaction_draft,
)

__all__ = [
    "ValidationErrors",
    "is_valid",
    "validate_bill_draft",
    "validate_transaction_draft",
]
