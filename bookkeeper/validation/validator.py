"""
Form Validation

Drafts are checked before they become records. Each check that fails
adds one entry to a {field_name: message} mapping; the form shows the
message next to the field. An empty mapping is the only success signal.

Validation NEVER fixes input. Whitespace is ignored for the emptiness
checks only; the draft itself is left untouched.
"""

from bookkeeper.models.records import BillDraft, TransactionDraft


ValidationErrors = dict[str, str]

AMOUNT_MESSAGE = "Amount must be greater than 0"


def _check_amount(draft, errors: ValidationErrors) -> None:
    # Missing, unparseable, zero and negative amounts all fail the same way
    amount = draft.parsed_amount
    if amount is None or amount <= 0:
        errors["amount"] = AMOUNT_MESSAGE


def validate_transaction_draft(draft: TransactionDraft) -> ValidationErrors:
    """
    Check a transaction draft.

    Rules:
    - description is non-empty after trimming
    - a category is selected
    - amount is present and greater than zero
    - a date is present (and readable)
    """
    errors: ValidationErrors = {}

    if not draft.description.strip():
        errors["description"] = "Description is required"

    if not draft.category:
        errors["category"] = "Category is required"

    _check_amount(draft, errors)

    if draft.parsed_date is None:
        errors["date"] = "Date is required"

    return errors


def validate_bill_draft(draft: BillDraft) -> ValidationErrors:
    """
    Check a bill draft.

    Rules:
    - title and description are non-empty after trimming
    - a category is selected
    - amount is present and greater than zero
    - a due date is present (and readable)
    """
    errors: ValidationErrors = {}

    if not draft.title.strip():
        errors["title"] = "Title is required"

    if not draft.description.strip():
        errors["description"] = "Description is required"

    if not draft.category:
        errors["category"] = "Category is required"

    _check_amount(draft, errors)

    if draft.parsed_due_date is None:
        errors["due_date"] = "Due date is required"

    return errors


def is_valid(errors: ValidationErrors) -> bool:
    """True when no rule was violated."""
    return not errors
