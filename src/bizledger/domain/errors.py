"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for callers that only care about bad input.
    """


class ValidationError(DomainError):
    """Malformed or out-of-range input."""


class NotFoundError(DomainError):
    """Referenced card, account, client or invoice does not exist."""


class ConflictError(DomainError):
    """State conflict, such as paying a paid invoice or a duplicate key."""


class ExternalError(DomainError):
    """A database or network call failed."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def card_not_found(card_id: int) -> str:
    """Return message for missing card."""
    return f"Card {card_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Invoice {invoice_id} not found"


def invoice_item_not_found(item_id: int) -> str:
    """Return message for missing invoice line item."""
    return f"Invoice item {item_id} not found"


def installments_out_of_range(installments: int, maximum: int) -> str:
    """Return message for an installment count outside 1..maximum."""
    return f"Installments must be between 1 and {maximum}, got {installments}"


def amount_not_positive(amount: Decimal) -> str:
    """Return message for a non-positive amount."""
    return f"Amount must be greater than zero, got {amount}"


def payment_exceeds_outstanding(amount: Decimal, outstanding: Decimal) -> str:
    """Return message for an overpayment attempt."""
    return f"Payment of {amount} exceeds outstanding balance of {outstanding}"


def duplicate_idempotency_key(key: str) -> str:
    """Return message for a sales record that was already ingested."""
    return f"Sale with idempotency key '{key}' already exists"
