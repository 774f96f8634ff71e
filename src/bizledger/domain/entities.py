"""Domain model entities for bizledger.

These are pure data classes representing business concepts, independent of
database schema. Services and the CLI only ever see these; the SQLAlchemy
models stay inside ``bizledger.database``.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

ACCOUNT_TYPES = ("checking", "savings", "investment", "cash", "wallet")
CATEGORY_KINDS = ("expense", "income", "transfer")
TRANSACTION_KINDS = ("credit", "debit", "transfer")

# Transaction status
FORECAST = "forecast"
SETTLED = "settled"
CANCELLED = "cancelled"
TRANSACTION_STATUSES = (FORECAST, SETTLED, CANCELLED)

# Invoice status
INVOICE_OPEN = "open"
INVOICE_CLOSED = "closed"
INVOICE_PAID = "paid"
INVOICE_OVERDUE = "overdue"
INVOICE_STATUSES = (INVOICE_OPEN, INVOICE_CLOSED, INVOICE_PAID, INVOICE_OVERDUE)

# Origin of the transactions that pay card invoices
INVOICE_PAYMENT_ORIGIN = "invoice"

UNPAID_INVOICE_STATUSES = (INVOICE_OPEN, INVOICE_CLOSED, INVOICE_OVERDUE)


@dataclass(frozen=True)
class Account:
    """Bank or cash account domain entity."""

    id: int
    tenant_id: str
    name: str
    account_type: str
    opening_balance: Decimal
    current_balance: Decimal
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class Card:
    """Credit card domain entity."""

    id: int
    tenant_id: str
    nickname: str
    brand: Optional[str]
    last_digits: Optional[str]
    credit_limit: Decimal
    closing_day: int
    due_day: int
    payment_account_id: Optional[int]
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity with a single-level hierarchy."""

    id: int
    tenant_id: Optional[str]
    name: str
    kind: str
    parent_id: Optional[int]
    created_at: datetime

    @property
    def is_global(self) -> bool:
        """Global categories are shared by every tenant."""
        return self.tenant_id is None


@dataclass(frozen=True)
class Transaction:
    """Account transaction domain entity.

    ``amount`` is always stored as a positive magnitude; ``kind`` decides the
    sign it carries on the source account.
    """

    id: int
    tenant_id: str
    description: str
    amount: Decimal
    kind: str
    transaction_date: date
    settlement_date: Optional[date]
    status: str
    account_id: int
    destination_account_id: Optional[int]
    category_id: Optional[int]
    origin: Optional[str]
    reference: Optional[str]
    notes: Optional[str]
    created_at: datetime

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign it applies to the source account."""
        if self.kind == "credit":
            return self.amount
        return -self.amount


@dataclass(frozen=True)
class Invoice:
    """Card invoice for one billing cycle ("competência")."""

    id: int
    card_id: int
    cycle: str
    closing_date: date
    due_date: date
    total_amount: Decimal
    paid_amount: Decimal
    status: str
    payment_transaction_id: Optional[int]
    created_at: datetime

    @property
    def outstanding(self) -> Decimal:
        """Amount still to be paid."""
        return self.total_amount - self.paid_amount


@dataclass(frozen=True)
class InvoiceItem:
    """Line item of a card invoice."""

    id: int
    invoice_id: int
    description: str
    amount: Decimal
    purchase_date: date
    installment_number: Optional[int]
    installment_count: Optional[int]
    installment_group_id: Optional[str]
    category_id: Optional[int]
    notes: Optional[str]
    is_deleted: bool
    created_at: datetime


@dataclass(frozen=True)
class Client:
    """Sales client domain entity."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Product:
    """Catalog product domain entity."""

    id: int
    sku: str
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Sale:
    """Sales record stored by direct ingestion."""

    id: int
    idempotency_key: str
    sale_date: date
    client_id: int
    sku: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal
    channel: str
    status: str
    created_at: datetime
