"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any
from datetime import date
from decimal import Decimal

from bizledger.domain.entities import (
    Account,
    Card,
    Category,
    Transaction,
    Invoice,
    InvoiceItem,
    Client,
    Product,
    Sale,
)


class Database(ABC):
    """Abstract database interface for bizledger.

    Every write method commits on its own unless it runs inside ``atomic()``,
    in which case the whole block commits or rolls back together.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Group writes into a single database transaction."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, tenant_id: str, name: str, account_type: str, opening_balance: Decimal
    ) -> int:
        """Create an account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, tenant_id: str, include_inactive: bool = False) -> list[Account]:
        """List accounts of a tenant."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update account fields."""
        pass

    @abstractmethod
    def adjust_account_balance(self, account_id: int, delta: Decimal) -> None:
        """Add delta to the account's realized balance."""
        pass

    # Card operations
    @abstractmethod
    def create_card(
        self,
        tenant_id: str,
        nickname: str,
        closing_day: int,
        due_day: int,
        credit_limit: Decimal,
        brand: Optional[str] = None,
        last_digits: Optional[str] = None,
        payment_account_id: Optional[int] = None,
    ) -> int:
        """Create a card. Returns card ID."""
        pass

    @abstractmethod
    def get_card(self, card_id: int) -> Optional[Card]:
        """Get card by ID."""
        pass

    @abstractmethod
    def list_cards(self, tenant_id: str, include_inactive: bool = False) -> list[Card]:
        """List cards of a tenant."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self, tenant_id: Optional[str], name: str, kind: str, parent_id: Optional[int] = None
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(self, tenant_id: str, kind: Optional[str] = None) -> list[Category]:
        """List the tenant's categories together with global ones."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        tenant_id: str,
        description: str,
        amount: Decimal,
        kind: str,
        transaction_date: date,
        account_id: int,
        status: str,
        settlement_date: Optional[date] = None,
        destination_account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        origin: Optional[str] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, **fields: Any) -> None:
        """Update the given transaction columns."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        tenant_id: str,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first.

        Filtering by account matches both the source and destination account.
        """
        pass

    # Invoice operations
    @abstractmethod
    def create_invoice(self, card_id: int, cycle: str, closing_date: date, due_date: date) -> int:
        """Create an open invoice. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID."""
        pass

    @abstractmethod
    def find_invoice(self, card_id: int, cycle: str) -> Optional[Invoice]:
        """Get the invoice of a card for a cycle label (YYYY-MM)."""
        pass

    @abstractmethod
    def list_invoices(
        self,
        card_ids: Optional[list[int]] = None,
        cycle: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Invoice]:
        """List invoices, newest cycle first."""
        pass

    @abstractmethod
    def update_invoice(self, invoice_id: int, **fields: Any) -> None:
        """Update the given invoice columns."""
        pass

    @abstractmethod
    def add_to_invoice_total(self, invoice_id: int, delta: Decimal) -> None:
        """Add delta to the invoice's maintained total."""
        pass

    # Invoice item operations
    @abstractmethod
    def create_invoice_item(
        self,
        invoice_id: int,
        description: str,
        amount: Decimal,
        purchase_date: date,
        installment_number: Optional[int] = None,
        installment_count: Optional[int] = None,
        installment_group_id: Optional[str] = None,
        category_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create an invoice line item. Returns item ID."""
        pass

    @abstractmethod
    def get_invoice_item(self, item_id: int) -> Optional[InvoiceItem]:
        """Get invoice item by ID."""
        pass

    @abstractmethod
    def list_invoice_items(
        self,
        invoice_id: Optional[int] = None,
        installment_group_id: Optional[str] = None,
        include_deleted: bool = False,
    ) -> list[InvoiceItem]:
        """List invoice items by invoice or installment group."""
        pass

    @abstractmethod
    def update_invoice_item(self, item_id: int, **fields: Any) -> None:
        """Update the given invoice item columns."""
        pass

    # Client and product operations
    @abstractmethod
    def create_client(self, name: str) -> int:
        """Create a client. Returns client ID."""
        pass

    @abstractmethod
    def find_client_by_name(self, name: str) -> Optional[Client]:
        """Get client by case-insensitive exact name."""
        pass

    @abstractmethod
    def list_clients(self) -> list[Client]:
        """List all clients."""
        pass

    @abstractmethod
    def create_product(self, sku: str, name: str) -> int:
        """Create a product. Returns product ID."""
        pass

    @abstractmethod
    def find_product_by_sku(self, sku: str) -> Optional[Product]:
        """Get product by case-insensitive exact SKU."""
        pass

    @abstractmethod
    def list_products(self) -> list[Product]:
        """List all products ordered by SKU."""
        pass

    # Sales operations
    @abstractmethod
    def sale_exists(self, idempotency_key: str) -> bool:
        """Check whether a sale with this idempotency key was stored."""
        pass

    @abstractmethod
    def create_sale(
        self,
        idempotency_key: str,
        sale_date: date,
        client_id: int,
        sku: str,
        quantity: Decimal,
        unit_price: Decimal,
        total: Decimal,
        channel: str,
        status: str = "concluido",
    ) -> int:
        """Create a sales record. Returns sale ID."""
        pass

    @abstractmethod
    def list_sales(self, key_prefix: Optional[str] = None) -> list[Sale]:
        """List sales, optionally restricted to an idempotency key prefix."""
        pass

    @abstractmethod
    def get_sales_summary(self, key_prefix: str) -> dict[str, Any]:
        """Aggregate count, quantity and total of the sales under a key prefix."""
        pass

    @abstractmethod
    def delete_sales(self, key_prefix: str) -> int:
        """Delete sales under an idempotency key prefix. Returns rows deleted."""
        pass
