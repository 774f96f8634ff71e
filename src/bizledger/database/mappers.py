"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic so the domain dataclasses stay
stable when the table layout changes.
"""

from bizledger.domain import entities as domain
from bizledger.database.models import (
    Account as ORMAccount,
    Card as ORMCard,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    Invoice as ORMInvoice,
    InvoiceItem as ORMInvoiceItem,
    Client as ORMClient,
    Product as ORMProduct,
    Sale as ORMSale,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        tenant_id=orm_account.tenant_id,
        name=orm_account.name,
        account_type=orm_account.account_type,
        opening_balance=orm_account.opening_balance,
        current_balance=orm_account.current_balance,
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
    )


def card_to_domain(orm_card: ORMCard) -> domain.Card:
    """Convert SQLAlchemy Card model to domain Card entity."""
    return domain.Card(
        id=orm_card.id,
        tenant_id=orm_card.tenant_id,
        nickname=orm_card.nickname,
        brand=orm_card.brand,
        last_digits=orm_card.last_digits,
        credit_limit=orm_card.credit_limit,
        closing_day=orm_card.closing_day,
        due_day=orm_card.due_day,
        payment_account_id=orm_card.payment_account_id,
        is_active=orm_card.is_active,
        created_at=orm_card.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        tenant_id=orm_category.tenant_id,
        name=orm_category.name,
        kind=orm_category.kind,
        parent_id=orm_category.parent_id,
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        tenant_id=orm_transaction.tenant_id,
        description=orm_transaction.description,
        amount=orm_transaction.amount,
        kind=orm_transaction.kind,
        transaction_date=orm_transaction.transaction_date,
        settlement_date=orm_transaction.settlement_date,
        status=orm_transaction.status,
        account_id=orm_transaction.account_id,
        destination_account_id=orm_transaction.destination_account_id,
        category_id=orm_transaction.category_id,
        origin=orm_transaction.origin,
        reference=orm_transaction.reference,
        notes=orm_transaction.notes,
        created_at=orm_transaction.created_at,
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        card_id=orm_invoice.card_id,
        cycle=orm_invoice.cycle,
        closing_date=orm_invoice.closing_date,
        due_date=orm_invoice.due_date,
        total_amount=orm_invoice.total_amount,
        paid_amount=orm_invoice.paid_amount,
        status=orm_invoice.status,
        payment_transaction_id=orm_invoice.payment_transaction_id,
        created_at=orm_invoice.created_at,
    )


def invoice_item_to_domain(orm_item: ORMInvoiceItem) -> domain.InvoiceItem:
    """Convert SQLAlchemy InvoiceItem model to domain InvoiceItem entity."""
    return domain.InvoiceItem(
        id=orm_item.id,
        invoice_id=orm_item.invoice_id,
        description=orm_item.description,
        amount=orm_item.amount,
        purchase_date=orm_item.purchase_date,
        installment_number=orm_item.installment_number,
        installment_count=orm_item.installment_count,
        installment_group_id=orm_item.installment_group_id,
        category_id=orm_item.category_id,
        notes=orm_item.notes,
        is_deleted=orm_item.is_deleted,
        created_at=orm_item.created_at,
    )


def client_to_domain(orm_client: ORMClient) -> domain.Client:
    """Convert SQLAlchemy Client model to domain Client entity."""
    return domain.Client(
        id=orm_client.id,
        name=orm_client.name,
        created_at=orm_client.created_at,
    )


def product_to_domain(orm_product: ORMProduct) -> domain.Product:
    """Convert SQLAlchemy Product model to domain Product entity."""
    return domain.Product(
        id=orm_product.id,
        sku=orm_product.sku,
        name=orm_product.name,
        created_at=orm_product.created_at,
    )


def sale_to_domain(orm_sale: ORMSale) -> domain.Sale:
    """Convert SQLAlchemy Sale model to domain Sale entity."""
    return domain.Sale(
        id=orm_sale.id,
        idempotency_key=orm_sale.idempotency_key,
        sale_date=orm_sale.sale_date,
        client_id=orm_sale.client_id,
        sku=orm_sale.sku,
        quantity=orm_sale.quantity,
        unit_price=orm_sale.unit_price,
        total=orm_sale.total,
        channel=orm_sale.channel,
        status=orm_sale.status,
        created_at=orm_sale.created_at,
    )
