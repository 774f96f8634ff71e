"""SQLAlchemy models for bizledger database."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(14, 2)


class Account(Base):
    """Bank or cash account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    opening_balance = Column(MONEY, default=Decimal("0"), nullable=False)
    current_balance = Column(MONEY, default=Decimal("0"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("tenant_id", "name", name="uq_account_tenant_name"),)

    # Relationships
    transactions = relationship(
        "Transaction", back_populates="account", foreign_keys="Transaction.account_id"
    )


class Card(Base):
    """Credit card model."""

    __tablename__ = "cards"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String, nullable=False, index=True)
    nickname = Column(String, nullable=False)
    brand = Column(String, nullable=True)
    last_digits = Column(String(4), nullable=True)
    credit_limit = Column(MONEY, default=Decimal("0"), nullable=False)
    closing_day = Column(Integer, nullable=False)
    due_day = Column(Integer, nullable=False)
    payment_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("tenant_id", "nickname", name="uq_card_tenant_nickname"),)

    # Relationships
    payment_account = relationship("Account")
    invoices = relationship("Invoice", back_populates="card", cascade="all, delete-orphan")


class Category(Base):
    """Category model; tenant_id is NULL for global categories."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String, nullable=True, index=True)
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Category", remote_side=[id], backref="children")


class Transaction(Base):
    """Account transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    kind = Column(String, nullable=False)
    transaction_date = Column(Date, nullable=False)
    settlement_date = Column(Date, nullable=True)
    status = Column(String, nullable=False, default="forecast")
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    destination_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    origin = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship("Account", back_populates="transactions", foreign_keys=[account_id])
    destination_account = relationship("Account", foreign_keys=[destination_account_id])
    category = relationship("Category")


class Invoice(Base):
    """Card invoice model, one per card and billing cycle."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    card_id = Column(Integer, ForeignKey("cards.id"), nullable=False)
    cycle = Column(String(7), nullable=False)
    closing_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    total_amount = Column(MONEY, default=Decimal("0"), nullable=False)
    paid_amount = Column(MONEY, default=Decimal("0"), nullable=False)
    status = Column(String, default="open", nullable=False)
    payment_transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("card_id", "cycle", name="uq_invoice_card_cycle"),)

    # Relationships
    card = relationship("Card", back_populates="invoices")
    items = relationship("InvoiceItem", back_populates="invoice", cascade="all, delete-orphan")


class InvoiceItem(Base):
    """Invoice line item model."""

    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False)
    description = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    purchase_date = Column(Date, nullable=False)
    installment_number = Column(Integer, nullable=True)
    installment_count = Column(Integer, nullable=True)
    installment_group_id = Column(String, nullable=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    notes = Column(String, nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    invoice = relationship("Invoice", back_populates="items")


class Client(Base):
    """Sales client model."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Product(Base):
    """Catalog product model; sku keeps its original case."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    sku = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Sale(Base):
    """Sales record model keyed by its idempotency key."""

    __tablename__ = "sales"

    id = Column(Integer, primary_key=True)
    idempotency_key = Column(String, unique=True, nullable=False)
    sale_date = Column(Date, nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    sku = Column(String, nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False)
    unit_price = Column(MONEY, nullable=False)
    total = Column(MONEY, nullable=False)
    channel = Column(String, nullable=False)
    status = Column(String, default="concluido", nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    client = relationship("Client")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
