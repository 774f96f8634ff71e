"""Shared pytest fixtures for bizledger tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from bizledger.config.settings import Settings
from bizledger.database.factories import create_sqlite_database
from bizledger.domain.account import AccountService
from bizledger.domain.card import CardService
from bizledger.domain.catalog import CatalogService
from bizledger.domain.category import CategoryService
from bizledger.domain.invoice import InvoiceService
from bizledger.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, api_base_url="http://sales.test", log_level="WARNING")


@pytest.fixture
def account_service(temp_db):
    return AccountService(temp_db)


@pytest.fixture
def card_service(temp_db):
    return CardService(temp_db)


@pytest.fixture
def category_service(temp_db):
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    return TransactionService(temp_db)


@pytest.fixture
def invoice_service(temp_db):
    return InvoiceService(temp_db, max_installments=24)


@pytest.fixture
def catalog_service(temp_db):
    return CatalogService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a checking account with an opening balance of 1000.00."""
    account_id = account_service.create_account(
        name="Itau PJ", account_type="checking", opening_balance=Decimal("1000.00")
    )
    return account_service.get_account(account_id)


@pytest.fixture
def sample_card(card_service, sample_account):
    """Create a card closing on the 5th and due on the 12th."""
    card_id = card_service.create_card(
        nickname="Nubank PJ",
        closing_day=5,
        due_day=12,
        credit_limit=Decimal("5000.00"),
        last_digits="1234",
        payment_account_id=sample_account.id,
    )
    return card_service.get_card(card_id)


@pytest.fixture
def november_invoice(invoice_service, sample_card):
    """An invoice for cycle 2025-11 holding one 300.00 purchase."""
    result = invoice_service.add_purchase(
        card_id=sample_card.id,
        description="Tecido",
        amount=Decimal("300.00"),
        purchase_date=date(2025, 11, 3),
    )
    return invoice_service.get_invoice(result.invoice_ids[0])


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
