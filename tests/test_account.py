"""Tests for account service."""

from datetime import date
from decimal import Decimal

import pytest

from bizledger.domain.account import AccountService
from bizledger.domain.entities import SETTLED
from bizledger.domain.errors import ConflictError, NotFoundError, ValidationError


def test_create_account(account_service):
    account_id = account_service.create_account("Caixa", account_type="cash", opening_balance=Decimal("50.00"))
    account = account_service.get_account(account_id)

    assert account.name == "Caixa"
    assert account.account_type == "cash"
    assert account.opening_balance == Decimal("50.00")
    assert account.current_balance == Decimal("50.00")
    assert account.is_active


def test_create_account_duplicate_name(account_service, sample_account):
    with pytest.raises(ConflictError, match="already exists"):
        account_service.create_account(sample_account.name)


def test_create_account_invalid_type(account_service):
    with pytest.raises(ValidationError, match="Invalid account type"):
        account_service.create_account("Broker", account_type="crypto")


def test_accounts_are_scoped_to_tenant(temp_db, sample_account):
    other = AccountService(temp_db, tenant_id="other")

    assert other.get_account(sample_account.id) is None
    assert other.list_accounts() == []
    with pytest.raises(NotFoundError):
        other.require_account(sample_account.id)


def test_deactivate_account_hides_it_from_default_list(account_service, sample_account):
    account_service.deactivate_account(sample_account.id)

    assert account_service.list_accounts() == []
    assert [a.id for a in account_service.list_accounts(include_inactive=True)] == [sample_account.id]


def test_rename_account(account_service, sample_account):
    account_service.rename_account(sample_account.id, "Itau Empresas")
    assert account_service.get_account(sample_account.id).name == "Itau Empresas"


def test_statement_filters_by_date_and_status(account_service, transaction_service, sample_account):
    transaction_service.create_transaction(
        "Aluguel", Decimal("100.00"), "debit", date(2025, 11, 1), sample_account.id, status=SETTLED
    )
    transaction_service.create_transaction(
        "Energia", Decimal("40.00"), "debit", date(2025, 11, 20), sample_account.id
    )
    transaction_service.create_transaction(
        "Venda", Decimal("70.00"), "credit", date(2025, 12, 2), sample_account.id, status=SETTLED
    )

    statement = account_service.statement(
        sample_account.id, start_date=date(2025, 11, 1), end_date=date(2025, 11, 30)
    )
    assert [t.description for t in statement["transactions"]] == ["Energia", "Aluguel"]

    settled = account_service.statement(sample_account.id, status=SETTLED)
    assert {t.description for t in settled["transactions"]} == {"Aluguel", "Venda"}


def test_computed_balance_matches_maintained_balance(account_service, transaction_service, sample_account):
    transaction_service.create_transaction(
        "Venda", Decimal("250.00"), "credit", date(2025, 11, 3), sample_account.id, status=SETTLED
    )
    transaction_service.create_transaction(
        "Fornecedor", Decimal("75.50"), "debit", date(2025, 11, 4), sample_account.id, status=SETTLED
    )
    transaction_service.create_transaction(
        "Previsto", Decimal("999.00"), "debit", date(2025, 11, 30), sample_account.id
    )

    account = account_service.get_account(sample_account.id)
    assert account.current_balance == Decimal("1174.50")
    assert account_service.computed_balance(sample_account.id) == account.current_balance
