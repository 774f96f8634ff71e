"""Tests for transaction service."""

from datetime import date
from decimal import Decimal

import pytest

from bizledger.domain.entities import CANCELLED, FORECAST, SETTLED
from bizledger.domain.errors import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def savings(account_service):
    account_id = account_service.create_account("Reserva", account_type="savings")
    return account_service.get_account(account_id)


def _balance(account_service, account_id):
    return account_service.get_account(account_id).current_balance


def test_forecast_does_not_touch_balance(transaction_service, account_service, sample_account):
    txn_id = transaction_service.create_transaction(
        "Aluguel", Decimal("100.00"), "debit", date(2025, 11, 1), sample_account.id
    )

    assert transaction_service.get_transaction(txn_id).status == FORECAST
    assert _balance(account_service, sample_account.id) == Decimal("1000.00")


def test_settle_applies_balance(transaction_service, account_service, sample_account):
    txn_id = transaction_service.create_transaction(
        "Aluguel", Decimal("100.00"), "debit", date(2025, 11, 1), sample_account.id
    )
    transaction_service.settle_transaction(txn_id, settlement_date=date(2025, 11, 2))

    txn = transaction_service.get_transaction(txn_id)
    assert txn.status == SETTLED
    assert txn.settlement_date == date(2025, 11, 2)
    assert _balance(account_service, sample_account.id) == Decimal("900.00")


def test_settle_twice_conflicts(transaction_service, sample_account):
    txn_id = transaction_service.create_transaction(
        "Aluguel", Decimal("100.00"), "debit", date(2025, 11, 1), sample_account.id, status=SETTLED
    )
    with pytest.raises(ConflictError):
        transaction_service.settle_transaction(txn_id)


def test_cancel_settled_reverses_balance(transaction_service, account_service, sample_account):
    txn_id = transaction_service.create_transaction(
        "Venda", Decimal("300.00"), "credit", date(2025, 11, 1), sample_account.id, status=SETTLED
    )
    assert _balance(account_service, sample_account.id) == Decimal("1300.00")

    transaction_service.cancel_transaction(txn_id)

    assert transaction_service.get_transaction(txn_id).status == CANCELLED
    assert _balance(account_service, sample_account.id) == Decimal("1000.00")
    with pytest.raises(ConflictError):
        transaction_service.cancel_transaction(txn_id)


def test_settled_transfer_moves_money(transaction_service, account_service, sample_account, savings):
    transaction_service.create_transaction(
        "Reserva mensal",
        Decimal("400.00"),
        "transfer",
        date(2025, 11, 10),
        sample_account.id,
        status=SETTLED,
        destination_account_id=savings.id,
    )

    assert _balance(account_service, sample_account.id) == Decimal("600.00")
    assert _balance(account_service, savings.id) == Decimal("400.00")


def test_transfer_requires_distinct_destination(transaction_service, sample_account):
    with pytest.raises(ValidationError, match="destination"):
        transaction_service.create_transaction(
            "Reserva", Decimal("1.00"), "transfer", date(2025, 11, 1), sample_account.id
        )
    with pytest.raises(ValidationError, match="differ"):
        transaction_service.create_transaction(
            "Reserva",
            Decimal("1.00"),
            "transfer",
            date(2025, 11, 1),
            sample_account.id,
            destination_account_id=sample_account.id,
        )


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5.00")])
def test_amount_must_be_positive(transaction_service, sample_account, amount):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            "Inválida", amount, "debit", date(2025, 11, 1), sample_account.id
        )


def test_inactive_account_rejects_transactions(transaction_service, account_service, sample_account):
    account_service.deactivate_account(sample_account.id)
    with pytest.raises(ValidationError, match="inactive"):
        transaction_service.create_transaction(
            "Aluguel", Decimal("10.00"), "debit", date(2025, 11, 1), sample_account.id
        )


def test_unknown_account(transaction_service):
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(
            "Aluguel", Decimal("10.00"), "debit", date(2025, 11, 1), 999
        )


def test_update_forecast(transaction_service, sample_account, category_service):
    category_id = category_service.create_category("Ocupação")
    txn_id = transaction_service.create_transaction(
        "Aluguel", Decimal("100.00"), "debit", date(2025, 11, 1), sample_account.id
    )

    transaction_service.update_transaction(
        txn_id, amount=Decimal("120.00"), category_id=category_id, notes="reajuste"
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.amount == Decimal("120.00")
    assert txn.category_id == category_id
    assert txn.notes == "reajuste"


def test_update_settled_conflicts(transaction_service, sample_account):
    txn_id = transaction_service.create_transaction(
        "Aluguel", Decimal("100.00"), "debit", date(2025, 11, 1), sample_account.id, status=SETTLED
    )
    with pytest.raises(ConflictError, match="forecast"):
        transaction_service.update_transaction(txn_id, description="Outro")


def test_update_rejects_non_editable_fields(transaction_service, sample_account):
    txn_id = transaction_service.create_transaction(
        "Aluguel", Decimal("100.00"), "debit", date(2025, 11, 1), sample_account.id
    )
    with pytest.raises(ValidationError, match="cannot be edited"):
        transaction_service.update_transaction(txn_id, status=SETTLED)
