"""Tests for card service."""

from decimal import Decimal

import pytest

from bizledger.domain.card import CardService
from bizledger.domain.errors import ConflictError, NotFoundError, ValidationError


def test_create_card(card_service, sample_account):
    card_id = card_service.create_card(
        "Inter",
        closing_day=20,
        due_day=28,
        credit_limit=Decimal("3000.00"),
        brand="Mastercard",
        last_digits="9876",
        payment_account_id=sample_account.id,
    )
    card = card_service.get_card(card_id)

    assert card.nickname == "Inter"
    assert card.closing_day == 20
    assert card.due_day == 28
    assert card.credit_limit == Decimal("3000.00")
    assert card.payment_account_id == sample_account.id


@pytest.mark.parametrize(
    "closing_day, due_day, match",
    [
        (0, 10, "Closing day"),
        (5, 32, "Due day"),
        (10, 10, "after the closing day"),
        (20, 5, "after the closing day"),
    ],
)
def test_invalid_days(card_service, closing_day, due_day, match):
    with pytest.raises(ValidationError, match=match):
        card_service.create_card("X", closing_day=closing_day, due_day=due_day)


@pytest.mark.parametrize("digits", ["123", "12345", "12a4"])
def test_invalid_last_digits(card_service, digits):
    with pytest.raises(ValidationError, match="4 digits"):
        card_service.create_card("X", closing_day=5, due_day=12, last_digits=digits)


def test_duplicate_nickname(card_service, sample_card):
    with pytest.raises(ConflictError):
        card_service.create_card(sample_card.nickname, closing_day=1, due_day=10)


def test_unknown_payment_account(card_service):
    with pytest.raises(NotFoundError):
        card_service.create_card("X", closing_day=5, due_day=12, payment_account_id=42)


def test_cards_are_scoped_to_tenant(temp_db, sample_card):
    other = CardService(temp_db, tenant_id="other")
    assert other.get_card(sample_card.id) is None
    assert other.list_cards() == []


def test_limit_usage_without_invoices(card_service, sample_card):
    assert card_service.limit_usage(sample_card.id)["available"] == Decimal("5000.00")
