"""Tests for billing cycle rules."""

from datetime import date
from decimal import Decimal

import pytest

from bizledger.domain import billing


def test_purchase_on_closing_day_stays_in_month():
    assert billing.natural_cycle(date(2025, 11, 5), closing_day=5) == date(2025, 11, 1)


def test_purchase_after_closing_day_moves_to_next_cycle():
    assert billing.natural_cycle(date(2025, 11, 6), closing_day=5) == date(2025, 12, 1)


def test_purchase_after_december_closing_rolls_year():
    assert billing.natural_cycle(date(2025, 12, 20), closing_day=10) == date(2026, 1, 1)


def test_installment_cycles_are_consecutive():
    cycles = billing.installment_cycles(date(2025, 11, 20), closing_day=10, installments=3)
    assert [billing.cycle_label(c) for c in cycles] == ["2025-12", "2026-01", "2026-02"]


def test_closing_and_due_dates_clamp_to_month_end():
    cycle = date(2026, 2, 1)
    assert billing.closing_date(cycle, 30) == date(2026, 2, 28)
    assert billing.due_date(cycle, closing_day=25, due_day=31) == date(2026, 2, 28)


def test_due_date_rolls_to_next_month_when_before_closing_day():
    assert billing.due_date(date(2025, 11, 1), closing_day=25, due_day=5) == date(2025, 12, 5)


def test_parse_cycle():
    assert billing.parse_cycle("2025-11") == date(2025, 11, 1)


@pytest.mark.parametrize(
    "total, n, expected",
    [
        ("100.00", 3, ["33.33", "33.33", "33.34"]),
        ("100.00", 1, ["100.00"]),
        ("0.05", 3, ["0.01", "0.01", "0.03"]),
        ("1000.00", 4, ["250.00", "250.00", "250.00", "250.00"]),
    ],
)
def test_split_installments(total, n, expected):
    parts = billing.split_installments(Decimal(total), n)
    assert parts == [Decimal(e) for e in expected]
    assert sum(parts) == Decimal(total)


@pytest.mark.parametrize("n", range(1, 25))
def test_split_installments_never_drifts(n):
    total = Decimal("1234.57")
    assert sum(billing.split_installments(total, n)) == total
