"""Tests for installment purchases and invoice maintenance."""

from datetime import date
from decimal import Decimal

import pytest

from bizledger.domain.category import CategoryService
from bizledger.domain.entities import INVOICE_CLOSED, INVOICE_OPEN, INVOICE_OVERDUE, INVOICE_PAID
from bizledger.domain.errors import ConflictError, ExternalError, NotFoundError, ValidationError


def _live_total(temp_db, invoice_id):
    return sum((i.amount for i in temp_db.list_invoice_items(invoice_id=invoice_id)), Decimal("0"))


class TestAddPurchase:
    def test_single_installment(self, invoice_service, sample_card):
        result = invoice_service.add_purchase(
            sample_card.id, "Linha", Decimal("89.90"), date(2025, 11, 5)
        )

        assert result.installment_group_id is None
        invoice = invoice_service.get_invoice(result.invoice_ids[0])
        assert invoice.cycle == "2025-11"
        assert invoice.closing_date == date(2025, 11, 5)
        assert invoice.due_date == date(2025, 11, 12)
        assert invoice.total_amount == Decimal("89.90")
        assert invoice.status == INVOICE_OPEN

        items = invoice_service.list_items(invoice.id)
        assert [i.description for i in items] == ["Linha"]

    def test_three_installments_split_without_drift(self, invoice_service, sample_card, temp_db):
        result = invoice_service.add_purchase(
            sample_card.id, "Máquina", Decimal("100.00"), date(2025, 11, 10), installments=3
        )

        invoices = [invoice_service.get_invoice(i) for i in result.invoice_ids]
        assert [inv.cycle for inv in invoices] == ["2025-12", "2026-01", "2026-02"]
        assert [inv.total_amount for inv in invoices] == [
            Decimal("33.33"),
            Decimal("33.33"),
            Decimal("33.34"),
        ]

        siblings = invoice_service.list_installments(result.installment_group_id)
        assert len(siblings) == 3
        assert sum(i.amount for i in siblings) == Decimal("100.00")
        assert [i.description for i in siblings] == [
            "Máquina (1/3)",
            "Máquina (2/3)",
            "Máquina (3/3)",
        ]
        assert {(i.installment_number, i.installment_count) for i in siblings} == {
            (1, 3),
            (2, 3),
            (3, 3),
        }

    def test_purchases_share_cycle_invoice(self, invoice_service, sample_card, temp_db):
        first = invoice_service.add_purchase(sample_card.id, "A", Decimal("10.00"), date(2025, 11, 1))
        second = invoice_service.add_purchase(
            sample_card.id, "B", Decimal("15.50"), date(2025, 11, 4), installments=2
        )

        assert first.invoice_ids[0] == second.invoice_ids[0]
        invoice = invoice_service.get_invoice(first.invoice_ids[0])
        assert invoice.total_amount == Decimal("17.75")
        assert invoice.total_amount == _live_total(temp_db, invoice.id)

    @pytest.mark.parametrize("installments", [0, 25, -1])
    def test_installments_out_of_range(self, invoice_service, sample_card, installments):
        with pytest.raises(ValidationError, match="between 1 and 24"):
            invoice_service.add_purchase(
                sample_card.id, "X", Decimal("10.00"), date(2025, 11, 1), installments=installments
            )

    @pytest.mark.parametrize("amount", ["0", "-10.00", "10.001"])
    def test_invalid_amount(self, invoice_service, sample_card, amount):
        with pytest.raises(ValidationError):
            invoice_service.add_purchase(sample_card.id, "X", Decimal(amount), date(2025, 11, 1))

    def test_unknown_card(self, invoice_service):
        with pytest.raises(NotFoundError):
            invoice_service.add_purchase(999, "X", Decimal("10.00"), date(2025, 11, 1))

    def test_failure_midway_keeps_nothing(self, invoice_service, sample_card, temp_db, monkeypatch):
        original = temp_db.add_to_invoice_total
        calls = []

        def flaky(invoice_id, delta):
            calls.append(invoice_id)
            if len(calls) == 2:
                raise ExternalError("connection lost")
            original(invoice_id, delta)

        monkeypatch.setattr(temp_db, "add_to_invoice_total", flaky)

        with pytest.raises(ExternalError):
            invoice_service.add_purchase(
                sample_card.id, "Máquina", Decimal("100.00"), date(2025, 11, 10), installments=3
            )

        assert invoice_service.list_invoices() == []
        assert temp_db.list_invoice_items(include_deleted=True) == []

    def test_paid_invoice_rejects_new_items(self, invoice_service, november_invoice, sample_card):
        invoice_service.pay_invoice(november_invoice.id, date(2025, 11, 12))

        with pytest.raises(ConflictError, match="already paid"):
            invoice_service.add_purchase(sample_card.id, "Extra", Decimal("5.00"), date(2025, 11, 2))


class TestItems:
    def test_update_item_amount_adjusts_total(self, invoice_service, november_invoice, temp_db):
        item = invoice_service.list_items(november_invoice.id)[0]

        invoice_service.update_item(item.id, amount=Decimal("250.00"), description="Tecido azul")

        invoice = invoice_service.get_invoice(november_invoice.id)
        assert invoice.total_amount == Decimal("250.00")
        assert invoice.total_amount == _live_total(temp_db, invoice.id)
        assert invoice_service.list_items(invoice.id)[0].description == "Tecido azul"

    def test_delete_item_removes_it_from_total(self, invoice_service, november_invoice, sample_card, temp_db):
        invoice_service.add_purchase(sample_card.id, "Botões", Decimal("20.00"), date(2025, 11, 4))
        item = invoice_service.list_items(november_invoice.id)[0]

        invoice_service.delete_item(item.id)

        invoice = invoice_service.get_invoice(november_invoice.id)
        assert invoice.total_amount == Decimal("20.00")
        assert invoice.total_amount == _live_total(temp_db, invoice.id)
        with pytest.raises(NotFoundError):
            invoice_service.delete_item(item.id)

    def test_items_of_paid_invoice_are_locked(self, invoice_service, november_invoice):
        item = invoice_service.list_items(november_invoice.id)[0]
        invoice_service.pay_invoice(november_invoice.id, date(2025, 11, 12))

        with pytest.raises(ConflictError):
            invoice_service.delete_item(item.id)
        with pytest.raises(ConflictError):
            invoice_service.update_item(item.id, amount=Decimal("1.00"))


    def test_items_cannot_drop_total_below_paid_amount(
        self, invoice_service, november_invoice, sample_card, temp_db
    ):
        invoice_service.add_purchase(sample_card.id, "Linha", Decimal("100.00"), date(2025, 11, 4))
        invoice_service.pay_invoice(november_invoice.id, date(2025, 11, 12), amount=Decimal("350.00"))
        fabric, thread = invoice_service.list_items(november_invoice.id)

        with pytest.raises(ValidationError, match="already paid"):
            invoice_service.delete_item(thread.id)
        with pytest.raises(ValidationError, match="already paid"):
            invoice_service.update_item(fabric.id, amount=Decimal("200.00"))

        invoice = invoice_service.get_invoice(november_invoice.id)
        assert invoice.total_amount == Decimal("400.00")
        assert invoice.status == INVOICE_CLOSED
        assert invoice.total_amount == _live_total(temp_db, invoice.id)

    def test_item_change_matching_paid_amount_settles_invoice(
        self, invoice_service, november_invoice, sample_card
    ):
        invoice_service.add_purchase(sample_card.id, "Linha", Decimal("100.00"), date(2025, 11, 4))
        invoice_service.pay_invoice(november_invoice.id, date(2025, 11, 12), amount=Decimal("350.00"))
        fabric, _ = invoice_service.list_items(november_invoice.id)

        invoice_service.update_item(fabric.id, amount=Decimal("250.00"))

        invoice = invoice_service.get_invoice(november_invoice.id)
        assert invoice.total_amount == Decimal("350.00")
        assert invoice.status == INVOICE_PAID

    def test_update_item_validates_like_purchases(self, invoice_service, november_invoice, temp_db):
        item = invoice_service.list_items(november_invoice.id)[0]
        foreign = CategoryService(temp_db, "outro").create_category("Material")

        with pytest.raises(ValidationError, match="two decimal places"):
            invoice_service.update_item(item.id, amount=Decimal("10.005"))
        with pytest.raises(NotFoundError):
            invoice_service.update_item(item.id, category_id=9999)
        with pytest.raises(NotFoundError):
            invoice_service.update_item(item.id, category_id=foreign)

        assert invoice_service.list_items(november_invoice.id)[0] == item

class TestStatus:
    def test_close_open_invoice(self, invoice_service, november_invoice):
        invoice_service.close_invoice(november_invoice.id)
        assert invoice_service.get_invoice(november_invoice.id).status == INVOICE_CLOSED

        with pytest.raises(ConflictError, match="only open invoices"):
            invoice_service.close_invoice(november_invoice.id)

    def test_refresh_overdue(self, invoice_service, november_invoice):
        assert invoice_service.refresh_overdue(date(2025, 11, 12)) == []
        assert invoice_service.refresh_overdue(date(2025, 11, 13)) == [november_invoice.id]
        assert invoice_service.get_invoice(november_invoice.id).status == INVOICE_OVERDUE

    def test_refresh_overdue_skips_paid(self, invoice_service, november_invoice):
        invoice_service.pay_invoice(november_invoice.id, date(2025, 11, 12))
        assert invoice_service.refresh_overdue(date(2025, 12, 31)) == []
        assert invoice_service.get_invoice(november_invoice.id).status == INVOICE_PAID

    def test_invoices_are_scoped_to_tenant(self, temp_db, november_invoice):
        from bizledger.domain.invoice import InvoiceService

        other = InvoiceService(temp_db, tenant_id="other")
        assert other.get_invoice(november_invoice.id) is None
        assert other.list_invoices() == []


def test_card_limit_usage(card_service, invoice_service, november_invoice, sample_card):
    usage = card_service.limit_usage(sample_card.id)
    assert usage == {
        "limit": Decimal("5000.00"),
        "used": Decimal("300.00"),
        "available": Decimal("4700.00"),
    }

    invoice_service.pay_invoice(november_invoice.id, date(2025, 11, 12), amount=Decimal("100.00"))
    assert card_service.limit_usage(sample_card.id)["used"] == Decimal("200.00")
