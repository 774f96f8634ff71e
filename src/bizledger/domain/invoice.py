"""Card invoice domain service.

Purchases are expanded into installment line items spread over consecutive
billing cycles. Each invoice keeps ``total_amount`` equal to the sum of its
live line items; every change to the items updates the total in the same
database transaction.
"""

import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from bizledger.database.base import Database
from bizledger.domain import billing
from bizledger.domain.card import CardService
from bizledger.domain.entities import (
    INVOICE_CLOSED,
    INVOICE_OPEN,
    INVOICE_OVERDUE,
    INVOICE_PAID,
    INVOICE_PAYMENT_ORIGIN,
    SETTLED,
    Card as CardEntity,
    Invoice as InvoiceEntity,
    InvoiceItem as InvoiceItemEntity,
)
from bizledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    amount_not_positive,
    category_not_found,
    installments_out_of_range,
    invoice_item_not_found,
    invoice_not_found,
    payment_exceeds_outstanding,
)
from bizledger.domain.transaction import TransactionService

logger = structlog.get_logger(__name__)

DEFAULT_MAX_INSTALLMENTS = 24


@dataclass(frozen=True)
class PurchaseResult:
    """Line items created for one purchase."""

    item_ids: list[int]
    invoice_ids: list[int]
    installment_group_id: Optional[str]
    amounts: list[Decimal]


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of an invoice payment."""

    invoice_id: int
    transaction_id: int
    amount: Decimal
    paid_amount: Decimal
    status: str


class InvoiceService:
    """Service for card invoices, installment purchases and payments."""

    def __init__(
        self,
        db: Database,
        tenant_id: str = "default",
        max_installments: int = DEFAULT_MAX_INSTALLMENTS,
    ):
        """Initialize invoice service.

        Args:
            db: Database instance
            tenant_id: Tenant whose cards this service manages
            max_installments: Highest installment count accepted for a purchase
        """
        self.db = db
        self.tenant_id = tenant_id
        self.max_installments = max_installments
        self.card_service = CardService(db, tenant_id)
        self.transaction_service = TransactionService(db, tenant_id)

    def add_purchase(
        self,
        card_id: int,
        description: str,
        amount: Decimal,
        purchase_date: date,
        installments: int = 1,
        category_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> PurchaseResult:
        """Add a card purchase, split into installments.

        Installment ``i`` lands on the invoice of the purchase's natural cycle
        plus ``i`` months. Invoices are created on demand.

        Args:
            card_id: Card ID
            description: Purchase description
            amount: Purchase total
            purchase_date: Purchase date
            installments: Number of installments (1..max_installments)
            category_id: Optional category ID
            notes: Optional notes

        Returns:
            PurchaseResult with the created line items

        Raises:
            NotFoundError: If card or category doesn't exist
            ValidationError: If amount or installment count is invalid
            ConflictError: If a target invoice is already paid
        """
        card = self.card_service.require_card(card_id)

        if not 1 <= installments <= self.max_installments:
            raise ValidationError(installments_out_of_range(installments, self.max_installments))
        self._check_amount(amount)
        if not description or not description.strip():
            raise ValidationError("Purchase description is required")
        if category_id is not None:
            self._check_category(category_id)

        amounts = billing.split_installments(amount, installments)
        cycles = billing.installment_cycles(purchase_date, card.closing_day, installments)
        group_id = uuid.uuid4().hex if installments > 1 else None

        item_ids: list[int] = []
        invoice_ids: list[int] = []
        with self.db.atomic():
            for number, (cycle, part) in enumerate(zip(cycles, amounts), start=1):
                invoice = self._get_or_create_invoice(card, cycle)
                if invoice.status == INVOICE_PAID:
                    raise ConflictError(
                        f"Invoice {invoice.cycle} of card '{card.nickname}' is already paid"
                    )
                item_ids.append(
                    self.db.create_invoice_item(
                        invoice_id=invoice.id,
                        description=(
                            f"{description} ({number}/{installments})"
                            if installments > 1
                            else description
                        ),
                        amount=part,
                        purchase_date=purchase_date,
                        installment_number=number,
                        installment_count=installments,
                        installment_group_id=group_id,
                        category_id=category_id,
                        notes=notes,
                    )
                )
                self.db.add_to_invoice_total(invoice.id, part)
                invoice_ids.append(invoice.id)

        logger.info(
            "purchase_added",
            card_id=card_id,
            amount=str(amount),
            installments=installments,
            first_cycle=billing.cycle_label(cycles[0]),
        )
        return PurchaseResult(
            item_ids=item_ids,
            invoice_ids=invoice_ids,
            installment_group_id=group_id,
            amounts=amounts,
        )

    def _get_or_create_invoice(self, card: CardEntity, cycle: date) -> InvoiceEntity:
        label = billing.cycle_label(cycle)
        invoice = self.db.find_invoice(card.id, label)
        if invoice is not None:
            return invoice
        invoice_id = self.db.create_invoice(
            card_id=card.id,
            cycle=label,
            closing_date=billing.closing_date(cycle, card.closing_day),
            due_date=billing.due_date(cycle, card.closing_day, card.due_day),
        )
        return self.db.get_invoice(invoice_id)

    def _check_amount(self, amount: Decimal) -> None:
        if amount <= 0:
            raise ValidationError(amount_not_positive(amount))
        if amount != amount.quantize(billing.CENT):
            raise ValidationError(f"Amount {amount} has more than two decimal places")

    def _check_category(self, category_id: int) -> None:
        category = self.db.get_category(category_id)
        if category is None or category.tenant_id not in (None, self.tenant_id):
            raise NotFoundError(category_not_found(category_id))

    def _check_total_covers_payments(self, invoice: InvoiceEntity, delta: Decimal) -> None:
        if invoice.total_amount + delta < invoice.paid_amount:
            raise ValidationError(
                f"Invoice {invoice.id} total would drop below the {invoice.paid_amount} already paid"
            )

    def _mark_paid_if_covered(self, invoice: InvoiceEntity, delta: Decimal) -> None:
        if invoice.paid_amount > 0 and invoice.total_amount + delta == invoice.paid_amount:
            self.db.update_invoice(invoice.id, status=INVOICE_PAID)

    def get_invoice(self, invoice_id: int) -> Optional[InvoiceEntity]:
        """Get invoice by ID, or None if it doesn't belong to this tenant."""
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None or self.card_service.get_card(invoice.card_id) is None:
            return None
        return invoice

    def require_invoice(self, invoice_id: int) -> InvoiceEntity:
        """Get invoice by ID or raise NotFoundError."""
        invoice = self.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice

    def list_invoices(
        self,
        card_id: Optional[int] = None,
        cycle: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[InvoiceEntity]:
        """List invoices of this tenant's cards.

        Args:
            card_id: Optional card filter
            cycle: Optional cycle label (YYYY-MM)
            status: Optional status filter
        """
        if card_id is not None:
            card_ids = [self.card_service.require_card(card_id).id]
        else:
            card_ids = [c.id for c in self.card_service.list_cards(include_inactive=True)]
        return self.db.list_invoices(card_ids=card_ids, cycle=cycle, status=status)

    def list_items(self, invoice_id: int) -> list[InvoiceItemEntity]:
        """List the live line items of an invoice."""
        self.require_invoice(invoice_id)
        return self.db.list_invoice_items(invoice_id=invoice_id)

    def list_installments(self, installment_group_id: str) -> list[InvoiceItemEntity]:
        """List the sibling installments of one purchase."""
        return self.db.list_invoice_items(installment_group_id=installment_group_id)

    def close_invoice(self, invoice_id: int) -> None:
        """Close an open invoice.

        Raises:
            NotFoundError: If invoice doesn't exist
            ConflictError: If the invoice is not open
        """
        invoice = self.require_invoice(invoice_id)
        if invoice.status != INVOICE_OPEN:
            raise ConflictError(
                f"Invoice {invoice_id} is {invoice.status}; only open invoices can be closed"
            )
        self.db.update_invoice(invoice_id, status=INVOICE_CLOSED)
        logger.info("invoice_closed", invoice_id=invoice_id, cycle=invoice.cycle)

    def pay_invoice(
        self,
        invoice_id: int,
        payment_date: date,
        amount: Optional[Decimal] = None,
        account_id: Optional[int] = None,
    ) -> PaymentResult:
        """Pay an invoice, fully or partially.

        A settled debit transaction is created on the paying account and the
        invoice's paid amount and status are updated in the same database
        transaction.

        Args:
            invoice_id: Invoice ID
            payment_date: Date of the payment
            amount: Amount to pay (defaults to the full outstanding balance)
            account_id: Paying account (defaults to the card's payment account)

        Returns:
            PaymentResult

        Raises:
            NotFoundError: If invoice or account doesn't exist
            ConflictError: If the invoice is already paid
            ValidationError: If the amount is not positive, exceeds the
                outstanding balance, or no paying account is known
        """
        invoice = self.require_invoice(invoice_id)
        if invoice.status == INVOICE_PAID:
            raise ConflictError(f"Invoice {invoice_id} is already paid")

        outstanding = invoice.outstanding
        if amount is None:
            amount = outstanding
        if amount <= 0:
            raise ValidationError(amount_not_positive(amount))
        if amount > outstanding:
            raise ValidationError(payment_exceeds_outstanding(amount, outstanding))

        card = self.card_service.require_card(invoice.card_id)
        paying_account_id = account_id if account_id is not None else card.payment_account_id
        if paying_account_id is None:
            raise ValidationError(
                f"Card '{card.nickname}' has no payment account; pass an account explicitly"
            )

        paid_amount = invoice.paid_amount + amount
        if paid_amount >= invoice.total_amount:
            status = INVOICE_PAID
        elif invoice.status == INVOICE_OVERDUE:
            status = INVOICE_OVERDUE
        else:
            status = INVOICE_CLOSED

        with self.db.atomic():
            transaction_id = self.transaction_service.create_transaction(
                description=f"Invoice payment {card.nickname} - {invoice.cycle}",
                amount=amount,
                kind="debit",
                transaction_date=payment_date,
                account_id=paying_account_id,
                status=SETTLED,
                settlement_date=payment_date,
                origin=INVOICE_PAYMENT_ORIGIN,
                reference=str(invoice_id),
            )
            self.db.update_invoice(
                invoice_id,
                paid_amount=paid_amount,
                status=status,
                payment_transaction_id=transaction_id,
            )

        logger.info(
            "invoice_paid",
            invoice_id=invoice_id,
            amount=str(amount),
            paid_amount=str(paid_amount),
            status=status,
        )
        return PaymentResult(
            invoice_id=invoice_id,
            transaction_id=transaction_id,
            amount=amount,
            paid_amount=paid_amount,
            status=status,
        )

    def refresh_overdue(self, today: Optional[date] = None) -> list[int]:
        """Mark unpaid invoices whose due date has passed as overdue.

        Args:
            today: Reference date (defaults to today)

        Returns:
            IDs of the invoices that became overdue
        """
        today = today or date.today()
        updated = []
        with self.db.atomic():
            for invoice in self.list_invoices():
                if invoice.status not in (INVOICE_OPEN, INVOICE_CLOSED):
                    continue
                if invoice.due_date < today and invoice.paid_amount < invoice.total_amount:
                    self.db.update_invoice(invoice.id, status=INVOICE_OVERDUE)
                    updated.append(invoice.id)
        if updated:
            logger.info("invoices_overdue", invoice_ids=updated)
        return updated

    def update_item(
        self,
        item_id: int,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        category_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> None:
        """Update an invoice line item, keeping the invoice total in sync.

        Raises:
            NotFoundError: If the item or category doesn't exist
            ConflictError: If the invoice is already paid
            ValidationError: If the new amount is invalid or would take the
                invoice total below what was already paid
        """
        item, invoice = self._require_live_item(item_id)
        if invoice.status == INVOICE_PAID:
            raise ConflictError(f"Items of paid invoice {invoice.id} cannot be changed")

        changes = {}
        if description is not None:
            changes["description"] = description
        if category_id is not None:
            self._check_category(category_id)
            changes["category_id"] = category_id
        if notes is not None:
            changes["notes"] = notes
        if amount is not None:
            self._check_amount(amount)
            self._check_total_covers_payments(invoice, amount - item.amount)
            changes["amount"] = amount

        with self.db.atomic():
            if changes:
                self.db.update_invoice_item(item_id, **changes)
            if amount is not None and amount != item.amount:
                self.db.add_to_invoice_total(invoice.id, amount - item.amount)
                self._mark_paid_if_covered(invoice, amount - item.amount)

    def delete_item(self, item_id: int) -> None:
        """Soft-delete an invoice line item and drop it from the invoice total.

        Raises:
            NotFoundError: If the item doesn't exist
            ConflictError: If the invoice is already paid
            ValidationError: If the invoice total would drop below what was
                already paid
        """
        item, invoice = self._require_live_item(item_id)
        if invoice.status == INVOICE_PAID:
            raise ConflictError(f"Items of paid invoice {invoice.id} cannot be deleted")
        self._check_total_covers_payments(invoice, -item.amount)

        with self.db.atomic():
            self.db.update_invoice_item(item_id, is_deleted=True)
            self.db.add_to_invoice_total(invoice.id, -item.amount)
            self._mark_paid_if_covered(invoice, -item.amount)

    def _require_live_item(self, item_id: int) -> tuple[InvoiceItemEntity, InvoiceEntity]:
        item = self.db.get_invoice_item(item_id)
        if item is None or item.is_deleted:
            raise NotFoundError(invoice_item_not_found(item_id))
        invoice = self.get_invoice(item.invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_item_not_found(item_id))
        return item, invoice
