"""Card domain service."""

from decimal import Decimal
from typing import Optional

from bizledger.database.base import Database
from bizledger.domain.account import AccountService
from bizledger.domain.entities import UNPAID_INVOICE_STATUSES, Card as CardEntity
from bizledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    card_not_found,
)


class CardService:
    """Service for managing credit cards."""

    def __init__(self, db: Database, tenant_id: str = "default"):
        """Initialize card service.

        Args:
            db: Database instance
            tenant_id: Tenant whose cards this service manages
        """
        self.db = db
        self.tenant_id = tenant_id
        self.account_service = AccountService(db, tenant_id)

    def create_card(
        self,
        nickname: str,
        closing_day: int,
        due_day: int,
        credit_limit: Decimal = Decimal("0"),
        brand: Optional[str] = None,
        last_digits: Optional[str] = None,
        payment_account_id: Optional[int] = None,
    ) -> int:
        """Create a new card.

        Args:
            nickname: Card nickname
            closing_day: Statement closing day-of-month (1-31)
            due_day: Due day-of-month, strictly after the closing day
            credit_limit: Credit limit
            brand: Card brand
            last_digits: Last four digits of the card number
            payment_account_id: Account invoices are paid from

        Returns:
            Card ID

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If the payment account doesn't exist
            ConflictError: If the nickname is already used
        """
        if not nickname or not nickname.strip():
            raise ValidationError("Card nickname is required")
        for label, day in (("Closing day", closing_day), ("Due day", due_day)):
            if not 1 <= day <= 31:
                raise ValidationError(f"{label} must be between 1 and 31, got {day}")
        if due_day <= closing_day:
            raise ValidationError(
                f"Due day ({due_day}) must be after the closing day ({closing_day})"
            )
        if credit_limit < 0:
            raise ValidationError("Credit limit cannot be negative")
        if last_digits is not None and not (len(last_digits) == 4 and last_digits.isdigit()):
            raise ValidationError("Last digits must be exactly 4 digits")
        if payment_account_id is not None:
            self.account_service.require_account(payment_account_id)

        for card in self.db.list_cards(self.tenant_id, include_inactive=True):
            if card.nickname == nickname:
                raise ConflictError(f"Card with nickname '{nickname}' already exists")

        return self.db.create_card(
            tenant_id=self.tenant_id,
            nickname=nickname,
            closing_day=closing_day,
            due_day=due_day,
            credit_limit=credit_limit,
            brand=brand,
            last_digits=last_digits,
            payment_account_id=payment_account_id,
        )

    def get_card(self, card_id: int) -> Optional[CardEntity]:
        """Get card by ID, or None if not found in this tenant."""
        card = self.db.get_card(card_id)
        if card is None or card.tenant_id != self.tenant_id:
            return None
        return card

    def require_card(self, card_id: int) -> CardEntity:
        """Get card by ID or raise NotFoundError."""
        card = self.get_card(card_id)
        if card is None:
            raise NotFoundError(card_not_found(card_id))
        return card

    def list_cards(self, include_inactive: bool = False) -> list[CardEntity]:
        """List cards."""
        return self.db.list_cards(self.tenant_id, include_inactive=include_inactive)

    def limit_usage(self, card_id: int) -> dict[str, Decimal]:
        """Get how much of a card's limit is in use.

        The used limit is the outstanding balance of every unpaid invoice.

        Returns:
            Dict with limit, used and available amounts
        """
        card = self.require_card(card_id)
        used = sum(
            (
                inv.outstanding
                for inv in self.db.list_invoices(card_ids=[card_id])
                if inv.status in UNPAID_INVOICE_STATUSES
            ),
            Decimal("0"),
        )
        return {
            "limit": card.credit_limit,
            "used": used,
            "available": card.credit_limit - used,
        }
