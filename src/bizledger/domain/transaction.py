"""Transaction domain service."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

import structlog

from bizledger.database.base import Database
from bizledger.domain.account import AccountService, balance_effects
from bizledger.domain.entities import (
    CANCELLED,
    FORECAST,
    INVOICE_PAYMENT_ORIGIN,
    SETTLED,
    TRANSACTION_KINDS,
    Transaction as TransactionEntity,
)
from bizledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    amount_not_positive,
    category_not_found,
    transaction_not_found,
)

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = (
    "description",
    "amount",
    "transaction_date",
    "category_id",
    "notes",
)


class TransactionService:
    """Service for managing account transactions.

    Only forecast transactions may be edited. Settling applies the
    transaction to the account balances in the same database transaction.
    """

    def __init__(self, db: Database, tenant_id: str = "default"):
        """Initialize transaction service.

        Args:
            db: Database instance
            tenant_id: Tenant whose transactions this service manages
        """
        self.db = db
        self.tenant_id = tenant_id
        self.account_service = AccountService(db, tenant_id)

    def create_transaction(
        self,
        description: str,
        amount: Decimal,
        kind: str,
        transaction_date: date,
        account_id: int,
        status: str = FORECAST,
        destination_account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        settlement_date: Optional[date] = None,
        origin: Optional[str] = "manual",
        reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a transaction.

        Args:
            description: Description
            amount: Positive magnitude; kind decides the sign
            kind: credit, debit or transfer
            transaction_date: Transaction date
            account_id: Source account ID
            status: forecast or settled
            destination_account_id: Destination account for transfers
            category_id: Optional category ID
            settlement_date: Settlement date (defaults to transaction_date when settled)
            origin: Where the transaction came from (manual, invoice, ...)
            reference: Optional reference to the originating record
            notes: Optional notes

        Returns:
            Transaction ID

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If an account or the category doesn't exist
        """
        if not description or not description.strip():
            raise ValidationError("Transaction description is required")
        if amount <= 0:
            raise ValidationError(amount_not_positive(amount))
        if kind not in TRANSACTION_KINDS:
            raise ValidationError(
                f"Invalid transaction kind '{kind}'. Valid kinds: {', '.join(TRANSACTION_KINDS)}"
            )
        if status not in (FORECAST, SETTLED):
            raise ValidationError("New transactions must be forecast or settled")

        account = self.account_service.require_account(account_id)
        if not account.is_active:
            raise ValidationError(f"Account '{account.name}' is inactive")

        if kind == "transfer":
            if destination_account_id is None:
                raise ValidationError("Transfers require a destination account")
            if destination_account_id == account_id:
                raise ValidationError("Transfer source and destination must differ")
            destination = self.account_service.require_account(destination_account_id)
            if not destination.is_active:
                raise ValidationError(f"Account '{destination.name}' is inactive")
        elif destination_account_id is not None:
            raise ValidationError("Only transfers can have a destination account")

        if category_id is not None:
            self._require_category(category_id)

        if status == SETTLED and settlement_date is None:
            settlement_date = transaction_date

        with self.db.atomic():
            transaction_id = self.db.create_transaction(
                tenant_id=self.tenant_id,
                description=description,
                amount=amount,
                kind=kind,
                transaction_date=transaction_date,
                account_id=account_id,
                status=status,
                settlement_date=settlement_date if status == SETTLED else None,
                destination_account_id=destination_account_id,
                category_id=category_id,
                origin=origin,
                reference=reference,
                notes=notes,
            )
            if status == SETTLED:
                self._apply(self.db.get_transaction(transaction_id), reverse=False)

        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None or txn.tenant_id != self.tenant_id:
            return None
        return txn

    def list_transactions(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List transactions with optional filters."""
        return self.db.list_transactions(
            self.tenant_id,
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            status=status,
        )

    def update_transaction(self, transaction_id: int, **changes: Any) -> None:
        """Update a forecast transaction.

        Args:
            transaction_id: Transaction ID
            **changes: New values for description, amount, transaction_date,
                category_id or notes

        Raises:
            NotFoundError: If transaction doesn't exist
            ConflictError: If the transaction is no longer a forecast
            ValidationError: If a field can't be edited or is invalid
        """
        txn = self._require_transaction(transaction_id)
        if txn.status != FORECAST:
            raise ConflictError(
                f"Transaction {transaction_id} is {txn.status}; only forecast transactions can be edited"
            )

        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        if "amount" in changes and changes["amount"] <= 0:
            raise ValidationError(amount_not_positive(changes["amount"]))
        if changes.get("category_id") is not None:
            self._require_category(changes["category_id"])

        if changes:
            self.db.update_transaction(transaction_id, **changes)

    def settle_transaction(self, transaction_id: int, settlement_date: Optional[date] = None) -> None:
        """Settle a forecast transaction and apply it to the account balances.

        Args:
            transaction_id: Transaction ID
            settlement_date: Settlement date (defaults to the transaction date)

        Raises:
            NotFoundError: If transaction doesn't exist
            ConflictError: If the transaction is already settled or cancelled
        """
        txn = self._require_transaction(transaction_id)
        if txn.status != FORECAST:
            raise ConflictError(f"Transaction {transaction_id} is already {txn.status}")

        with self.db.atomic():
            self.db.update_transaction(
                transaction_id,
                status=SETTLED,
                settlement_date=settlement_date or txn.transaction_date,
            )
            self._apply(txn, reverse=False)

        logger.info("transaction_settled", transaction_id=transaction_id, amount=str(txn.amount))

    def cancel_transaction(self, transaction_id: int) -> None:
        """Cancel a transaction.

        Settled transactions are kept for history; their balance effect is
        reversed in the same database transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
            ConflictError: If the transaction is already cancelled or pays an
                invoice
        """
        txn = self._require_transaction(transaction_id)
        if txn.status == CANCELLED:
            raise ConflictError(f"Transaction {transaction_id} is already cancelled")
        if txn.origin == INVOICE_PAYMENT_ORIGIN:
            raise ConflictError(
                f"Transaction {transaction_id} pays invoice {txn.reference} and cannot be cancelled"
            )

        with self.db.atomic():
            self.db.update_transaction(transaction_id, status=CANCELLED)
            if txn.status == SETTLED:
                self._apply(txn, reverse=True)

        logger.info("transaction_cancelled", transaction_id=transaction_id, was=txn.status)

    def _apply(self, txn: TransactionEntity, reverse: bool) -> None:
        for account_id, delta in balance_effects(txn):
            self.db.adjust_account_balance(account_id, -delta if reverse else delta)

    def _require_transaction(self, transaction_id: int) -> TransactionEntity:
        txn = self.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def _require_category(self, category_id: int) -> None:
        category = self.db.get_category(category_id)
        if category is None or category.tenant_id not in (None, self.tenant_id):
            raise NotFoundError(category_not_found(category_id))
