"""Account domain service."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from bizledger.database.base import Database
from bizledger.domain.entities import (
    ACCOUNT_TYPES,
    SETTLED,
    Account as AccountEntity,
    Transaction as TransactionEntity,
)
from bizledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
)


def balance_effects(txn: TransactionEntity) -> list[tuple[int, Decimal]]:
    """Return the (account_id, delta) pairs a settled transaction applies.

    Transfers debit the source account and credit the destination account.
    """
    effects = [(txn.account_id, txn.signed_amount)]
    if txn.kind == "transfer" and txn.destination_account_id is not None:
        effects.append((txn.destination_account_id, txn.amount))
    return effects


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database, tenant_id: str = "default"):
        """Initialize account service.

        Args:
            db: Database instance
            tenant_id: Tenant whose accounts this service manages
        """
        self.db = db
        self.tenant_id = tenant_id

    def create_account(
        self,
        name: str,
        account_type: str = "checking",
        opening_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new account.

        Args:
            name: Display name
            account_type: One of checking, savings, investment, cash, wallet
            opening_balance: Balance the account starts with

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is empty or the type is unknown
            ConflictError: If account name already exists
        """
        if not name or not name.strip():
            raise ValidationError("Account name is required")
        if account_type not in ACCOUNT_TYPES:
            raise ValidationError(
                f"Invalid account type '{account_type}'. Valid types: {', '.join(ACCOUNT_TYPES)}"
            )

        for acc in self.db.list_accounts(self.tenant_id, include_inactive=True):
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        return self.db.create_account(
            tenant_id=self.tenant_id,
            name=name,
            account_type=account_type,
            opening_balance=opening_balance,
        )

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found in this tenant
        """
        account = self.db.get_account(account_id)
        if account is None or account.tenant_id != self.tenant_id:
            return None
        return account

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, include_inactive: bool = False) -> list[AccountEntity]:
        """List accounts.

        Args:
            include_inactive: Also return deactivated accounts

        Returns:
            List of account entities
        """
        return self.db.list_accounts(self.tenant_id, include_inactive=include_inactive)

    def rename_account(self, account_id: int, name: str) -> None:
        """Rename an account.

        Raises:
            NotFoundError: If account not found
            ConflictError: If the name is taken by another account
        """
        self.require_account(account_id)

        for acc in self.db.list_accounts(self.tenant_id, include_inactive=True):
            if acc.id != account_id and acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        self.db.update_account(account_id, name=name)

    def deactivate_account(self, account_id: int) -> None:
        """Deactivate an account.

        Accounts are never deleted so their history stays intact; inactive
        accounts cannot receive new transactions.

        Raises:
            NotFoundError: If account not found
        """
        self.require_account(account_id)
        self.db.update_account(account_id, is_active=False)

    def computed_balance(self, account_id: int) -> Decimal:
        """Recompute the realized balance from the settled transactions.

        Args:
            account_id: Account ID

        Returns:
            Opening balance plus the effect of every settled transaction
        """
        account = self.require_account(account_id)
        balance = account.opening_balance
        for txn in self.db.list_transactions(self.tenant_id, account_id=account_id, status=SETTLED):
            for effect_account_id, delta in balance_effects(txn):
                if effect_account_id == account_id:
                    balance += delta
        return balance

    def statement(
        self,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[str] = None,
    ) -> dict[str, Any]:
        """Get an account statement.

        Args:
            account_id: Account ID
            start_date: Optional first transaction date
            end_date: Optional last transaction date
            status: Optional transaction status filter

        Returns:
            Dict with the account entity and its matching transactions

        Raises:
            NotFoundError: If account not found
        """
        account = self.require_account(account_id)
        transactions = self.db.list_transactions(
            self.tenant_id,
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            status=status,
        )
        return {"account": account, "transactions": transactions}
