"""Utilities for resolving account, card and category names to IDs."""

from bizledger.domain.account import AccountService
from bizledger.domain.card import CardService
from bizledger.domain.category import CategoryService
from bizledger.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        pass
    else:
        if account_service.get_account(account_id) is None:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    for acc in account_service.list_accounts(include_inactive=True):
        if acc.name.lower() == str(account).lower():
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")


def resolve_card(card_service: CardService, card: str | int) -> int:
    """Resolve card nickname or ID to card ID.

    Args:
        card_service: CardService instance
        card: Card nickname or ID

    Returns:
        Card ID

    Raises:
        NotFoundError: If card is not found
    """
    try:
        card_id = int(card)
    except (ValueError, TypeError):
        pass
    else:
        if card_service.get_card(card_id) is None:
            raise NotFoundError(f"Card ID {card_id} not found")
        return card_id

    for c in card_service.list_cards(include_inactive=True):
        if c.nickname.lower() == str(card).lower():
            return c.id

    raise NotFoundError(f"Card '{card}' not found")


def resolve_category(category_service: CategoryService, category: str | int) -> int:
    """Resolve category name or ID to category ID.

    Raises:
        NotFoundError: If category is not found
    """
    try:
        category_id = int(category)
    except (ValueError, TypeError):
        pass
    else:
        if category_service.get_category(category_id) is None:
            raise NotFoundError(f"Category ID {category_id} not found")
        return category_id

    for cat in category_service.list_categories():
        if cat.name.lower() == str(category).lower():
            return cat.id

    raise NotFoundError(f"Category '{category}' not found")
