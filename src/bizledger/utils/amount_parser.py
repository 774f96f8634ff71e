"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Any

from bizledger.domain.errors import ValidationError

ZERO = Decimal("0")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-entered amount into a Decimal.

    Accepts both "1234.56" and Brazilian "1.234,56" notation, with an
    optional "R$" marker.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValidationError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    if "," in amount_str:
        return parse_brl_amount(amount_str)

    cleaned = re.sub(r"[R$\s]", "", amount_str)
    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValidationError(f"Could not parse amount '{amount_str}'") from e


def parse_brl_amount(value: Any) -> Decimal:
    """Parse a spreadsheet currency cell into a Decimal.

    Handles:
    - "R$ 1.234,56" -> 1234.56
    - "-R$ 238,00" -> -238.00
    - "R$ -", "" and None -> 0
    - numbers, which spreadsheets already store as plain values

    Args:
        value: Cell value

    Returns:
        Decimal amount

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise ValidationError(f"Could not parse amount '{value}'")
    if isinstance(value, (int, float, Decimal)):
        amount = Decimal(str(value))
    else:
        text = str(value).replace('"', "").replace("'", "").replace("R$", "")
        text = re.sub(r"\s+", "", text)
        if text in ("", "-"):
            return ZERO

        # "." separates thousands and "," is the decimal point
        text = text.replace(".", "").replace(",", ".")
        try:
            amount = Decimal(text)
        except InvalidOperation as e:
            raise ValidationError(f"Could not parse amount '{value}'") from e

    if not amount.is_finite():
        raise ValidationError(f"Could not parse amount '{value}'")
    return amount
