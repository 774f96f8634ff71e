"""Utility functions for bizledger."""

from bizledger.utils.date_parser import parse_date, parse_sheet_date
from bizledger.utils.amount_parser import parse_amount, parse_brl_amount
from bizledger.utils.sku import normalize_sku, loose_sku_key

__all__ = [
    "parse_date",
    "parse_sheet_date",
    "parse_amount",
    "parse_brl_amount",
    "normalize_sku",
    "loose_sku_key",
]
