"""SKU normalization utilities."""

import re

# The product table stores codes under these prefixes hyphen-joined
# ("DESK-PTO-20X20") while the sales sheets type them with spaces.
HYPHENATED_SKU_PREFIXES = ("DESK",)


def normalize_sku(raw: object) -> str:
    """Canonicalize a SKU as typed in a spreadsheet.

    Uppercases, removes quote characters and collapses whitespace. SKUs under
    a hyphenated prefix get their whitespace runs replaced with hyphens.

    Examples:
        'ch206-pto-41"' -> 'CH206-PTO-41'
        'desk pto 20x20' -> 'DESK-PTO-20X20'
        'h301  preto p' -> 'H301 PRETO P'
    """
    if raw is None:
        return ""
    sku = str(raw).replace('"', "").replace("'", "").strip().upper()
    for prefix in HYPHENATED_SKU_PREFIXES:
        if sku.startswith(prefix + " "):
            return re.sub(r"\s+", "-", sku)
    return re.sub(r"\s+", " ", sku)


def loose_sku_key(sku: str) -> str:
    """Key used to match SKUs that differ only in spacing or hyphenation.

    Whitespace is removed and hyphens are dropped, so "H106 PTO",
    "H106-PTO" and "h106--pto" share a key.
    """
    return re.sub(r"[\s\-]+", "", sku).upper()
