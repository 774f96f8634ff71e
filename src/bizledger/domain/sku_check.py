"""Read-only verification of SKUs against the product catalog."""

from dataclasses import dataclass, field
from typing import Iterable

from bizledger.database.base import Database
from bizledger.domain.entities import Product
from bizledger.utils.sku import loose_sku_key


@dataclass
class SkuVerification:
    """SKUs sorted into the three match buckets.

    ``by_case`` and ``by_format`` map each searched SKU to the catalog
    product it resolved to.
    """

    by_case: dict[str, Product] = field(default_factory=dict)
    by_format: dict[str, Product] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)


class SkuVerificationService:
    """Match SKUs against the catalog, first exactly and then loosely."""

    def __init__(self, db: Database):
        self.db = db

    def verify(self, skus: Iterable[str]) -> SkuVerification:
        """Sort SKUs into match buckets.

        A SKU resolves "by case" when a product has the same SKU ignoring
        case, and "by format" when the SKUs only differ in spaces or hyphens.
        Nothing is written to the database.

        Args:
            skus: SKUs to look up

        Returns:
            SkuVerification
        """
        result = SkuVerification()
        loose_index: dict[str, Product] = {}
        for product in self.db.list_products():
            loose_index.setdefault(loose_sku_key(product.sku), product)

        for sku in dict.fromkeys(s.strip() for s in skus):
            if not sku:
                continue
            product = self.db.find_product_by_sku(sku)
            if product is not None:
                result.by_case[sku] = product
                continue
            product = loose_index.get(loose_sku_key(sku))
            if product is not None:
                result.by_format[sku] = product
            else:
                result.missing.append(sku)
        return result
