"""Client and product catalog service."""

from typing import Optional

from bizledger.database.base import Database
from bizledger.domain.entities import Client, Product
from bizledger.domain.errors import ConflictError, ValidationError


class CatalogService:
    """Service for the client and product tables sales are reconciled against.

    Lookups are exact but case-insensitive. Product SKUs are stored as typed.
    """

    def __init__(self, db: Database):
        """Initialize catalog service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_client(self, name: str) -> int:
        """Add a client.

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a client with this name exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Client name is required")
        if self.db.find_client_by_name(name) is not None:
            raise ConflictError(f"Client '{name}' already exists")
        return self.db.create_client(name)

    def find_client(self, name: str) -> Optional[Client]:
        return self.db.find_client_by_name(name.strip())

    def list_clients(self) -> list[Client]:
        return self.db.list_clients()

    def add_product(self, sku: str, name: Optional[str] = None) -> int:
        """Add a product.

        Args:
            sku: Product SKU
            name: Display name (defaults to the SKU)

        Raises:
            ValidationError: If the SKU is empty
            ConflictError: If the SKU exists in any letter case
        """
        sku = (sku or "").strip()
        if not sku:
            raise ValidationError("Product SKU is required")
        if self.db.find_product_by_sku(sku) is not None:
            raise ConflictError(f"Product with SKU '{sku}' already exists")
        return self.db.create_product(sku, name or sku)

    def find_product(self, sku: str) -> Optional[Product]:
        return self.db.find_product_by_sku(sku.strip())

    def list_products(self) -> list[Product]:
        return self.db.list_products()
