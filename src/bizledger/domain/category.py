"""Category domain service."""

from typing import Optional

from bizledger.database.base import Database
from bizledger.domain.entities import CATEGORY_KINDS, Category as CategoryEntity
from bizledger.domain.errors import NotFoundError, ValidationError, category_not_found


class CategoryService:
    """Service for managing categories.

    Categories form a single-level hierarchy: a parent cannot itself have a
    parent. Global categories are visible to every tenant.
    """

    def __init__(self, db: Database, tenant_id: str = "default"):
        """Initialize category service.

        Args:
            db: Database instance
            tenant_id: Tenant whose categories this service manages
        """
        self.db = db
        self.tenant_id = tenant_id

    def create_category(
        self,
        name: str,
        kind: str = "expense",
        parent_id: Optional[int] = None,
        is_global: bool = False,
    ) -> int:
        """Create a category.

        Args:
            name: Category name
            kind: expense, income or transfer
            parent_id: Optional parent category ID
            is_global: Share the category with every tenant

        Returns:
            Category ID

        Raises:
            ValidationError: If the kind is unknown or the parent is a subcategory
            NotFoundError: If parent category doesn't exist
        """
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        if kind not in CATEGORY_KINDS:
            raise ValidationError(
                f"Invalid category kind '{kind}'. Valid kinds: {', '.join(CATEGORY_KINDS)}"
            )

        if parent_id is not None:
            parent = self.get_category(parent_id)
            if parent is None:
                raise NotFoundError(category_not_found(parent_id))
            if parent.parent_id is not None:
                raise ValidationError(
                    f"Category '{parent.name}' is already a subcategory and cannot have children"
                )

        return self.db.create_category(
            tenant_id=None if is_global else self.tenant_id,
            name=name,
            kind=kind,
            parent_id=parent_id,
        )

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get a category visible to this tenant, or None."""
        category = self.db.get_category(category_id)
        if category is None or category.tenant_id not in (None, self.tenant_id):
            return None
        return category

    def list_categories(self, kind: Optional[str] = None) -> list[CategoryEntity]:
        """List tenant and global categories, optionally filtered by kind."""
        return self.db.list_categories(self.tenant_id, kind=kind)

    def format_category_path(self, category_id: int) -> str:
        """Get full path for a category (e.g., "Produção > Matéria-prima")."""
        cat = self.get_category(category_id)
        if cat is None:
            return ""
        if cat.parent_id is None:
            return cat.name
        parent = self.get_category(cat.parent_id)
        return f"{parent.name} > {cat.name}" if parent else cat.name
