"""Tests for category service."""

import pytest

from bizledger.domain.category import CategoryService
from bizledger.domain.errors import NotFoundError, ValidationError


def test_create_and_path(category_service):
    parent_id = category_service.create_category("Produção")
    child_id = category_service.create_category("Matéria-prima", parent_id=parent_id)

    assert category_service.format_category_path(child_id) == "Produção > Matéria-prima"
    assert category_service.format_category_path(parent_id) == "Produção"


def test_hierarchy_is_single_level(category_service):
    parent_id = category_service.create_category("Produção")
    child_id = category_service.create_category("Matéria-prima", parent_id=parent_id)

    with pytest.raises(ValidationError, match="already a subcategory"):
        category_service.create_category("Tecido", parent_id=child_id)


def test_unknown_parent(category_service):
    with pytest.raises(NotFoundError):
        category_service.create_category("Tecido", parent_id=99)


def test_invalid_kind(category_service):
    with pytest.raises(ValidationError, match="Invalid category kind"):
        category_service.create_category("Tecido", kind="asset")


def test_global_categories_are_shared(temp_db, category_service):
    global_id = category_service.create_category("Impostos", is_global=True)
    local_id = category_service.create_category("Marketing")

    other = CategoryService(temp_db, tenant_id="other")
    assert other.get_category(global_id) is not None
    assert other.get_category(local_id) is None
    assert [c.name for c in other.list_categories()] == ["Impostos"]


def test_list_by_kind(category_service):
    category_service.create_category("Vendas", kind="income")
    category_service.create_category("Aluguel", kind="expense")

    assert [c.name for c in category_service.list_categories(kind="income")] == ["Vendas"]
