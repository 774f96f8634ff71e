"""Tests for the client and product catalog."""

import pytest

from bizledger.cli.main import cli
from bizledger.domain.errors import ConflictError, ValidationError


def test_add_and_find_client(catalog_service):
    client_id = catalog_service.add_client("  Obsidian Ecom ")

    client = catalog_service.find_client("obsidian ecom")
    assert client.id == client_id
    assert client.name == "Obsidian Ecom"


def test_client_name_required(catalog_service):
    with pytest.raises(ValidationError):
        catalog_service.add_client("   ")


def test_duplicate_client(catalog_service):
    catalog_service.add_client("BMT")
    with pytest.raises(ConflictError):
        catalog_service.add_client("bmt")


def test_product_name_defaults_to_sku(catalog_service):
    catalog_service.add_product("H106-PTO")

    product = catalog_service.find_product(" h106-pto ")
    assert product.sku == "H106-PTO"
    assert product.name == "H106-PTO"


def test_duplicate_sku_in_other_case(catalog_service):
    catalog_service.add_product("DESK-PTO-20X20", "Mesa preta")
    with pytest.raises(ConflictError, match="already exists"):
        catalog_service.add_product("desk-pto-20x20")


def test_lists_are_sorted(catalog_service):
    catalog_service.add_product("Z1")
    catalog_service.add_product("A1")
    catalog_service.add_client("Zeta")
    catalog_service.add_client("Alfa")

    assert [p.sku for p in catalog_service.list_products()] == ["A1", "Z1"]
    assert [c.name for c in catalog_service.list_clients()] == ["Alfa", "Zeta"]


def test_catalog_commands(cli_runner, temp_db, settings):
    obj = {"db": temp_db, "settings": settings}

    result = cli_runner.invoke(cli, ["product", "add", "CH206-PTO-41", "--name", "Cadeira"], obj=obj)
    assert result.exit_code == 0
    assert "Created product 'CH206-PTO-41'" in result.output

    result = cli_runner.invoke(cli, ["product", "add", "ch206-pto-41"], obj=obj)
    assert result.exit_code == 1
    assert "already exists" in result.output

    cli_runner.invoke(cli, ["client", "add", "BMT"], obj=obj)
    result = cli_runner.invoke(cli, ["client", "list"], obj=obj)
    assert "BMT" in result.output
