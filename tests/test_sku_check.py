"""Tests for SKU verification."""

import pytest

from bizledger.domain.sku_check import SkuVerificationService


@pytest.fixture
def catalog(catalog_service):
    catalog_service.add_product("CH206-PTO-41", "Chinelo 206 preto 41")
    catalog_service.add_product("H106-PTO", "Bolsa 106 preta")
    catalog_service.add_product("DESK-PTO-20X20", "Desk pad preto")
    return catalog_service


def test_verify_buckets(temp_db, catalog):
    report = SkuVerificationService(temp_db).verify(
        ["ch206-pto-41", "H106 PTO", "DESK PTO 20X20", "H999", "H106--PTO"]
    )

    assert {sku: p.sku for sku, p in report.by_case.items()} == {"ch206-pto-41": "CH206-PTO-41"}
    assert {sku: p.sku for sku, p in report.by_format.items()} == {
        "H106 PTO": "H106-PTO",
        "DESK PTO 20X20": "DESK-PTO-20X20",
        "H106--PTO": "H106-PTO",
    }
    assert report.missing == ["H999"]


def test_verify_ignores_blanks_and_duplicates(temp_db, catalog):
    report = SkuVerificationService(temp_db).verify(["H999", " ", "H999 "])
    assert report.missing == ["H999"]


def test_verify_is_read_only(temp_db, catalog):
    before = temp_db.list_products()
    SkuVerificationService(temp_db).verify(["H106 PTO", "NOPE"])
    assert temp_db.list_products() == before
