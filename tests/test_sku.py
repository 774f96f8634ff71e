"""Tests for SKU normalization."""

import pytest

from bizledger.utils.sku import loose_sku_key, normalize_sku


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('ch206-pto-41"', "CH206-PTO-41"),
        ("desk pto 20x20", "DESK-PTO-20X20"),
        ("DESK  MAR   90x40", "DESK-MAR-90X40"),
        ("h301  preto p", "H301 PRETO P"),
        ("  'h106 pto'  ", "H106 PTO"),
        ("desktop", "DESKTOP"),
        (None, ""),
        ("   ", ""),
    ],
)
def test_normalize_sku(raw, expected):
    assert normalize_sku(raw) == expected


def test_loose_sku_key_ignores_spaces_and_hyphens():
    assert loose_sku_key("H106 PTO") == loose_sku_key("h106-pto") == loose_sku_key("H106--PTO")
    assert loose_sku_key("H106 PTO") != loose_sku_key("H106 MAR")
