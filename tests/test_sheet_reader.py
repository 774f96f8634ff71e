"""Tests for workbook reading."""

from datetime import datetime

import pytest
from openpyxl import Workbook

from bizledger.domain.errors import ExternalError, NotFoundError, ValidationError
from bizledger.utils.sheet_reader import read_sheet_rows


@pytest.fixture
def workbook_path(tmp_path):
    wb = Workbook()
    wb.active.title = "out"
    ws = wb.create_sheet("NOV")
    ws.append([None, "Vendas"])
    ws.append([])
    ws.append([None, "Data", "Cliente", "Código"])
    ws.append([None, datetime(2025, 11, 5), "BMT", "A1"])
    path = tmp_path / "vendas.xlsx"
    wb.save(path)
    return path


def test_rows_keep_sheet_positions(workbook_path):
    rows = read_sheet_rows(workbook_path, "NOV")

    assert len(rows) == 4
    assert rows[2][1] == "Data"
    assert rows[3][1] == datetime(2025, 11, 5)
    assert rows[3][3] == "A1"


def test_sheet_name_falls_back_to_case_insensitive(workbook_path):
    assert len(read_sheet_rows(workbook_path, "nov")) == 4


def test_missing_sheet(workbook_path):
    with pytest.raises(ValidationError, match="Available sheets: out, NOV"):
        read_sheet_rows(workbook_path, "dez")


def test_missing_file(tmp_path):
    with pytest.raises(NotFoundError):
        read_sheet_rows(tmp_path / "nope.xlsx", "nov")


def test_unreadable_file(tmp_path):
    path = tmp_path / "broken.xlsx"
    path.write_text("not a workbook")
    with pytest.raises(ExternalError):
        read_sheet_rows(path, "nov")
