"""Spreadsheet reading utilities."""

import zipfile
from pathlib import Path
from typing import Any, Union

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from bizledger.domain.errors import ExternalError, NotFoundError, ValidationError


def read_sheet_rows(path: Union[str, Path], sheet_name: str) -> list[tuple[Any, ...]]:
    """Read every row of a workbook sheet as a tuple of cell values.

    Rows are returned from the first sheet row, so list indexes match the
    sheet's 0-based row numbers. Cells hold the cached values of formulas.

    Args:
        path: Path to an .xlsx workbook
        sheet_name: Sheet tab name, matched exactly first and then
            case-insensitively

    Returns:
        List of row tuples

    Raises:
        NotFoundError: If the file doesn't exist
        ValidationError: If the sheet is missing
        ExternalError: If the file can't be read as a workbook
    """
    path = Path(path)
    if not path.exists():
        raise NotFoundError(f"Workbook not found: {path}")

    try:
        workbook = load_workbook(path, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError) as e:
        raise ExternalError(f"Could not read workbook {path}: {e}") from e

    try:
        sheet = _find_sheet(workbook, sheet_name)
        return list(sheet.values)
    finally:
        workbook.close()


def _find_sheet(workbook, sheet_name: str):
    if sheet_name in workbook.sheetnames:
        return workbook[sheet_name]
    for name in workbook.sheetnames:
        if name.lower() == sheet_name.lower():
            return workbook[name]
    raise ValidationError(
        f"Sheet '{sheet_name}' not found. Available sheets: {', '.join(workbook.sheetnames)}"
    )
