"""Date parsing utilities."""

import re
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from bizledger.domain.errors import ValidationError

# Spreadsheet serial dates count days from this epoch (1900 date system
# including the phantom 1900-02-29, which the epoch shift absorbs).
SPREADSHEET_EPOCH = date(1899, 12, 30)

_DAY_MONTH_RE = re.compile(r"^(\d{1,2})[./](\d{1,2})$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2025-11-05", "05/11/2025" (day first), etc.
    - Relative dates: "today", "yesterday", "tomorrow"

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValidationError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        dt = date_parser.parse(date_str, dayfirst=not re.match(r"^\d{4}-", date_str))
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str}': {e}") from e


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Args:
        period: Period string (this-month, last-month, this-year)

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValidationError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        # Day before the first day of the current month
        end_date = today.replace(day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    raise ValidationError(
        f"Unknown period: '{period}'. Supported periods: this-month, last-month, this-year"
    )


def parse_sheet_date(value: Any, year: int) -> Optional[date]:
    """Parse a sales spreadsheet date cell.

    Accepts "DD.MM" or "DD/MM" text (the year comes from ``year``), native
    date/datetime values, and spreadsheet serial numbers.

    Args:
        value: Cell value
        year: Year applied to day/month text

    Returns:
        Date, or None when the cell is empty or not a recognizable date
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float, Decimal)):
        # NaN, infinities and serials past year 9999 are not dates
        try:
            days = int(value)
            return SPREADSHEET_EPOCH + timedelta(days=days) if days > 0 else None
        except (ValueError, OverflowError):
            return None

    match = _DAY_MONTH_RE.match(str(value).strip())
    if match is None:
        return None
    day, month = int(match.group(1)), int(match.group(2))
    try:
        return date(year, month, day)
    except ValueError:
        return None
