"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from bizledger.cli.date_filters import resolve_cli_date_range
from bizledger.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_rejects_multiple_periods(capsys):
    period_flags = {"this-month": True, "last-month": True}

    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date=None,
            end_date=None,
            period_flags=period_flags,
        )

    assert excinfo.value.exit_code == 1
    assert "Only one period option" in capsys.readouterr().err


def test_resolve_cli_date_range_rejects_period_with_start_end(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date="2025-11-01",
            end_date=None,
            period_flags={"this-month": True},
        )

    assert excinfo.value.exit_code == 1
    assert "cannot be combined" in capsys.readouterr().err


def test_resolve_cli_date_range_returns_period_range():
    start, end = resolve_cli_date_range(
        _ctx(),
        start_date=None,
        end_date=None,
        period_flags={"last-month": True},
    )

    assert (start, end) == get_date_range("last-month")


def test_resolve_cli_date_range_parses_brazilian_dates():
    start, end = resolve_cli_date_range(
        _ctx(),
        start_date="01/11/2025",
        end_date="2025-11-30",
        period_flags={"this-month": False},
    )

    assert start == date(2025, 11, 1)
    assert end == date(2025, 11, 30)


def test_resolve_cli_date_range_rejects_bad_date(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(
            _ctx(),
            start_date="not a date",
            end_date=None,
            period_flags={},
        )

    assert "Invalid start date" in capsys.readouterr().err
