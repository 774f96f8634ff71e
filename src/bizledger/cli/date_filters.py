"""CLI helpers for date range resolution."""

from datetime import date

import click

from bizledger.utils.date_parser import get_date_range, parse_date


def date_range_options(command):
    """Attach --start-date/--end-date and the period flags to a command."""
    options = [
        click.option("--start-date", help="Start date (YYYY-MM-DD, DD/MM/YYYY or 'today')"),
        click.option("--end-date", help="End date (YYYY-MM-DD, DD/MM/YYYY or 'today')"),
        click.option("--this-month", is_flag=True, help="Only the current month"),
        click.option("--last-month", is_flag=True, help="Only the previous month"),
        click.option("--this-year", is_flag=True, help="Only the current year"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--this-month, --last-month, --this-year) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                return get_date_range(period)

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    return start, end
