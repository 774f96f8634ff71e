"""Account management commands."""

from decimal import Decimal

import click

from bizledger.cli.account_resolution import resolve_account_or_exit
from bizledger.cli.date_filters import date_range_options, resolve_cli_date_range
from bizledger.cli.error_handling import confirm_or_abort, handle_domain_error
from bizledger.domain.account import AccountService
from bizledger.domain.entities import ACCOUNT_TYPES, TRANSACTION_STATUSES
from bizledger.domain.errors import DomainError
from bizledger.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    default="checking",
    help="Account type (default: checking)",
)
@click.option("--opening-balance", default="0", help="Opening balance (e.g., 1500.00 or 'R$ 1.500,00')")
@click.pass_context
def create_account(ctx, name: str, account_type: str, opening_balance: str):
    """Create a new account.

    Examples:
        bizledger account create "Itaú PJ"
        bizledger account create "Caixa" --type cash --opening-balance 250,00
    """
    service = AccountService(ctx.obj["db"], ctx.obj["settings"].tenant_id)

    try:
        balance = parse_amount(opening_balance)
        account_id = service.create_account(
            name=name, account_type=account_type.lower(), opening_balance=balance
        )
        click.echo(f"Created account '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List accounts with their current balances."""
    service = AccountService(ctx.obj["db"], ctx.obj["settings"].tenant_id)

    accounts = service.list_accounts(include_inactive=include_inactive)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    for acc in accounts:
        flag = "" if acc.is_active else " (inactive)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type:10s} | "
            f"Balance: {acc.current_balance:>12,.2f}{flag}"
        )


@account_group.command("statement")
@click.argument("account", metavar="ACCOUNT")
@date_range_options
@click.option(
    "--status",
    type=click.Choice(TRANSACTION_STATUSES, case_sensitive=False),
    help="Only transactions with this status",
)
@click.pass_context
def account_statement(
    ctx,
    account: str,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    status: str | None,
) -> None:
    """Show an account's transactions.

    ACCOUNT can be an account name or ID.

    Examples:
        bizledger account statement "Itaú PJ" --this-month
        bizledger account statement 1 --start-date 2025-11-01 --status settled
    """
    service = AccountService(ctx.obj["db"], ctx.obj["settings"].tenant_id)
    account_id = resolve_account_or_exit(ctx, service, account)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "last-month": last_month,
            "this-year": this_year,
        },
    )

    try:
        statement = service.statement(account_id, start_date=start, end_date=end, status=status)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    acc = statement["account"]
    click.echo(f"\nStatement for '{acc.name}'")
    click.echo(f"Opening balance: {acc.opening_balance:,.2f}")
    click.echo(f"Current balance: {acc.current_balance:,.2f}")
    click.echo("-" * 80)

    transactions = statement["transactions"]
    if not transactions:
        click.echo("No transactions found.")
        return

    total = Decimal("0")
    for txn in transactions:
        signed = txn.signed_amount if txn.account_id == account_id else txn.amount
        if txn.status != "cancelled":
            total += signed
        click.echo(
            f"{txn.transaction_date} | ID: {txn.id:4d} | {txn.description[:32]:32s} | "
            f"{signed:>12,.2f} | {txn.status}"
        )
    click.echo("-" * 80)
    click.echo(f"Net movement: {total:,.2f}")


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def deactivate_account(ctx, account: str, yes: bool) -> None:
    """Deactivate an account.

    Deactivated accounts keep their history but cannot receive new
    transactions.
    """
    service = AccountService(ctx.obj["db"], ctx.obj["settings"].tenant_id)
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not confirm_or_abort(f"Deactivate account '{account_obj.name}' (ID: {account_id})?", yes):
        click.echo("Deactivation cancelled.")
        return

    try:
        service.deactivate_account(account_id)
        click.echo(f"Deactivated account '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
