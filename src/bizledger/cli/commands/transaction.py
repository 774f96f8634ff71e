"""Transaction management commands."""

import click

from bizledger.cli.account_resolution import resolve_account_or_exit
from bizledger.cli.date_filters import date_range_options, resolve_cli_date_range
from bizledger.cli.error_handling import handle_domain_error
from bizledger.domain.category import CategoryService
from bizledger.domain.entities import FORECAST, SETTLED, TRANSACTION_KINDS, TRANSACTION_STATUSES
from bizledger.domain.errors import DomainError
from bizledger.domain.transaction import TransactionService
from bizledger.utils.account_resolver import resolve_category
from bizledger.utils.amount_parser import parse_amount
from bizledger.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage account transactions."""
    pass


@transaction_group.command("add")
@click.argument("description")
@click.argument("amount")
@click.option("--account", required=True, help="Account name or ID")
@click.option(
    "--kind",
    type=click.Choice(TRANSACTION_KINDS, case_sensitive=False),
    default="debit",
    help="credit, debit or transfer (default: debit)",
)
@click.option("--to", "destination", help="Destination account name or ID (transfers only)")
@click.option("--date", "txn_date", default="today", help="Transaction date (default: today)")
@click.option("--settled", is_flag=True, help="Record as settled instead of forecast")
@click.option("--category", help="Category name or ID")
@click.option("--notes", help="Notes")
@click.pass_context
def add_transaction(
    ctx,
    description: str,
    amount: str,
    account: str,
    kind: str,
    destination: str | None,
    txn_date: str,
    settled: bool,
    category: str | None,
    notes: str | None,
) -> None:
    """Add a transaction.

    AMOUNT is a positive value; --kind decides whether it enters or leaves
    the account.

    Examples:
        bizledger transaction add "Aluguel" 3500 --account "Itaú PJ"
        bizledger transaction add "Recebimento cliente" "R$ 1.200,00" --account 1 --kind credit --settled
        bizledger transaction add "Reserva" 1000 --account 1 --kind transfer --to "Poupança"
    """
    db = ctx.obj["db"]
    tenant_id = ctx.obj["settings"].tenant_id
    service = TransactionService(db, tenant_id)

    account_id = resolve_account_or_exit(ctx, service.account_service, account)
    destination_id = None
    if destination is not None:
        destination_id = resolve_account_or_exit(ctx, service.account_service, destination)

    try:
        category_id = (
            resolve_category(CategoryService(db, tenant_id), category) if category else None
        )
        transaction_id = service.create_transaction(
            description=description,
            amount=parse_amount(amount),
            kind=kind,
            transaction_date=parse_date(txn_date),
            account_id=account_id,
            status=SETTLED if settled else FORECAST,
            destination_account_id=destination_id,
            category_id=category_id,
            notes=notes,
        )
        click.echo(f"Created transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--description", help="Transaction description")
@click.option("--amount", help="Transaction amount")
@click.option("--date", "txn_date", help="Transaction date")
@click.option("--category", help="Category name or ID")
@click.option("--notes", help="Notes")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    description: str | None,
    amount: str | None,
    txn_date: str | None,
    category: str | None,
    notes: str | None,
) -> None:
    """Update a forecast transaction.

    Updates only the fields that are provided. Settled and cancelled
    transactions cannot be edited.
    """
    db = ctx.obj["db"]
    tenant_id = ctx.obj["settings"].tenant_id
    service = TransactionService(db, tenant_id)

    try:
        changes = {}
        if description is not None:
            changes["description"] = description
        if amount is not None:
            changes["amount"] = parse_amount(amount)
        if txn_date is not None:
            changes["transaction_date"] = parse_date(txn_date)
        if category is not None:
            changes["category_id"] = resolve_category(CategoryService(db, tenant_id), category)
        if notes is not None:
            changes["notes"] = notes
        service.update_transaction(transaction_id, **changes)
        click.echo(f"Updated transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("settle")
@click.argument("transaction_id", type=int)
@click.option("--date", "settlement_date", help="Settlement date (default: transaction date)")
@click.pass_context
def settle_transaction(ctx, transaction_id: int, settlement_date: str | None) -> None:
    """Settle a forecast transaction and update the account balance."""
    service = TransactionService(ctx.obj["db"], ctx.obj["settings"].tenant_id)

    try:
        service.settle_transaction(
            transaction_id,
            settlement_date=parse_date(settlement_date) if settlement_date else None,
        )
        click.echo(f"Settled transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("cancel")
@click.argument("transaction_id", type=int)
@click.pass_context
def cancel_transaction(ctx, transaction_id: int) -> None:
    """Cancel a transaction.

    Cancelling a settled transaction reverses its effect on the balance.
    """
    service = TransactionService(ctx.obj["db"], ctx.obj["settings"].tenant_id)

    try:
        service.cancel_transaction(transaction_id)
        click.echo(f"Cancelled transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option(
    "--status",
    type=click.Choice(TRANSACTION_STATUSES, case_sensitive=False),
    help="Only transactions with this status",
)
@date_range_options
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    status: str | None,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
) -> None:
    """List transactions."""
    service = TransactionService(ctx.obj["db"], ctx.obj["settings"].tenant_id)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, service.account_service, account)
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

    transactions = service.list_transactions(
        account_id=account_id, start_date=start, end_date=end, status=status
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':>4} | {'Date':10} | {'Description':32} | {'Amount':>12} | Status")
    click.echo("-" * 80)
    for txn in transactions:
        click.echo(
            f"{txn.id:4d} | {txn.transaction_date} | {txn.description[:32]:32s} | "
            f"{txn.signed_amount:>12,.2f} | {txn.status}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
