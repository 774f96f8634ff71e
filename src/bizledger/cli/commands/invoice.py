"""Card invoice commands."""

import click

from bizledger.cli.account_resolution import resolve_account_or_exit, resolve_card_or_exit
from bizledger.cli.error_handling import handle_domain_error
from bizledger.domain.entities import INVOICE_STATUSES
from bizledger.domain.errors import DomainError
from bizledger.domain.invoice import InvoiceService
from bizledger.utils.amount_parser import parse_amount
from bizledger.utils.date_parser import parse_date


def _invoice_service(ctx) -> InvoiceService:
    settings = ctx.obj["settings"]
    return InvoiceService(ctx.obj["db"], settings.tenant_id, max_installments=settings.max_installments)


@click.group()
def invoice_group():
    """Manage card invoices."""
    pass


@invoice_group.command("list")
@click.option("--card", help="Card nickname or ID")
@click.option("--cycle", help="Billing cycle (YYYY-MM)")
@click.option(
    "--status",
    type=click.Choice(INVOICE_STATUSES, case_sensitive=False),
    help="Only invoices with this status",
)
@click.pass_context
def list_invoices(ctx, card: str | None, cycle: str | None, status: str | None) -> None:
    """List invoices."""
    service = _invoice_service(ctx)

    card_id = resolve_card_or_exit(ctx, service.card_service, card) if card else None
    invoices = service.list_invoices(card_id=card_id, cycle=cycle, status=status)
    if not invoices:
        click.echo("No invoices found.")
        return

    nicknames = {c.id: c.nickname for c in service.card_service.list_cards(include_inactive=True)}
    click.echo(f"\n{'ID':>4} | {'Card':16} | {'Cycle':7} | {'Due':10} | {'Total':>10} | {'Paid':>10} | Status")
    click.echo("-" * 86)
    for inv in invoices:
        click.echo(
            f"{inv.id:4d} | {nicknames.get(inv.card_id, '?')[:16]:16s} | {inv.cycle} | "
            f"{inv.due_date} | {inv.total_amount:>10,.2f} | {inv.paid_amount:>10,.2f} | {inv.status}"
        )


@invoice_group.command("show")
@click.argument("invoice_id", type=int)
@click.pass_context
def show_invoice(ctx, invoice_id: int) -> None:
    """Show an invoice with its line items."""
    service = _invoice_service(ctx)

    try:
        invoice = service.require_invoice(invoice_id)
        items = service.list_items(invoice_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    card = service.card_service.get_card(invoice.card_id)
    click.echo(f"\nInvoice {invoice.id} - {card.nickname} - {invoice.cycle} ({invoice.status})")
    click.echo(f"Closes: {invoice.closing_date}   Due: {invoice.due_date}")
    click.echo("-" * 72)
    for item in items:
        click.echo(
            f"{item.id:5d} | {item.purchase_date} | {item.description[:36]:36s} | {item.amount:>10,.2f}"
        )
    click.echo("-" * 72)
    click.echo(f"Total:       {invoice.total_amount:>12,.2f}")
    click.echo(f"Paid:        {invoice.paid_amount:>12,.2f}")
    click.echo(f"Outstanding: {invoice.outstanding:>12,.2f}")


@invoice_group.command("close")
@click.argument("invoice_id", type=int)
@click.pass_context
def close_invoice(ctx, invoice_id: int) -> None:
    """Close an open invoice."""
    service = _invoice_service(ctx)

    try:
        service.close_invoice(invoice_id)
        click.echo(f"Closed invoice {invoice_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@invoice_group.command("pay")
@click.argument("invoice_id", type=int)
@click.option("--amount", help="Amount to pay (default: full outstanding balance)")
@click.option("--account", help="Paying account name or ID (default: the card's payment account)")
@click.option("--date", "payment_date", default="today", help="Payment date (default: today)")
@click.pass_context
def pay_invoice(
    ctx, invoice_id: int, amount: str | None, account: str | None, payment_date: str
) -> None:
    """Pay an invoice, fully or partially.

    Examples:
        bizledger invoice pay 3
        bizledger invoice pay 3 --amount 500 --account "Itaú PJ"
    """
    service = _invoice_service(ctx)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, service.card_service.account_service, account)

    try:
        result = service.pay_invoice(
            invoice_id,
            payment_date=parse_date(payment_date),
            amount=parse_amount(amount) if amount is not None else None,
            account_id=account_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Paid {result.amount:,.2f} on invoice {invoice_id} "
        f"(transaction {result.transaction_id}); status: {result.status}"
    )


@invoice_group.command("refresh-overdue")
@click.option("--date", "today", default="today", help="Reference date (default: today)")
@click.pass_context
def refresh_overdue(ctx, today: str) -> None:
    """Mark unpaid invoices past their due date as overdue."""
    service = _invoice_service(ctx)

    try:
        updated = service.refresh_overdue(parse_date(today))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"{len(updated)} invoice(s) marked overdue")


@invoice_group.command("item-update")
@click.argument("item_id", type=int)
@click.option("--description", help="New description")
@click.option("--amount", help="New amount")
@click.option("--notes", help="Notes")
@click.pass_context
def update_item(
    ctx, item_id: int, description: str | None, amount: str | None, notes: str | None
) -> None:
    """Edit an invoice line item; the invoice total follows the new amount."""
    service = _invoice_service(ctx)

    try:
        service.update_item(
            item_id,
            description=description,
            amount=parse_amount(amount) if amount is not None else None,
            notes=notes,
        )
        click.echo(f"Updated item {item_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@invoice_group.command("item-delete")
@click.argument("item_id", type=int)
@click.pass_context
def delete_item(ctx, item_id: int) -> None:
    """Remove an invoice line item from its invoice."""
    service = _invoice_service(ctx)

    try:
        service.delete_item(item_id)
        click.echo(f"Deleted item {item_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
