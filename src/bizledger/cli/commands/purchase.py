"""Card purchase commands."""

import click

from bizledger.cli.account_resolution import resolve_card_or_exit
from bizledger.cli.error_handling import handle_domain_error
from bizledger.domain.category import CategoryService
from bizledger.domain.errors import DomainError
from bizledger.domain.invoice import InvoiceService
from bizledger.utils.account_resolver import resolve_category
from bizledger.utils.amount_parser import parse_amount
from bizledger.utils.date_parser import parse_date


@click.group()
def purchase_group():
    """Record credit card purchases."""
    pass


@purchase_group.command("add")
@click.argument("card", metavar="CARD")
@click.argument("description")
@click.argument("amount")
@click.option("--date", "purchase_date", default="today", help="Purchase date (default: today)")
@click.option("--installments", "-n", type=int, default=1, help="Number of installments (default: 1)")
@click.option("--category", help="Category name or ID")
@click.option("--notes", help="Notes")
@click.pass_context
def add_purchase(
    ctx,
    card: str,
    description: str,
    amount: str,
    purchase_date: str,
    installments: int,
    category: str | None,
    notes: str | None,
) -> None:
    """Add a purchase to a card, split into installments.

    CARD can be a card nickname or ID. Each installment lands on the invoice
    of a consecutive billing cycle.

    Examples:
        bizledger purchase add "Nubank PJ" "Notebook" 4599,90 -n 10
        bizledger purchase add 1 "Tecido" "R$ 320,00" --date 2025-11-07
    """
    db = ctx.obj["db"]
    settings = ctx.obj["settings"]
    service = InvoiceService(db, settings.tenant_id, max_installments=settings.max_installments)

    card_id = resolve_card_or_exit(ctx, service.card_service, card)

    try:
        category_id = (
            resolve_category(CategoryService(db, settings.tenant_id), category)
            if category
            else None
        )
        result = service.add_purchase(
            card_id=card_id,
            description=description,
            amount=parse_amount(amount),
            purchase_date=parse_date(purchase_date),
            installments=installments,
            category_id=category_id,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Added purchase '{description}' in {installments} installment(s)")
    for number, (invoice_id, part) in enumerate(zip(result.invoice_ids, result.amounts), start=1):
        invoice = service.get_invoice(invoice_id)
        click.echo(f"  {number:2d}/{installments} | {invoice.cycle} | {part:>10,.2f}")


def register_commands(cli):
    """Register purchase commands with main CLI."""
    cli.add_command(purchase_group, name="purchase")
