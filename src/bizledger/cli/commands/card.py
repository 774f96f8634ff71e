"""Credit card commands."""

import click

from bizledger.cli.account_resolution import resolve_account_or_exit
from bizledger.cli.error_handling import handle_domain_error
from bizledger.domain.card import CardService
from bizledger.domain.errors import DomainError
from bizledger.utils.amount_parser import parse_amount


@click.group()
def card_group():
    """Manage credit cards."""
    pass


@card_group.command("create")
@click.argument("nickname")
@click.option("--closing-day", type=int, required=True, help="Statement closing day (1-31)")
@click.option("--due-day", type=int, required=True, help="Due day, after the closing day (1-31)")
@click.option("--limit", "credit_limit", default="0", help="Credit limit")
@click.option("--brand", help="Card brand (e.g., Visa, Mastercard)")
@click.option("--last-digits", help="Last four digits of the card number")
@click.option("--payment-account", help="Account name or ID invoices are paid from")
@click.pass_context
def create_card(
    ctx,
    nickname: str,
    closing_day: int,
    due_day: int,
    credit_limit: str,
    brand: str | None,
    last_digits: str | None,
    payment_account: str | None,
):
    """Create a new credit card.

    Examples:
        bizledger card create "Nubank PJ" --closing-day 5 --due-day 12 --limit 8000
        bizledger card create "Inter" --closing-day 20 --due-day 28 --payment-account "Inter PJ"
    """
    service = CardService(ctx.obj["db"], ctx.obj["settings"].tenant_id)

    account_id = None
    if payment_account is not None:
        account_id = resolve_account_or_exit(ctx, service.account_service, payment_account)

    try:
        card_id = service.create_card(
            nickname=nickname,
            closing_day=closing_day,
            due_day=due_day,
            credit_limit=parse_amount(credit_limit),
            brand=brand,
            last_digits=last_digits,
            payment_account_id=account_id,
        )
        click.echo(f"Created card '{nickname}' (ID: {card_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@card_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive cards")
@click.pass_context
def list_cards(ctx, include_inactive: bool):
    """List cards with their limit usage."""
    service = CardService(ctx.obj["db"], ctx.obj["settings"].tenant_id)

    cards = service.list_cards(include_inactive=include_inactive)
    if not cards:
        click.echo("No cards found.")
        return

    click.echo("\nCards:")
    click.echo("-" * 90)
    for card in cards:
        usage = service.limit_usage(card.id)
        digits = f" *{card.last_digits}" if card.last_digits else ""
        click.echo(
            f"ID: {card.id:3d} | {card.nickname + digits:24s} | "
            f"closes {card.closing_day:2d} / due {card.due_day:2d} | "
            f"Limit: {usage['limit']:>10,.2f} | Available: {usage['available']:>10,.2f}"
        )


def register_commands(cli):
    """Register card commands with main CLI."""
    cli.add_command(card_group, name="card")
