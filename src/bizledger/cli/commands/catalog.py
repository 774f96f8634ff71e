"""Client and product catalog commands."""

import click

from bizledger.cli.error_handling import handle_domain_error
from bizledger.domain.catalog import CatalogService
from bizledger.domain.errors import DomainError


@click.group()
def client_group():
    """Manage clients."""
    pass


@client_group.command("add")
@click.argument("name")
@click.pass_context
def add_client(ctx, name: str) -> None:
    """Add a client."""
    service = CatalogService(ctx.obj["db"])

    try:
        client_id = service.add_client(name)
        click.echo(f"Created client '{name}' (ID: {client_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@client_group.command("list")
@click.pass_context
def list_clients(ctx) -> None:
    """List clients."""
    clients = CatalogService(ctx.obj["db"]).list_clients()
    if not clients:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    for client in clients:
        click.echo(f"ID: {client.id:4d} | {client.name}")


@click.group()
def product_group():
    """Manage the product catalog."""
    pass


@product_group.command("add")
@click.argument("sku")
@click.option("--name", help="Product name (default: the SKU)")
@click.pass_context
def add_product(ctx, sku: str, name: str | None) -> None:
    """Add a product."""
    service = CatalogService(ctx.obj["db"])

    try:
        product_id = service.add_product(sku, name)
        click.echo(f"Created product '{sku}' (ID: {product_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@product_group.command("list")
@click.pass_context
def list_products(ctx) -> None:
    """List products."""
    products = CatalogService(ctx.obj["db"]).list_products()
    if not products:
        click.echo("No products found.")
        return

    click.echo("\nProducts:")
    for product in products:
        click.echo(f"ID: {product.id:4d} | {product.sku:24s} | {product.name}")


def register_commands(cli):
    """Register client and product commands with main CLI."""
    cli.add_command(client_group, name="client")
    cli.add_command(product_group, name="product")
