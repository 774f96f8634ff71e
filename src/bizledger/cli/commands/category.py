"""Category management commands."""

import click

from bizledger.cli.error_handling import handle_domain_error
from bizledger.domain.category import CategoryService
from bizledger.domain.entities import CATEGORY_KINDS
from bizledger.domain.errors import DomainError
from bizledger.utils.account_resolver import resolve_category


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--kind", type=click.Choice(CATEGORY_KINDS, case_sensitive=False), help="Only this kind")
@click.pass_context
def list_categories(ctx, kind: str | None):
    """List categories, children indented under their parent."""
    service = CategoryService(ctx.obj["db"], ctx.obj["settings"].tenant_id)

    categories = service.list_categories(kind=kind)
    if not categories:
        click.echo("No categories found.")
        return

    children: dict[int, list] = {}
    for cat in categories:
        if cat.parent_id is not None:
            children.setdefault(cat.parent_id, []).append(cat)

    click.echo("\nCategories:")
    for cat in categories:
        if cat.parent_id is not None:
            continue
        scope = " [global]" if cat.is_global else ""
        click.echo(f"{cat.name} (ID: {cat.id}, {cat.kind}){scope}")
        for child in children.get(cat.id, []):
            click.echo(f"  {child.name} (ID: {child.id})")


@category_group.command("create")
@click.argument("name")
@click.option("--parent", help="Parent category name or ID")
@click.option(
    "--kind",
    type=click.Choice(CATEGORY_KINDS, case_sensitive=False),
    default="expense",
    help="Category kind (default: expense)",
)
@click.option("--global", "is_global", is_flag=True, help="Share the category with every tenant")
@click.pass_context
def create_category(ctx, name: str, parent: str | None, kind: str, is_global: bool):
    """Create a new category."""
    service = CategoryService(ctx.obj["db"], ctx.obj["settings"].tenant_id)

    try:
        parent_id = resolve_category(service, parent) if parent else None
        category_id = service.create_category(
            name=name, kind=kind, parent_id=parent_id, is_global=is_global
        )
        parent_str = f" under '{parent}'" if parent else ""
        click.echo(f"Created category '{name}'{parent_str} (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
