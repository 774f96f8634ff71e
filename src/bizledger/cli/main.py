"""Main CLI entry point."""

import click

from bizledger.config import configure_logging, load_settings
from bizledger.database.factories import create_database
from bizledger.domain.errors import DomainError

# Import and register all commands at module level
from bizledger.cli.commands import (
    account,
    card,
    catalog,
    category,
    invoice,
    purchase,
    sales,
    transaction,
)


@click.group()
@click.option(
    "--db-url",
    help="Database URL or SQLite file path (overrides DATABASE_URL and the DB_* variables)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (overrides LOG_LEVEL)",
)
@click.pass_context
def cli(ctx, db_url: str | None, log_level: str | None):
    """Bizledger - business ledger and sales reconciliation.

    Track accounts, cards and invoices with installment purchases, and import
    sales spreadsheets into the sales ledger.
    """
    ctx.ensure_object(dict)

    settings = ctx.obj.get("settings") or load_settings()
    configure_logging(settings, level=log_level.upper() if log_level else None)
    ctx.obj["settings"] = settings

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and "db" not in ctx.obj:
        try:
            db = create_database(settings, database_url=db_url)
            db.connect()
            db.initialize_schema()
        except DomainError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
card.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)
purchase.register_commands(cli)
invoice.register_commands(cli)
catalog.register_commands(cli)
sales.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
