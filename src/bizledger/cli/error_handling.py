"""CLI error handling helpers."""

import click

from bizledger.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def confirm_or_abort(prompt: str, assume_yes: bool) -> bool:
    """Ask before a destructive step unless --yes was given.

    Returns:
        True when the operation may proceed
    """
    if assume_yes:
        return True
    return click.confirm(prompt, default=False)
