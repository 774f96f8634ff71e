"""Sales spreadsheet import commands."""

from datetime import date
from pathlib import Path

import click

from bizledger.cli.error_handling import confirm_or_abort, handle_domain_error
from bizledger.clients.sales_api import SalesAPIClient
from bizledger.domain.errors import DomainError
from bizledger.domain.sales_import import (
    DatabaseSalesGateway,
    ImportPlan,
    ImportResult,
    SalesImportService,
    summarize_lines,
)
from bizledger.domain.sku_check import SkuVerificationService
from bizledger.utils.sheet_reader import read_sheet_rows


@click.group()
def sales_group():
    """Import and reconcile sales spreadsheets."""
    pass


def _import_service(ctx, tag: str | None) -> SalesImportService:
    settings = ctx.obj["settings"]
    return SalesImportService(
        ctx.obj["db"],
        batch_tag=tag or settings.import_batch_tag,
        channel=settings.import_channel,
    )


def _print_plan(plan: ImportPlan) -> None:
    click.echo(f"Sales lines: {len(plan.lines) + len(plan.excluded)}")
    click.echo(f"Skipped rows: {len(plan.skipped)}")
    for row in plan.skipped:
        click.echo(f"  row {row.row_index + 1}: {row.reason}")

    click.echo("\nClients:")
    for name, client_id in plan.clients.resolved.items():
        click.echo(f"  {name} -> ID {client_id}")
    for name in plan.clients.unresolved:
        click.echo(f"  {name} -> NOT FOUND")
    if plan.excluded:
        click.echo(f"\n{len(plan.excluded)} line(s) will be skipped because their client was not found.")

    if plan.lines:
        click.echo("\nPreview:")
        for line in plan.lines[:5]:
            click.echo(
                f"  row {line.sheet_row:4d} | {line.sale_date} | {line.client_name[:16]:16s} | "
                f"{line.sku:20s} | x{line.quantity} | {line.total:>10,.2f}"
            )


def _print_result(result: ImportResult, total: int) -> None:
    click.echo("\n" + "=" * 60)
    click.echo("IMPORT REPORT")
    click.echo("=" * 60)
    click.echo(f"Created:    {result.created_count}")
    click.echo(f"Duplicates: {result.duplicate_count}")
    click.echo(f"Failed:     {len(result.failed)}")
    click.echo(f"Processed:  {total}")
    if result.failed:
        click.echo("\nFailures:")
        for failure in result.failed:
            click.echo(f"  row {failure.line.sheet_row} ({failure.line.sku}): {failure.error}")


@sales_group.command("import")
@click.argument("workbook", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--sheet", help="Sheet tab to import (default: IMPORT_SHEET setting)")
@click.option("--year", type=int, help="Year for DD.MM dates (default: current year)")
@click.option("--tag", help="Batch tag used in the idempotency keys (default: IMPORT_BATCH_TAG setting)")
@click.option("--direct", is_flag=True, help="Write sales to the local database instead of the API")
@click.option("--dry-run", is_flag=True, help="Parse and resolve only; emit nothing")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_sales(
    ctx,
    workbook: Path,
    sheet: str | None,
    year: int | None,
    tag: str | None,
    direct: bool,
    dry_run: bool,
    yes: bool,
) -> None:
    """Import a sales sheet.

    Rows are read in sheet order, clients are resolved before anything is
    sent, and every line is emitted with an idempotency key, so re-running
    the same sheet creates no duplicates.

    Examples:
        bizledger sales import "Vendas Fabrica 2025.xlsx" --dry-run
        bizledger sales import vendas.xlsx --sheet nov --year 2025 --yes
        bizledger sales import vendas.xlsx --direct
    """
    settings = ctx.obj["settings"]
    service = _import_service(ctx, tag)
    sheet_name = sheet or settings.import_sheet

    try:
        rows = read_sheet_rows(workbook, sheet_name)
        plan = service.plan(rows, year or date.today().year)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Sheet '{sheet_name}': {len(rows)} rows")
    _print_plan(plan)

    if not plan.lines:
        click.echo("\nNo sales to import.")
        return

    if dry_run:
        summary = summarize_lines(plan.lines)
        click.echo(
            f"\nDry run: {summary['lines']} line(s), quantity {summary['quantity']}, "
            f"total {summary['total']:,.2f}, {summary['distinct_skus']} distinct SKU(s)"
        )
        for sku, quantity in summary["top_skus"]:
            click.echo(f"  {sku:24s} {quantity}")
        return

    if not confirm_or_abort(f"\nImport {len(plan.lines)} sale(s)?", yes):
        click.echo("Import cancelled.")
        return

    if direct:
        result = service.emit(plan, DatabaseSalesGateway(ctx.obj["db"]))
    else:
        with SalesAPIClient(settings=settings) as client:
            result = service.emit(plan, client)

    _print_result(result, len(plan.lines))


@sales_group.command("verify-skus")
@click.argument("skus", nargs=-1)
@click.option(
    "--file",
    "sku_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File with one SKU per line",
)
@click.pass_context
def verify_skus(ctx, skus: tuple[str, ...], sku_file: Path | None) -> None:
    """Check SKUs against the product catalog.

    Each SKU is reported as found (ignoring case), found after ignoring
    spaces and hyphens, or missing. Nothing is changed.
    """
    candidates = list(skus)
    if sku_file is not None:
        candidates.extend(sku_file.read_text(encoding="utf-8").splitlines())
    if not candidates:
        click.echo("Error: No SKUs given", err=True)
        ctx.exit(1)

    report = SkuVerificationService(ctx.obj["db"]).verify(candidates)

    click.echo(f"\nFound ignoring case: {len(report.by_case)}")
    for sku, product in report.by_case.items():
        click.echo(f"  {sku} -> {product.sku} ({product.name})")
    click.echo(f"\nFound ignoring spaces/hyphens: {len(report.by_format)}")
    for sku, product in report.by_format.items():
        click.echo(f"  {sku} -> {product.sku} ({product.name})")
    click.echo(f"\nMissing: {len(report.missing)}")
    for sku in report.missing:
        click.echo(f"  {sku}")


@sales_group.command("summary")
@click.option("--tag", help="Batch tag (default: IMPORT_BATCH_TAG setting)")
@click.pass_context
def batch_summary(ctx, tag: str | None) -> None:
    """Show totals of the stored sales of an import batch."""
    service = _import_service(ctx, tag)

    try:
        summary = service.batch_summary()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Batch '{service.batch_tag}'")
    click.echo(f"  Sales:    {summary['count']}")
    click.echo(f"  Quantity: {summary['quantity']}")
    click.echo(f"  Total:    {summary['total']:,.2f}")


@sales_group.command("delete-batch")
@click.option("--tag", help="Batch tag (default: IMPORT_BATCH_TAG setting)")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_batch(ctx, tag: str | None, yes: bool) -> None:
    """Delete the stored sales of an import batch."""
    service = _import_service(ctx, tag)

    try:
        count = service.batch_summary()["count"]
        if count == 0:
            click.echo(f"No sales found for batch '{service.batch_tag}'.")
            return
        if not confirm_or_abort(f"Delete {count} sale(s) of batch '{service.batch_tag}'?", yes):
            click.echo("Deletion cancelled.")
            return
        deleted = service.delete_batch()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted {deleted} sale(s)")


def register_commands(cli):
    """Register sales commands with main CLI."""
    cli.add_command(sales_group, name="sales")
