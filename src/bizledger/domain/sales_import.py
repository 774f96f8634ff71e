"""Spreadsheet sales reconciliation.

A sales sheet is read row by row in sheet order, normalized into sale lines,
checked against the client table in a pre-flight step and finally emitted
one line at a time through a ``SalesGateway``. Emission is idempotent: each
line carries a deterministic key built from the batch tag, sale date, SKU
and sheet row index, so importing the same sheet twice stores nothing new.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional, Sequence

import structlog

from bizledger.database.base import Database
from bizledger.domain.errors import DomainError, ValidationError, duplicate_idempotency_key
from bizledger.utils.amount_parser import parse_brl_amount
from bizledger.utils.date_parser import parse_sheet_date
from bizledger.utils.sku import normalize_sku

logger = structlog.get_logger(__name__)

# Sheet layout: header metadata on the first rows, data from row index 3.
# Columns are positional and start at the second column.
DATA_START_ROW = 3
COL_DATE = 1
COL_CLIENT = 2
COL_SKU = 3
COL_QUANTITY = 4
COL_UNIT_PRICE = 5
COL_TOTAL = 6

# Clients whose name on the sheet differs from the ledger's
CLIENT_ALIASES = {"Obsidian": "Obsidian Ecom"}
FALLBACK_CLIENT = "Obsidian Ecom"

DEFAULT_CHANNEL = "Planilha Manual"


@dataclass(frozen=True)
class SaleLine:
    """One normalized sales row."""

    row_index: int
    sale_date: date
    client_name: str
    sku: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal
    idempotency_key: str

    @property
    def sheet_row(self) -> int:
        """1-based row number as shown by spreadsheet programs."""
        return self.row_index + 1


@dataclass(frozen=True)
class SkippedRow:
    """A sheet row that produced no sale line."""

    row_index: int
    reason: str


@dataclass
class ClientResolution:
    """Outcome of the client pre-flight."""

    resolved: dict[str, int] = field(default_factory=dict)
    unresolved: list[str] = field(default_factory=list)


@dataclass
class ImportPlan:
    """Sale lines ready for emission, plus everything left out of it."""

    lines: list[SaleLine]
    skipped: list[SkippedRow]
    clients: ClientResolution
    excluded: list[SaleLine]

    def client_id(self, line: SaleLine) -> int:
        return self.clients.resolved[line.client_name]


@dataclass(frozen=True)
class EmittedSale:
    line: SaleLine
    created: bool


@dataclass(frozen=True)
class FailedSale:
    line: SaleLine
    error: str


@dataclass
class ImportResult:
    """Per-line emission results."""

    succeeded: list[EmittedSale] = field(default_factory=list)
    failed: list[FailedSale] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return sum(1 for s in self.succeeded if s.created)

    @property
    def duplicate_count(self) -> int:
        return sum(1 for s in self.succeeded if not s.created)


class SalesGateway(ABC):
    """Destination for emitted sale lines."""

    @abstractmethod
    def emit(self, line: SaleLine, client_id: int, channel: str) -> bool:
        """Store one sale line.

        Returns:
            True if a record was created, False if the idempotency key was
            already stored

        Raises:
            DomainError: If the line was rejected or the call failed
        """
        pass


class DatabaseSalesGateway(SalesGateway):
    """Gateway that writes sales straight into the local database."""

    def __init__(self, db: Database):
        self.db = db

    def emit(self, line: SaleLine, client_id: int, channel: str) -> bool:
        if self.db.sale_exists(line.idempotency_key):
            return False
        self.db.create_sale(
            idempotency_key=line.idempotency_key,
            sale_date=line.sale_date,
            client_id=client_id,
            sku=line.sku,
            quantity=line.quantity,
            unit_price=line.unit_price,
            total=line.total,
            channel=channel,
        )
        return True


def normalize_client_name(raw: Any) -> str:
    """Map a sheet client cell to the ledger's client name."""
    if raw is None or not str(raw).strip():
        return FALLBACK_CLIENT
    name = str(raw).strip()
    return CLIENT_ALIASES.get(name, name)


def parse_quantity(raw: Any) -> Decimal:
    """Parse a quantity cell; unreadable values count as zero."""
    if raw is None or isinstance(raw, bool):
        return Decimal("0")
    if isinstance(raw, (int, float, Decimal)):
        quantity = Decimal(str(raw))
    else:
        try:
            quantity = Decimal(str(raw).strip().replace(",", "."))
        except InvalidOperation:
            return Decimal("0")
    return quantity if quantity.is_finite() else Decimal("0")


def idempotency_key(batch_tag: str, sale_date: date, sku: str, row_index: int) -> str:
    """Deterministic key of a sale line within an import batch."""
    return f"{batch_tag}_{sale_date.isoformat()}_{sku}_{row_index}"


def _cell(row: Sequence[Any], index: int) -> Any:
    if index >= len(row):
        return None
    value = row[index]
    if isinstance(value, str) and not value.strip():
        return None
    return value


def parse_sales_rows(
    rows: Sequence[Sequence[Any]],
    year: int,
    batch_tag: str,
    start_row: int = DATA_START_ROW,
) -> tuple[list[SaleLine], list[SkippedRow]]:
    """Normalize sheet rows into sale lines.

    Rows are read in order. An empty date cell takes the last valid date
    seen above it. A row is skipped when its SKU is blank, its quantity is
    not positive, or no date can be resolved for it.

    Args:
        rows: All sheet rows; list index is the 0-based sheet row
        year: Year applied to "DD.MM" dates
        batch_tag: Prefix of the idempotency keys
        start_row: Index of the first data row

    Returns:
        Tuple of (sale lines, skipped rows)
    """
    lines: list[SaleLine] = []
    skipped: list[SkippedRow] = []
    last_date: Optional[date] = None

    for index in range(start_row, len(rows)):
        row = rows[index] or ()

        sku = normalize_sku(_cell(row, COL_SKU))
        if not sku:
            skipped.append(SkippedRow(index, "blank SKU"))
            continue

        sale_date = parse_sheet_date(_cell(row, COL_DATE), year)
        if sale_date is None:
            sale_date = last_date
        else:
            last_date = sale_date
        if sale_date is None:
            skipped.append(SkippedRow(index, "no date and no earlier date to carry forward"))
            continue

        quantity = parse_quantity(_cell(row, COL_QUANTITY))
        if quantity <= 0:
            skipped.append(SkippedRow(index, f"quantity {quantity} is not positive"))
            continue

        try:
            unit_price = parse_brl_amount(_cell(row, COL_UNIT_PRICE))
            total = parse_brl_amount(_cell(row, COL_TOTAL))
        except ValidationError as e:
            skipped.append(SkippedRow(index, str(e)))
            continue

        lines.append(
            SaleLine(
                row_index=index,
                sale_date=sale_date,
                client_name=normalize_client_name(_cell(row, COL_CLIENT)),
                sku=sku,
                quantity=quantity,
                unit_price=unit_price,
                total=total,
                idempotency_key=idempotency_key(batch_tag, sale_date, sku, index),
            )
        )

    return lines, skipped


def resolve_clients(db: Database, names: Iterable[str]) -> ClientResolution:
    """Look up every unique client name before anything is emitted."""
    resolution = ClientResolution()
    for name in dict.fromkeys(names):
        client = db.find_client_by_name(name)
        if client is None:
            resolution.unresolved.append(name)
            logger.warning("client_not_found", client=name)
        else:
            resolution.resolved[name] = client.id
    return resolution


class SalesImportService:
    """Service for importing sales sheets."""

    def __init__(
        self,
        db: Database,
        batch_tag: str = "IMPORT_NOV",
        channel: str = DEFAULT_CHANNEL,
    ):
        """Initialize sales import service.

        Args:
            db: Database instance used for client lookups and batch queries
            batch_tag: Prefix of the idempotency keys of this batch
            channel: Sales channel label stored with every line
        """
        self.db = db
        self.batch_tag = batch_tag
        self.channel = channel

    def plan(self, rows: Sequence[Sequence[Any]], year: int) -> ImportPlan:
        """Parse the sheet and run the client pre-flight.

        Args:
            rows: All sheet rows
            year: Year applied to "DD.MM" dates

        Returns:
            ImportPlan with emittable lines and the excluded ones
        """
        lines, skipped = parse_sales_rows(rows, year, self.batch_tag)
        clients = resolve_clients(self.db, (line.client_name for line in lines))
        ready = [line for line in lines if line.client_name in clients.resolved]
        excluded = [line for line in lines if line.client_name not in clients.resolved]

        logger.info(
            "import_planned",
            batch_tag=self.batch_tag,
            lines=len(ready),
            skipped=len(skipped),
            excluded=len(excluded),
            unresolved_clients=clients.unresolved,
        )
        return ImportPlan(lines=ready, skipped=skipped, clients=clients, excluded=excluded)

    def emit(self, plan: ImportPlan, gateway: SalesGateway) -> ImportResult:
        """Emit every planned line through the gateway.

        Each line is independent; failures are collected and the remaining
        lines are still emitted.
        """
        result = ImportResult()
        for line in plan.lines:
            try:
                created = gateway.emit(line, plan.client_id(line), self.channel)
            except DomainError as e:
                logger.warning(
                    "sale_failed",
                    row=line.sheet_row,
                    sku=line.sku,
                    error=str(e),
                )
                result.failed.append(FailedSale(line, str(e)))
                continue

            if not created:
                logger.debug("sale_duplicate", detail=duplicate_idempotency_key(line.idempotency_key))
            else:
                logger.info(
                    "sale_emitted",
                    row=line.sheet_row,
                    sale_date=line.sale_date.isoformat(),
                    sku=line.sku,
                    quantity=str(line.quantity),
                )
            result.succeeded.append(EmittedSale(line, created))

        logger.info(
            "import_finished",
            batch_tag=self.batch_tag,
            created=result.created_count,
            duplicates=result.duplicate_count,
            failed=len(result.failed),
        )
        return result

    def batch_summary(self, batch_tag: Optional[str] = None) -> dict[str, Any]:
        """Count, quantity and value totals of the stored sales of a batch."""
        return self.db.get_sales_summary(self._key_prefix(batch_tag))

    def delete_batch(self, batch_tag: Optional[str] = None) -> int:
        """Delete the stored sales of a batch.

        Returns:
            Number of sales deleted
        """
        prefix = self._key_prefix(batch_tag)
        deleted = self.db.delete_sales(prefix)
        logger.info("batch_deleted", key_prefix=prefix, deleted=deleted)
        return deleted

    def _key_prefix(self, batch_tag: Optional[str]) -> str:
        tag = batch_tag or self.batch_tag
        if not tag:
            raise ValidationError("Batch tag is required")
        return f"{tag}_"


def summarize_lines(lines: Sequence[SaleLine], top: int = 10) -> dict[str, Any]:
    """Totals of parsed sale lines, before anything is emitted.

    Returns:
        Dict with line count, total quantity and value, distinct SKU count
        and the ``top`` SKUs by quantity
    """
    by_sku: dict[str, Decimal] = {}
    for line in lines:
        by_sku[line.sku] = by_sku.get(line.sku, Decimal("0")) + line.quantity
    ranked = sorted(by_sku.items(), key=lambda item: item[1], reverse=True)
    return {
        "lines": len(lines),
        "quantity": sum((line.quantity for line in lines), Decimal("0")),
        "total": sum((line.total for line in lines), Decimal("0")),
        "distinct_skus": len(by_sku),
        "top_skus": ranked[:top],
    }
