"""CLI output formatters for Rich tables and JSON.

Provides human-readable Rich output (default) and machine-parseable JSON
output (--json flag). All formatting goes through these functions so the
CLI commands stay clean.
"""

import json
from decimal import Decimal

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from vicsedi.edi.models import (
    AsnDocument,
    InvoiceDocument,
    PurchaseOrder,
    ValidationResult,
)

console = Console()


def format_money(amount: Decimal | None) -> str:
    """Format a dollar amount, e.g. "$3,187.50" or "—" for None."""
    if amount is None:
        return "—"
    return f"${amount:,.2f}"


def _render(renderable) -> str:
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


def format_validation(result: ValidationResult, as_json: bool = False) -> str:
    """Format a validation result as a Rich panel or JSON.

    Args:
        result: Validation outcome.
        as_json: If True, return JSON string instead of Rich panel.

    Returns:
        Formatted string output.
    """
    if as_json:
        return result.model_dump_json(indent=2)

    if result.valid:
        lines = ["[bold green]Valid[/bold green]"]
    else:
        lines = [f"[bold red]Invalid[/bold red] ({len(result.errors)} error(s))"]
    for error in result.errors:
        lines.append(f"  [red]✗[/red] {error}")
    for warning in result.warnings:
        lines.append(f"  [yellow]![/yellow] {warning}")

    border = "green" if result.valid else "red"
    return _render(Panel("\n".join(lines), title="Validation", border_style=border))


def format_purchase_order(po: PurchaseOrder, as_json: bool = False) -> str:
    """Format an extracted purchase order as a Rich table or JSON."""
    if as_json:
        return po.model_dump_json(by_alias=True, indent=2)

    ship_to = po.ship_to.name if po.ship_to else "—"
    bill_to = po.bill_to.name if po.bill_to else "—"
    table = Table(title=f"PO {po.po_number}  (ship to {ship_to}, bill to {bill_to})")
    table.add_column("#", justify="right")
    table.add_column("SKU", style="cyan")
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right")
    for index, item in enumerate(po.items, start=1):
        table.add_row(str(index), item.sku, str(item.quantity), format_money(item.price))
    return _render(table)


def format_asn(document: AsnDocument, as_json: bool = False) -> str:
    """Format a generated ASN: JSON record, or summary table plus X12."""
    if as_json:
        return document.model_dump_json(by_alias=True, indent=2)

    record = document.record
    table = Table(title=f"{document.title}  {record.asn_number}")
    table.add_column("SKU", style="cyan")
    table.add_column("Qty", justify="right")
    for item in record.items:
        table.add_row(item.sku, str(item.qty))
    return _render(table) + "\n" + document.text


def format_invoice(document: InvoiceDocument, as_json: bool = False) -> str:
    """Format a generated invoice: JSON record, or priced table plus X12."""
    if as_json:
        return document.model_dump_json(by_alias=True, indent=2)

    record = document.record
    table = Table(title=f"{document.title}  {record.invoice_number}", show_footer=True)
    table.add_column("SKU", "Grand total", style="cyan")
    table.add_column("Qty", justify="right")
    table.add_column("Unit", justify="right")
    table.add_column("Line total", format_money(record.grand_total), justify="right")
    for item in record.items:
        table.add_row(
            item.sku, str(item.qty), format_money(item.unit_price), format_money(item.line_total)
        )
    summary = (
        f"Subtotal {format_money(record.subtotal)}  "
        f"Freight {format_money(record.freight)}  "
        f"Tax {format_money(record.tax_amount)}"
    )
    return _render(table) + summary + "\n\n" + document.text


def format_segments(segments: list[dict]) -> str:
    """Segments as indented JSON for the generic converter."""
    return json.dumps(segments, indent=2)
