"""vicsedi CLI: validate 850s and generate 856/810 interchanges.

Usage:
    vicsedi validate po.edi            Validate an inbound 850
    vicsedi extract po.edi             Extract the purchase order as JSON
    vicsedi asn po.edi                 Generate an 856 ASN
    vicsedi invoice asn.json po.json   Generate an 810 invoice
    vicsedi convert to-json file.edi   Generic segment/JSON conversion
    vicsedi serve                      Run the HTTP API
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from rich.console import Console

from vicsedi.cli.config import VicsEdiConfig, load_config
from vicsedi.cli.output import (
    format_asn,
    format_invoice,
    format_purchase_order,
    format_segments,
    format_validation,
)
from vicsedi.edi.extractor import extract_purchase_order
from vicsedi.edi.models import Dialect, PurchaseOrder
from vicsedi.edi.tokenizer import segments_to_x12, x12_to_segments
from vicsedi.edi.validator import validate_po_json, validate_x12
from vicsedi.errors import DomainError, FormatError, ValidationError, format_error
from vicsedi.services.document_service import (
    generate_asn_document,
    generate_invoice_document,
    purchase_order_from_x12,
)

_log = logging.getLogger(__name__)

app = typer.Typer(
    name="vicsedi",
    help="VICS 4010/5010 X12 tools: 850 validation, 856 ASN and 810 invoice generation",
    no_args_is_help=True,
)
convert_app = typer.Typer(help="Generic X12 segment / JSON conversion")
config_app = typer.Typer(help="Configuration management")

app.add_typer(convert_app, name="convert")
app.add_typer(config_app, name="config")

console = Console()
err_console = Console(stderr=True)


class InputFormat(str, Enum):
    x12 = "x12"
    json = "json"


# --- Global state ---
_config_path: str | None = None


@app.callback()
def main(
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to vicsedi.yaml config file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """vicsedi: VICS X12 document tools."""
    global _config_path
    _config_path = config
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _load() -> VicsEdiConfig:
    try:
        return load_config(config_path=_config_path)
    except FileNotFoundError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _fail(error: DomainError) -> NoReturn:
    err_console.print(format_error(error), markup=False, highlight=False)
    raise typer.Exit(1)


def _read(path: Path) -> str:
    try:
        return path.read_text()
    except OSError as e:
        err_console.print(f"[red]Cannot read {path}:[/red] {e}")
        raise typer.Exit(1)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(_read(path))
    except json.JSONDecodeError as e:
        _fail(FormatError(f"Invalid JSON format in {path}: {e}"))


def _detect_format(path: Path, text: str) -> InputFormat:
    if path.suffix.lower() == ".json" or text.lstrip().startswith("{"):
        return InputFormat.json
    return InputFormat.x12


def _emit(output: str, destination: Path | None) -> None:
    if destination is None:
        console.print(output, markup=False, highlight=False, soft_wrap=True)
    else:
        destination.write_text(output)
        console.print(f"[green]Wrote {destination}[/green]")


def _load_purchase_order(path: Path, fmt: InputFormat | None, dialect: Dialect) -> PurchaseOrder | dict:
    """PO from X12 (validated and extracted) or decoded JSON payload."""
    text = _read(path)
    fmt = fmt or _detect_format(path, text)
    if fmt is InputFormat.x12:
        return purchase_order_from_x12(text, dialect)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(f"Invalid JSON format: {e}") from e


# --- Version ---


@app.command()
def version():
    """Show vicsedi version."""
    from vicsedi import __version__

    console.print(f"[bold]vicsedi[/bold] v{__version__}")
    console.print(f"  Dialects: {', '.join(d.value for d in Dialect)}")


# --- Document commands ---


@app.command()
def validate(
    file: Path = typer.Argument(..., help="850 purchase order (X12 or JSON)"),
    dialect: Optional[Dialect] = typer.Option(None, "--dialect", "-d", help="VICS dialect"),
    input_format: Optional[InputFormat] = typer.Option(None, "--format", "-f", help="Input format"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Validate an inbound purchase order. Exits 1 when invalid."""
    cfg = _load()
    text = _read(file)
    fmt = input_format or _detect_format(file, text)
    if fmt is InputFormat.x12:
        result = validate_x12(text, dialect or cfg.edi.default_dialect)
    else:
        result = validate_po_json(text)
    _emit(format_validation(result, as_json=json_output), None)
    if not result.valid:
        raise typer.Exit(1)


@app.command()
def extract(
    file: Path = typer.Argument(..., help="850 purchase order in X12"),
    dialect: Optional[Dialect] = typer.Option(None, "--dialect", "-d", help="VICS dialect"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    skip_validation: bool = typer.Option(
        False, "--no-validate", help="Extract without the structural gate"
    ),
):
    """Extract the canonical purchase order from 850 X12."""
    cfg = _load()
    text = _read(file)
    try:
        if skip_validation:
            po = extract_purchase_order(text)
        else:
            po = purchase_order_from_x12(text, dialect or cfg.edi.default_dialect)
    except DomainError as e:
        _fail(e)
    _emit(format_purchase_order(po, as_json=json_output), None)


@app.command()
def asn(
    file: Path = typer.Argument(..., help="850 purchase order (X12 or JSON)"),
    dialect: Optional[Dialect] = typer.Option(None, "--dialect", "-d", help="VICS dialect"),
    input_format: Optional[InputFormat] = typer.Option(None, "--format", "-f", help="Input format"),
    json_output: bool = typer.Option(False, "--json", help="Output record and X12 as JSON"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to file"),
):
    """Generate an 856 Advance Ship Notice for a purchase order."""
    cfg = _load()
    dialect = dialect or cfg.edi.default_dialect
    try:
        po = _load_purchase_order(file, input_format, dialect)
        document = generate_asn_document(po, dialect, envelope=cfg.envelope.to_settings())
    except DomainError as e:
        _fail(e)
    if output is not None and not json_output:
        _emit(document.text, output)
    else:
        _emit(format_asn(document, as_json=json_output), output)


@app.command()
def invoice(
    asn_file: Path = typer.Argument(..., help="ASN record as JSON (from 'asn --json')"),
    po_file: Path = typer.Argument(..., help="850 purchase order (X12 or JSON)"),
    dialect: Optional[Dialect] = typer.Option(None, "--dialect", "-d", help="VICS dialect"),
    input_format: Optional[InputFormat] = typer.Option(
        None, "--format", "-f", help="Purchase order format"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output record and X12 as JSON"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to file"),
):
    """Generate an 810 invoice from an ASN record and its purchase order."""
    cfg = _load()
    dialect = dialect or cfg.edi.default_dialect
    asn_payload = _read_json(asn_file)
    if isinstance(asn_payload, dict) and isinstance(asn_payload.get("record"), dict):
        # Accept the full 'asn --json' document as well as the bare record
        asn_payload = asn_payload["record"]
    try:
        po = _load_purchase_order(po_file, input_format, dialect)
        document = generate_invoice_document(
            asn_payload, po, dialect, envelope=cfg.envelope.to_settings()
        )
    except DomainError as e:
        _fail(e)
    if output is not None and not json_output:
        _emit(document.text, output)
    else:
        _emit(format_invoice(document, as_json=json_output), output)


# --- Convert commands ---


@convert_app.command("to-json")
def convert_to_json(
    file: Path = typer.Argument(..., help="X12 file"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to file"),
):
    """Convert X12 to a JSON list of {tag, elements}."""
    try:
        segments = x12_to_segments(_read(file))
    except FormatError as e:
        _fail(e)
    _emit(format_segments(segments), output)


@convert_app.command("to-x12")
def convert_to_x12(
    file: Path = typer.Argument(..., help="JSON list of {tag, elements}"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to file"),
):
    """Convert a JSON list of {tag, elements} to X12."""
    data = _read_json(file)
    if not isinstance(data, list) or not all(isinstance(s, dict) for s in data):
        _fail(ValidationError("Expected a JSON array of {tag, elements} objects"))
    try:
        text = segments_to_x12(data)
    except FormatError as e:
        _fail(e)
    _emit(text, output)


# --- Server ---


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
):
    """Run the HTTP API with uvicorn."""
    import os

    import uvicorn

    cfg = _load()
    final_host = host or cfg.server.host
    final_port = port or cfg.server.port

    # Propagate config path so the API loads the same config as the CLI
    if _config_path:
        os.environ["VICSEDI_CONFIG_PATH"] = str(_config_path)

    console.print(f"[bold]Starting vicsedi API on {final_host}:{final_port}[/bold]")
    _log.info("Serving on %s:%d", final_host, final_port)
    uvicorn.run(
        "vicsedi.api.main:app",
        host=final_host,
        port=final_port,
        log_level=cfg.server.log_level,
    )


# --- Config commands ---


@config_app.command("show")
def config_show():
    """Display resolved configuration."""
    cfg = _load()
    console.print("[bold]Server:[/bold]")
    console.print(f"  host: {cfg.server.host}")
    console.print(f"  port: {cfg.server.port}")
    console.print(f"  log_level: {cfg.server.log_level}")

    console.print("\n[bold]Envelope:[/bold]")
    console.print(f"  sender_id: {cfg.envelope.sender_id}")
    console.print(f"  receiver_id: {cfg.envelope.receiver_id}")
    console.print(f"  usage_indicator: {cfg.envelope.usage_indicator}")

    console.print("\n[bold]EDI:[/bold]")
    console.print(f"  default_dialect: {cfg.edi.default_dialect.value}")


if __name__ == "__main__":
    app()
