"""Transport-agnostic document operations.

Each function takes the decoded request payloads, runs the validation gate,
and hands typed records to the codec. They are the single entry point used
by both the HTTP routes and the CLI.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, Literal

from vicsedi.edi.asn import generate_asn
from vicsedi.edi.envelope import EnvelopeSettings
from vicsedi.edi.extractor import extract_purchase_order
from vicsedi.edi.identifiers import IdentifierSource
from vicsedi.edi.invoice import generate_invoice
from vicsedi.edi.models import (
    AsnDocument,
    AsnRecord,
    Dialect,
    InvoiceDocument,
    PurchaseOrder,
    ValidationResult,
)
from vicsedi.edi.validator import (
    parse_asn_record,
    parse_purchase_order,
    validate_po_json,
    validate_x12,
)
from vicsedi.errors import ValidationError

logger = logging.getLogger(__name__)

PayloadKind = Literal["po", "asn"]


def purchase_order_from_x12(text: str, dialect: Dialect | str = Dialect.V4010) -> PurchaseOrder:
    """Validate inbound 850 text and extract the purchase order.

    Raises:
        ValidationError: With every structural error when the text is invalid.
    """
    result = validate_x12(text, dialect)
    if not result.valid:
        raise ValidationError(result.errors)
    for warning in result.warnings:
        logger.info("850 warning: %s", warning)
    return extract_purchase_order(text)


def generate_asn_document(
    po: PurchaseOrder | Mapping[str, Any] | None,
    dialect: Dialect | str = Dialect.V4010,
    *,
    identifiers: IdentifierSource | None = None,
    clock: Callable[[], datetime] = datetime.now,
    envelope: EnvelopeSettings | None = None,
) -> AsnDocument:
    """GenerateASN: validate the PO payload and emit an 856."""
    purchase_order = parse_purchase_order(po)
    return generate_asn(
        purchase_order, dialect, identifiers=identifiers, clock=clock, envelope=envelope
    )


def generate_invoice_document(
    asn: AsnRecord | Mapping[str, Any] | None,
    po: PurchaseOrder | Mapping[str, Any] | None,
    dialect: Dialect | str = Dialect.V4010,
    *,
    identifiers: IdentifierSource | None = None,
    clock: Callable[[], datetime] = datetime.now,
    envelope: EnvelopeSettings | None = None,
) -> InvoiceDocument:
    """GenerateInvoice: validate both payloads, reconcile and emit an 810."""
    errors: list[str] = []
    asn_record = purchase_order = None
    try:
        asn_record = parse_asn_record(asn)
    except ValidationError as e:
        errors.extend(e.errors)
    try:
        purchase_order = parse_purchase_order(po)
    except ValidationError as e:
        errors.extend(e.errors)
    if errors:
        raise ValidationError(errors)

    return generate_invoice(
        asn_record,
        purchase_order,
        dialect,
        identifiers=identifiers,
        clock=clock,
        envelope=envelope,
    )


def validate_payload(data: Any, kind: PayloadKind) -> ValidationResult:
    """Run a generation gate without generating anything.

    Args:
        data: Decoded PO or ASN payload.
        kind: "po" or "asn".

    Returns:
        ValidationResult; invalid when the gate would reject the payload.
    """
    parsers: dict[str, Callable[[Any], object]] = {
        "po": parse_purchase_order,
        "asn": parse_asn_record,
    }
    if kind not in parsers:
        raise ValidationError(f"Invalid validation type '{kind}'. Use \"po\" or \"asn\"")
    try:
        parsers[kind](data)
    except ValidationError as e:
        return ValidationResult.from_messages(e.errors, [])
    warnings = validate_po_json(data).warnings if kind == "po" else []
    return ValidationResult.from_messages([], warnings)
