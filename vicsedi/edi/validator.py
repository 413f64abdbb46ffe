"""Structural validation for inbound 850s and generation payloads.

Two advisory modes return a ValidationResult (errors block, warnings do
not): X12 text checked against the required envelope segments, and a JSON
purchase order checked field by field. Validation always accumulates every
violated rule instead of stopping at the first one.

The generation gates (``parse_purchase_order`` / ``parse_asn_record``) apply
the stricter rules required before a document is generated and raise
ValidationError with every message at once.
"""

import json
import logging
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from vicsedi.edi.dialects import get_profile
from vicsedi.edi.models import (
    AsnRecord,
    Dialect,
    EDITransactionType,
    PurchaseOrder,
    Segment,
    ValidationResult,
)
from vicsedi.edi.tokenizer import (
    ELEMENT_SEPARATOR,
    SEGMENT_TERMINATOR,
    has_delimiter,
    parse_segment,
    split_segments,
)
from vicsedi.errors import FormatError, ValidationError

logger = logging.getLogger(__name__)

# Required 850 segments in envelope order
REQUIRED_SEGMENTS: dict[str, str] = {
    "ISA": "Interchange Control Header",
    "GS": "Functional Group Header",
    "ST": "Transaction Set Header",
    "BEG": "Beginning Segment for Purchase Order",
    "SE": "Transaction Set Trailer",
    "GE": "Functional Group Trailer",
    "IEA": "Interchange Control Trailer",
}

# Payload fields that are rendered into X12 elements
PO_FIELDS = ["poNumber", "shipTo", "billTo", "items"]
ASN_FIELDS = ["asnNumber", "bolNumber", "poNumber", "shipTo", "items"]


def _first(segments: list[Segment], tag: str) -> Segment | None:
    return next((s for s in segments if s.tag == tag), None)


def _encodes(segment: Segment, token: str) -> bool:
    return any(token in element for element in segment.elements)


def validate_x12(text: str, dialect: Dialect | str = Dialect.V4010) -> ValidationResult:
    """Validate raw 850 X12 text.

    Args:
        text: Raw interchange text.
        dialect: Expected VICS dialect (drives the version-token warnings).

    Returns:
        ValidationResult with every error and warning found.

    Raises:
        UnsupportedDialectError: If the dialect is not 4010 or 5010.
    """
    profile = get_profile(dialect)
    errors: list[str] = []
    warnings: list[str] = []

    clean = "".join((text or "").splitlines()).strip()
    if not clean.startswith("ISA"):
        errors.append("X12 must start with ISA segment")

    # A malformed segment is reported on its own; the rest still count.
    segments: list[Segment] = []
    for index, body in split_segments(clean):
        try:
            segments.append(parse_segment(index, body))
        except FormatError as e:
            errors.append(str(e))

    tags = {segment.tag for segment in segments}
    for tag, description in REQUIRED_SEGMENTS.items():
        if tag not in tags:
            errors.append(f"Missing {tag} ({description}) segment")

    if SEGMENT_TERMINATOR not in clean:
        errors.append(f"Missing segment terminator ({SEGMENT_TERMINATOR})")
    if ELEMENT_SEPARATOR not in clean:
        errors.append(f"Missing element delimiter ({ELEMENT_SEPARATOR})")

    if "PO1" not in tags:
        warnings.append("No PO1 (Purchase Order Line Item) segments found")

    st = _first(segments, "ST")
    if st is not None and st.element(1) != EDITransactionType.X12_850.value:
        warnings.append(
            f"ST transaction type is '{st.element(1)}', expected 850 (Purchase Order)"
        )

    isa = _first(segments, "ISA")
    if isa is not None and not _encodes(isa, profile.isa_token):
        warnings.append(f"ISA version should be {profile.isa_token} for {profile.label}")

    gs = _first(segments, "GS")
    if gs is not None and not _encodes(gs, profile.gs_token):
        warnings.append(f"GS version should be {profile.gs_token} for {profile.label}")

    result = ValidationResult.from_messages(errors, warnings)
    if not result.valid:
        logger.warning("X12 validation failed with %d error(s)", len(errors))
    return result


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _is_missing_quantity(value: Any) -> bool:
    return _is_blank(value) or value is False


def _as_number(value: Any) -> Decimal | None:
    """Numeric value of a JSON number or numeric string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    try:
        number = Decimal(value.strip())
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def _delimiter_errors(value: Any, path: str) -> list[str]:
    """Every string under ``value`` that would break X12 framing."""
    if isinstance(value, str):
        if has_delimiter(value):
            return [
                f"{path} contains a reserved delimiter "
                f"('{SEGMENT_TERMINATOR}' or '{ELEMENT_SEPARATOR}')"
            ]
        return []
    if isinstance(value, Mapping):
        return [
            error
            for key, child in value.items()
            for error in _delimiter_errors(child, f"{path}.{key}" if path else str(key))
        ]
    if isinstance(value, list):
        return [
            error
            for index, child in enumerate(value, start=1)
            for error in _delimiter_errors(child, f"{path}[{index}]")
        ]
    return []


def _record_delimiter_errors(payload: Mapping[str, Any], fields: list[str]) -> list[str]:
    return _delimiter_errors({key: payload[key] for key in fields if key in payload}, "")


def validate_po_json(value: str | Mapping[str, Any]) -> ValidationResult:
    """Validate a JSON purchase order.

    Args:
        value: JSON text, or an already-decoded mapping.

    Returns:
        ValidationResult. Zero or negative quantities and missing prices are
        warnings, not errors.
    """
    errors: list[str] = []
    warnings: list[str] = []

    data: Any = value
    if isinstance(value, (str, bytes)):
        try:
            data = json.loads(value)
        except json.JSONDecodeError as e:
            errors.append(f"Invalid JSON format: {e}")
            return ValidationResult.from_messages(errors, warnings)

    if not isinstance(data, Mapping):
        errors.append("Purchase order must be a JSON object")
        return ValidationResult.from_messages(errors, warnings)

    if _is_blank(data.get("poNumber")):
        errors.append("Missing required field: poNumber")

    items = data.get("items")
    if not isinstance(items, list):
        errors.append("Missing or invalid field: items (must be an array)")
    else:
        if not items:
            warnings.append("Items array is empty")
        for index, item in enumerate(items, start=1):
            if not isinstance(item, Mapping):
                errors.append(f"Item {index}: Must be an object")
                continue
            if _is_blank(item.get("sku")):
                errors.append(f"Item {index}: Missing SKU")
            quantity = item.get("quantity")
            if _is_missing_quantity(quantity):
                errors.append(f"Item {index}: Missing quantity")
            else:
                number = _as_number(quantity)
                if number is None:
                    errors.append(f"Item {index}: Quantity must be a number")
                elif number <= 0:
                    warnings.append(f"Item {index}: Quantity should be greater than 0")
            if _is_blank(item.get("price")):
                warnings.append(
                    f"Item {index}: Missing price (required for invoice generation)"
                )

    errors.extend(_record_delimiter_errors(data, PO_FIELDS))

    if not data.get("shipTo"):
        warnings.append("Missing shipTo information (will use default)")
    if not data.get("billTo"):
        warnings.append("Missing billTo information (will use shipTo as default)")

    return ValidationResult.from_messages(errors, warnings)


def _item_errors(
    items: Any, *, label: str, quantity_field: str, item_label: str
) -> list[str]:
    """Shared line-item rules for the generation gates."""
    if not isinstance(items, list):
        return [f"{label} must contain an items array"]
    if not items:
        return [f"{label} must contain at least one item"]

    errors: list[str] = []
    for index, item in enumerate(items, start=1):
        if not isinstance(item, Mapping):
            errors.append(f"{item_label} {index}: Must be an object")
            continue
        if _is_blank(item.get("sku")):
            errors.append(f"{item_label} {index}: Missing SKU")
        quantity = item.get(quantity_field)
        if _is_missing_quantity(quantity):
            errors.append(f"{item_label} {index}: Missing quantity")
        else:
            number = _as_number(quantity)
            if number is not None and number <= 0:
                errors.append(f"{item_label} {index}: Quantity must be greater than 0")
        price = _as_number(item.get("price"))
        if price is not None and price < 0:
            errors.append(f"{item_label} {index}: Price must not be negative")
    return errors


def _pydantic_messages(exc: PydanticValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"])
        messages.append(f"{location}: {err['msg']}")
    return messages


def parse_purchase_order(payload: PurchaseOrder | Mapping[str, Any] | None) -> PurchaseOrder:
    """Validate a PO payload for ASN generation and deserialize it.

    Args:
        payload: Decoded JSON purchase order (camelCase keys) or a record.

    Returns:
        The typed PurchaseOrder.

    Raises:
        ValidationError: With every violated rule.
    """
    if isinstance(payload, PurchaseOrder):
        require_generatable_po(payload)
        return payload
    if not payload:
        raise ValidationError("PO data is required")
    if not isinstance(payload, Mapping):
        raise ValidationError("PO data must be an object")

    errors: list[str] = []
    if _is_blank(payload.get("poNumber")):
        errors.append("PO number is missing")
    errors.extend(
        _item_errors(
            payload.get("items"), label="PO", quantity_field="quantity", item_label="Item"
        )
    )
    errors.extend(_record_delimiter_errors(payload, PO_FIELDS))
    if errors:
        raise ValidationError(errors)

    try:
        return PurchaseOrder.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(_pydantic_messages(e)) from e


def parse_asn_record(payload: AsnRecord | Mapping[str, Any] | None) -> AsnRecord:
    """Validate an ASN payload for invoice generation and deserialize it.

    Raises:
        ValidationError: With every violated rule.
    """
    if isinstance(payload, AsnRecord):
        require_invoiceable_asn(payload)
        return payload
    if not payload:
        raise ValidationError("ASN data is required")
    if not isinstance(payload, Mapping):
        raise ValidationError("ASN data must be an object")

    errors = _item_errors(
        payload.get("items"), label="ASN", quantity_field="qty", item_label="ASN item"
    )
    errors.extend(_record_delimiter_errors(payload, ASN_FIELDS))
    if errors:
        raise ValidationError(errors)

    try:
        return AsnRecord.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(_pydantic_messages(e)) from e


def require_generatable_po(po: PurchaseOrder) -> None:
    """Apply the ASN generation rules to a typed PurchaseOrder."""
    errors: list[str] = []
    if not po.po_number:
        errors.append("PO number is missing")
    if not po.items:
        errors.append("PO must contain at least one item")
    for index, item in enumerate(po.items, start=1):
        if not item.sku:
            errors.append(f"Item {index}: Missing SKU")
        if item.quantity <= 0:
            errors.append(f"Item {index}: Quantity must be greater than 0")
    errors.extend(_delimiter_errors(po.model_dump(by_alias=True, mode="json"), ""))
    if errors:
        raise ValidationError(errors)


def require_invoiceable_asn(asn: AsnRecord) -> None:
    """Apply the invoice generation rules to a typed AsnRecord."""
    errors: list[str] = []
    if not asn.items:
        errors.append("ASN must contain at least one item")
    for index, item in enumerate(asn.items, start=1):
        if not item.sku:
            errors.append(f"ASN item {index}: Missing SKU")
        if item.qty <= 0:
            errors.append(f"ASN item {index}: Quantity must be greater than 0")
    errors.extend(_delimiter_errors(asn.model_dump(by_alias=True, mode="json"), ""))
    if errors:
        raise ValidationError(errors)
