"""Projection of an X12 850 segment stream onto a PurchaseOrder.

Positions below follow X12 numbering, where the tag is position 0
(BEG03 is the PO number, PO102 the quantity, PO104 the unit price).
"""

import logging
from decimal import Decimal, InvalidOperation

from vicsedi.edi.models import (
    DEFAULT_PARTY,
    Address,
    LineItem,
    Party,
    PurchaseOrder,
    Segment,
)
from vicsedi.edi.tokenizer import tokenize
from vicsedi.errors import FormatError

logger = logging.getLogger(__name__)

MISSING_PO_NUMBER = "ERR"
MISSING_SKU = "SKU-ERR"

# Product/service ID qualifiers, most preferred first. Buyer and vendor
# item numbers win over barcodes.
SKU_QUALIFIERS = ("VC", "VP", "SK", "BP", "IN", "VN", "MG", "UP", "EN", "UK")

# PO106/PO107 is the first qualifier/value pair; further pairs follow.
_FIRST_QUALIFIER_POSITION = 6


def _parse_decimal(value: str) -> Decimal:
    try:
        amount = Decimal(value.strip())
    except InvalidOperation:
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")


def _parse_int(value: str) -> int:
    """Whole part of a numeric element, so "100.00" reads as 100."""
    return int(_parse_decimal(value))


def sku_from_po1(segment: Segment) -> str:
    """Pick the item identifier from a PO1 segment.

    The qualifier/value pairs are scanned and the value of the most
    preferred known qualifier is returned. Unknown qualifiers fall back to
    the value positions of the first two pairs (PO107, then PO109).
    """
    pairs: dict[str, str] = {}
    position = _FIRST_QUALIFIER_POSITION
    while position + 1 <= len(segment.elements):
        qualifier = segment.element(position).strip()
        value = segment.element(position + 1).strip()
        if qualifier and value and qualifier not in pairs:
            pairs[qualifier] = value
        position += 2

    for qualifier in SKU_QUALIFIERS:
        if qualifier in pairs:
            return pairs[qualifier]

    return segment.element(7) or segment.element(9) or MISSING_SKU


def _line_item(segment: Segment) -> LineItem:
    return LineItem(
        sku=sku_from_po1(segment),
        quantity=_parse_int(segment.element(2)),
        price=_parse_decimal(segment.element(4)),
    )


def _parties(segments: list[Segment]) -> dict[str, Party]:
    """First N1 party per entity code, with any N3/N4 in its loop."""
    parties: dict[str, Party] = {}
    current: str | None = None
    fields: dict[str, str] = {}

    def close() -> None:
        if current is None or current in parties:
            return
        name, ident, address = fields.get("name", ""), fields.get("id", ""), None
        street, city = fields.get("street"), fields.get("city")
        if street or city:
            address = Address(
                street=street,
                city=city,
                state=fields.get("state"),
                zip=fields.get("zip"),
            )
        parties[current] = Party(name=name, id=ident, address=address)

    for segment in segments:
        if segment.tag == "N1":
            close()
            current = segment.element(1)
            fields = {"name": segment.element(2), "id": segment.element(4)}
        elif segment.tag == "N3" and current is not None:
            fields["street"] = segment.element(1)
        elif segment.tag == "N4" and current is not None:
            fields["city"] = segment.element(1)
            fields["state"] = segment.element(2)
            fields["zip"] = segment.element(3)
        elif segment.tag in ("PO1", "CTT", "SE") and current is not None:
            close()
            current = None
    close()
    return parties


def extract_purchase_order(source: str | list[Segment]) -> PurchaseOrder:
    """Build a PurchaseOrder from 850 X12 text or segments.

    Missing pieces get placeholders rather than failing: no BEG gives
    po_number "ERR", no ship-to N1 gives the default party, and a PO1
    whose SKU or numbers cannot be read still becomes a line item.

    Args:
        source: Raw X12 text or already tokenized segments.

    Returns:
        The extracted PurchaseOrder. bill_to is None when the document
        has no N1*BT loop.

    Raises:
        FormatError: If tokenization or extraction fails unexpectedly.
    """
    try:
        segments = tokenize(source) if isinstance(source, str) else list(source)

        beg = next((s for s in segments if s.tag == "BEG"), None)
        po_number = beg.element(3) if beg is not None else MISSING_PO_NUMBER

        parties = _parties(segments)
        items = [_line_item(s) for s in segments if s.tag == "PO1"]

        po = PurchaseOrder(
            po_number=po_number,
            ship_to=parties.get("ST", DEFAULT_PARTY),
            bill_to=parties.get("BT"),
            items=items,
        )
    except FormatError:
        raise
    except Exception as e:
        raise FormatError(f"Invalid X12 format: {e}") from e

    logger.debug("Extracted PO %s with %d line item(s)", po.po_number, len(po.items))
    return po
