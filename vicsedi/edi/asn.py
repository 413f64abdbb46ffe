"""X12 856 Advance Ship Notice generation (VICS 4010 and 5010)."""

import logging
from collections.abc import Callable
from datetime import datetime

from vicsedi.edi.dialects import get_profile
from vicsedi.edi.envelope import (
    ASN_856,
    EnvelopeSettings,
    TransactionBuilder,
    edi_date,
    edi_time,
)
from vicsedi.edi.identifiers import IdentifierSource, get_identifier_source
from vicsedi.edi.models import (
    DEFAULT_PARTY,
    AsnDocument,
    AsnItem,
    AsnRecord,
    Dialect,
    PurchaseOrder,
)
from vicsedi.edi.validator import require_generatable_po

logger = logging.getLogger(__name__)

# Fixed shipment details
PACKAGING_CODE = "CTN25"
CARRIER = ("B", "02", "FDE", "M", "FEDERAL EXPRESS")


def build_asn_record(po: PurchaseOrder, identifiers: IdentifierSource) -> AsnRecord:
    """Derive the ASN record from a PO, minting fresh ASN and BOL numbers."""
    return AsnRecord(
        asn_number=identifiers.asn_number(),
        bol_number=identifiers.bol_number(),
        po_number=po.po_number,
        ship_to=po.ship_to or DEFAULT_PARTY,
        items=[AsnItem(sku=item.sku, qty=item.quantity) for item in po.items],
    )


def generate_asn(
    po: PurchaseOrder,
    dialect: Dialect | str = Dialect.V4010,
    *,
    identifiers: IdentifierSource | None = None,
    clock: Callable[[], datetime] = datetime.now,
    envelope: EnvelopeSettings | None = None,
) -> AsnDocument:
    """Generate an 856 ASN interchange for a purchase order.

    Args:
        po: The purchase order being shipped. Must have at least one item,
            each with a SKU and a positive quantity.
        dialect: "4010" or "5010". 5010 adds the ship-to N3/N4 block when
            the ship-to party has an address.
        identifiers: Source of ASN/BOL numbers. Defaults to the process-wide
            source.
        clock: Returns the timestamp stamped on the envelope.
        envelope: Sender/receiver identifiers.

    Returns:
        AsnDocument with the record and the X12 text.

    Raises:
        ValidationError: If the PO cannot be shipped.
        UnsupportedDialectError: If the dialect is unknown.
    """
    profile = get_profile(dialect)
    require_generatable_po(po)
    record = build_asn_record(po, identifiers or get_identifier_source())
    moment = clock()

    builder = TransactionBuilder(ASN_856, profile, moment, envelope)
    builder.add("BSN", "00", record.asn_number, edi_date(moment), edi_time(moment), "0001")

    # Shipment level
    builder.add("HL", "1", "", "S")
    builder.add("TD1", PACKAGING_CODE, len(record.items))
    builder.add("TD5", *CARRIER)
    builder.add("REF", "BM", record.bol_number)
    builder.add_party("ST", record.ship_to)

    # Order level
    builder.add("HL", "2", "1", "O")
    builder.add("PRF", record.po_number)

    # Item level
    for index, item in enumerate(record.items):
        builder.add("HL", index + 3, "2", "I")
        builder.add("LIN", "", "VC", item.sku)
        builder.add("SN1", "", item.qty, "EA")
        builder.add("PO4", "1", "1", "EA")

    builder.add("CTT", len(record.items))

    text = builder.render()
    logger.info(
        "Generated 856 ASN %s for PO %s (%s, %d item(s))",
        record.asn_number,
        record.po_number,
        profile.label,
        len(record.items),
    )
    return AsnDocument(title=f"856 ASN ({profile.label})", record=record, text=text)
