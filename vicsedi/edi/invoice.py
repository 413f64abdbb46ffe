"""X12 810 Invoice generation (VICS 4010 and 5010)."""

import logging
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal

from vicsedi.edi.dialects import get_profile
from vicsedi.edi.envelope import INVOICE_810, EnvelopeSettings, TransactionBuilder, edi_date
from vicsedi.edi.identifiers import IdentifierSource, get_identifier_source
from vicsedi.edi.models import (
    DEFAULT_PARTY,
    AsnRecord,
    Dialect,
    InvoiceDocument,
    InvoiceRecord,
    PurchaseOrder,
)
from vicsedi.edi.reconciler import FREIGHT_RATE, reconcile, to_cents
from vicsedi.edi.validator import require_invoiceable_asn

logger = logging.getLogger(__name__)

# ITD: basic terms, 2% discount within 10 days, net 30
PAYMENT_TERMS = ("01", "3", "2", "", "30", "", "31")


def format_amount(amount: Decimal) -> str:
    """Plain decimal text without trailing zeros or exponent (25.50 -> 25.5)."""
    text = format(amount.normalize(), "f")
    return "0" if text in ("-0", "") else text


def generate_invoice(
    asn: AsnRecord,
    po: PurchaseOrder,
    dialect: Dialect | str = Dialect.V4010,
    *,
    identifiers: IdentifierSource | None = None,
    clock: Callable[[], datetime] = datetime.now,
    envelope: EnvelopeSettings | None = None,
) -> InvoiceDocument:
    """Generate an 810 invoice interchange for shipped goods.

    Quantities come from the ASN and prices from the PO. Bill-to falls back
    from the PO bill-to to its ship-to and then to the default party.

    Raises:
        ReconciliationError: If an ASN SKU is missing from the PO. No
            partial invoice is produced.
        ValidationError: If the ASN has no shippable items.
        UnsupportedDialectError: If the dialect is unknown.
    """
    profile = get_profile(dialect)
    require_invoiceable_asn(asn)
    totals = reconcile(asn, po, profile)
    ids = identifiers or get_identifier_source()

    record = InvoiceRecord(
        invoice_number=ids.invoice_number(),
        po_number=po.po_number,
        bill_to=po.bill_to or po.ship_to or DEFAULT_PARTY,
        items=totals.items,
        subtotal=totals.subtotal,
        freight=totals.freight,
        tax_amount=totals.tax_amount,
        grand_total=totals.grand_total,
    )
    moment = clock()
    date = edi_date(moment)

    builder = TransactionBuilder(INVOICE_810, profile, moment, envelope)
    builder.add("BIG", date, record.invoice_number, date, record.po_number, "", "", "DI")
    builder.add_party("BT", record.bill_to)
    builder.add("ITD", *PAYMENT_TERMS)

    for index, item in enumerate(record.items, start=1):
        builder.add("IT1", index, item.qty, "EA", format_amount(item.unit_price), "", "VC", item.sku)
        builder.add("PID", "F", "", "", "", item.sku)

    builder.add("TDS", to_cents(record.grand_total))
    if profile.emits_tax and record.tax_amount:
        builder.add("TXI", "TX", to_cents(record.tax_amount))
    builder.add(
        "SAC", "C", "D240", "", "", to_cents(record.grand_total * FREIGHT_RATE),
        "", "", "", "06", "Freight",
    )
    builder.add("CTT", len(record.items))

    text = builder.render()
    logger.info(
        "Generated 810 invoice %s for PO %s (%s, total %s)",
        record.invoice_number,
        record.po_number,
        profile.label,
        format_amount(record.grand_total),
    )
    return InvoiceDocument(title=f"810 Invoice ({profile.label})", record=record, text=text)
