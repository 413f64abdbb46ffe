"""Price/quantity reconciliation of an ASN against its purchase order.

Shipped quantities come from the ASN, unit prices from the PO. Every
shipped SKU must be on the PO; a single miss aborts the whole invoice.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from vicsedi.edi.dialects import DialectProfile, get_profile
from vicsedi.edi.models import AsnRecord, Dialect, InvoiceItem, PurchaseOrder
from vicsedi.errors import ReconciliationError

FREIGHT_RATE = Decimal("0.01")

_CENT = Decimal("0.01")
_ONE = Decimal("1")


def to_cents(amount: Decimal) -> int:
    """Convert a dollar amount to whole cents, rounding half up.

    >>> to_cents(Decimal("10.005"))
    1001
    """
    return int((amount / _CENT).quantize(_ONE, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Reconciliation:
    """Priced invoice lines and the totals derived from them."""

    items: list[InvoiceItem]
    subtotal: Decimal
    freight: Decimal
    tax_amount: Decimal
    grand_total: Decimal


def reconcile(
    asn: AsnRecord,
    po: PurchaseOrder,
    dialect: Dialect | str | DialectProfile = Dialect.V4010,
) -> Reconciliation:
    """Price each ASN line from the PO and total the invoice.

    Args:
        asn: The shipped items.
        po: The purchase order supplying unit prices. The first PO line
            with a matching SKU wins.
        dialect: Dialect, or its profile, supplying the tax rate.

    Returns:
        Reconciliation with items, subtotal, freight, tax and grand total.

    Raises:
        ReconciliationError: For the first ASN SKU missing from the PO.
    """
    profile = dialect if isinstance(dialect, DialectProfile) else get_profile(dialect)
    prices: dict[str, Decimal] = {}
    for po_item in po.items:
        prices.setdefault(po_item.sku, po_item.price or Decimal("0"))

    items: list[InvoiceItem] = []
    for asn_item in asn.items:
        if asn_item.sku not in prices:
            raise ReconciliationError(asn_item.sku)
        unit_price = prices[asn_item.sku]
        items.append(
            InvoiceItem(
                sku=asn_item.sku,
                qty=asn_item.qty,
                unit_price=unit_price,
                line_total=asn_item.qty * unit_price,
            )
        )

    subtotal = sum((item.line_total for item in items), Decimal("0"))
    freight = subtotal * FREIGHT_RATE
    tax_amount = subtotal * profile.tax_rate if profile.emits_tax else Decimal("0")
    return Reconciliation(
        items=items,
        subtotal=subtotal,
        freight=freight,
        tax_amount=tax_amount,
        grand_total=subtotal + freight + tax_amount,
    )
