"""EDI data models for the VICS 850/856/810 codec.

Supports:
- X12 segments as parsed from the wire
- 850 Purchase Order, 856 Advance Ship Notice, 810 Invoice records

Records use snake_case attributes and serialize with the camelCase
field names of the JSON document format (poNumber, shipTo, unitPrice).
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Dialect(str, Enum):
    """VICS versioning profile."""

    V4010 = "4010"
    V5010 = "5010"


class EDITransactionType(str, Enum):
    """Supported X12 transaction types."""

    X12_850 = "850"  # Purchase Order
    X12_856 = "856"  # ASN (Advance Ship Notice)
    X12_810 = "810"  # Invoice


class Segment(BaseModel):
    """One X12 segment: a tag plus its ordered elements.

    Empty strings are positional placeholders and are kept as-is.
    """

    model_config = ConfigDict(frozen=True)

    tag: str = Field(..., min_length=1, description="Segment identifier, e.g. ISA or PO1")
    elements: tuple[str, ...] = Field(default=(), description="Elements after the tag")

    def element(self, position: int, default: str = "") -> str:
        """Return the element at an X12 position (the tag is position 0).

        Args:
            position: 1-based element position as written in X12 docs (PO102).
            default: Value returned when the segment is too short.
        """
        if position < 1 or position > len(self.elements):
            return default
        return self.elements[position - 1]


class EDIRecord(BaseModel):
    """Base for document records: immutable, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Address(EDIRecord):
    """Postal address of a trading party. Every field is optional."""

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None

    @property
    def has_city_line(self) -> bool:
        return bool(self.city and self.state and self.zip)


class Party(EDIRecord):
    """Ship-to or bill-to party."""

    name: str = Field(..., description="Party name (N102)")
    id: str = Field(..., description="Party identification code (N104)")
    address: Address | None = None


DEFAULT_PARTY = Party(name="RETAIL DC", id="0001")


class LineItem(EDIRecord):
    """A PO line item."""

    sku: str = Field(..., description="SKU or product identifier")
    quantity: int = Field(..., description="Ordered quantity")
    price: Decimal | None = Field(None, ge=0, description="Unit price")


class PurchaseOrder(EDIRecord):
    """Canonical 850 Purchase Order."""

    po_number: str = Field(..., description="Purchase order number (BEG03)")
    ship_to: Party | None = None
    bill_to: Party | None = None
    items: list[LineItem] = Field(default_factory=list)


class AsnItem(EDIRecord):
    """A shipped line item. The ASN carries no pricing."""

    sku: str
    qty: int


class AsnRecord(EDIRecord):
    """Canonical 856 Advance Ship Notice."""

    asn_number: str
    bol_number: str
    po_number: str
    ship_to: Party
    items: list[AsnItem]


class InvoiceItem(EDIRecord):
    """An invoiced line item, priced from the matching PO line."""

    sku: str
    qty: int
    unit_price: Decimal
    line_total: Decimal


class InvoiceRecord(EDIRecord):
    """Canonical 810 Invoice. Monetary fields are derived by reconciliation."""

    invoice_number: str
    po_number: str
    bill_to: Party
    items: list[InvoiceItem]
    subtotal: Decimal
    freight: Decimal
    tax_amount: Decimal
    grand_total: Decimal


class ValidationResult(EDIRecord):
    """Outcome of a structural validation pass.

    Errors block generation; warnings are advisory only.
    """

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_messages(cls, errors: list[str], warnings: list[str]) -> "ValidationResult":
        return cls(valid=not errors, errors=errors, warnings=warnings)


class AsnDocument(EDIRecord):
    """A generated 856: display title, the record and its X12 text."""

    title: str
    record: AsnRecord
    text: str


class InvoiceDocument(EDIRecord):
    """A generated 810: display title, the record and its X12 text."""

    title: str
    record: InvoiceRecord
    text: str
