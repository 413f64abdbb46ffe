"""Test 810 Invoice generation."""

from decimal import Decimal

import pytest

from vicsedi.edi.extractor import extract_purchase_order
from vicsedi.edi.invoice import format_amount, generate_invoice
from vicsedi.edi.models import (
    DEFAULT_PARTY,
    AsnItem,
    AsnRecord,
    Dialect,
    LineItem,
    Party,
    PurchaseOrder,
)
from vicsedi.edi.tokenizer import tokenize
from vicsedi.errors import ReconciliationError, ValidationError

EXPECTED_4010 = """\
ISA*00*          *00*          *ZZ*SENDERID       *ZZ*RECEIVERID     *250115*1200*U*00401*000000002*0*T*>~
GS*IN*SENDERID*RECEIVERID*20250115*1200*2*X*004010VICS~
ST*810*0001~
BIG*20250115*INV-TEST-0001*20250115*PO123456***DI~
N1*BT*BASELWAY PLAZA*9*1000~
ITD*01*3*2**30**31~
IT1*1*100*EA*25.5**VC*SKU12345~
PID*F****SKU12345~
IT1*2*50*EA*42**VC*SKU67890~
PID*F****SKU67890~
TDS*469650~
SAC*C*D240***4697****06*Freight~
CTT*2~
SE*12*0001~
GE*1*2~
IEA*1*000000002~"""


def _segment(text: str, tag: str):
    return next(s for s in tokenize(text) if s.tag == tag)


def _se_count(text: str) -> int:
    segments = tokenize(text)
    start = next(i for i, s in enumerate(segments) if s.tag == "ST")
    end = next(i for i, s in enumerate(segments) if s.tag == "SE")
    assert int(segments[end].element(1)) == end - start + 1
    return end - start + 1


def test_generate_4010_exact(sample_asn, sample_po, identifiers, fixed_clock):
    """The 4010 interchange matches the expected text segment for segment."""
    document = generate_invoice(
        sample_asn, sample_po, Dialect.V4010, identifiers=identifiers, clock=fixed_clock
    )
    assert document.title == "810 Invoice (VICS 4010)"
    assert document.text == EXPECTED_4010


def test_record_totals(sample_asn, sample_po, identifiers, fixed_clock):
    """The record carries the reconciled totals."""
    record = generate_invoice(
        sample_asn, sample_po, identifiers=identifiers, clock=fixed_clock
    ).record

    assert record.invoice_number == "INV-TEST-0001"
    assert record.po_number == "PO123456"
    assert record.subtotal == Decimal("4650")
    assert record.freight == Decimal("46.5")
    assert record.tax_amount == 0
    assert record.grand_total == Decimal("4696.5")


def test_generate_5010_tax_and_address(sample_850_5010, sample_asn, identifiers, fixed_clock):
    """5010 emits TXI and the bill-to N3/N4, and SE counts both."""
    po = extract_purchase_order(sample_850_5010)
    document = generate_invoice(sample_asn, po, "5010", identifiers=identifiers, clock=fixed_clock)
    tags = [s.tag for s in tokenize(document.text)]

    assert document.title == "810 Invoice (VICS 5010)"
    assert document.record.tax_amount == Decimal("372")
    assert _segment(document.text, "TDS").element(1) == "506850"
    assert _segment(document.text, "TXI").elements == ("TX", "37200")
    assert _segment(document.text, "SAC").element(5) == "5069"
    assert _segment(document.text, "N1").element(2) == "BASELWAY HQ"
    assert tags[tags.index("N1") + 1 : tags.index("N1") + 3] == ["N3", "N4"]
    assert tags.index("TXI") == tags.index("TDS") + 1
    assert _se_count(document.text) == 15


def test_4010_has_no_tax(sample_asn, sample_po, identifiers, fixed_clock):
    """4010 never emits TXI."""
    document = generate_invoice(sample_asn, sample_po, identifiers=identifiers, clock=fixed_clock)
    assert "TXI" not in [s.tag for s in tokenize(document.text)]


def test_5010_zero_tax_omits_txi(identifiers, fixed_clock):
    """A zero tax amount produces no TXI segment, and SE still matches."""
    po = PurchaseOrder(po_number="PO1", items=[LineItem(sku="A", quantity=1, price=None)])
    asn = AsnRecord(
        asn_number="A", bol_number="B", po_number="PO1",
        ship_to=DEFAULT_PARTY, items=[AsnItem(sku="A", qty=1)],
    )
    document = generate_invoice(asn, po, "5010", identifiers=identifiers, clock=fixed_clock)
    assert "TXI" not in [s.tag for s in tokenize(document.text)]
    assert _segment(document.text, "TDS").element(1) == "0"
    assert _se_count(document.text) == 10


def test_half_up_totals(identifiers, fixed_clock):
    """125 x 25.50 rounds the grand total half up in TDS."""
    po = PurchaseOrder(po_number="PO1", items=[LineItem(sku="A", quantity=125, price=Decimal("25.50"))])
    asn = AsnRecord(
        asn_number="A", bol_number="B", po_number="PO1",
        ship_to=DEFAULT_PARTY, items=[AsnItem(sku="A", qty=125)],
    )
    text = generate_invoice(asn, po, identifiers=identifiers, clock=fixed_clock).text
    assert _segment(text, "TDS").element(1) == "321938"
    assert _segment(text, "SAC").element(5) == "3219"


def test_bill_to_fallbacks(sample_asn, identifiers, fixed_clock):
    """Bill-to falls back to the PO ship-to, then the default party."""
    ship_to = Party(name="STORE 9", id="9")
    items = [LineItem(sku="SKU12345", quantity=100, price=Decimal("1")),
             LineItem(sku="SKU67890", quantity=50, price=Decimal("1"))]

    with_ship_to = PurchaseOrder(po_number="PO1", ship_to=ship_to, items=items)
    record = generate_invoice(sample_asn, with_ship_to, identifiers=identifiers, clock=fixed_clock).record
    assert record.bill_to == ship_to

    bare = PurchaseOrder(po_number="PO1", items=items)
    record = generate_invoice(sample_asn, bare, identifiers=identifiers, clock=fixed_clock).record
    assert record.bill_to == DEFAULT_PARTY


def test_reconciliation_failure_produces_nothing(sample_po, identifiers, fixed_clock):
    """An unknown SKU raises before any invoice number is minted."""
    asn = AsnRecord(
        asn_number="A", bol_number="B", po_number="PO123456",
        ship_to=DEFAULT_PARTY, items=[AsnItem(sku="SKU12345", qty=1), AsnItem(sku="NOPE", qty=1)],
    )
    with pytest.raises(ReconciliationError, match="SKU NOPE from ASN not found in PO"):
        generate_invoice(asn, sample_po, identifiers=identifiers, clock=fixed_clock)
    assert identifiers.invoice_number() == "INV-TEST-0001"


def test_rejects_empty_asn(sample_po, identifiers, fixed_clock):
    """An ASN with no items cannot be invoiced."""
    asn = AsnRecord(
        asn_number="A", bol_number="B", po_number="PO1", ship_to=DEFAULT_PARTY, items=[]
    )
    with pytest.raises(ValidationError):
        generate_invoice(asn, sample_po, identifiers=identifiers, clock=fixed_clock)


@pytest.mark.parametrize(
    ("amount", "text"),
    [("25.50", "25.5"), ("42.00", "42"), ("100", "100"), ("0.00", "0"), ("1.005", "1.005")],
)
def test_format_amount(amount, text):
    """Unit prices render without trailing zeros or exponent."""
    assert format_amount(Decimal(amount)) == text
