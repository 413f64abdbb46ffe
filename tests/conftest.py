"""Root-level pytest fixtures for all tests.

Provides shared fixtures for codec, service, API and CLI tests:
- Sample 850 interchanges (4010 and 5010) and a JSON purchase order
- A deterministic identifier source and a frozen clock
- Typed PO/ASN records built from the samples
"""

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from vicsedi.edi.models import AsnItem, AsnRecord, LineItem, Party, PurchaseOrder

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "edi"

FIXED_MOMENT = datetime(2025, 1, 15, 12, 0)


class SequentialIdentifiers:
    """Identifier source producing predictable numbers (ASN-TEST-0001, ...)."""

    def __init__(self) -> None:
        self._counters: dict[str, int] = {}

    def _next(self, prefix: str) -> str:
        self._counters[prefix] = self._counters.get(prefix, 0) + 1
        return f"{prefix}-TEST-{self._counters[prefix]:04d}"

    def asn_number(self) -> str:
        return self._next("ASN")

    def bol_number(self) -> str:
        return self._next("BOL")

    def invoice_number(self) -> str:
        return self._next("INV")


# ============================================================================
# Deterministic generation inputs
# ============================================================================


@pytest.fixture
def identifiers() -> SequentialIdentifiers:
    """Fresh deterministic identifier source."""
    return SequentialIdentifiers()


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2025-01-15 12:00."""
    return lambda: FIXED_MOMENT


# ============================================================================
# Sample documents
# ============================================================================


@pytest.fixture
def sample_850_4010() -> str:
    """VICS 4010 850 with two line items and a ship-to party."""
    return (FIXTURES_DIR / "sample_850_4010.edi").read_text()


@pytest.fixture
def sample_850_5010() -> str:
    """VICS 5010 850 with ship-to and bill-to address blocks."""
    return (FIXTURES_DIR / "sample_850_5010.edi").read_text()


@pytest.fixture
def sample_po_path() -> Path:
    """Path to the sample JSON purchase order."""
    return FIXTURES_DIR / "sample_po.json"


@pytest.fixture
def sample_po_dict(sample_po_path) -> dict:
    """Sample purchase order as decoded JSON (camelCase keys)."""
    return json.loads(sample_po_path.read_text())


@pytest.fixture
def sample_po() -> PurchaseOrder:
    """Typed purchase order matching the sample documents."""
    party = Party(name="BASELWAY PLAZA", id="1000")
    return PurchaseOrder(
        po_number="PO123456",
        ship_to=party,
        bill_to=party,
        items=[
            LineItem(sku="SKU12345", quantity=100, price=Decimal("25.50")),
            LineItem(sku="SKU67890", quantity=50, price=Decimal("42.00")),
        ],
    )


@pytest.fixture
def sample_asn() -> AsnRecord:
    """ASN shipping the full sample purchase order."""
    return AsnRecord(
        asn_number="ASN-TEST-0001",
        bol_number="BOL-TEST-0001",
        po_number="PO123456",
        ship_to=Party(name="BASELWAY PLAZA", id="1000"),
        items=[
            AsnItem(sku="SKU12345", qty=100),
            AsnItem(sku="SKU67890", qty=50),
        ],
    )
