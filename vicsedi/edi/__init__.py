"""VICS X12 codec: 850 parsing/validation, 856 and 810 generation."""

from vicsedi.edi.asn import generate_asn
from vicsedi.edi.dialects import DialectProfile, get_profile
from vicsedi.edi.envelope import EnvelopeSettings
from vicsedi.edi.extractor import extract_purchase_order
from vicsedi.edi.identifiers import IdentifierSource, MonotonicIdentifierSource
from vicsedi.edi.invoice import generate_invoice
from vicsedi.edi.models import (
    AsnDocument,
    AsnRecord,
    Dialect,
    InvoiceDocument,
    InvoiceRecord,
    PurchaseOrder,
    Segment,
    ValidationResult,
)
from vicsedi.edi.reconciler import reconcile, to_cents
from vicsedi.edi.tokenizer import segments_to_x12, tokenize, untokenize, x12_to_segments
from vicsedi.edi.validator import validate_po_json, validate_x12

__all__ = [
    "AsnDocument",
    "AsnRecord",
    "Dialect",
    "DialectProfile",
    "EnvelopeSettings",
    "IdentifierSource",
    "InvoiceDocument",
    "InvoiceRecord",
    "MonotonicIdentifierSource",
    "PurchaseOrder",
    "Segment",
    "ValidationResult",
    "extract_purchase_order",
    "generate_asn",
    "generate_invoice",
    "get_profile",
    "reconcile",
    "segments_to_x12",
    "to_cents",
    "tokenize",
    "untokenize",
    "validate_po_json",
    "validate_x12",
    "x12_to_segments",
]
