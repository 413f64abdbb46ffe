"""API routes for EDI document generation and validation.

Thin HTTP adapter over the document service. Domain errors are turned into
400 responses by the exception handler registered in ``vicsedi.api.main``.
All endpoints use /api/v1/documents prefix.
"""

import logging

from fastapi import APIRouter, Request

from vicsedi.api.schemas import (
    ASNResponse,
    ExtractResponse,
    GenerateASNRequest,
    GenerateInvoiceRequest,
    InvoiceResponse,
    ValidatePayloadRequest,
    ValidateX12Request,
    ValidationResponse,
)
from vicsedi.edi.dialects import DialectProfile, get_profile
from vicsedi.edi.extractor import extract_purchase_order
from vicsedi.edi.validator import validate_x12
from vicsedi.services.document_service import (
    generate_asn_document,
    generate_invoice_document,
    validate_payload,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


def _profile(vics_version: str | None, request: Request) -> DialectProfile:
    """Requested dialect, falling back to the configured default."""
    if vics_version is None:
        return get_profile(request.app.state.config.edi.default_dialect)
    return get_profile(vics_version)


@router.post("/asn", response_model=ASNResponse)
def generate_asn_route(body: GenerateASNRequest, request: Request) -> ASNResponse:
    """Generate an 856 ASN from a JSON purchase order."""
    profile = _profile(body.vics_version, request)
    document = generate_asn_document(
        body.po, profile.dialect, envelope=request.app.state.envelope
    )
    return ASNResponse(
        title=document.title,
        json_record=document.record,
        x12=document.text,
        message=f"ASN created successfully using {profile.label}",
        vics_version=profile.dialect.value,
    )


@router.post("/invoice", response_model=InvoiceResponse)
def generate_invoice_route(body: GenerateInvoiceRequest, request: Request) -> InvoiceResponse:
    """Generate an 810 invoice from an ASN record and its purchase order."""
    profile = _profile(body.vics_version, request)
    document = generate_invoice_document(
        body.asn, body.po, profile.dialect, envelope=request.app.state.envelope
    )
    return InvoiceResponse(
        title=document.title,
        json_record=document.record,
        x12=document.text,
        message=f"Invoice created successfully using {profile.label}",
        vics_version=profile.dialect.value,
    )


@router.post("/validate", response_model=ValidationResponse)
def validate_route(body: ValidatePayloadRequest) -> ValidationResponse:
    """Check a PO or ASN payload against the generation rules."""
    result = validate_payload(body.data, body.type)
    return ValidationResponse(**result.model_dump())


@router.post("/validate/x12", response_model=ValidationResponse)
def validate_x12_route(body: ValidateX12Request, request: Request) -> ValidationResponse:
    """Structurally validate inbound 850 X12 text."""
    result = validate_x12(body.text, _profile(body.vics_version, request).dialect)
    return ValidationResponse(**result.model_dump())


@router.post("/extract", response_model=ExtractResponse)
def extract_route(body: ValidateX12Request, request: Request) -> ExtractResponse:
    """Validate inbound 850 X12 text and extract the purchase order.

    Invalid text returns the validation result with no PO rather than an
    error status, so callers see the warnings alongside the errors.
    """
    result = validate_x12(body.text, _profile(body.vics_version, request).dialect)
    po = extract_purchase_order(body.text) if result.valid else None
    return ExtractResponse(**result.model_dump(), po=po)
