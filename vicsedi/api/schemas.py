"""Request and response schemas for the document API.

PO and ASN payloads stay as plain dicts on the request models: the service
layer's validation gate reports every missing field in one response,
instead of failing the request body on the first schema violation.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from vicsedi.edi.models import AsnRecord, InvoiceRecord, PurchaseOrder

# camelCase keys of the invoice money fields
INVOICE_AMOUNTS = ("subtotal", "freight", "taxAmount", "grandTotal")
ITEM_AMOUNTS = ("unitPrice", "lineTotal")


class GenerateASNRequest(BaseModel):
    """Request body for 856 generation."""

    po: dict[str, Any] | None = None
    vics_version: str | None = Field(None, alias="vicsVersion")


class GenerateInvoiceRequest(BaseModel):
    """Request body for 810 generation."""

    asn: dict[str, Any] | None = None
    po: dict[str, Any] | None = None
    vics_version: str | None = Field(None, alias="vicsVersion")


class ValidatePayloadRequest(BaseModel):
    """Request body for payload validation."""

    data: Any = None
    type: str


class ValidateX12Request(BaseModel):
    """Request body for inbound 850 validation and extraction."""

    text: str = ""
    vics_version: str | None = Field(None, alias="vicsVersion")


class DocumentResponse(BaseModel):
    """Shared fields of a successful generation."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    title: str
    x12: str
    message: str
    vics_version: str = Field(..., alias="vicsVersion")


class ASNResponse(DocumentResponse):
    json_record: AsnRecord = Field(..., alias="json")


class InvoiceResponse(DocumentResponse):
    json_record: InvoiceRecord = Field(..., alias="json")

    @field_serializer("json_record", when_used="json")
    def _amounts_as_numbers(self, record: InvoiceRecord) -> dict[str, Any]:
        """Send invoice amounts as JSON numbers instead of decimal strings."""
        data = record.model_dump(by_alias=True, mode="json")
        for key in INVOICE_AMOUNTS:
            data[key] = float(data[key])
        for item in data["items"]:
            for key in ITEM_AMOUNTS:
                item[key] = float(item[key])
        return data


class ValidationResponse(BaseModel):
    valid: bool
    errors: list[str] = []
    warnings: list[str] = []


class ExtractResponse(ValidationResponse):
    po: PurchaseOrder | None = None


class SegmentItem(BaseModel):
    tag: str
    elements: list[str] = []


class SegmentsResponse(BaseModel):
    segments: list[SegmentItem]


class SegmentsRequest(BaseModel):
    segments: list[SegmentItem]


class X12TextRequest(BaseModel):
    text: str


class X12TextResponse(BaseModel):
    text: str


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["healthy"] = "healthy"
    message: str
    supported_versions: list[str] = Field(..., alias="supportedVersions")
    timestamp: str
