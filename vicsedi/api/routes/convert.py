"""API routes for the generic X12 segment / JSON converter.

No business validation: segments go in and out as tag + elements.
All endpoints use /api/v1/convert prefix.
"""

from fastapi import APIRouter

from vicsedi.api.schemas import (
    SegmentItem,
    SegmentsRequest,
    SegmentsResponse,
    X12TextRequest,
    X12TextResponse,
)
from vicsedi.edi.tokenizer import segments_to_x12, x12_to_segments

router = APIRouter(prefix="/convert", tags=["convert"])


@router.post("/x12-to-json", response_model=SegmentsResponse)
def x12_to_json(body: X12TextRequest) -> SegmentsResponse:
    """Split X12 text into tag/elements records."""
    return SegmentsResponse(
        segments=[SegmentItem(**segment) for segment in x12_to_segments(body.text)]
    )


@router.post("/json-to-x12", response_model=X12TextResponse)
def json_to_x12(body: SegmentsRequest) -> X12TextResponse:
    """Render tag/elements records as X12 text."""
    return X12TextResponse(
        text=segments_to_x12(segment.model_dump() for segment in body.segments)
    )
