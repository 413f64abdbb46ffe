"""X12 segment tokenizer.

Splits raw interchange text into Segment records and renders them back.
Only the fixed delimiters used by the VICS documents here are handled:
``~`` terminates a segment and ``*`` separates elements.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from vicsedi.edi.models import Segment
from vicsedi.errors import FormatError

SEGMENT_TERMINATOR = "~"
ELEMENT_SEPARATOR = "*"

_LINE_BREAKS = re.compile(r"[\r\n]+")


def tokenize(text: str, *, allow_empty: bool = False) -> list[Segment]:
    """Split raw X12 text into segments.

    Args:
        text: Raw interchange text. Line breaks are ignored.
        allow_empty: Return an empty list for blank input instead of failing.

    Returns:
        Segments in document order.

    Raises:
        FormatError: If the input is blank (and not allowed to be) or a
            segment has an empty tag.
    """
    clean = _LINE_BREAKS.sub("", text or "").strip()
    if not clean:
        if allow_empty:
            return []
        raise FormatError("X12 input is empty; expected an interchange")

    return [parse_segment(index, body) for index, body in split_segments(clean)]


def split_segments(text: str) -> list[tuple[int, str]]:
    """Non-blank segment bodies paired with their 1-based position.

    Positions count every terminator-delimited fragment, blank ones
    included, so they line up with what a reader counts in the raw text.
    """
    clean = _LINE_BREAKS.sub("", text or "").strip()
    fragments = []
    for index, body in enumerate(clean.split(SEGMENT_TERMINATOR), start=1):
        body = body.strip()
        if body:
            fragments.append((index, body))
    return fragments


def parse_segment(index: int, body: str) -> Segment:
    """Parse one segment body (no terminator).

    Raises:
        FormatError: If the segment has an empty tag.
    """
    tag, *elements = body.split(ELEMENT_SEPARATOR)
    if not tag:
        raise FormatError(f"Segment {index} has an empty tag: '{body}'")
    return Segment(tag=tag, elements=tuple(elements))


def has_delimiter(value: str) -> bool:
    """True if the value would break segment or element framing."""
    return SEGMENT_TERMINATOR in value or ELEMENT_SEPARATOR in value


def render_segment(segment: Segment) -> str:
    """Render one segment including its terminator."""
    return ELEMENT_SEPARATOR.join((segment.tag, *segment.elements)) + SEGMENT_TERMINATOR


def untokenize(segments: Iterable[Segment]) -> str:
    """Render segments as X12 text, one segment per line."""
    return "\n".join(render_segment(segment) for segment in segments)


def x12_to_segments(text: str) -> list[dict[str, Any]]:
    """Convert X12 text to a list of ``{"tag", "elements"}`` dicts.

    No business validation is applied.
    """
    return [
        {"tag": segment.tag, "elements": list(segment.elements)}
        for segment in tokenize(text)
    ]


def segments_to_x12(segments: Iterable[Mapping[str, Any]]) -> str:
    """Render ``{"tag", "elements"}`` dicts back to X12 text.

    Raises:
        FormatError: If an entry has no tag.
    """
    rendered: list[Segment] = []
    for index, raw in enumerate(segments, start=1):
        tag = str(raw.get("tag") or "")
        if not tag:
            raise FormatError(f"Segment {index} has an empty tag")
        elements = tuple("" if e is None else str(e) for e in raw.get("elements") or ())
        rendered.append(Segment(tag=tag, elements=elements))
    return untokenize(rendered)
