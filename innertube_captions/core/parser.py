"""Caption XML parsing for both schema variants the platform serves.

WHY: The same caption URL has been observed to return two materially
different XML shapes. Callers should get one CaptionDocument regardless,
and a slightly off attribute should never sink a whole track.

HOW: Detect-then-dispatch. parse_caption_xml() parses the document once,
looks for paragraph elements first, and hands the tree to one of two pure
routines:

  Paragraph schema (<p t="1000" d="500"><s t="0">hi</s></p>)
    integer milliseconds; <s> children are word parts whose t is
    relative to the paragraph start.

  Flat text schema (<text start="1.0" dur="0.5">hi</text>)
    fractional seconds, multiplied by 1000 and rounded; no parts.

RULES:
- Paragraph schema wins whenever at least one <p> is present
- Neither tag present: an empty document, not an error
- Absent, empty, or non-numeric timing attributes parse as 0
- Entry text is every descendant text node concatenated; flat-text entries
  get one extra HTML-unescape pass for their double-escaped entities
- Empty or unparsable XML raises MalformedResponse
"""

from __future__ import annotations

import html
import logging
import math
import xml.etree.ElementTree as ET

from innertube_captions.core.ir import CaptionDocument, CaptionEntry, CaptionPart
from innertube_captions.errors import STAGE_PARSE, MalformedResponse

logger = logging.getLogger(__name__)

PARAGRAPH_TAG = "p"
PART_TAG = "s"
TEXT_TAG = "text"


def parse_caption_xml(raw: str, video_id: str | None = None) -> CaptionDocument:
    """Parse a caption payload into a CaptionDocument.

    Args:
        raw: XML text as returned by the caption track URL.
        video_id: Video ID, for error context only.

    Returns:
        CaptionDocument with entries in document order.

    Raises:
        MalformedResponse: If raw is empty or not well-formed XML.
    """
    if not raw or not raw.strip():
        raise MalformedResponse("Empty caption payload", video_id=video_id, stage=STAGE_PARSE)

    try:
        root = ET.fromstring(raw)
    except ET.ParseError as exc:
        raise MalformedResponse(
            f"Caption payload is not well-formed XML: {exc}",
            video_id=video_id,
            stage=STAGE_PARSE,
        ) from exc

    paragraphs = list(root.iter(PARAGRAPH_TAG))
    if paragraphs:
        logger.debug("Parsing %d paragraph-schema entries", len(paragraphs))
        return CaptionDocument(entries=_parse_paragraphs(paragraphs))

    texts = list(root.iter(TEXT_TAG))
    logger.debug("Parsing %d text-schema entries", len(texts))
    return CaptionDocument(entries=_parse_texts(texts))


# ---------------------------------------------------------------------------
# Schema routines
# ---------------------------------------------------------------------------


def _parse_paragraphs(elements: list[ET.Element]) -> list[CaptionEntry]:
    entries = []
    for element in elements:
        parts = [
            CaptionPart(text=_element_text(part), offset_ms=_parse_ms(part.get("t")))
            for part in element.iter(PART_TAG)
        ]
        entries.append(CaptionEntry(
            text=_element_text(element),
            offset_ms=_parse_ms(element.get("t")),
            duration_ms=_parse_ms(element.get("d")),
            parts=parts,
        ))
    return entries


def _parse_texts(elements: list[ET.Element]) -> list[CaptionEntry]:
    return [
        CaptionEntry(
            text=_flat_text(element),
            offset_ms=_parse_seconds_as_ms(element.get("start")),
            duration_ms=_parse_seconds_as_ms(element.get("dur")),
        )
        for element in elements
    ]


# ---------------------------------------------------------------------------
# Lenient attribute helpers
# ---------------------------------------------------------------------------


def _element_text(element: ET.Element) -> str:
    return "".join(element.itertext())


def _flat_text(element: ET.Element) -> str:
    # Flat-text payloads arrive double-escaped ("&amp;#39;"); the paragraph
    # schema is escaped once and is fully decoded by the XML parser.
    return html.unescape(_element_text(element))


def _parse_ms(value: str | None) -> int:
    """Integer milliseconds; fractional strings are rounded."""
    if value is None or not value.strip():
        return 0
    try:
        return int(value)
    except ValueError:
        pass
    number = _parse_float(value)
    return _round_half_up(number) if number is not None else 0


def _parse_seconds_as_ms(value: str | None) -> int:
    if value is None or not value.strip():
        return 0
    seconds = _parse_float(value)
    return _round_half_up(seconds * 1000) if seconds is not None else 0


def _parse_float(value: str) -> float | None:
    try:
        number = float(value)
    except ValueError:
        logger.warning("Unparsable timing attribute %r, using 0", value)
        return None
    if not math.isfinite(number):
        logger.warning("Non-finite timing attribute %r, using 0", value)
        return None
    return number


def _round_half_up(number: float) -> int:
    if not math.isfinite(number):
        logger.warning("Timing value %r overflows milliseconds, using 0", number)
        return 0
    return int(math.floor(number + 0.5))
