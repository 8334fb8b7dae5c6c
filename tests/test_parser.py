"""Unit tests for the caption XML parser.

WHY: The parser is where both upstream schema variants meet. It must pick
the right one, normalize units to milliseconds, and never raise on a
sloppy timing attribute.

HOW: Small literal XML snippets per behavior, plus the shared fixtures for
realistic full payloads.

RULES:
- Paragraph schema: integer ms, parts relative to the paragraph
- Text schema: seconds × 1000, rounded, no parts
- Bad timing values are 0, never an exception
"""

import pytest

from innertube_captions.core.parser import parse_caption_xml
from innertube_captions.errors import MalformedResponse


class TestParagraphSchema:

    def test_single_paragraph(self):
        doc = parse_caption_xml('<p t="1000" d="500"><s t="0">hi</s></p>')
        assert len(doc.entries) == 1
        entry = doc.entries[0]
        assert entry.offset_ms == 1000
        assert entry.duration_ms == 500
        assert entry.end_ms == 1500
        assert len(entry.parts) == 1
        assert entry.parts[0].offset_ms == 0
        assert entry.parts[0].text == "hi"
        assert entry.text == "hi"

    def test_full_payload(self, paragraph_xml):
        doc = parse_caption_xml(paragraph_xml)
        assert [e.text for e in doc.entries] == ["Hello world", "again"]
        first = doc.entries[0]
        assert [p.text for p in first.parts] == ["Hello", " world"]
        assert [p.offset_ms for p in first.parts] == [0, 480]
        assert first.part_start_ms(first.parts[1]) == 1480

    def test_paragraph_without_parts(self):
        doc = parse_caption_xml('<timedtext><body><p t="10" d="20">plain</p></body></timedtext>')
        assert doc.entries[0].text == "plain"
        assert doc.entries[0].parts == []

    def test_paragraph_wins_over_text(self):
        xml = '<root><text start="9" dur="9">ignored</text><p t="1" d="2">used</p></root>'
        doc = parse_caption_xml(xml)
        assert [e.text for e in doc.entries] == ["used"]

    def test_fractional_millisecond_rounded(self):
        doc = parse_caption_xml('<p t="1000.6" d="499.5">x</p>')
        assert doc.entries[0].offset_ms == 1001
        assert doc.entries[0].duration_ms == 500

    def test_document_order_preserved(self):
        xml = '<body><p t="5000" d="1">late</p><p t="1000" d="1">early</p></body>'
        doc = parse_caption_xml(xml)
        assert [e.text for e in doc.entries] == ["late", "early"]


class TestTextSchema:

    def test_single_text(self):
        doc = parse_caption_xml('<text start="1.0" dur="0.5">hi</text>')
        entry = doc.entries[0]
        assert entry.offset_ms == 1000
        assert entry.duration_ms == 500
        assert entry.end_ms == 1500
        assert entry.parts == []
        assert entry.text == "hi"

    def test_full_payload(self, text_xml):
        doc = parse_caption_xml(text_xml)
        assert len(doc.entries) == 2
        assert doc.entries[0].offset_ms == 500
        assert doc.entries[0].duration_ms == 1250
        assert doc.entries[1].offset_ms == 1750
        assert doc.entries[1].duration_ms == 2000

    def test_double_escaped_entities_decoded(self, text_xml):
        doc = parse_caption_xml(text_xml)
        assert doc.entries[1].text == "it's second"

    def test_seconds_rounded_to_nearest_ms(self):
        doc = parse_caption_xml('<transcript><text start="2.0004" dur="0.0016">x</text></transcript>')
        assert doc.entries[0].offset_ms == 2000
        assert doc.entries[0].duration_ms == 2


class TestLenientTiming:

    @pytest.mark.parametrize("xml", [
        "<p>x</p>",
        '<p t="" d="">x</p>',
        '<p t="abc" d="1s">x</p>',
        '<p t="NaN" d="inf">x</p>',
        "<text>x</text>",
        '<text start="soon" dur="">x</text>',
        '<text start="1e306" dur="1e306">x</text>',
    ])
    def test_missing_or_bad_timing_is_zero(self, xml):
        entry = parse_caption_xml(xml).entries[0]
        assert entry.offset_ms == 0
        assert entry.duration_ms == 0
        assert entry.end_ms == 0

    def test_bad_part_offset_is_zero(self):
        entry = parse_caption_xml('<p t="100" d="10"><s t="?">a</s><s>b</s></p>').entries[0]
        assert [p.offset_ms for p in entry.parts] == [0, 0]


class TestTextExtraction:

    def test_inline_markup_concatenated(self):
        xml = '<text start="0" dur="1">one <font color="#fff">two</font> three</text>'
        assert parse_caption_xml(xml).entries[0].text == "one two three"

    def test_xml_entities_decoded(self):
        xml = '<p t="0" d="1">Tom &amp; Jerry &lt;3</p>'
        assert parse_caption_xml(xml).entries[0].text == "Tom & Jerry <3"

    def test_paragraph_text_decoded_once(self):
        xml = '<p t="0" d="1"><s>rock&amp;not roll</s><s> &amp;amp; more</s></p>'
        entry = parse_caption_xml(xml).entries[0]
        assert entry.text == "rock&not roll &amp; more"
        assert [p.text for p in entry.parts] == ["rock&not roll", " &amp; more"]

    def test_numeric_character_reference(self):
        xml = '<text start="0" dur="1">caf&#233;</text>'
        assert parse_caption_xml(xml).entries[0].text == "café"


class TestEmptyAndInvalid:

    def test_no_known_elements_is_empty_document(self):
        doc = parse_caption_xml("<timedtext><head/><body/></timedtext>")
        assert doc.entries == []
        assert len(doc) == 0

    def test_empty_payload_raises(self):
        with pytest.raises(MalformedResponse):
            parse_caption_xml("   ")

    def test_not_xml_raises(self):
        with pytest.raises(MalformedResponse) as excinfo:
            parse_caption_xml("<p t='1'>unclosed", video_id="abc123")
        assert excinfo.value.video_id == "abc123"
        assert excinfo.value.stage == "parse"
