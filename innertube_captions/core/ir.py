"""Normalized caption dataclasses shared by both XML schema variants.

WHY: The platform serves caption payloads in two different XML shapes
(paragraph/sentence with millisecond timing, or flat text with fractional
seconds). Callers should never care which one arrived, so both are parsed
into the same three dataclasses.

HOW: Three dataclasses form a hierarchy:
  CaptionPart     — one sub-unit (usually a word) inside an entry
  CaptionEntry    — one displayed caption unit with timing and parts
  CaptionDocument — the ordered entries of one caption track

RULES:
- All times are integer milliseconds
- CaptionPart.offset_ms is relative to its entry's start, never absolute
- end_ms is always derived (offset_ms + duration_ms), never stored
- parts is empty for the flat-text schema; that is a valid state
- Entries keep document order; nothing here sorts them
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CaptionPart:
    """A sub-unit of a caption entry, typically one word.

    RULES:
    - offset_ms: milliseconds from the owning entry's start
    """

    text: str
    offset_ms: int = 0


@dataclass
class CaptionEntry:
    """One caption unit as displayed on screen.

    WHY: This is what callers iterate: rendered text plus when it appears
    and for how long.

    HOW: Created by the XML parser, one per top-level caption element.
    text is the concatenation of every descendant text node, so inline
    formatting markup and word parts collapse into a single string.

    RULES:
    - offset_ms: start from the beginning of the track
    - duration_ms: display length; absent upstream means 0
    - end_ms: computed on each access
    - parts: ordered sub-units, possibly empty
    """

    text: str
    offset_ms: int = 0
    duration_ms: int = 0
    parts: list[CaptionPart] = field(default_factory=list)

    @property
    def end_ms(self) -> int:
        return self.offset_ms + self.duration_ms

    def part_start_ms(self, part: CaptionPart) -> int:
        """Absolute start of one of this entry's parts."""
        return self.offset_ms + part.offset_ms


@dataclass
class CaptionDocument:
    """The parsed result of one caption track fetch.

    RULES:
    - entries are in document order, which is temporal order for
      well-formed input; callers needing a strict guarantee must sort
    - An empty entries list is a valid document
    """

    entries: list[CaptionEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def text(self) -> str:
        return "\n".join(entry.text for entry in self.entries)

    def get_by_time(self, position_ms: int) -> CaptionEntry | None:
        """Return the first entry displayed at position_ms, or None.

        HOW: Linear scan in document order; an entry matches when
        offset_ms <= position_ms <= end_ms.
        """
        for entry in self.entries:
            if entry.offset_ms <= position_ms <= entry.end_ms:
                return entry
        return None
