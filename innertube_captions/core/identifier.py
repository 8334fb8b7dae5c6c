"""Video ID extraction from free-form references.

WHY: Users paste watch URLs, short links, embed URLs, or bare IDs. The rest
of the pipeline needs exactly the opaque ID.

HOW: An ordered list of URL matchers is tried; the first one that matches
wins and no later matcher is consulted. When none match, the whole input is
taken as a bare ID if it does not look like a URL.

RULES:
- First match wins, not the longest or most specific match
- Bare-ID fallback only when the input has no "/" and no "youtube" substring
- Anything else raises InvalidReference
"""

from __future__ import annotations

import logging
import re

from innertube_captions.errors import InvalidReference

logger = logging.getLogger(__name__)

_REFERENCE_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("watch", re.compile(r"youtube\.com/watch\?v=([^&?/#]+)")),
    ("short", re.compile(r"youtu\.be/([^&?/#]+)")),
    ("embed", re.compile(r"youtube\.com/embed/([^&?/#]+)")),
    ("query", re.compile(r"[?&]v=([^&#]+)")),
]

_DOMAIN_MARKER = "youtube"


def resolve_video_id(reference: str) -> str:
    """Extract the video ID from a URL or bare ID.

    Args:
        reference: Watch URL, short link, embed URL, or bare video ID.

    Returns:
        The video ID.

    Raises:
        InvalidReference: If no ID can be derived.
    """
    candidate = (reference or "").strip()

    for name, pattern in _REFERENCE_PATTERNS:
        match = pattern.search(candidate)
        if match:
            logger.debug("Resolved %r via %s pattern", reference, name)
            return match.group(1)

    if candidate and "/" not in candidate and _DOMAIN_MARKER not in candidate:
        return candidate

    raise InvalidReference(reference)
