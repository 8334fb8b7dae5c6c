"""InnerTube API key extraction from watch-page HTML."""

from __future__ import annotations

import logging
import re

from innertube_captions.config import API_KEY_PATTERN, RECAPTCHA_MARKER
from innertube_captions.errors import Blocked, KeyNotFound

logger = logging.getLogger(__name__)

_API_KEY_RE = re.compile(API_KEY_PATTERN)


def extract_api_key(html: str, video_id: str) -> str:
    """Find the InnerTube API key embedded in the watch page.

    WHY: The internal player endpoint only answers requests carrying the
    key the web client was served. It rotates per deployment, so it is
    scraped fresh on every call.

    HOW: One regex search for the quoted key field. On a miss, the page is
    checked for the reCAPTCHA interstitial to tell a block apart from a
    markup change.

    RULES:
    - Key present: returned exactly, whatever surrounds it
    - Key absent, challenge present: Blocked
    - Key absent, no challenge: KeyNotFound
    """
    match = _API_KEY_RE.search(html)
    if match:
        return match.group(1)

    if RECAPTCHA_MARKER in html:
        logger.warning("Anti-bot challenge served for %s", video_id)
        raise Blocked(video_id)

    logger.warning("API key pattern missing from watch page for %s", video_id)
    raise KeyNotFound(video_id)
