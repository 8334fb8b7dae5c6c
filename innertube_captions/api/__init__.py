"""HTTP side of the pipeline — watch page, InnerTube player, caption payload.

WHY: Only three requests touch the network. Keeping them in one package
makes the pure scraping and parsing code in core/ testable without HTTP.

HOW: CaptionClient wraps httpx.AsyncClient; CaptionTrack is the typed form
of one caption track descriptor from the player response.

RULES:
- All HTTP calls go through CaptionClient (no direct httpx usage elsewhere)
- No request carries credentials beyond the scraped InnerTube key
"""

from innertube_captions.api.client import CaptionClient, fetch_captions
from innertube_captions.api.models import CaptionTrack

__all__ = ["CaptionClient", "CaptionTrack", "fetch_captions"]
