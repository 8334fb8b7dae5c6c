"""InnerTube Captions — timed captions for platform videos without an official API.

Resolves a video reference, scrapes the internal API key from the watch page,
asks the InnerTube player endpoint for caption tracks, and parses the caption
XML (either schema variant) into a CaptionDocument.
"""

from innertube_captions.api.client import CaptionClient, fetch_captions
from innertube_captions.config import ClientSettings
from innertube_captions.core.ir import CaptionDocument, CaptionEntry, CaptionPart
from innertube_captions.errors import (
    Blocked,
    CaptionError,
    InvalidReference,
    KeyNotFound,
    MalformedResponse,
    NoCaptionsAvailable,
    UpstreamUnavailable,
)

__version__ = "0.1.0"

__all__ = [
    "Blocked",
    "CaptionClient",
    "CaptionDocument",
    "CaptionEntry",
    "CaptionError",
    "CaptionPart",
    "ClientSettings",
    "InvalidReference",
    "KeyNotFound",
    "MalformedResponse",
    "NoCaptionsAvailable",
    "UpstreamUnavailable",
    "fetch_captions",
]
