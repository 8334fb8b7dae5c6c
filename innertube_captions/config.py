"""Configuration constants, pinned InnerTube client context, and settings.

WHY: Every stage of the caption pipeline depends on an implicit, unversioned
contract with the platform: URL templates, the client name/version the
internal API accepts, the markup pattern the API key hides behind, and the
anti-bot marker. Keeping these as plain module-level data (not buried in
logic) means a markup change is a one-line fix here.

HOW: Constants are defined at module level. ClientSettings bundles the
values a CaptionClient needs and can optionally be populated from the
environment (via python-dotenv) with ClientSettings.from_env().

RULES:
- Nothing here reads the environment on import
- ClientSettings.from_env() is the only place .env is loaded
- The client context is pinned (hl="en", gl="US", WEB client)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Platform endpoints
# ---------------------------------------------------------------------------

BASE_URL = "https://www.youtube.com"
WATCH_PATH = "/watch"
PLAYER_PATH = "/youtubei/v1/player"

# ---------------------------------------------------------------------------
# Pinned InnerTube client context
# ---------------------------------------------------------------------------

CLIENT_LANGUAGE = "en"
CLIENT_REGION = "US"
CLIENT_NAME = "WEB"
CLIENT_VERSION = "2.20210721.00.00"

# ---------------------------------------------------------------------------
# Request headers
# ---------------------------------------------------------------------------

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
ACCEPT_LANGUAGE = "en-US,en;q=0.9"

# ---------------------------------------------------------------------------
# Scraping contract
# ---------------------------------------------------------------------------

API_KEY_PATTERN = r'"INNERTUBE_API_KEY":\s*"([a-zA-Z0-9_-]+)"'
"""Quoted key field embedded in the watch page's ytcfg blob."""

RECAPTCHA_MARKER = 'class="g-recaptcha"'
"""Present on the interstitial served instead of the watch page when blocked."""

DEFAULT_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class ClientSettings:
    """Values a CaptionClient needs to talk to the platform.

    WHY: Tests and callers occasionally need to point the client elsewhere
    (a mock host, a newer client version) without monkeypatching module
    constants.

    HOW: A frozen dataclass with defaults taken from the module constants.
    from_env() overlays environment variables on top of the defaults.

    RULES:
    - base_url has no trailing slash
    - timeout_s is handed to the HTTP transport; the pipeline has no
      timeout policy of its own
    """

    base_url: str = BASE_URL
    user_agent: str = USER_AGENT
    accept_language: str = ACCEPT_LANGUAGE
    client_name: str = CLIENT_NAME
    client_version: str = CLIENT_VERSION
    language: str = CLIENT_LANGUAGE
    region: str = CLIENT_REGION
    timeout_s: float = DEFAULT_TIMEOUT_S

    @property
    def watch_url(self) -> str:
        return self.base_url.rstrip("/") + WATCH_PATH

    @property
    def player_url(self) -> str:
        return self.base_url.rstrip("/") + PLAYER_PATH

    def client_context(self) -> dict:
        """Build the ``context`` object sent with every InnerTube request."""
        return {
            "client": {
                "hl": self.language,
                "gl": self.region,
                "clientName": self.client_name,
                "clientVersion": self.client_version,
            }
        }

    @classmethod
    def from_env(cls) -> ClientSettings:
        """Load settings from the environment, reading a .env file if present.

        WHY: Deployments pin a newer client version or user agent when the
        platform starts rejecting the defaults, without a code change.

        HOW: python-dotenv populates os.environ from .env, then each
        INNERTUBE_* variable overrides the matching default.

        RULES:
        - Unset or empty variables keep the default
        - INNERTUBE_TIMEOUT_S must parse as a float; ValueError otherwise
        """
        load_dotenv()
        defaults = cls()
        timeout = os.getenv("INNERTUBE_TIMEOUT_S", "").strip()
        return cls(
            base_url=os.getenv("INNERTUBE_BASE_URL", "").strip() or defaults.base_url,
            user_agent=os.getenv("INNERTUBE_USER_AGENT", "").strip() or defaults.user_agent,
            client_version=(
                os.getenv("INNERTUBE_CLIENT_VERSION", "").strip() or defaults.client_version
            ),
            timeout_s=float(timeout) if timeout else defaults.timeout_s,
        )
