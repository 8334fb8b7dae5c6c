"""Async HTTP client for the platform's watch page and InnerTube API.

WHY: Getting captions without an official API takes three requests against
undocumented endpoints: the watch page (to scrape the API key), the
internal player endpoint (to find caption tracks), and the caption track
URL itself. This module owns all three requests and chains them with the
pure scraping and parsing steps into one pipeline.

HOW: Uses httpx.AsyncClient. CaptionClient is an async context manager;
enter it to open a connection pool (or hand it an existing AsyncClient to
share one), exit to close what it opened. Each stage is a separate method:
fetch_watch_page → extract_api_key → fetch_player_response → select_track
→ fetch_caption_xml → parse_caption_xml. get_captions() runs them in order.

RULES:
- Stages run strictly in sequence; the first failure aborts the pipeline
- No retries, no caching: every call re-fetches page, key, and tracks
- Headers are passed per request; nothing call-specific is kept on the
  client, so one CaptionClient can serve concurrent get_captions() calls
- API keys and caption URLs are never stored or logged
- Transport failures are wrapped in UpstreamUnavailable(status_code=None)
"""

from __future__ import annotations

import logging

import httpx

from innertube_captions.api.models import CaptionTrack
from innertube_captions.config import ClientSettings
from innertube_captions.core.identifier import resolve_video_id
from innertube_captions.core.ir import CaptionDocument
from innertube_captions.core.keys import extract_api_key
from innertube_captions.core.parser import parse_caption_xml
from innertube_captions.core.tracks import SelectionPolicy, select_track
from innertube_captions.errors import (
    STAGE_PAGE,
    STAGE_PAYLOAD,
    STAGE_PLAYER,
    MalformedResponse,
    UpstreamUnavailable,
)

logger = logging.getLogger(__name__)


class CaptionClient:
    """Async client that turns a video reference into a CaptionDocument.

    WHY: Provides one typed entry point for the whole scrape-and-parse
    chain, while still exposing each stage for callers that want to
    cache or retry part of it themselves.

    HOW: Wraps httpx.AsyncClient. When http_client is given it is used
    as-is and left open on exit; otherwise one is created on enter with
    the configured timeout.

    RULES:
    - Use as: async with CaptionClient() as client: ...
    - settings defaults to ClientSettings() (no environment reads)
    - policy is the default track selection policy for get_captions()
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
        policy: SelectionPolicy | None = None,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._policy = policy
        self._client: httpx.AsyncClient | None = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> CaptionClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._settings.timeout_s),
                follow_redirects=True,
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the connection pool a fetch stage should use."""
        if self._client is None:
            raise RuntimeError(
                "No open connection pool for caption fetches; enter the client "
                "first (async with CaptionClient() as client) or pass http_client="
            )
        return self._client

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def get_captions(
        self,
        reference: str,
        policy: SelectionPolicy | None = None,
    ) -> CaptionDocument:
        """Fetch and parse one caption track for a video.

        Args:
            reference: Watch URL, short link, embed URL, or bare video ID.
            policy: Track selection policy; overrides the client default.

        Returns:
            The parsed CaptionDocument.

        Raises:
            InvalidReference, UpstreamUnavailable, Blocked, KeyNotFound,
            MalformedResponse, NoCaptionsAvailable.
        """
        video_id = resolve_video_id(reference)
        html = await self.fetch_watch_page(video_id)
        api_key = extract_api_key(html, video_id)
        player_response = await self.fetch_player_response(video_id, api_key)
        track = select_track(player_response, video_id, policy or self._policy)
        raw_xml = await self.fetch_caption_xml(track.base_url, video_id)
        document = parse_caption_xml(raw_xml, video_id)
        logger.info(
            "Fetched %d caption entries for %s (%s)",
            len(document.entries), video_id, track.language_code,
        )
        return document

    # ------------------------------------------------------------------
    # Stage 1: Watch page
    # ------------------------------------------------------------------

    async def fetch_watch_page(self, video_id: str) -> str:
        """GET the video's watch page and return its HTML.

        RULES:
        - Browser User-Agent and Accept-Language are always sent
        - Non-2xx raises UpstreamUnavailable
        """
        resp = await self._request(
            "GET",
            self._settings.watch_url,
            video_id,
            STAGE_PAGE,
            params={"v": video_id},
            headers={
                "User-Agent": self._settings.user_agent,
                "Accept-Language": self._settings.accept_language,
            },
        )
        return resp.text

    # ------------------------------------------------------------------
    # Stage 2: InnerTube player endpoint
    # ------------------------------------------------------------------

    async def fetch_player_response(self, video_id: str, api_key: str) -> dict:
        """POST to the InnerTube player endpoint and return the decoded JSON.

        WHY: The player response is where the caption track list lives.
        It is returned unmodified; select_track() does the validation.

        RULES:
        - api_key is sent as the ``key`` query parameter
        - Body is {"context": {"client": {...}}, "videoId": video_id}
        - Non-2xx raises UpstreamUnavailable
        - A body that is not a JSON object raises MalformedResponse
        """
        body = {
            "context": self._settings.client_context(),
            "videoId": video_id,
        }
        resp = await self._request(
            "POST",
            self._settings.player_url,
            video_id,
            STAGE_PLAYER,
            params={"key": api_key},
            headers={
                "Content-Type": "application/json",
                "User-Agent": self._settings.user_agent,
            },
            json=body,
        )

        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedResponse(
                "InnerTube player response is not valid JSON",
                video_id=video_id,
                stage=STAGE_PLAYER,
            ) from exc

        if not isinstance(data, dict):
            raise MalformedResponse(
                f"InnerTube player response is a JSON {type(data).__name__}, not an object",
                video_id=video_id,
                stage=STAGE_PLAYER,
            )
        return data

    # ------------------------------------------------------------------
    # Stage 3: Caption payload
    # ------------------------------------------------------------------

    async def fetch_caption_xml(self, url: str, video_id: str | None = None) -> str:
        """GET a caption track URL and return the XML text.

        RULES:
        - Non-2xx raises UpstreamUnavailable
        - An empty body with a 2xx status also raises UpstreamUnavailable;
          it is an upstream anomaly, not a captionless video
        """
        resp = await self._request(
            "GET",
            url,
            video_id,
            STAGE_PAYLOAD,
            headers={"User-Agent": self._settings.user_agent},
        )
        if not resp.text.strip():
            raise UpstreamUnavailable(
                "Caption track returned an empty body",
                video_id=video_id,
                stage=STAGE_PAYLOAD,
                status_code=resp.status_code,
            )
        return resp.text

    async def fetch_track(self, track: CaptionTrack, video_id: str | None = None) -> CaptionDocument:
        """Fetch and parse a specific, already selected track."""
        raw_xml = await self.fetch_caption_xml(track.base_url, video_id)
        return parse_caption_xml(raw_xml, video_id)

    # ------------------------------------------------------------------
    # Transport helper
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        video_id: str | None,
        stage: str,
        **kwargs,
    ) -> httpx.Response:
        client = self._ensure_client()
        logger.debug("%s %s stage for %s", method, stage, video_id)
        try:
            resp = await client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            raise UpstreamUnavailable(
                f"{stage} request failed: {exc.__class__.__name__}",
                video_id=video_id,
                stage=stage,
            ) from exc

        if not resp.is_success:
            raise UpstreamUnavailable(
                f"{stage} request returned an error status",
                video_id=video_id,
                stage=stage,
                status_code=resp.status_code,
                url=str(resp.request.url),
            )
        return resp


async def fetch_captions(
    reference: str,
    settings: ClientSettings | None = None,
    policy: SelectionPolicy | None = None,
) -> CaptionDocument:
    """Open a CaptionClient for a single get_captions() call."""
    async with CaptionClient(settings=settings, policy=policy) as client:
        return await client.get_captions(reference)
