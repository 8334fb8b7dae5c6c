"""Shared test fixtures for the innertube_captions test suite.

WHY: Several test modules need the same watch page, player response, and
caption payloads. Centralizing them keeps every test on the same shapes the
platform actually serves.

HOW: Module-level constants hold the raw strings/dicts; pytest fixtures hand
out fresh copies. The make_transport, happy_routes, and run_with_client
fixtures hand out factories: an httpx.MockTransport routed by URL path, the
routes of a successful run, and a runner that drives a CaptionClient over
the mock transport, so CaptionClient is exercised without a network.

RULES:
- No test touches the real network
- Payload shapes mirror real platform responses, trimmed to what we read
- The video ID is always "abc123" and the API key always "XYZ"
"""

import asyncio
import copy
from typing import Awaitable, Callable, Dict, List, Optional

import httpx
import pytest

from innertube_captions.api.client import CaptionClient

VIDEO_ID = "abc123"
API_KEY = "XYZ"
TRACK_URL = "http://track/1"

WATCH_HTML = (
    "<!DOCTYPE html><html><head><script>"
    'ytcfg.set({"INNERTUBE_API_KEY":"XYZ","INNERTUBE_CLIENT_NAME":"WEB"});'
    "</script></head><body><div id=\"player\"></div></body></html>"
)

RECAPTCHA_HTML = (
    "<html><body><form id=\"captcha-form\">"
    '<div class="g-recaptcha" data-sitekey="abc"></div>'
    "</form></body></html>"
)

PLAYER_RESPONSE: Dict = {
    "playabilityStatus": {"status": "OK"},
    "videoDetails": {"videoId": VIDEO_ID, "title": "Test video"},
    "captions": {
        "playerCaptionsTracklistRenderer": {
            "captionTracks": [
                {
                    "baseUrl": TRACK_URL,
                    "name": {"simpleText": "English (auto-generated)"},
                    "languageCode": "en",
                    "kind": "asr",
                    "isTranslatable": True,
                },
            ],
        },
    },
}

PARAGRAPH_XML = (
    '<?xml version="1.0" encoding="utf-8" ?>'
    '<timedtext format="3"><body>'
    '<p t="1000" d="2500"><s ac="0">Hello</s><s t="480" ac="0"> world</s></p>'
    '<p t="3600" d="1200"><s ac="0">again</s></p>'
    "</body></timedtext>"
)

TEXT_XML = (
    '<?xml version="1.0" encoding="utf-8" ?><transcript>'
    '<text start="0.5" dur="1.25">first line</text>'
    '<text start="1.75" dur="2">it&amp;#39;s second</text>'
    "</transcript>"
)

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def watch_html() -> str:
    return WATCH_HTML


@pytest.fixture
def player_response() -> Dict:
    return copy.deepcopy(PLAYER_RESPONSE)


@pytest.fixture
def paragraph_xml() -> str:
    return PARAGRAPH_XML


@pytest.fixture
def text_xml() -> str:
    return TEXT_XML


def _make_transport(
    routes: Dict[str, Handler],
    seen: Optional[List[httpx.Request]] = None,
) -> httpx.MockTransport:
    """Route requests to handlers keyed by "METHOD host/path".

    Unrouted requests get a 404 so a wrong URL fails loudly.
    """

    def _handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        key = "{} {}{}".format(request.method, request.url.host, request.url.path)
        handler = routes.get(key)
        if handler is None:
            return httpx.Response(404, text="no route for " + key)
        return handler(request)

    return httpx.MockTransport(_handler)


def _happy_routes(xml: str = PARAGRAPH_XML, player: Optional[Dict] = None) -> Dict[str, Handler]:
    """Routes for a full successful pipeline run against the default settings."""
    body = player if player is not None else PLAYER_RESPONSE
    return {
        "GET www.youtube.com/watch": lambda request: httpx.Response(200, text=WATCH_HTML),
        "POST www.youtube.com/youtubei/v1/player": lambda request: httpx.Response(200, json=body),
        "GET track/1": lambda request: httpx.Response(200, text=xml),
    }


def _run_with_client(
    transport: httpx.MockTransport,
    action: Callable[[CaptionClient], Awaitable],
    **kwargs,
):
    """Run action(client) on a CaptionClient wired to the mock transport.

    HOW: The AsyncClient is borrowed by CaptionClient, so it is opened and
    closed here; asyncio.run() drives the coroutine from a sync test.
    """

    async def _run():
        async with httpx.AsyncClient(transport=transport) as http_client:
            async with CaptionClient(http_client=http_client, **kwargs) as client:
                return await action(client)

    return asyncio.run(_run())


@pytest.fixture
def video_id() -> str:
    return VIDEO_ID


@pytest.fixture
def api_key() -> str:
    return API_KEY


@pytest.fixture
def recaptcha_html() -> str:
    return RECAPTCHA_HTML


@pytest.fixture
def make_transport():
    """Factory: make_transport(routes, seen=None) -> httpx.MockTransport."""
    return _make_transport


@pytest.fixture
def happy_routes():
    """Factory: happy_routes(xml=PARAGRAPH_XML, player=None) -> routes dict."""
    return _happy_routes


@pytest.fixture
def run_with_client():
    """Factory: run_with_client(transport, action, **client_kwargs) -> result."""
    return _run_with_client
