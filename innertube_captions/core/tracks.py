"""Caption track discovery and selection from an InnerTube player response.

WHY: The player response is returned unvalidated by the API client. This
module is where its caption metadata is checked, turned into typed
CaptionTrack objects, and narrowed down to the one track to fetch.

HOW: list_tracks() walks captions.playerCaptionsTracklistRenderer
.captionTracks, validates the descriptors against a JSON schema, and wraps
them. select_track() applies a selection policy: a plain callable that
receives the non-empty track list and returns one track.

RULES:
- Missing metadata path or an empty list: NoCaptionsAvailable
- A descriptor without a string baseUrl: MalformedResponse
- Bot-detection playability status: Blocked
- Default policy is first_track; prefer_language() builds a
  language-aware policy that falls back to the first track
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import jsonschema

from innertube_captions.api.models import CaptionTrack
from innertube_captions.errors import (
    STAGE_TRACKS,
    Blocked,
    MalformedResponse,
    NoCaptionsAvailable,
)

logger = logging.getLogger(__name__)

SelectionPolicy = Callable[[list[CaptionTrack]], CaptionTrack]

CAPTION_TRACKS_SCHEMA: dict = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["baseUrl"],
        "properties": {
            "baseUrl": {"type": "string", "minLength": 1},
            "languageCode": {"type": "string"},
            "kind": {"type": "string"},
            "isTranslatable": {"type": "boolean"},
        },
    },
}

_LOGIN_REQUIRED = "LOGIN_REQUIRED"
_BOT_DETECTED_MARKER = "not a bot"


def first_track(tracks: list[CaptionTrack]) -> CaptionTrack:
    """Pick the first track in the order the platform listed them."""
    return tracks[0]


def prefer_language(language_code: str) -> SelectionPolicy:
    """Build a policy that picks the first track in the given language.

    Falls back to the first track when no track declares that language.
    """

    def _policy(tracks: list[CaptionTrack]) -> CaptionTrack:
        for track in tracks:
            if track.language_code == language_code:
                return track
        logger.debug("No %s track among %d, using first", language_code, len(tracks))
        return tracks[0]

    return _policy


def list_tracks(player_response: dict, video_id: str) -> list[CaptionTrack]:
    """Return every caption track listed in a player response.

    Raises:
        Blocked: If the response reports bot detection.
        NoCaptionsAvailable: If the caption list is absent or empty.
        MalformedResponse: If a descriptor fails schema validation.
    """
    _check_playability(player_response, video_id)

    captions = player_response.get("captions")
    renderer = captions.get("playerCaptionsTracklistRenderer") if isinstance(captions, dict) else None
    raw_tracks = renderer.get("captionTracks") if isinstance(renderer, dict) else None
    if not raw_tracks:
        raise NoCaptionsAvailable(video_id)

    try:
        jsonschema.validate(instance=raw_tracks, schema=CAPTION_TRACKS_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise MalformedResponse(
            f"Invalid caption track descriptor: {exc.message}",
            video_id=video_id,
            stage=STAGE_TRACKS,
        ) from exc

    tracks = [CaptionTrack.from_dict(raw) for raw in raw_tracks]
    logger.debug("Found %d caption track(s) for %s", len(tracks), video_id)
    return tracks


def select_track(
    player_response: dict,
    video_id: str,
    policy: SelectionPolicy | None = None,
) -> CaptionTrack:
    """Choose one caption track from a player response.

    Args:
        player_response: Decoded InnerTube player JSON, as returned.
        video_id: Video ID, for error context.
        policy: Selection policy; defaults to first_track.

    Returns:
        The selected CaptionTrack.
    """
    tracks = list_tracks(player_response, video_id)
    track = (policy or first_track)(tracks)
    logger.debug("Selected %s track (kind=%s) for %s", track.language_code, track.kind, video_id)
    return track


def _check_playability(player_response: dict, video_id: str) -> None:
    status = player_response.get("playabilityStatus")
    if not isinstance(status, dict) or status.get("status") != _LOGIN_REQUIRED:
        return
    reason = status.get("reason") or ""
    if _BOT_DETECTED_MARKER in reason:
        raise Blocked(video_id, stage=STAGE_TRACKS, reason=reason)
