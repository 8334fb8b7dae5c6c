"""Typed failures raised by the caption pipeline.

WHY: Each pipeline stage fails for a different reason and callers must react
differently: a bad reference is the caller's fault, an anti-bot wall needs a
long backoff, a missing key means the scraping pattern is out of date, and a
captionless video is a legitimate terminal state.

HOW: One base class, CaptionError, carrying the video ID and the stage that
failed. Every concrete failure subclasses it so callers can catch the whole
family or a single kind.

RULES:
- Every error carries video_id (None only when it could not be derived)
- Every error carries stage, one of the STAGE_* constants
- Messages include both, for log-grep diagnosis
"""

from __future__ import annotations

STAGE_RESOLVE = "resolve"
STAGE_PAGE = "page"
STAGE_KEY = "key"
STAGE_PLAYER = "player"
STAGE_TRACKS = "tracks"
STAGE_PAYLOAD = "payload"
STAGE_PARSE = "parse"


class CaptionError(Exception):
    """Base class for every failure of the caption pipeline."""

    def __init__(self, message: str, video_id: str | None = None, stage: str | None = None) -> None:
        self.video_id = video_id
        self.stage = stage
        self.message = message
        super().__init__(f"[{stage or 'unknown'}] {message} (video_id={video_id})")


class InvalidReference(CaptionError, ValueError):
    """No video ID could be derived from the user-supplied reference.

    Not retriable without fixing the input.
    """

    def __init__(self, reference: str) -> None:
        self.reference = reference
        super().__init__(f"Invalid video reference: {reference!r}", stage=STAGE_RESOLVE)


class UpstreamUnavailable(CaptionError):
    """A network stage returned a non-success status, or no response at all.

    WHY: Usually transient. Callers may retry the whole pipeline with backoff.

    RULES:
    - status_code is None when the transport itself failed
    - url is the request URL with the API key already embedded, so do
      not persist it
    """

    def __init__(
        self,
        message: str,
        video_id: str | None,
        stage: str,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.url = url
        detail = f"{message} (status={status_code})" if status_code is not None else message
        super().__init__(detail, video_id=video_id, stage=stage)


class Blocked(CaptionError):
    """The platform served an anti-automation challenge instead of content.

    Surface to the end user as a rate-limit condition.
    """

    def __init__(self, video_id: str, stage: str = STAGE_KEY, reason: str | None = None) -> None:
        self.reason = reason
        message = "Request blocked by the platform's anti-bot challenge"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, video_id=video_id, stage=stage)


class KeyNotFound(CaptionError):
    """The watch page no longer contains the API key where expected.

    The scraping pattern needs maintenance; backing off will not help.
    """

    def __init__(self, video_id: str) -> None:
        super().__init__("InnerTube API key not found in watch page", video_id=video_id, stage=STAGE_KEY)


class MalformedResponse(CaptionError):
    """A JSON or XML payload was structurally invalid."""


class NoCaptionsAvailable(CaptionError):
    """The video has no caption tracks."""

    def __init__(self, video_id: str) -> None:
        super().__init__("No caption tracks available", video_id=video_id, stage=STAGE_TRACKS)
