"""InnerTube response dataclasses.

WHY: The player response is a large, undocumented JSON document. The only
part this package consumes is the caption track list; a typed dataclass
makes the fields we rely on explicit.

HOW: CaptionTrack maps one entry of
captions.playerCaptionsTracklistRenderer.captionTracks. from_dict() parses
a raw descriptor that has already passed schema validation.

RULES:
- base_url is the only required field
- name is flattened from either {"simpleText": ...} or {"runs": [...]}
- kind is "asr" for auto-generated tracks, absent for uploaded ones
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CaptionTrack:
    """One available caption track for a video.

    RULES:
    - base_url is an ephemeral, signed URL; never persist or reuse it
    - language_code is the platform's BCP-47-ish code ("en", "pt-BR")
    """

    base_url: str
    language_code: str | None = None
    name: str | None = None
    kind: str | None = None
    is_translatable: bool = False

    @property
    def is_auto_generated(self) -> bool:
        return self.kind == "asr"

    @classmethod
    def from_dict(cls, data: dict) -> CaptionTrack:
        return cls(
            base_url=data["baseUrl"],
            language_code=data.get("languageCode"),
            name=_flatten_text(data.get("name")),
            kind=data.get("kind"),
            is_translatable=bool(data.get("isTranslatable", False)),
        )


def _flatten_text(value: object) -> str | None:
    """Collapse an InnerTube text object into a plain string.

    HOW: InnerTube renders labels either as {"simpleText": "English"} or as
    {"runs": [{"text": "Eng"}, {"text": "lish"}]}.
    """
    if isinstance(value, str):
        return value
    if not isinstance(value, dict):
        return None
    if "simpleText" in value:
        return value["simpleText"]
    runs = value.get("runs")
    if isinstance(runs, list):
        return "".join(run.get("text", "") for run in runs if isinstance(run, dict))
    return None
