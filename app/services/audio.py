"""
Bilingual audio resolution.

An audio field arrives either as a single URL (older records carried one clip
for both languages) or as a Czech/English pair. Both shapes are normalized to
a ``BilingualPair`` before a clip is picked for the active UI language.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Union

from app.schemas.guest import AudioPair

Lang = Literal["cs", "en"]

LANGUAGES = ("cs", "en")

NO_AUDIO_MESSAGES = {
    "cs": "Pro tento jazyk zatím není audio nahrané.",
    "en": "No audio uploaded for this language yet.",
}


@dataclass(frozen=True)
class SingleUrl:
    url: str


@dataclass(frozen=True)
class BilingualPair:
    cs: Optional[str] = None
    en: Optional[str] = None

    def get(self, lang: Lang) -> Optional[str]:
        return self.cs if lang == "cs" else self.en


AudioSource = Union[SingleUrl, BilingualPair]


def _url_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def to_source(value: Any) -> Optional[AudioSource]:
    """Tag a raw audio field: None, a URL string, a mapping or an AudioPair"""
    if value is None or isinstance(value, (SingleUrl, BilingualPair)):
        return value
    if isinstance(value, str):
        return SingleUrl(value) if value else None
    if isinstance(value, AudioPair):
        return BilingualPair(cs=value.cs, en=value.en)
    if isinstance(value, Mapping):
        cs = _url_or_none(value.get("cs")) or _url_or_none(value.get("cz"))
        return BilingualPair(cs=cs, en=_url_or_none(value.get("en")))
    raise TypeError(f"Unsupported audio field: {type(value).__name__}")


def as_audio(value: Any) -> BilingualPair:
    """Normalize an audio field so each language falls back to the other"""
    source = to_source(value)
    if source is None:
        return BilingualPair()
    if isinstance(source, SingleUrl):
        return BilingualPair(cs=source.url, en=source.url)
    return BilingualPair(cs=source.cs or source.en, en=source.en or source.cs)


def pick_audio(value: Any, lang: Lang) -> Optional[str]:
    """Clip to play for ``lang``: same language first, then the other one.

    Returns None when the guest has no clip in either language.
    """
    pair = as_audio(value)
    other: Lang = "en" if lang == "cs" else "cs"
    return pair.get(lang) or pair.get(other)


def no_audio_message(lang: Lang) -> str:
    return NO_AUDIO_MESSAGES[lang]
