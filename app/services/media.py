"""
Media slots, storage keys and public URL construction
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

PHOTOS_BUCKET = "photos"
AUDIO_OFFICIAL_BUCKET = "audio-official"
AUDIO_FUNNY_BUCKET = "audio-funny"

BUCKETS = (PHOTOS_BUCKET, AUDIO_OFFICIAL_BUCKET, AUDIO_FUNNY_BUCKET)

# Checked in order against the declared content type
_MIME_EXTENSIONS = (
    (("png",), "png"),
    (("webp",), "webp"),
    (("jpeg", "jpg"), "jpg"),
    (("mpeg", "mp3"), "mp3"),
    (("wav",), "wav"),
)

# Characters encodeURIComponent leaves untouched besides alphanumerics and "_.-~"
_URI_COMPONENT_SAFE = "!*'()"


@dataclass(frozen=True)
class MediaSlot:
    """One uploadable file part and the column that stores its key"""

    field: str
    bucket: str
    column: str
    lang: Optional[str]
    fallback_ext: str

    def storage_key(self, guest_id: int, content_type: Optional[str]) -> str:
        ext = mime_extension(content_type, self.fallback_ext)
        if self.lang is None:
            return f"{guest_id}.{ext}"
        return f"{guest_id}_{self.lang}.{ext}"


PHOTO_SLOT = MediaSlot("photo", PHOTOS_BUCKET, "photo_path", None, "jpg")

MEDIA_SLOTS = (
    PHOTO_SLOT,
    MediaSlot("audio_official_cs", AUDIO_OFFICIAL_BUCKET, "audio_official_cs_path", "cs", "mp3"),
    MediaSlot("audio_official_en", AUDIO_OFFICIAL_BUCKET, "audio_official_en_path", "en", "mp3"),
    MediaSlot("audio_funny_cs", AUDIO_FUNNY_BUCKET, "audio_funny_cs_path", "cs", "mp3"),
    MediaSlot("audio_funny_en", AUDIO_FUNNY_BUCKET, "audio_funny_en_path", "en", "mp3"),
)

PATH_COLUMNS = tuple(slot.column for slot in MEDIA_SLOTS)


def mime_extension(content_type: Optional[str], fallback: str) -> str:
    """Infer a file extension from a declared MIME type"""
    declared = (content_type or "").lower()
    for needles, ext in _MIME_EXTENSIONS:
        if any(needle in declared for needle in needles):
            return ext
    return fallback


def public_url(base: str, bucket: str, path: Optional[str]) -> Optional[str]:
    """Build the public URL of a stored object, or None when there is no object"""
    if not path:
        return None
    return f"{base.rstrip('/')}/{bucket}/{quote(path, safe=_URI_COMPONENT_SAFE)}"


def is_media_url(url: str, base: str) -> bool:
    """Whether a URL points into the photo bucket or one of the audio buckets"""
    base = base.rstrip("/") + "/"
    if not url.startswith(base):
        return False
    bucket, sep, _ = url[len(base):].partition("/")
    # Bucket names may carry a deployment prefix
    return bool(sep) and (bucket.endswith(PHOTOS_BUCKET) or "audio-" in bucket)
