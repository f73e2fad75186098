"""
Gallery page state: guest grid, language and the detail overlay
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from app.core.errors import GuestDirectoryError
from app.schemas.guest import GuestView
from app.services.audio import Lang, LANGUAGES, pick_audio
from app.services.guest_service import GuestService
from app.services.player import AudioPlayer
from app.services.storage import StorageBackend

logger = logging.getLogger(__name__)

TEXTS = {
    "cs": {
        "empty": "Zatím žádní hosté.",
        "detail": "Profil hosta",
        "close": "Zavřít",
    },
    "en": {
        "empty": "No guests yet.",
        "detail": "Guest detail",
        "close": "Close",
    },
}


@dataclass(frozen=True)
class Closed:
    pass


@dataclass(frozen=True)
class Open:
    guest_id: int


OverlayState = Union[Closed, Open]


def overlay_from_query(guest: Optional[int]) -> OverlayState:
    return Open(guest) if guest is not None else Closed()


def parse_lang(value: Optional[str]) -> Lang:
    return value if value in LANGUAGES else "cs"


@dataclass
class GalleryPage:
    """Everything the gallery template needs for one render"""

    lang: Lang
    guests: List[GuestView]
    overlay: OverlayState = field(default_factory=Closed)

    @property
    def texts(self) -> dict:
        return TEXTS[self.lang]

    @property
    def open_guest(self) -> Optional[GuestView]:
        if not isinstance(self.overlay, Open):
            return None
        return next((g for g in self.guests if g.id == self.overlay.guest_id), None)

    def relation(self, guest: GuestView) -> str:
        return guest.relation.cs if self.lang == "cs" else guest.relation.en

    def about(self, guest: GuestView) -> Optional[str]:
        return guest.about.cs if self.lang == "cs" else guest.about.en

    def players(self, guest: GuestView) -> List[AudioPlayer]:
        return [
            AudioPlayer(pick_audio(guest.audio_official, self.lang), "Oficiální intro", "Official Intro"),
            AudioPlayer(pick_audio(guest.audio_funny, self.lang), "Vtipné intro", "Funny Intro"),
        ]


def build_gallery(
    db: Session,
    storage: StorageBackend,
    lang: Optional[str] = None,
    guest: Optional[int] = None
) -> GalleryPage:
    """Load guests for the gallery; a failed load renders as an empty gallery"""
    try:
        guests = GuestService.list_guests(db, storage)
    except GuestDirectoryError as e:
        logger.warning(f"Guest list unavailable, rendering empty gallery: {e}")
        guests = []
    return GalleryPage(lang=parse_lang(lang), guests=guests, overlay=overlay_from_query(guest))
