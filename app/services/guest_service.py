"""
Guest directory service: read model and admin upsert/upload pipeline
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import BackendError, ValidationError
from app.schemas.guest import AudioPair, BilingualText, GuestSubmission, GuestView
from app.services.media import (
    AUDIO_FUNNY_BUCKET,
    AUDIO_OFFICIAL_BUCKET,
    MEDIA_SLOTS,
    PHOTOS_BUCKET,
)
from app.services.repositories import GuestRepo, use_firestore
from app.services.storage import StorageBackend, StorageError

logger = logging.getLogger(__name__)

BACKEND_ERRORS = (SQLAlchemyError, GoogleAPIError, GoogleAuthError)

REQUIRED_FIELDS = ("number", "name", "relation_cs", "relation_en")

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


@dataclass
class MediaFile:
    """A file part of an admin submission"""
    data: bytes
    content_type: Optional[str] = None
    filename: Optional[str] = None


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Integral value of a form field ("3" or "3.0"), None if invalid or outside int64"""
    if value is None:
        return None
    try:
        parsed = int(value)
    except ValueError:
        try:
            as_float = float(value)
        except ValueError:
            return None
        if not as_float.is_integer():
            return None
        parsed = int(as_float)
    if not INT64_MIN <= parsed <= INT64_MAX:
        return None
    return parsed


class GuestService:
    """Service for reading and writing guest records"""

    # -------- Read path --------

    @staticmethod
    def fetch_rows(db: Session) -> List[Dict[str, Any]]:
        """All guest rows ordered by number"""
        try:
            if use_firestore():
                return GuestRepo.list_fs()
            return GuestRepo.list_sql(db)
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to read guests: {e}")
            raise BackendError(str(e)) from e

    @staticmethod
    def to_view(row: Mapping[str, Any], storage: StorageBackend) -> GuestView:
        """Map a stored row to the bilingual view with public media URLs"""
        return GuestView(
            id=row["id"],
            number=row["number"],
            name=row["name"],
            relation=BilingualText(cs=row["relation_cs"], en=row["relation_en"]),
            about=BilingualText(cs=row.get("about_cs") or None, en=row.get("about_en") or None),
            photo_url=storage.public_url(PHOTOS_BUCKET, row.get("photo_path")),
            audio_official=AudioPair(
                cs=storage.public_url(AUDIO_OFFICIAL_BUCKET, row.get("audio_official_cs_path")),
                en=storage.public_url(AUDIO_OFFICIAL_BUCKET, row.get("audio_official_en_path")),
            ),
            audio_funny=AudioPair(
                cs=storage.public_url(AUDIO_FUNNY_BUCKET, row.get("audio_funny_cs_path")),
                en=storage.public_url(AUDIO_FUNNY_BUCKET, row.get("audio_funny_en_path")),
            ),
        )

    @staticmethod
    def list_guests(db: Session, storage: StorageBackend) -> List[GuestView]:
        rows = GuestService.fetch_rows(db)
        return [GuestService.to_view(row, storage) for row in rows]

    @staticmethod
    def media_urls(db: Session, storage: StorageBackend) -> List[str]:
        """Public URL of every stored photo and clip"""
        urls: List[str] = []
        for row in GuestService.fetch_rows(db):
            for slot in MEDIA_SLOTS:
                url = storage.public_url(slot.bucket, row.get(slot.column))
                if url:
                    urls.append(url)
        return urls

    # -------- Write path --------

    @staticmethod
    def validate_submission(
        form: Mapping[str, Any],
        files: Mapping[str, MediaFile]
    ) -> GuestSubmission:
        """Check required fields and file sizes before anything is written"""
        raw = {field: _clean(form.get(field)) for field in REQUIRED_FIELDS}
        number = _parse_int(raw["number"])

        missing = [field for field in REQUIRED_FIELDS if not raw[field]]
        if raw["number"] and not number:
            missing.insert(0, "number")
        if missing:
            raise ValidationError("Missing required fields", missing=missing, got=raw)

        raw_id = _clean(form.get("id"))
        guest_id = _parse_int(raw_id)
        if raw_id is not None and guest_id is None:
            raise ValidationError("Invalid guest id", missing=[], got={"id": raw_id})
        # Id 0 means "create", like a blank id
        guest_id = guest_id or None

        oversized = [
            name for name, f in files.items()
            if f is not None and len(f.data) > settings.MAX_UPLOAD_SIZE
        ]
        if oversized:
            raise ValidationError(
                f"File too large (limit {settings.MAX_UPLOAD_SIZE} bytes)",
                missing=[],
                got={"files": oversized}
            )

        return GuestSubmission(
            id=guest_id,
            number=number,
            name=raw["name"],
            relation_cs=raw["relation_cs"],
            relation_en=raw["relation_en"],
            about_cs=_clean(form.get("about_cs")),
            about_en=_clean(form.get("about_en")),
        )

    @staticmethod
    def _write(db: Session, step: str, guest_id: Optional[int], fields: Dict[str, Any]) -> int:
        """Insert (guest_id None) or update a row, tagging failures with ``step``"""
        try:
            if guest_id is None:
                if use_firestore():
                    return GuestRepo.insert_fs(fields)
                return GuestRepo.insert_sql(db, fields)

            if use_firestore():
                found = GuestRepo.update_fs(guest_id, fields)
            else:
                found = GuestRepo.update_sql(db, guest_id, fields)
        except BACKEND_ERRORS as e:
            if not use_firestore():
                db.rollback()
            logger.error(f"Guest {step} failed: {e}")
            raise BackendError(str(e), step=step) from e

        if not found:
            raise BackendError(f"Guest {guest_id} not found", step=step)
        return guest_id

    @staticmethod
    def save_guest(
        db: Session,
        storage: StorageBackend,
        submission: GuestSubmission,
        files: Mapping[str, MediaFile]
    ) -> int:
        """Upsert the guest row, upload attached media and record the storage keys.

        The row write is committed before any upload. A failed upload leaves
        it in place with the media columns unpatched.
        """
        fields = submission.text_fields()
        if submission.id is None:
            guest_id = GuestService._write(db, "insert", None, fields)
            logger.info(f"Inserted guest {guest_id} (#{submission.number} {submission.name})")
        else:
            guest_id = GuestService._write(db, "update", submission.id, fields)
            logger.info(f"Updated guest {guest_id}")

        patch: Dict[str, str] = {}
        for slot in MEDIA_SLOTS:
            media = files.get(slot.field)
            if media is None or not media.data:
                continue
            key = slot.storage_key(guest_id, media.content_type)
            try:
                patch[slot.column] = storage.upload(slot.bucket, key, media.data, media.content_type)
            except StorageError as e:
                logger.error(f"Upload of {slot.field} for guest {guest_id} failed: {e}")
                raise BackendError(str(e), step="upload") from e

        if patch:
            GuestService._write(db, "update-paths", guest_id, patch)
            logger.info(f"Patched media columns {sorted(patch)} of guest {guest_id}")

        return guest_id
