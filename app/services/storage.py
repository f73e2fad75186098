"""
Object storage backends for guest photos and audio clips.

Objects live under ``{bucket}/{key}``. Uploading to an existing key replaces
the previous object.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from firebase_admin import exceptions as firebase_exceptions
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from requests import exceptions as requests_exceptions

from app.core.config import settings
from app.services.firebase_client import get_storage_bucket
from app.services.media import BUCKETS, public_url

logger = logging.getLogger(__name__)

# Raised by the Cloud Storage client, its HTTP transport, token refresh or app setup
FIREBASE_STORAGE_ERRORS = (
    google_exceptions.GoogleAPIError,
    auth_exceptions.GoogleAuthError,
    requests_exceptions.RequestException,
    firebase_exceptions.FirebaseError,
    RuntimeError,
)


class StorageError(Exception):
    """Raised when an object could not be written"""


class StorageBackend:
    """Common interface of the object stores"""

    def __init__(self, public_base: str):
        self.public_base = public_base.rstrip("/")

    def upload(self, bucket: str, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        raise NotImplementedError

    def public_url(self, bucket: str, key: Optional[str]) -> Optional[str]:
        return public_url(self.public_base, bucket, key)


class LocalStorage(StorageBackend):
    """Buckets as directories below a root folder, served under /media"""

    def __init__(self, root: str | Path, public_base: str):
        super().__init__(public_base)
        self.root = Path(root)

    def ensure_buckets(self) -> None:
        for bucket in BUCKETS:
            (self.root / bucket).mkdir(parents=True, exist_ok=True)

    def upload(self, bucket: str, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        if bucket not in BUCKETS:
            raise StorageError(f"[storage {bucket}] unknown bucket")
        target = self.root / bucket / key
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            tmp = target.with_name(target.name + ".part")
            tmp.write_bytes(data)
            os.replace(tmp, target)
        except OSError as e:
            raise StorageError(f"[storage {bucket}] {e}") from e
        logger.info(f"Stored {len(data)} bytes at {bucket}/{key}")
        return key


class FirebaseStorage(StorageBackend):
    """Buckets in Firebase (Google Cloud) Storage"""

    def upload(self, bucket: str, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        try:
            blob = get_storage_bucket(bucket).blob(key)
            blob.upload_from_string(data, content_type=content_type or "application/octet-stream")
        except FIREBASE_STORAGE_ERRORS as e:
            raise StorageError(f"[storage {bucket}] {e}") from e
        logger.info(f"Uploaded {len(data)} bytes to {bucket}/{key}")
        return key

    def public_url(self, bucket: str, key: Optional[str]) -> Optional[str]:
        return public_url(self.public_base, f"{settings.FIREBASE_BUCKET_PREFIX}{bucket}", key)


@lru_cache(maxsize=1)
def get_storage() -> StorageBackend:
    """Return the configured object store"""
    if settings.USE_FIREBASE:
        return FirebaseStorage(settings.storage_public_base)

    storage = LocalStorage(settings.MEDIA_ROOT, settings.storage_public_base)
    storage.ensure_buckets()
    return storage
