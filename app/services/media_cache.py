"""
Offline media cache.

Mirrors the service worker policy on disk: entries are keyed by exact URL,
looked up before the network, and stored only after a successful fetch.
Each cache generation is a directory; activating a generation drops every
directory that is not on the allow-list.
"""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
from pathlib import Path
from typing import Iterable, List, Optional

import httpx

from app.core.errors import NetworkError
from app.services.media import is_media_url

logger = logging.getLogger(__name__)


class MediaCache:
    def __init__(self, root: str | Path, generation: str, storage_base: str):
        self.root = Path(root)
        self.generation = generation
        self.storage_base = storage_base

    @property
    def directory(self) -> Path:
        return self.root / self.generation

    def _entry(self, url: str) -> Path:
        return self.directory / hashlib.sha256(url.encode("utf-8")).hexdigest()

    def is_cacheable(self, url: str) -> bool:
        return is_media_url(url, self.storage_base)

    def match(self, url: str) -> Optional[bytes]:
        entry = self._entry(url)
        return entry.read_bytes() if entry.exists() else None

    def put(self, url: str, data: bytes) -> None:
        entry = self._entry(url)
        entry.parent.mkdir(parents=True, exist_ok=True)
        tmp = entry.with_suffix(".part")
        tmp.write_bytes(data)
        os.replace(tmp, entry)

    def activate(self, allowed: Optional[Iterable[str]] = None) -> List[str]:
        """Drop every cache generation not in ``allowed``; returns the dropped names"""
        keep = set(allowed) if allowed is not None else {self.generation}
        dropped: List[str] = []
        if not self.root.exists():
            return dropped
        for child in self.root.iterdir():
            if child.is_dir() and child.name not in keep:
                shutil.rmtree(child)
                dropped.append(child.name)
        if dropped:
            logger.info(f"Dropped stale media caches: {', '.join(sorted(dropped))}")
        return dropped

    def fetch(self, url: str, client: httpx.Client, navigate: bool = False) -> bytes:
        """Cache-first fetch for media URLs; everything else goes to the network"""
        if navigate or not self.is_cacheable(url):
            return self._network(url, client)

        cached = self.match(url)
        if cached is not None:
            return cached

        data = self._network(url, client)
        self.put(url, data)
        return data

    @staticmethod
    def _network(url: str, client: httpx.Client) -> bytes:
        try:
            response = client.get(url)
        except httpx.HTTPError as e:
            raise NetworkError(f"Fetching {url} failed: {e}") from e
        if not response.is_success:
            raise NetworkError(f"Fetching {url} failed with status {response.status_code}")
        return response.content
