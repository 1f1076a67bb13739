"""Blob storage for uploaded logos and avatars. The store only keeps the returned URL."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    """Upload-by-path and download-URL retrieval. Local disk, S3, GCS, etc. share this contract."""

    def upload(self, path: str, data: bytes, content_type: str | None = None) -> None:
        ...

    def download_url(self, path: str) -> str:
        ...


class LocalBlobStore:
    """Writes blobs under a directory; URLs are base_url + path (served by the app's static mount)."""

    def __init__(self, root: str | Path, base_url: str = "/uploads"):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise ValueError(f"Blob path escapes storage root: {path}")
        return target

    def upload(self, path: str, data: bytes, content_type: str | None = None) -> None:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug("Stored blob %s (%s bytes, %s)", path, len(data), content_type)

    def download_url(self, path: str) -> str:
        self._resolve(path)
        return f"{self.base_url}/{path.lstrip('/')}"
