"""Blob storage for visit photos.

``BaseBlobStore`` holds the backend-independent rules (type allow-list, size
cap, key generation, URL-to-key mapping). ``SupabaseBlobStore`` talks to the
Supabase Storage REST API over httpx.
"""

import logging
import time
import uuid
from typing import Iterable, Optional
from urllib.parse import urlparse

import httpx

from visit_tracker.config import Settings
from visit_tracker.core.exceptions import StorageException, ValidationException

logger = logging.getLogger(__name__)

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
}


class BaseBlobStore:
    """Validation and naming shared by every blob backend."""

    def __init__(self, allowed_types: Iterable[str], max_bytes: int):
        self.allowed_types = frozenset(allowed_types)
        self.max_bytes = max_bytes

    def validate(self, data: bytes, mime_type: Optional[str]) -> None:
        if not mime_type or mime_type not in self.allowed_types:
            allowed = ", ".join(sorted(self.allowed_types))
            raise ValidationException(f"Only image files are allowed ({allowed})")
        if len(data) > self.max_bytes:
            raise ValidationException(
                f"Image exceeds the maximum size of {self.max_bytes // (1024 * 1024)} MB"
            )
        if not data:
            raise ValidationException("Image file is empty")

    @staticmethod
    def generate_key(mime_type: str) -> str:
        """Collision-resistant key; the client's file name is never used."""
        ext = EXTENSIONS.get(mime_type, mime_type.rsplit("/", 1)[-1])
        return f"visit-{int(time.time() * 1000)}-{uuid.uuid4()}.{ext}"

    @staticmethod
    def key_from_url(url: str) -> str:
        return urlparse(url).path.rstrip("/").rsplit("/", 1)[-1]

    def put(self, data: bytes, original_name: str, mime_type: str) -> str:
        self.validate(data, mime_type)
        key = self.generate_key(mime_type)
        self._upload(key, data, mime_type)
        logger.info("Image stored key=%s original_name=%s size=%d", key, original_name, len(data))
        return self.public_url(key)

    def delete(self, url: str) -> bool:
        if not url:
            return False
        key = self.key_from_url(url)
        try:
            self._remove(key)
        except Exception as e:
            logger.warning("Image deletion failed key=%s error=%s", key, e)
            return False
        return True

    def public_url(self, key: str) -> str:
        raise NotImplementedError

    def _upload(self, key: str, data: bytes, mime_type: str) -> None:
        raise NotImplementedError

    def _remove(self, key: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass


class SupabaseBlobStore(BaseBlobStore):
    """Client for the Supabase Storage REST API (public bucket)."""

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None):
        super().__init__(settings.ALLOWED_IMAGE_TYPES, settings.MAX_UPLOAD_BYTES)
        self.base_url = settings.SUPABASE_URL.rstrip("/")
        self.bucket = settings.STORAGE_BUCKET
        self.client = client or httpx.Client(
            headers={
                "Authorization": f"Bearer {settings.SUPABASE_SERVICE_KEY}",
                "apikey": settings.SUPABASE_SERVICE_KEY,
            },
            timeout=settings.STORAGE_TIMEOUT_SECONDS,
        )

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{key}"

    def _upload(self, key: str, data: bytes, mime_type: str) -> None:
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{key}"
        try:
            response = self.client.post(
                url,
                content=data,
                headers={"Content-Type": mime_type, "x-upsert": "false"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Image upload rejected key=%s status=%s body=%s",
                key, e.response.status_code, e.response.text[:200],
            )
            raise StorageException("Failed to upload image") from e
        except httpx.HTTPError as e:
            logger.error("Image upload failed key=%s error=%s", key, e)
            raise StorageException("Failed to upload image") from e

    def _remove(self, key: str) -> None:
        response = self.client.request(
            "DELETE",
            f"{self.base_url}/storage/v1/object/{self.bucket}",
            json={"prefixes": [key]},
        )
        response.raise_for_status()

    def close(self) -> None:
        self.client.close()
