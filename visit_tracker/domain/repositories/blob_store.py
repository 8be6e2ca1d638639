"""
Blob Store Interface.
"""

from typing import Protocol


class BlobStore(Protocol):
    """Binary image storage returning durable public URLs."""

    def put(self, data: bytes, original_name: str, mime_type: str) -> str:
        """Store an image and return its public URL.

        Raises ValidationException for a disallowed type or oversized payload
        (checked before any upload) and StorageException on backend failure.
        """
        ...

    def delete(self, url: str) -> bool:
        """Best-effort removal. Never raises; returns False on failure."""
        ...

    def close(self) -> None:
        ...
