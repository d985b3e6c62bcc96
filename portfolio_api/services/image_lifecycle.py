"""Image Lifecycle Manager — validated upload, public URL, and best-effort removal of project images.

Invariants:
    - store() rejects a disallowed MIME type or an oversize payload BEFORE any blob call
    - Generated names are uuid4 hex + the original extension (lowercased); never reused
    - remove() never raises: failures are logged and reported as False
    - name_from_url() takes the final path segment of a public URL (coupled to the
      blob store's URL scheme; S3BlobStore and InMemoryBlobStore both end in "/<name>")

Design Decisions:
    - Blob failures during store() become UploadError (400): the caller's record was
      never touched, so the request is rejected rather than reported as a 500
"""

import logging
import os
import uuid
from dataclasses import dataclass
from urllib.parse import urlparse

from portfolio_api.core.errors import ErrorContext, UploadError
from portfolio_api.core.repository_protocols import BlobStore
from portfolio_api.infrastructure.blob_storage import BlobStorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageUpload:
    """A file received at the HTTP boundary, already read into memory."""
    payload: bytes
    mime_type: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.payload)


@dataclass(frozen=True)
class StoredImage:
    generated_name: str
    public_url: str
    size: int
    mime_type: str
    original_name: str


def generate_name(original_name: str) -> str:
    """Collision-resistant object name preserving the original extension."""
    _, ext = os.path.splitext(original_name or "")
    return f"{uuid.uuid4().hex}{ext.lower()}"


def name_from_url(url: str | None) -> str | None:
    """Recover the generated object name from a stored public URL."""
    if not url:
        return None
    segment = urlparse(url).path.rstrip("/").rsplit("/", 1)[-1]
    return segment or None


class ImageLifecycleManager:
    def __init__(self, blob_store: BlobStore, allowed_types: list[str], max_bytes: int):
        self.blob_store = blob_store
        self.allowed_types = set(allowed_types)
        self.max_bytes = max_bytes

    def check(self, mime_type: str, size: int) -> None:
        """Raise UploadError if the payload may not be stored. No IO."""
        if mime_type not in self.allowed_types:
            raise UploadError(
                "Invalid file type. Only JPEG, PNG, GIF and WebP images are allowed",
            )
        if size > self.max_bytes:
            limit_mb = self.max_bytes / (1024 * 1024)
            raise UploadError(f"File too large. Maximum size is {limit_mb:g}MB")

    async def store(self, payload: bytes, mime_type: str, original_name: str) -> StoredImage:
        self.check(mime_type, len(payload))
        name = generate_name(original_name)
        try:
            await self.blob_store.put(name, payload, mime_type)
        except BlobStorageError as e:
            logger.error(
                f"Image upload failed: {e}",
                extra={"image_name": name, "operation": "upload"},
            )
            raise UploadError(
                f"Failed to upload image: {e}",
                ErrorContext(operation="upload", debug_info={"image_name": name}),
            )
        logger.info(
            f"Stored image {name} ({len(payload)} bytes)",
            extra={"image_name": name},
        )
        return StoredImage(
            generated_name=name,
            public_url=self.blob_store.public_url(name),
            size=len(payload),
            mime_type=mime_type,
            original_name=original_name,
        )

    async def remove(self, name: str | None) -> bool:
        """Best-effort delete. Returns whether the object was removed."""
        if not name:
            return False
        try:
            await self.blob_store.delete(name)
        except BlobStorageError as e:
            logger.warning(
                f"Failed to delete image {name}: {e}",
                extra={"image_name": name, "operation": "delete_image"},
            )
            return False
        return True

    async def remove_by_url(self, url: str | None) -> bool:
        return await self.remove(name_from_url(url))
