"""
Media storage abstraction.

file:// stores images on the local filesystem (served by the API under /media)
s3://   stores images in an S3 bucket

Storage is addressed by URI; services only ever see a MediaStore, a public URL
and an opaque storage key.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from ..primitives import generate_ulid
from .images import ImageTransform, prepare_image

logger = structlog.get_logger()


class MediaStoreError(Exception):
    """Raised when the storage backend fails to write or delete an object."""


@dataclass(frozen=True)
class StoredMedia:
    """Result of storing an image: where it is served and how to delete it."""

    url: str
    key: str
    width: int
    height: int


class MediaStore(ABC):
    """Abstract base class for image storage."""

    key_prefix: str = ""

    def store(
        self,
        content: bytes,
        folder: str,
        transform: Optional[ImageTransform] = None,
        max_bytes: Optional[int] = None,
    ) -> StoredMedia:
        """Validate, transform and persist an image under a fresh key.

        Raises:
            ValidationError: content is not an acceptable image
            MediaStoreError: the backend rejected the write
        """
        image = prepare_image(content, transform, max_bytes)
        key = self._make_key(folder, image.extension)
        self._put(key, image.content, image.content_type)
        return StoredMedia(
            url=self.url_for(key), key=key, width=image.width, height=image.height
        )

    def _make_key(self, folder: str, extension: str) -> str:
        parts = [p for p in (self.key_prefix, folder.strip("/")) if p]
        parts.append(f"{generate_ulid().lower()}.{extension}")
        return "/".join(parts)

    @abstractmethod
    def _put(self, key: str, content: bytes, content_type: str) -> None:
        """Write raw bytes under key."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete the object under key. Returns False if it did not exist."""
        pass

    def discard(self, key: str) -> bool:
        """Best-effort delete: failures are logged and reported as False."""
        if not key:
            return False
        try:
            return self.delete(key)
        except MediaStoreError as e:
            logger.warning("Failed to delete stored media", key=key, error=str(e))
            return False

    @abstractmethod
    def url_for(self, key: str) -> str:
        """Public URL of the object under key."""
        pass

    @abstractmethod
    def get_uri(self) -> str:
        """Get the full URI of this media store."""
        pass


class LocalMediaStore(MediaStore):
    """Local filesystem media store (file:// URIs).

    Structure:
        {root}/
        ├── artworks/    # Artwork images
        ├── profiles/    # Profile pictures
        └── covers/      # Cover images
    """

    def __init__(self, root: Path, public_url: str = "/media"):
        self.root = Path(root)
        self.public_url = public_url.rstrip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise MediaStoreError(f"Key escapes the media root: {key}")
        return path

    def _put(self, key: str, content: bytes, content_type: str) -> None:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            raise MediaStoreError(f"Failed to write {key}: {e}") from e

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise MediaStoreError(f"Failed to delete {key}: {e}") from e
        return True

    def url_for(self, key: str) -> str:
        return f"{self.public_url}/{key}"

    def get_uri(self) -> str:
        return f"file://{self.root}"


class S3MediaStore(MediaStore):
    """Amazon S3 media store (s3://bucket/prefix URIs)."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        public_url: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        self.bucket = bucket
        self.key_prefix = prefix.strip("/")
        self.public_url = (
            public_url or f"https://{bucket}.s3.amazonaws.com"
        ).rstrip("/")
        self.client = client or boto3.client("s3")

    def _put(self, key: str, content: bytes, content_type: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket, Key=key, Body=content, ContentType=content_type
            )
        except (BotoCoreError, ClientError) as e:
            raise MediaStoreError(f"Failed to upload {key}: {e}") from e

    def delete(self, key: str) -> bool:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise MediaStoreError(f"Failed to delete {key}: {e}") from e
        return True

    def url_for(self, key: str) -> str:
        return f"{self.public_url}/{key}"

    def get_uri(self) -> str:
        suffix = f"/{self.key_prefix}" if self.key_prefix else ""
        return f"s3://{self.bucket}{suffix}"


def create_media_store(uri: str, public_url: Optional[str] = None) -> MediaStore:
    """Factory function to create the appropriate MediaStore from a URI.

    Args:
        uri: Store URI (e.g., "file://./media", "file:///var/lib/showcase/media"
            or "s3://bucket/prefix")
        public_url: Base URL the stored keys are served under

    Raises:
        ValueError: If URI scheme is not supported
    """
    parsed = urlparse(uri)

    if parsed.scheme == "file":
        # file://./media -> ./media, file:///srv/media -> /srv/media
        root = Path(f"{parsed.netloc}{parsed.path}")
        return LocalMediaStore(root, public_url or "/media")

    elif parsed.scheme == "s3":
        # Only honour a public URL that is absolute; "/media" is the local default
        absolute = public_url if public_url and "://" in public_url else None
        return S3MediaStore(parsed.netloc, parsed.path, public_url=absolute)

    raise ValueError(
        f"Unsupported media storage scheme: {parsed.scheme}. "
        f"Supported: file://, s3://"
    )
