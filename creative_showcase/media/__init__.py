"""
Media storage for uploaded images.
"""

from .images import (
    ARTWORK_TRANSFORM,
    AVATAR_TRANSFORM,
    COVER_TRANSFORM,
    ImageTransform,
    PreparedImage,
    prepare_image,
)
from .store import (
    LocalMediaStore,
    MediaStore,
    MediaStoreError,
    S3MediaStore,
    StoredMedia,
    create_media_store,
)

__all__ = [
    "ARTWORK_TRANSFORM",
    "AVATAR_TRANSFORM",
    "COVER_TRANSFORM",
    "ImageTransform",
    "PreparedImage",
    "prepare_image",
    "MediaStore",
    "MediaStoreError",
    "LocalMediaStore",
    "S3MediaStore",
    "StoredMedia",
    "create_media_store",
]
