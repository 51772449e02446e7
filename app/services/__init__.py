"""Service layer helpers for external integrations."""

from .images import PreparedImage, limit_image_size
from .storage import (
    ImageStorageFailed,
    ImageStorageResolver,
    LocalImageStorage,
    S3ImageStorage,
    StorageError,
    build_image_storage,
)

__all__ = [
    "PreparedImage",
    "limit_image_size",
    "ImageStorageFailed",
    "ImageStorageResolver",
    "LocalImageStorage",
    "S3ImageStorage",
    "StorageError",
    "build_image_storage",
]
