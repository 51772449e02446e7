"""Request ingestion helpers (stage 01 of the registration pipeline)."""

from __future__ import annotations

import mimetypes
from typing import Optional

from fastapi import UploadFile

from .types import ImageUpload

_DEFAULT_CONTENT_TYPE = "application/octet-stream"


def resolve_content_type(image_file: UploadFile) -> str:
    """Prefer the declared content type, guessing from the filename otherwise."""

    content_type = image_file.content_type
    if not content_type and image_file.filename:
        guessed_type, _ = mimetypes.guess_type(image_file.filename)
        content_type = guessed_type

    return (content_type or _DEFAULT_CONTENT_TYPE).lower()


async def read_image_upload(image_file: UploadFile | None) -> Optional[ImageUpload]:
    """Load the upload fully into memory.

    Browsers submit an empty file part when no image was chosen; that is
    treated the same as omitting the field.
    """

    if image_file is None:
        return None

    data = await image_file.read()
    await image_file.close()

    if not data:
        return None

    return ImageUpload(
        filename=image_file.filename or "",
        content_type=resolve_content_type(image_file),
        data=data,
    )


__all__ = ["resolve_content_type", "read_image_upload"]
