"""Image preparation applied before remote upload."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Formats Pillow can write back in the same container.
_REENCODABLE_FORMATS = {"JPEG", "PNG", "WEBP", "GIF"}


@dataclass(frozen=True)
class PreparedImage:
    data: bytes
    content_type: str
    width: int | None = None
    height: int | None = None
    transformed: bool = False


def limit_image_size(
    data: bytes,
    content_type: str,
    *,
    max_width: int = 800,
    max_height: int = 600,
) -> PreparedImage:
    """Shrink an image to fit ``max_width`` x ``max_height`` and optimise it.

    Aspect ratio is preserved and smaller images are never upscaled. Payloads
    Pillow cannot decode or re-encode are returned unchanged.
    """

    try:
        with Image.open(io.BytesIO(data)) as source:
            image_format = source.format
            original_size = source.size
            if image_format not in _REENCODABLE_FORMATS or getattr(
                source, "is_animated", False
            ):
                return PreparedImage(data, content_type, *original_size)

            image = ImageOps.exif_transpose(source)
            image.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)

            save_options: dict[str, object] = {"optimize": True}
            if image_format == "JPEG":
                if image.mode not in ("RGB", "L"):
                    image = image.convert("RGB")
                save_options["quality"] = 85
                save_options["progressive"] = True
            elif image_format == "WEBP":
                save_options["quality"] = 85

            buffer = io.BytesIO()
            image.save(buffer, format=image_format, **save_options)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
        # Pillow reports corrupt PNG chunks and truncated streams this way.
        SyntaxError,
        EOFError,
    ) as exc:
        logger.debug("Skipping image transform for %s payload: %s", content_type, exc)
        return PreparedImage(data, content_type)

    optimised = buffer.getvalue()
    width, height = image.size
    if len(optimised) >= len(data) and (width, height) == original_size:
        # Re-encoding did not help and nothing was resized.
        return PreparedImage(data, content_type, width, height)

    return PreparedImage(
        optimised,
        Image.MIME.get(image_format, content_type),
        width,
        height,
        transformed=True,
    )


__all__ = ["PreparedImage", "limit_image_size"]
