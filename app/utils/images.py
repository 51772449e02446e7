"""Helpers turning stored image references into displayable URLs."""

from __future__ import annotations

import re
from typing import Optional

PLACEHOLDER_IMAGE = "/static/img/school-placeholder.svg"
DEFAULT_IMAGE_PREFIX = "/schoolImages"

_URI_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


def resolve_image_url(
    reference: Optional[str],
    *,
    prefix: str = DEFAULT_IMAGE_PREFIX,
) -> Optional[str]:
    """Return a URL the browser can fetch for a stored image reference.

    Absolute URLs (anything with a scheme) and rooted paths are returned as
    they are; bare file names are placed under ``prefix``. Empty references
    resolve to ``None``.
    """

    if not reference or not reference.strip():
        return None

    reference = reference.strip()
    if _URI_SCHEME.match(reference) or reference.startswith("/"):
        return reference

    return f"/{prefix.strip('/')}/{reference}"


__all__ = ["DEFAULT_IMAGE_PREFIX", "PLACEHOLDER_IMAGE", "resolve_image_url"]
