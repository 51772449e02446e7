"""Utility helpers for the school directory."""

from .images import DEFAULT_IMAGE_PREFIX, PLACEHOLDER_IMAGE, resolve_image_url

__all__ = [
    "DEFAULT_IMAGE_PREFIX",
    "PLACEHOLDER_IMAGE",
    "resolve_image_url",
]
