"""Tests for the size-limiting image transform."""

from __future__ import annotations

import io

from PIL import Image

from app.services.images import limit_image_size
from conftest import make_png


def _dimensions(data: bytes) -> tuple[int, int]:
    with Image.open(io.BytesIO(data)) as image:
        return image.size


def test_large_image_fits_in_box_keeping_aspect_ratio():
    prepared = limit_image_size(make_png(1600, 1600), "image/png")

    assert prepared.transformed
    assert _dimensions(prepared.data) == (600, 600)
    assert prepared.content_type == "image/png"


def test_wide_image_is_limited_by_width():
    prepared = limit_image_size(make_png(2000, 500), "image/png")

    assert _dimensions(prepared.data) == (800, 200)


def test_small_image_is_not_upscaled():
    prepared = limit_image_size(make_png(100, 50), "image/png")

    assert (prepared.width, prepared.height) == (100, 50)
    assert _dimensions(prepared.data) == (100, 50)


def test_undecodable_payload_is_passed_through():
    payload = b"\x89PNG\r\n\x1a\n" + b"garbage" * 10

    prepared = limit_image_size(payload, "image/png")

    assert prepared.data == payload
    assert not prepared.transformed


def test_large_jpeg_is_resized():
    buffer = io.BytesIO()
    Image.new("RGB", (1200, 900), "blue").save(buffer, format="JPEG")

    prepared = limit_image_size(buffer.getvalue(), "image/jpeg")

    assert _dimensions(prepared.data) == (800, 600)
    assert prepared.content_type == "image/jpeg"
