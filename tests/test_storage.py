"""Tests for the ordered image storage chain."""

from __future__ import annotations

import asyncio
import io
from pathlib import Path

import pytest
from PIL import Image

from app.config.settings import ImageConfig
from app.pipelines.schools import ImageUpload
from app.services.storage import (
    ImageStorageFailed,
    ImageStorageResolver,
    LocalImageStorage,
    S3ImageStorage,
    build_image_storage,
    generate_filename,
)
from conftest import FakeS3Client, make_corrupt_png, make_png, s3_settings


def _upload(data: bytes | None = None, filename: str = "campus.png") -> ImageUpload:
    return ImageUpload(filename, "image/png", data if data is not None else make_png(40, 30))


def test_generate_filename_keeps_extension():
    assert generate_filename(".jpg", 1700000000000) == "school-1700000000000.jpg"


def test_no_image_resolves_to_none(image_settings: ImageConfig, fake_s3: FakeS3Client, image_dir: Path):
    resolver = build_image_storage(s3_settings(), image_settings, s3_client=fake_s3)

    assert asyncio.run(resolver.resolve(None)) is None
    assert fake_s3.calls == []
    assert not image_dir.exists() or not any(image_dir.iterdir())


def test_remote_upload_returns_bucket_url(image_settings: ImageConfig, fake_s3: FakeS3Client, image_dir: Path):
    resolver = build_image_storage(s3_settings(), image_settings, s3_client=fake_s3)

    reference = asyncio.run(resolver.resolve(_upload(make_png(1600, 1200))))

    assert len(fake_s3.calls) == 1
    call = fake_s3.calls[0]
    assert call["Bucket"] == "school-images"
    assert call["Key"].startswith("schools/school-")
    assert call["Key"].endswith(".png")
    assert call["ContentType"] == "image/png"
    assert reference == f"https://school-images.s3.amazonaws.com/{call['Key']}"
    with Image.open(io.BytesIO(call["Body"])) as uploaded:
        assert uploaded.size == (800, 600)
    assert not image_dir.exists() or not any(image_dir.iterdir())


def test_remote_url_uses_region_and_public_base(image_settings: ImageConfig, fake_s3: FakeS3Client):
    regional = S3ImageStorage(s3_settings(region="eu-west-1"), image_settings, client=fake_s3)
    cdn = S3ImageStorage(
        s3_settings(public_base_url="https://cdn.example.com/"), image_settings, client=fake_s3
    )

    assert regional.object_url("schools/a.png") == (
        "https://school-images.s3.eu-west-1.amazonaws.com/schools/a.png"
    )
    assert cdn.object_url("schools/a.png") == "https://cdn.example.com/schools/a.png"


def test_remote_skipped_when_not_configured(image_settings: ImageConfig, fake_s3: FakeS3Client, image_dir: Path):
    resolver = build_image_storage(
        s3_settings(secret_key=None), image_settings, s3_client=fake_s3
    )
    payload = make_png(20, 20)

    reference = asyncio.run(resolver.resolve(_upload(payload)))

    assert fake_s3.calls == []
    assert reference.startswith("/schoolImages/school-")
    assert (image_dir / reference.rsplit("/", 1)[1]).read_bytes() == payload


def test_remote_failure_falls_back_to_local_with_exact_bytes(image_settings: ImageConfig, image_dir: Path):
    failing = FakeS3Client(fail=True)
    resolver = build_image_storage(s3_settings(), image_settings, s3_client=failing)
    payload = b"\x89PNG\r\n\x1a\n" + bytes(range(256)) * 64

    reference = asyncio.run(resolver.resolve(_upload(payload)))

    assert len(failing.calls) == 1
    assert reference.startswith("/schoolImages/")
    stored = image_dir / reference.removeprefix("/schoolImages/")
    assert stored.read_bytes() == payload
    assert stored.name.startswith("school-") and stored.suffix == ".png"


def test_remote_timeout_falls_back_to_local(image_settings: ImageConfig, image_dir: Path):
    slow = FakeS3Client(delay=0.5)
    resolver = build_image_storage(
        s3_settings(timeout_seconds=0.05), image_settings, s3_client=slow
    )

    reference = asyncio.run(resolver.resolve(_upload()))

    assert reference.startswith("/schoolImages/")
    assert len(list(image_dir.iterdir())) == 1


def test_local_files_never_overwrite_each_other(image_settings: ImageConfig, image_dir: Path):
    storage = LocalImageStorage(image_settings)

    async def store_many() -> list[str]:
        return [await storage.store(_upload(bytes([index]) * 10)) for index in range(5)]

    references = asyncio.run(store_many())

    assert len(set(references)) == 5
    assert len(list(image_dir.iterdir())) == 5


def test_local_failure_is_fatal(tmp_path: Path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("occupied")
    resolver = ImageStorageResolver(
        [LocalImageStorage(ImageConfig(local_dir=str(blocker / "images")))]
    )

    with pytest.raises(ImageStorageFailed):
        asyncio.run(resolver.resolve(_upload()))


def test_all_strategies_failing_raises(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("occupied")
    broken_local = ImageConfig(local_dir=str(blocker / "images"))
    resolver = build_image_storage(
        s3_settings(), broken_local, s3_client=FakeS3Client(fail=True)
    )

    with pytest.raises(ImageStorageFailed):
        asyncio.run(resolver.resolve(_upload()))


def test_corrupt_png_is_uploaded_unchanged(image_settings: ImageConfig, fake_s3: FakeS3Client, image_dir: Path):
    payload = make_corrupt_png()
    resolver = build_image_storage(s3_settings(), image_settings, s3_client=fake_s3)

    reference = asyncio.run(resolver.resolve(_upload(payload)))

    key = fake_s3.calls[0]["Key"]
    assert reference == f"https://school-images.s3.amazonaws.com/{key}"
    assert fake_s3.objects[key] == payload
    assert not image_dir.exists() or not any(image_dir.iterdir())


def test_unexpected_transform_error_falls_back_to_local(
    monkeypatch: pytest.MonkeyPatch,
    image_settings: ImageConfig,
    fake_s3: FakeS3Client,
    image_dir: Path,
):
    def explode(*args, **kwargs):
        raise KeyError("unsupported PNG filter")

    monkeypatch.setattr("app.services.storage.limit_image_size", explode)
    resolver = build_image_storage(s3_settings(), image_settings, s3_client=fake_s3)
    payload = make_png(30, 30)

    reference = asyncio.run(resolver.resolve(_upload(payload)))

    assert reference.startswith("/schoolImages/")
    assert fake_s3.calls == []
    assert (image_dir / reference.rsplit("/", 1)[1]).read_bytes() == payload


def test_timed_out_upload_leaves_no_remote_object(image_settings: ImageConfig, image_dir: Path):
    slow = FakeS3Client(delay=0.3)
    resolver = build_image_storage(
        s3_settings(timeout_seconds=0.05), image_settings, s3_client=slow
    )

    # asyncio.run waits for the abandoned upload thread before returning.
    reference = asyncio.run(resolver.resolve(_upload()))

    assert reference.startswith("/schoolImages/")
    assert len(list(image_dir.iterdir())) == 1
    assert slow.deleted == [slow.calls[0]["Key"]]
    assert slow.objects == {}
