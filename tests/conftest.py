"""Shared fixtures: an isolated app backed by SQLite and a fake S3 client."""

from __future__ import annotations

import io
import time
from pathlib import Path
from typing import Any

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from PIL import Image

from app.config.settings import DatabaseConfig, ImageConfig, S3Config, Settings
from app.main import create_app


class FakeS3Client:
    """Records put_object calls; can be told to fail or hang.

    ``objects`` holds what the bucket would contain once every call returned.
    """

    def __init__(self, *, fail: bool = False, delay: float = 0.0) -> None:
        self.fail = fail
        self.delay = delay
        self.calls: list[dict[str, Any]] = []
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []

    def put_object(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(kwargs)
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise ClientError(
                {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}},
                "PutObject",
            )
        self.objects[kwargs["Key"]] = kwargs["Body"]
        return {"ETag": '"fake"'}

    def delete_object(self, *, Bucket: str, Key: str) -> dict[str, Any]:
        self.deleted.append(Key)
        self.objects.pop(Key, None)
        return {}


def make_png(width: int, height: int, color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_corrupt_png(width: int = 1200, height: int = 900) -> bytes:
    """Noise PNG (several IDAT chunks) whose second IDAT chunk type is mangled."""

    buffer = io.BytesIO()
    Image.effect_noise((width, height), 64).save(buffer, format="PNG")
    data = bytearray(buffer.getvalue())
    first = data.index(b"IDAT")
    second = data.index(b"IDAT", first + 4)
    data[second : second + 4] = b"\x00\x01\x02\x03"
    return bytes(data)


def s3_settings(**overrides: Any) -> S3Config:
    values: dict[str, Any] = {
        "access_key": "AKIATEST",
        "secret_key": "secret",
        "bucket_name": "school-images",
        "region": "us-east-1",
        "timeout_seconds": 5.0,
    }
    values.update(overrides)
    return S3Config(**values)


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    return tmp_path / "schoolImages"


@pytest.fixture
def image_settings(image_dir: Path) -> ImageConfig:
    return ImageConfig(local_dir=str(image_dir))


@pytest.fixture
def fake_s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def app_settings(tmp_path: Path, image_settings: ImageConfig) -> Settings:
    """Settings pointing at a throwaway database and image directory, S3 unset."""

    return Settings(
        log_file="",
        database=DatabaseConfig(dsn=f"sqlite+aiosqlite:///{tmp_path / 'schools.db'}"),
        images=image_settings,
        s3=S3Config(access_key=None, secret_key=None, bucket_name=None),
    )


@pytest.fixture
def client(app_settings: Settings):
    """Test client for an app without remote storage."""

    app = create_app(app_settings)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def failing_s3() -> FakeS3Client:
    return FakeS3Client(fail=True)


@pytest.fixture
def client_with_failing_s3(app_settings: Settings, failing_s3: FakeS3Client):
    """Test client whose S3 bucket rejects every upload."""

    configured = app_settings.model_copy(update={"s3": s3_settings()})
    app = create_app(configured, s3_client=failing_s3)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def client_with_s3(app_settings: Settings, fake_s3: FakeS3Client):
    """Test client whose S3 bucket accepts uploads."""

    configured = app_settings.model_copy(update={"s3": s3_settings()})
    app = create_app(configured, s3_client=fake_s3)
    with TestClient(app) as test_client:
        yield test_client


VALID_FORM = {
    "name": "Springfield Elementary",
    "address": "19 Plympton Street",
    "city": "Springfield",
    "state": "Oregon",
    "contact": "5551234567",
    "email_id": "office@springfield.edu",
}
