"""Image storage strategies and the resolver that chains them.

A submission's image is offered to each strategy in order. The first one
that stores the bytes wins and its reference (absolute URL or rooted local
path) is what gets persisted with the school record. Remote storage is
best-effort: its failures are logged and the next strategy is tried. Only
when every strategy fails does the request abort.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from pathlib import Path
from typing import Any, Protocol, Sequence

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from app.config.settings import ImageConfig, S3Config
from app.pipelines.schools.types import ImageUpload
from app.services.aws import create_boto3_client
from app.services.images import PreparedImage, limit_image_size
from app.telemetry import record_storage_attempt

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "school"


class StorageError(RuntimeError):
    """Raised by a single strategy when it cannot store an image."""


class ImageStorageFailed(RuntimeError):
    """Raised when no storage strategy could persist the image."""


class ImageStorage(Protocol):
    """One way of persisting image bytes."""

    name: str

    @property
    def available(self) -> bool:
        ...

    async def store(self, upload: ImageUpload) -> str:
        ...


def generate_filename(extension: str, timestamp_ms: int | None = None) -> str:
    """Return ``school-<milliseconds><extension>``."""

    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return f"{FILENAME_PREFIX}-{timestamp_ms}{extension}"


class _UploadAttempt:
    """Shared between a put running in a worker thread and the waiting request.

    Whichever side gets the lock first decides the outcome: either the upload
    completed in time, or the request gave up and the thread removes the
    object once the put returns.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.completed = False
        self.abandoned = False


class S3ImageStorage:
    """Upload to an S3 bucket after shrinking the image to the configured box."""

    name = "s3"

    def __init__(
        self,
        s3_settings: S3Config,
        image_settings: ImageConfig,
        *,
        client: Any | None = None,
    ) -> None:
        self._s3 = s3_settings
        self._images = image_settings
        self._client = client
        if self._client is None and s3_settings.is_configured():
            self._client = create_boto3_client("s3", s3_settings)

    @property
    def available(self) -> bool:
        return self._client is not None and self._s3.is_configured()

    def object_url(self, key: str) -> str:
        if self._s3.public_base_url:
            return f"{self._s3.public_base_url.rstrip('/')}/{key}"
        bucket = self._s3.bucket_name
        region = self._s3.region
        if region == "us-east-1":
            return f"https://{bucket}.s3.amazonaws.com/{key}"
        return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"

    def _object_key(self, extension: str) -> str:
        folder = self._s3.folder.strip("/")
        filename = generate_filename(extension)
        return f"{folder}/{filename}" if folder else filename

    def _put(self, key: str, prepared: PreparedImage, attempt: _UploadAttempt) -> None:
        self._client.put_object(
            Bucket=self._s3.bucket_name,
            Key=key,
            Body=prepared.data,
            ContentType=prepared.content_type,
        )
        with attempt.lock:
            if not attempt.abandoned:
                attempt.completed = True
                return
        self._discard(key)

    def _discard(self, key: str) -> None:
        """Delete an object whose upload finished after the request moved on."""

        try:
            self._client.delete_object(Bucket=self._s3.bucket_name, Key=key)
        except (BotoCoreError, ClientError):
            logger.exception("Failed to remove abandoned S3 object %s", key)
            return
        logger.info("Removed S3 object %s uploaded after the timeout", key)

    async def store(self, upload: ImageUpload) -> str:
        object_key = self._object_key(upload.extension)
        attempt = _UploadAttempt()

        try:
            prepared = await run_in_threadpool(
                limit_image_size,
                upload.data,
                upload.content_type,
                max_width=self._images.max_width,
                max_height=self._images.max_height,
            )
            # to_thread lets wait_for abandon a hung call instead of waiting on it.
            await asyncio.wait_for(
                asyncio.to_thread(self._put, object_key, prepared, attempt),
                timeout=self._s3.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            with attempt.lock:
                if attempt.completed:
                    return self.object_url(object_key)
                attempt.abandoned = True
            raise StorageError(
                f"S3 upload timed out after {self._s3.timeout_seconds}s"
            ) from exc
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to upload image to S3: {exc}") from exc
        except Exception as exc:
            raise StorageError(f"Failed to prepare or upload image for S3: {exc!r}") from exc

        return self.object_url(object_key)


class LocalImageStorage:
    """Write the original bytes under the static image directory."""

    name = "local"

    def __init__(self, image_settings: ImageConfig) -> None:
        self.directory = Path(image_settings.local_dir)
        self.url_prefix = "/" + image_settings.url_prefix.strip("/")

    @property
    def available(self) -> bool:
        return True

    def _write(self, upload: ImageUpload) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        timestamp_ms = time.time_ns() // 1_000_000
        while True:
            filename = generate_filename(upload.extension, timestamp_ms)
            try:
                # "x" refuses to clobber an image saved in the same millisecond.
                with open(self.directory / filename, "xb") as image_file:
                    image_file.write(upload.data)
            except FileExistsError:
                timestamp_ms += 1
                continue
            return filename

    async def store(self, upload: ImageUpload) -> str:
        try:
            filename = await run_in_threadpool(self._write, upload)
        except OSError as exc:
            raise StorageError(f"Failed to write image to {self.directory}: {exc}") from exc
        return f"{self.url_prefix}/{filename}"


class ImageStorageResolver:
    """Try each strategy in order and return the first stored reference."""

    def __init__(self, strategies: Sequence[ImageStorage]) -> None:
        self.strategies = tuple(strategies)

    async def resolve(self, upload: ImageUpload | None) -> str | None:
        if upload is None:
            return None

        last_error: StorageError | None = None
        for strategy in self.strategies:
            if not strategy.available:
                logger.debug("Image storage '%s' not configured; skipping", strategy.name)
                continue

            try:
                reference = await strategy.store(upload)
            except StorageError as exc:
                record_storage_attempt(strategy.name, "failure")
                logger.warning(
                    "store_image via %s failed for %s (%d bytes): %s",
                    strategy.name,
                    upload.filename or "<unnamed>",
                    upload.size,
                    exc,
                )
                last_error = exc
                continue

            record_storage_attempt(strategy.name, "success")
            logger.info("Stored image via %s at %s", strategy.name, reference)
            return reference

        raise ImageStorageFailed("No image storage backend accepted the upload") from last_error


def build_image_storage(
    s3_settings: S3Config,
    image_settings: ImageConfig,
    *,
    s3_client: Any | None = None,
) -> ImageStorageResolver:
    """Remote first, local directory as fallback."""

    return ImageStorageResolver(
        [
            S3ImageStorage(s3_settings, image_settings, client=s3_client),
            LocalImageStorage(image_settings),
        ]
    )


__all__ = [
    "FILENAME_PREFIX",
    "ImageStorage",
    "ImageStorageFailed",
    "ImageStorageResolver",
    "LocalImageStorage",
    "S3ImageStorage",
    "StorageError",
    "build_image_storage",
    "generate_filename",
]
