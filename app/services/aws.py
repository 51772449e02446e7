"""Shared AWS helpers for service clients."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from app.config.settings import S3Config


def create_boto3_client(
    service_name: str,
    s3_settings: S3Config,
    *,
    region_name: str | None = None,
    timeout_seconds: float | None = None,
) -> Any:
    """Instantiate a boto3 client using configured credentials if available.

    Retries are disabled; callers decide what happens after a failed call.
    """

    region = region_name or s3_settings.region
    timeout = timeout_seconds or s3_settings.timeout_seconds
    client_kwargs: dict[str, Any] = {
        "region_name": region,
        "config": Config(
            connect_timeout=timeout,
            read_timeout=timeout,
            retries={"max_attempts": 1, "mode": "standard"},
        ),
    }
    if s3_settings.access_key and s3_settings.secret_key is not None:
        client_kwargs["aws_access_key_id"] = s3_settings.access_key
        client_kwargs["aws_secret_access_key"] = (
            s3_settings.secret_key.get_secret_value()
        )
    return boto3.client(service_name, **client_kwargs)


__all__ = ["create_boto3_client"]
