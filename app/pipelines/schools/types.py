"""Typed containers shared across the school registration pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional


@dataclass(frozen=True)
class ImageUpload:
    """An image file received with a submission, fully read into memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        """Original extension including the dot, lower-cased ('' when absent)."""

        return PurePath(self.filename).suffix.lower()


@dataclass(frozen=True)
class SchoolSubmission:
    """Raw form values as submitted, before trimming or validation."""

    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    contact: Optional[str] = None
    email_id: Optional[str] = None
    image: Optional[ImageUpload] = None


@dataclass(frozen=True)
class SchoolRecordData:
    """Normalized values ready to be written by the record store."""

    name: str
    address: str
    city: str
    state: str
    contact: str
    email_id: str
    image: Optional[str] = None


__all__ = ["ImageUpload", "SchoolSubmission", "SchoolRecordData"]
