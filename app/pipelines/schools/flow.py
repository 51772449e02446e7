"""Orchestration of the school registration pipeline.

``POST /schools`` runs these stages strictly in order and stops at the first
failure:

1. ``ingestion`` – read the multipart form and the optional image into memory.
2. ``validation`` – presence, length, email, contact and image checks.
3. ``storage`` – resolve the image to a URL (S3) or a local path (fallback).
4. ``persistence`` – insert the record with the resolved reference.

Validation errors never reach storage; storage errors never reach the
database.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Iterable, List

from app.telemetry import increment_schools_created

from .types import SchoolSubmission
from .validation import MAX_IMAGE_BYTES, validate_submission

if TYPE_CHECKING:
    from app.application.interfaces import SchoolRepositoryInterface
    from app.models.school import School
    from app.services.storage import ImageStorageResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the registration pipeline."""

    order: int
    name: str
    module: str
    summary: str


class SchoolRegistrationPipeline:
    """Utility wrapper for documenting the `POST /schools` flow."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "Ingestion",
            "app.pipelines.schools.ingestion",
            "Read form fields and the optional image part into a submission.",
        ),
        PipelineStage(
            2,
            "Validation",
            "app.pipelines.schools.validation",
            "Reject missing or malformed fields and unacceptable images.",
        ),
        PipelineStage(
            3,
            "Image Storage",
            "app.services.storage",
            "Upload to S3 when configured, otherwise write to the local image directory.",
        ),
        PipelineStage(
            4,
            "Persistence",
            "app.infrastructure.persistence.repositories_sqlalchemy",
            "Insert the normalized record with the resolved image reference.",
        ),
    ]

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)


async def register_school(
    submission: SchoolSubmission,
    *,
    storage: ImageStorageResolver,
    repository: SchoolRepositoryInterface,
    max_image_bytes: int = MAX_IMAGE_BYTES,
) -> School:
    """Validate, store the image, then persist the school."""

    record = validate_submission(submission, max_image_bytes=max_image_bytes)

    image_reference = await storage.resolve(submission.image)
    if image_reference is not None:
        record = replace(record, image=image_reference)

    school = await repository.create(record)
    increment_schools_created()
    logger.info("Created school id=%s image=%s", school.id, school.image or "-")
    return school


__all__ = ["PipelineStage", "SchoolRegistrationPipeline", "register_school"]
