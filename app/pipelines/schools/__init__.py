"""School registration pipeline package.

Modules follow the order in which `POST /schools` executes:

1. `ingestion` – turn multipart parts into a `SchoolSubmission`.
2. `validation` – decide whether the submission is acceptable.
3. `flow` – run validation, image storage and persistence in sequence.
"""

from .flow import PipelineStage, SchoolRegistrationPipeline, register_school
from .ingestion import read_image_upload, resolve_content_type
from .types import ImageUpload, SchoolRecordData, SchoolSubmission
from .validation import (
    FieldTooLong,
    FieldTooShort,
    ImageTooLarge,
    InvalidContact,
    InvalidEmail,
    InvalidImageType,
    MissingFields,
    SchoolValidationError,
    validate_submission,
)

__all__ = [
    "FieldTooLong",
    "FieldTooShort",
    "ImageTooLarge",
    "ImageUpload",
    "InvalidContact",
    "InvalidEmail",
    "InvalidImageType",
    "MissingFields",
    "PipelineStage",
    "SchoolRecordData",
    "SchoolRegistrationPipeline",
    "SchoolSubmission",
    "SchoolValidationError",
    "read_image_upload",
    "register_school",
    "resolve_content_type",
    "validate_submission",
]
