"""Submission validation (stage 02 of the registration pipeline).

Checks run in a fixed order and the first failure is raised:

1. presence of all six required fields,
2. minimum field lengths,
3. maximum field lengths (the column sizes),
4. email shape,
5. ten-digit contact number,
6. image content type,
7. image size.

Nothing here touches storage or the database.
"""

from __future__ import annotations

import re
from typing import ClassVar, Final, Mapping

from .types import ImageUpload, SchoolRecordData, SchoolSubmission

REQUIRED_FIELDS: Final[tuple[str, ...]] = (
    "name",
    "address",
    "city",
    "state",
    "contact",
    "email_id",
)

MIN_LENGTHS: Final[Mapping[str, int]] = {
    "name": 2,
    "address": 5,
    "city": 2,
    "state": 2,
}

# Mirrors the String column sizes on app.models.school.School.
MAX_LENGTHS: Final[Mapping[str, int]] = {
    "name": 255,
    "city": 120,
    "state": 120,
    "email_id": 255,
}

MAX_IMAGE_BYTES: Final[int] = 10 * 1024 * 1024

EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
CONTACT_PATTERN: Final[re.Pattern[str]] = re.compile(r"[0-9]{10}")


class SchoolValidationError(ValueError):
    """Base class for submissions rejected before any side effect."""

    code: ClassVar[str] = "invalid_submission"
    message: ClassVar[str] = "Invalid submission"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class MissingFields(SchoolValidationError):
    code = "missing_fields"
    message = "All required fields must be provided"

    def __init__(self, fields: tuple[str, ...] = ()) -> None:
        self.fields = fields
        super().__init__()


class FieldTooShort(SchoolValidationError):
    code = "field_too_short"
    message = "Field is too short"

    def __init__(self, field: str, minimum: int) -> None:
        self.field = field
        self.minimum = minimum
        label = "School name" if field == "name" else field.capitalize()
        super().__init__(f"{label} must be at least {minimum} characters")


class FieldTooLong(SchoolValidationError):
    code = "field_too_long"
    message = "Field is too long"

    def __init__(self, field: str, maximum: int) -> None:
        self.field = field
        self.maximum = maximum
        label = "School name" if field == "name" else field.capitalize()
        super().__init__(f"{label} must be at most {maximum} characters")


class InvalidEmail(SchoolValidationError):
    code = "invalid_email"
    message = "Invalid email format"


class InvalidContact(SchoolValidationError):
    code = "invalid_contact"
    message = "Contact must be a 10-digit number"


class InvalidImageType(SchoolValidationError):
    code = "invalid_image_type"
    message = "Only image files are allowed"


class ImageTooLarge(SchoolValidationError):
    code = "image_too_large"
    message = "Image size must be less than 10MB"


def is_valid_email(value: str) -> bool:
    return EMAIL_PATTERN.fullmatch(value) is not None


def is_valid_contact(value: str) -> bool:
    return CONTACT_PATTERN.fullmatch(value) is not None


def validate_image(image: ImageUpload, *, max_bytes: int = MAX_IMAGE_BYTES) -> None:
    """Reject non-image content types and payloads above ``max_bytes``."""

    if not image.content_type.startswith("image/"):
        raise InvalidImageType()
    if image.size > max_bytes:
        raise ImageTooLarge()


def validate_submission(
    submission: SchoolSubmission,
    *,
    max_image_bytes: int = MAX_IMAGE_BYTES,
) -> SchoolRecordData:
    """Validate a submission and return its normalized field values.

    The returned data has every text field trimmed and the email lower-cased;
    the ``image`` reference is left empty for the storage stage to fill in.
    """

    values = {
        field: (getattr(submission, field) or "").strip() for field in REQUIRED_FIELDS
    }

    missing = tuple(field for field, value in values.items() if not value)
    if missing:
        raise MissingFields(missing)

    for field, minimum in MIN_LENGTHS.items():
        if len(values[field]) < minimum:
            raise FieldTooShort(field, minimum)

    for field, maximum in MAX_LENGTHS.items():
        if len(values[field]) > maximum:
            raise FieldTooLong(field, maximum)

    if not is_valid_email(values["email_id"]):
        raise InvalidEmail()

    if not is_valid_contact(values["contact"]):
        raise InvalidContact()

    if submission.image is not None:
        validate_image(submission.image, max_bytes=max_image_bytes)

    return SchoolRecordData(
        name=values["name"],
        address=values["address"],
        city=values["city"],
        state=values["state"],
        contact=values["contact"],
        email_id=values["email_id"].lower(),
    )


__all__ = [
    "CONTACT_PATTERN",
    "EMAIL_PATTERN",
    "MAX_IMAGE_BYTES",
    "MAX_LENGTHS",
    "MIN_LENGTHS",
    "REQUIRED_FIELDS",
    "FieldTooLong",
    "FieldTooShort",
    "ImageTooLarge",
    "InvalidContact",
    "InvalidEmail",
    "InvalidImageType",
    "MissingFields",
    "SchoolValidationError",
    "is_valid_contact",
    "is_valid_email",
    "validate_image",
    "validate_submission",
]
