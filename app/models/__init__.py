"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .school import School  # noqa: F401

__all__ = [
    "Base",
    "School",
]
