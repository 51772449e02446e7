"""Pydantic schemas used as views in the MVC architecture."""

from .common import ErrorResponse, SuccessResponse
from .schools import SchoolResponse

__all__ = [
    "SchoolResponse",
    "ErrorResponse",
    "SuccessResponse",
]
