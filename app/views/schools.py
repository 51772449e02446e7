"""Pydantic schemas for School resources."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SchoolResponse(BaseModel):
    """Serialized representation of a School."""

    id: int
    name: str
    address: str
    city: str
    state: str
    contact: str = Field(..., min_length=10, max_length=10)
    email_id: str
    image: Optional[str] = None
    created_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )
    updated_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
    )

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


__all__ = ["SchoolResponse"]
