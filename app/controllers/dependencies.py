"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces import SchoolRepositoryInterface
from app.config.settings import Settings
from app.database import get_session
from app.infrastructure.persistence.repositories_sqlalchemy import (
    SQLAlchemySchoolRepository,
)
from app.services.storage import ImageStorageResolver

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_school_repository(session: SessionDep) -> SchoolRepositoryInterface:
    """Bind the SQLAlchemy record store to the request's session."""

    return SQLAlchemySchoolRepository(session)


def get_image_storage(request: Request) -> ImageStorageResolver:
    """Return the resolver built once in ``create_app``."""

    return request.app.state.image_storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


RepositoryDep = Annotated[SchoolRepositoryInterface, Depends(get_school_repository)]
StorageDep = Annotated[ImageStorageResolver, Depends(get_image_storage)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


__all__ = [
    "get_image_storage",
    "get_school_repository",
    "get_settings",
    "RepositoryDep",
    "SessionDep",
    "SettingsDep",
    "StorageDep",
]
