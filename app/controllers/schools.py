"""School controller: list, register and delete schools."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile, status

from app.application.interfaces import PersistenceError, SchoolNotFoundError
from app.controllers.dependencies import RepositoryDep, SettingsDep, StorageDep
from app.pipelines.schools import (
    SchoolSubmission,
    read_image_upload,
    register_school,
)
from app.services.storage import ImageStorageFailed
from app.views import ErrorResponse, SchoolResponse, SuccessResponse

router = APIRouter(prefix="/schools", tags=["schools"])

logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.get("", response_model=list[SchoolResponse], responses=_ERROR_RESPONSES)
async def list_schools(repository: RepositoryDep) -> list[SchoolResponse]:
    try:
        schools = await repository.list_recent()
    except PersistenceError as exc:
        logger.exception("list_schools failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch schools",
        ) from exc
    return [SchoolResponse.model_validate(school) for school in schools]


@router.post(
    "",
    response_model=SchoolResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def create_school(
    repository: RepositoryDep,
    storage: StorageDep,
    app_settings: SettingsDep,
    name: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    contact: Optional[str] = Form(None),
    email_id: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
) -> SchoolResponse:
    """Register a school from multipart form data with an optional image."""

    submission = SchoolSubmission(
        name=name,
        address=address,
        city=city,
        state=state,
        contact=contact,
        email_id=email_id,
        image=await read_image_upload(image),
    )

    # Validation errors propagate to the app-level 400 handler.
    try:
        school = await register_school(
            submission,
            storage=storage,
            repository=repository,
            max_image_bytes=app_settings.images.max_bytes,
        )
    except (ImageStorageFailed, PersistenceError) as exc:
        logger.exception("create_school failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create school",
        ) from exc

    return SchoolResponse.model_validate(school)


@router.delete(
    "",
    response_model=SuccessResponse,
    responses={
        **_ERROR_RESPONSES,
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def delete_school(
    repository: RepositoryDep,
    school_id: Optional[str] = Query(None, alias="id"),
) -> SuccessResponse:
    try:
        parsed_id = int((school_id or "").strip())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A numeric school id is required",
        ) from None

    try:
        await repository.delete_by_id(parsed_id)
    except SchoolNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="School not found",
        ) from exc
    except PersistenceError as exc:
        logger.exception("delete_school failed for id=%s", parsed_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete school",
        ) from exc

    return SuccessResponse(
        message="School deleted successfully",
        data={"id": parsed_id},
    )
