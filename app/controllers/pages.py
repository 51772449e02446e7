"""Server-rendered pages: home, submission form and school listing."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.application.interfaces import PersistenceError
from app.controllers.dependencies import RepositoryDep, SettingsDep
from app.pipelines.schools.validation import MAX_LENGTHS, MIN_LENGTHS
from app.utils import PLACEHOLDER_IMAGE, resolve_image_url

router = APIRouter(tags=["pages"], include_in_schema=False)

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["image_url"] = resolve_image_url
templates.env.globals["placeholder_image"] = PLACEHOLDER_IMAGE


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, app_settings: SettingsDep) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "index.html",
        {"app_name": app_settings.app_name},
    )


@router.get("/add-school", response_class=HTMLResponse)
async def add_school_form(request: Request, app_settings: SettingsDep) -> HTMLResponse:
    """Render the registration form with the same limits the API enforces."""

    return templates.TemplateResponse(
        request,
        "add_school.html",
        {
            "app_name": app_settings.app_name,
            "min_lengths": MIN_LENGTHS,
            "max_lengths": MAX_LENGTHS,
            "max_image_bytes": app_settings.images.max_bytes,
        },
    )


@router.get("/view-schools", response_class=HTMLResponse)
async def view_schools(
    request: Request,
    repository: RepositoryDep,
    app_settings: SettingsDep,
) -> HTMLResponse:
    context = {
        "app_name": app_settings.app_name,
        "image_prefix": app_settings.images.url_prefix,
        "schools": [],
        "error": None,
    }
    status_code = status.HTTP_200_OK
    try:
        context["schools"] = await repository.list_recent()
    except PersistenceError:
        logger.exception("view_schools failed")
        context["error"] = "Failed to load schools. Please try again later."
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return templates.TemplateResponse(
        request,
        "schools.html",
        context,
        status_code=status_code,
    )
