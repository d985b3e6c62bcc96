"""Project Routes — list, search, CRUD and standalone image upload for projects.

Invariants:
    - Create/update accept JSON or multipart; the image field is `image` or `uploadedFile`
    - Every mutation requires a bearer token; GET /{id} does too
    - /search and /upload-image are declared before /{project_id}
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from portfolio_api.api.dependencies import get_project_service, optional_auth, require_auth
from portfolio_api.api.uploads import image_from_form, is_form, read_payload
from portfolio_api.core import envelope
from portfolio_api.core.errors import UploadError
from portfolio_api.infrastructure.token_verifier import TokenClaims
from portfolio_api.schemas.common import IdParam, SearchQuery, parse_input
from portfolio_api.schemas.project import (
    ProjectCreate, ProjectListQuery, ProjectOut, ProjectUpdate,
)
from portfolio_api.services.project_service import ProjectService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/projects", tags=["projects"])


def _out(row) -> dict:
    return ProjectOut.model_validate(row).model_dump(mode="json")


@router.get("")
async def list_projects(
    query: Annotated[ProjectListQuery, Query()],
    service: ProjectService = Depends(get_project_service),
    _user: TokenClaims | None = Depends(optional_auth),
):
    rows, pagination = await service.list(
        page=query.page,
        limit=query.limit,
        sort_by=query.sort_by,
        sort_order=query.sort_order,
        search=query.search,
        skills=query.skill_list(),
        has_image=query.has_image,
    )
    return envelope.paginated(
        [_out(r) for r in rows], pagination, "Projects retrieved successfully",
    )


@router.get("/search")
async def search_projects(
    query: Annotated[SearchQuery, Query()],
    service: ProjectService = Depends(get_project_service),
):
    rows, pagination = await service.search(query.q, query.page, query.limit)
    return envelope.search_results([_out(r) for r in rows], query.q, pagination)


@router.post("/upload-image", status_code=status.HTTP_201_CREATED)
async def upload_image(
    request: Request,
    service: ProjectService = Depends(get_project_service),
    _user: TokenClaims = Depends(require_auth),
):
    """Store an image and return its URL without touching any project."""
    image = (
        await image_from_form(await request.form(), service.images)
        if is_form(request) else None
    )
    if image is None:
        raise UploadError("No file uploaded")
    stored = await service.upload_image(image)
    return envelope.success(
        {
            "filename": stored.generated_name,
            "originalName": stored.original_name,
            "size": stored.size,
            "mimetype": stored.mime_type,
            "url": stored.public_url,
        },
        "Image uploaded successfully",
    )


@router.get("/{project_id}")
async def get_project(
    project_id: IdParam,
    service: ProjectService = Depends(get_project_service),
    _user: TokenClaims = Depends(require_auth),
):
    row = await service.get(project_id)
    return envelope.success(_out(row), "Project retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    request: Request,
    service: ProjectService = Depends(get_project_service),
    _user: TokenClaims = Depends(require_auth),
):
    raw, image = await read_payload(request, service.images)
    body = parse_input(ProjectCreate, raw)
    row = await service.create(body.model_dump(), image)
    return envelope.success(_out(row), "Project created successfully")


@router.put("/{project_id}")
async def update_project(
    project_id: IdParam,
    request: Request,
    service: ProjectService = Depends(get_project_service),
    _user: TokenClaims = Depends(require_auth),
):
    raw, image = await read_payload(request, service.images)
    body = parse_input(ProjectUpdate, raw)
    row = await service.update(project_id, body.model_dump(exclude_unset=True), image)
    return envelope.success(_out(row), "Project updated successfully")


@router.delete("/{project_id}")
async def delete_project(
    project_id: IdParam,
    service: ProjectService = Depends(get_project_service),
    _user: TokenClaims = Depends(require_auth),
):
    await service.delete(project_id)
    return envelope.deleted("Project deleted successfully")
