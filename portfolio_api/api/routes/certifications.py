"""Certification Routes — list, by-issuer listing and CRUD for certifications.

Invariants:
    - Reads are public (list accepts an optional token); mutations require one
    - /issuer/{issuer} is declared before /{certification_id}
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from portfolio_api.api.dependencies import get_certification_service, optional_auth, require_auth
from portfolio_api.core import envelope
from portfolio_api.infrastructure.token_verifier import TokenClaims
from portfolio_api.schemas.certification import (
    CertificationCreate, CertificationListQuery, CertificationOut,
    CertificationUpdate, IssuerQuery,
)
from portfolio_api.schemas.common import IdParam
from portfolio_api.services.certification_service import CertificationService

router = APIRouter(prefix="/api/certifications", tags=["certifications"])


def _out(row) -> dict:
    return CertificationOut.model_validate(row).model_dump(mode="json")


@router.get("")
async def list_certifications(
    query: Annotated[CertificationListQuery, Query()],
    service: CertificationService = Depends(get_certification_service),
    _user: TokenClaims | None = Depends(optional_auth),
):
    rows, pagination = await service.list(
        query.page, query.limit, query.sort_by, query.sort_order, issuer=query.issuer,
    )
    return envelope.paginated(
        [_out(r) for r in rows], pagination, "Certifications retrieved successfully",
    )


@router.get("/issuer/{issuer}")
async def certifications_by_issuer(
    issuer: Annotated[str, Path(min_length=1, max_length=255)],
    query: Annotated[IssuerQuery, Query()],
    service: CertificationService = Depends(get_certification_service),
):
    rows, pagination = await service.by_issuer(
        issuer, query.page, query.limit, query.sort_by, query.sort_order,
    )
    return envelope.paginated(
        [_out(r) for r in rows], pagination,
        f"Certifications from {issuer} retrieved successfully",
    )


@router.get("/{certification_id}")
async def get_certification(
    certification_id: IdParam,
    service: CertificationService = Depends(get_certification_service),
):
    row = await service.get(certification_id)
    return envelope.success(_out(row), "Certification retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_certification(
    payload: CertificationCreate,
    service: CertificationService = Depends(get_certification_service),
    _user: TokenClaims = Depends(require_auth),
):
    row = await service.create(payload.model_dump())
    return envelope.success(_out(row), "Certification created successfully")


@router.put("/{certification_id}")
async def update_certification(
    certification_id: IdParam,
    payload: CertificationUpdate,
    service: CertificationService = Depends(get_certification_service),
    _user: TokenClaims = Depends(require_auth),
):
    row = await service.update(certification_id, payload.model_dump(exclude_unset=True))
    return envelope.success(_out(row), "Certification updated successfully")


@router.delete("/{certification_id}")
async def delete_certification(
    certification_id: IdParam,
    service: CertificationService = Depends(get_certification_service),
    _user: TokenClaims = Depends(require_auth),
):
    await service.delete(certification_id)
    return envelope.deleted("Certification deleted successfully")
