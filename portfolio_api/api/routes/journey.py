"""Journey Routes — timeline listing (all, by type, current) and CRUD.

Invariants:
    - Reads are public (list views accept an optional token); mutations require one
    - /current and /type/{journey_type} are declared before /{item_id}
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from portfolio_api.api.dependencies import get_journey_service, optional_auth, require_auth
from portfolio_api.core import envelope
from portfolio_api.core.domain_types import JourneyType
from portfolio_api.infrastructure.token_verifier import TokenClaims
from portfolio_api.schemas.common import IdParam
from portfolio_api.schemas.journey import (
    JourneyCreate, JourneyItemOut, JourneyListQuery, JourneyPageQuery, JourneyUpdate,
)
from portfolio_api.services.journey_service import JourneyService

router = APIRouter(prefix="/api/journey", tags=["journey"])


def _out(row) -> dict:
    return JourneyItemOut.model_validate(row).model_dump(mode="json")


@router.get("")
async def list_journey(
    query: Annotated[JourneyListQuery, Query()],
    service: JourneyService = Depends(get_journey_service),
    _user: TokenClaims | None = Depends(optional_auth),
):
    rows, pagination = await service.list(
        query.page, query.limit, query.sort_by, query.sort_order,
        journey_type=query.journey_type, current=query.current,
    )
    return envelope.paginated(
        [_out(r) for r in rows], pagination, "Journey items retrieved successfully",
    )


@router.get("/current")
async def current_journey(
    query: Annotated[JourneyPageQuery, Query()],
    service: JourneyService = Depends(get_journey_service),
    _user: TokenClaims | None = Depends(optional_auth),
):
    rows, pagination = await service.current(
        query.page, query.limit, query.sort_by, query.sort_order,
    )
    return envelope.paginated(
        [_out(r) for r in rows], pagination, "Current journey items retrieved successfully",
    )


@router.get("/type/{journey_type}")
async def journey_by_type(
    journey_type: JourneyType,
    query: Annotated[JourneyPageQuery, Query()],
    service: JourneyService = Depends(get_journey_service),
    _user: TokenClaims | None = Depends(optional_auth),
):
    rows, pagination = await service.by_type(
        journey_type, query.page, query.limit, query.sort_by, query.sort_order,
    )
    return envelope.paginated(
        [_out(r) for r in rows], pagination,
        f"{journey_type.value} items retrieved successfully",
    )


@router.get("/{item_id}")
async def get_journey_item(
    item_id: IdParam,
    service: JourneyService = Depends(get_journey_service),
):
    row = await service.get(item_id)
    return envelope.success(_out(row), "Journey item retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_journey_item(
    payload: JourneyCreate,
    service: JourneyService = Depends(get_journey_service),
    _user: TokenClaims = Depends(require_auth),
):
    row = await service.create(payload.model_dump())
    return envelope.success(_out(row), "Journey item created successfully")


@router.put("/{item_id}")
async def update_journey_item(
    item_id: IdParam,
    payload: JourneyUpdate,
    service: JourneyService = Depends(get_journey_service),
    _user: TokenClaims = Depends(require_auth),
):
    row = await service.update(item_id, payload.model_dump(exclude_unset=True))
    return envelope.success(_out(row), "Journey item updated successfully")


@router.delete("/{item_id}")
async def delete_journey_item(
    item_id: IdParam,
    service: JourneyService = Depends(get_journey_service),
    _user: TokenClaims = Depends(require_auth),
):
    await service.delete(item_id)
    return envelope.deleted("Journey item deleted successfully")
