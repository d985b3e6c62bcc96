"""Certification Schemas — create/update/query/response contracts for certifications.

Invariants:
    - title / issuer: 1-255 chars, stripped; (title, issuer) is the natural key
    - issued_date: ISO-8601 calendar date
    - details: optional, at most 2000 chars; certification_id: optional, at most 255
"""

from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints

from portfolio_api.schemas.common import (
    OptionalShortText, OptionalUrl, PageQuery, RequiredName, blank_to_none,
)

LongText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=2000)]
OptionalDetails = Annotated[LongText | None, BeforeValidator(blank_to_none)]


class CertificationCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: RequiredName
    issuer: RequiredName
    issued_date: date
    certification_id: OptionalShortText = None
    details: OptionalDetails = None
    link_url: OptionalUrl = None


class CertificationUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: RequiredName = None
    issuer: RequiredName = None
    issued_date: date = None
    certification_id: OptionalShortText = None
    details: OptionalDetails = None
    link_url: OptionalUrl = None


class CertificationListQuery(PageQuery):
    sort_by: Literal["issued_date", "title", "issuer"] = Field("issued_date", alias="sortBy")
    issuer: str | None = Field(None, max_length=255)


class IssuerQuery(PageQuery):
    sort_by: Literal["issued_date", "title", "issuer"] = Field("issued_date", alias="sortBy")


class CertificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    issuer: str
    issued_date: date
    certification_id: str | None
    details: str | None
    link_url: str | None
    created_at: datetime
    updated_at: datetime
    has_link: bool
