"""Journey Schemas — create/update/query/response contracts for timeline entries.

Invariants:
    - title / company_name: 1-255 chars; details: at least 10 chars
    - journey_type: Experience | Education | Volunteer
    - end_date, when given together with start_date, is strictly after it;
      the error is reported on the end_date field
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from portfolio_api.core.domain_types import JourneyType
from portfolio_api.schemas.common import Details, PageQuery, RequiredName

END_BEFORE_START = "End date must be after start date"


def check_date_order(start_date: date | None, end_date: date | None) -> None:
    """Raise ValueError unless end_date is absent or strictly after start_date."""
    if start_date is not None and end_date is not None and end_date <= start_date:
        raise ValueError(END_BEFORE_START)


class _DateOrder(BaseModel):
    @field_validator("end_date", check_fields=False)
    @classmethod
    def end_after_start(cls, v: date | None, info: ValidationInfo) -> date | None:
        check_date_order(info.data.get("start_date"), v)
        return v


class JourneyCreate(_DateOrder):
    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    title: RequiredName
    company_name: RequiredName
    start_date: date
    end_date: date | None = None
    details: Details
    journey_type: JourneyType


class JourneyUpdate(_DateOrder):
    """Partial update; the service re-checks end_date against the stored start_date."""
    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    title: RequiredName = None
    company_name: RequiredName = None
    start_date: date = None
    end_date: date | None = None
    details: Details = None
    journey_type: JourneyType = None


class JourneyListQuery(PageQuery):
    sort_by: Literal["start_date", "title", "company_name"] = Field("start_date", alias="sortBy")
    journey_type: JourneyType | None = None
    current: bool | None = None


class JourneyPageQuery(PageQuery):
    sort_by: Literal["start_date", "title", "company_name"] = Field("start_date", alias="sortBy")


class JourneyItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: int
    title: str
    company_name: str
    start_date: date
    end_date: date | None
    details: str
    journey_type: JourneyType
    created_at: datetime
    updated_at: datetime
    is_current: bool
