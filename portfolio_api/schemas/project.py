"""Project Schemas — create/update/query/response contracts for portfolio projects.

Invariants:
    - name: 1-255 chars, stripped; details: at least 10 chars, stripped
    - skills: ordered list of trimmed strings, [] when omitted
    - demo_link / github_link: http(s) URL or None ("" clears the field)
"""

import json
from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints
from pydantic_core import PydanticCustomError

from portfolio_api.schemas.common import Details, OptionalUrl, PageQuery, RequiredName


def _split_skills(value: Any) -> Any:
    """Accept a list, a JSON array string or a comma-separated string.

    Multipart clients send skills either as repeated fields, as JSON.stringify([...]),
    or as "a, b, c".
    """
    if not isinstance(value, str):
        return value
    if value.lstrip().startswith("["):
        try:
            parsed = json.loads(value)
        except ValueError:
            parsed = None
        if not isinstance(parsed, list):
            raise PydanticCustomError("skills_json", "Skills must be a valid JSON array of strings")
        return parsed
    return [part for part in value.split(",") if part.strip()]


Skill = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
SkillList = Annotated[list[Skill], BeforeValidator(_split_skills)]


class ProjectCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: RequiredName
    details: Details
    skills: SkillList = Field(default_factory=list)
    demo_link: OptionalUrl = None
    github_link: OptionalUrl = None


class ProjectUpdate(BaseModel):
    """Partial update — only fields present in the request are written."""
    model_config = ConfigDict(extra="ignore")

    name: RequiredName = None
    details: Details = None
    skills: SkillList = None
    demo_link: OptionalUrl = None
    github_link: OptionalUrl = None


class ProjectListQuery(PageQuery):
    sort_by: Literal["created_at", "name", "updated_at"] = Field("created_at", alias="sortBy")
    search: str | None = Field(None, max_length=255)
    skills: str | None = Field(None, max_length=255)
    has_image: bool | None = Field(None, alias="hasImage")

    def skill_list(self) -> list[str]:
        if not self.skills:
            return []
        return [s.strip() for s in self.skills.split(",") if s.strip()]


class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    details: str
    image_url: str | None
    skills: list[str]
    demo_link: str | None
    github_link: str | None
    created_at: datetime
    updated_at: datetime
    has_image: bool
