"""Project ORM — a portfolio project with an optional cover image.

Invariants:
    - name is unique across all projects (constraint backs the service-level check)
    - skills is an ordered JSON array, never null (defaults to [])
    - has_image is true iff image_url is set

Design Decisions:
    - JSONB in Postgres (GIN-indexable containment), plain JSON elsewhere
    - image_url stores the blob store's public URL; the blob name is its last path segment
"""

from datetime import datetime, timezone
from typing import ClassVar

from sqlalchemy import JSON, DateTime, Index, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, column_property, mapped_column

from portfolio_api.db.base import Base, IdType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    """Project entity."""
    __tablename__ = "projects"
    resource_label: ClassVar[str] = "Project"
    conflict_message: ClassVar[str] = "Project with this name already exists"
    __table_args__ = (
        UniqueConstraint("name", name="uq_projects_name"),
        Index("idx_projects_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    skills: Mapped[list] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list,
    )
    demo_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    github_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    has_image: Mapped[bool] = column_property(image_url.is_not(None))
