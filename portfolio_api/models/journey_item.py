"""JourneyItem ORM — one entry of the experience/education/volunteer timeline.

Invariants:
    - (title, company_name) is unique together
    - journey_type is one of Experience | Education | Volunteer (DB check constraint)
    - end_date, when set, is strictly after start_date (checked in schemas and service)
    - is_current is true iff end_date is null
"""

from datetime import date, datetime, timezone
from typing import ClassVar

from sqlalchemy import (
    CheckConstraint, Date, DateTime, Index, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, column_property, mapped_column

from portfolio_api.db.base import Base, IdType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JourneyItem(Base):
    """Journey item entity."""
    __tablename__ = "journey_items"
    resource_label: ClassVar[str] = "Journey item"
    conflict_message: ClassVar[str] = (
        "Journey item with this title and company already exists"
    )
    __table_args__ = (
        UniqueConstraint(
            "title", "company_name", name="uq_journey_items_title_company",
        ),
        CheckConstraint(
            "journey_type IN ('Experience', 'Education', 'Volunteer')",
            name="ck_journey_items_type",
        ),
        Index("idx_journey_items_start_date", "start_date"),
        Index("idx_journey_items_type", "journey_type"),
        Index("idx_journey_items_company", "company_name"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    company_name: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    details: Mapped[str] = mapped_column(Text, nullable=False)
    journey_type: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    is_current: Mapped[bool] = column_property(end_date.is_(None))
