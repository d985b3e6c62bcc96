"""Certification ORM — a credential issued by an organization.

Invariants:
    - (title, issuer) is unique together
    - issued_date is a calendar date (no time component)
    - has_link is true iff link_url is set
"""

from datetime import date, datetime, timezone
from typing import ClassVar

from sqlalchemy import Date, DateTime, Index, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, column_property, mapped_column

from portfolio_api.db.base import Base, IdType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Certification(Base):
    """Certification entity."""
    __tablename__ = "certifications"
    resource_label: ClassVar[str] = "Certification"
    conflict_message: ClassVar[str] = (
        "Certification with this title and issuer already exists"
    )
    __table_args__ = (
        UniqueConstraint("title", "issuer", name="uq_certifications_title_issuer"),
        Index("idx_certifications_issued_date", "issued_date"),
        Index("idx_certifications_issuer", "issuer"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    issuer: Mapped[str] = mapped_column(Text, nullable=False)
    issued_date: Mapped[date] = mapped_column(Date, nullable=False)
    certification_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    link_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    has_link: Mapped[bool] = column_property(link_url.is_not(None))
