"""Initial schema — projects, certifications, journey_items.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("details", sa.Text, nullable=False),
        sa.Column("image_url", sa.Text, nullable=True),
        sa.Column("skills", JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("demo_link", sa.Text, nullable=True),
        sa.Column("github_link", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("name", name="uq_projects_name"),
    )
    op.create_index("idx_projects_created_at", "projects", ["created_at"])
    op.create_index(
        "idx_projects_skills", "projects", ["skills"], postgresql_using="gin",
    )

    op.create_table(
        "certifications",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("issuer", sa.Text, nullable=False),
        sa.Column("issued_date", sa.Date, nullable=False),
        sa.Column("certification_id", sa.Text, nullable=True),
        sa.Column("details", sa.Text, nullable=True),
        sa.Column("link_url", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("title", "issuer", name="uq_certifications_title_issuer"),
    )
    op.create_index("idx_certifications_issued_date", "certifications", ["issued_date"])
    op.create_index("idx_certifications_issuer", "certifications", ["issuer"])

    op.create_table(
        "journey_items",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("company_name", sa.Text, nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("details", sa.Text, nullable=False),
        sa.Column("journey_type", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("title", "company_name", name="uq_journey_items_title_company"),
        sa.CheckConstraint(
            "journey_type IN ('Experience', 'Education', 'Volunteer')",
            name="ck_journey_items_type",
        ),
    )
    op.create_index("idx_journey_items_start_date", "journey_items", ["start_date"])
    op.create_index("idx_journey_items_type", "journey_items", ["journey_type"])
    op.create_index("idx_journey_items_company", "journey_items", ["company_name"])


def downgrade() -> None:
    op.drop_table("journey_items")
    op.drop_table("certifications")
    op.drop_table("projects")
