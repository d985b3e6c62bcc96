"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Derived read attributes (has_image, has_link, is_current) are SQL expressions,
      so they can be filtered and sorted like stored columns

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete for create_all and Alembic
"""

from portfolio_api.models.project import Project  # noqa: F401
from portfolio_api.models.certification import Certification  # noqa: F401
from portfolio_api.models.journey_item import JourneyItem  # noqa: F401
