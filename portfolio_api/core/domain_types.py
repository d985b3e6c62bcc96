"""Domain Types — enums and identity types shared by schemas, models and services.

Invariants:
    - Record ids are positive integers assigned by the store
    - All valid enumerated states encoded as str Enums (JSON-serializable as-is)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

RecordId = NewType("RecordId", int)


# ─── Enums ───────────────────────────────────────────────────────

class JourneyType(str, Enum):
    """Journey item classification — maps to DB `journey_type` check constraint."""
    EXPERIENCE = "Experience"
    EDUCATION = "Education"
    VOLUNTEER = "Volunteer"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
