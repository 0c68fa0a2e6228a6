"""OffsetUnit enum for schedule age offsets."""

from enum import Enum


class OffsetUnit(Enum):
    """Calendar granularity of a vaccine's age offset from birth."""

    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"
