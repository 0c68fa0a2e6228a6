"""Status enum for vaccination urgency levels."""

from enum import Enum


class Status(Enum):
    """Scheduled event status categories. Lower value = more urgent."""

    OVERDUE = 1
    DUE_SOON = 2
    UPCOMING = 3
    COMPLETED = 4  # Dose recorded as administered
