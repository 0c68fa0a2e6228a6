"""EventDue dataclass for a scheduled event's status as of a date."""

from dataclasses import dataclass
from typing import Optional

from .scheduled_event import ScheduledEvent
from .status import Status


@dataclass
class EventDue:
    """Calculated status of one scheduled dose."""

    index: int
    event: ScheduledEvent
    status: Status
    days_remaining: Optional[int] = None

    @property
    def is_due(self) -> bool:
        return self.status in (Status.OVERDUE, Status.DUE_SOON)
