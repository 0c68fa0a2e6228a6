"""ChildProfile class - the aggregate for a child and their vaccine schedule."""

from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from .calculations import (
    calculate_vaccine_schedule,
    check_status,
    days_remaining,
    parse_birth_date,
)
from .event_due import EventDue
from .scheduled_event import ScheduledEvent
from .status import Status


class ChildProfile:
    """Child details with their computed immunization schedule."""

    def __init__(
        self,
        id: Optional[int],
        user_id: Optional[int],
        name: str,
        dob: str,
        gender: Optional[str] = None,
        blood_group: Optional[str] = None,
        schedule: Optional[List[ScheduledEvent]] = None,
        created_at: Optional[str] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.name = name
        self.dob = dob
        self.gender = gender
        self.blood_group = blood_group
        self.schedule = schedule or []
        self.created_at = created_at

    @classmethod
    def create(
        cls,
        user_id: Optional[int],
        name: str,
        dob: str,
        gender: Optional[str] = None,
        blood_group: Optional[str] = None,
    ) -> "ChildProfile":
        """New profile with a schedule calculated from the date of birth."""
        birth_date = parse_birth_date(dob)
        return cls(
            None,
            user_id,
            name,
            birth_date.isoformat(),
            gender,
            blood_group,
            calculate_vaccine_schedule(birth_date),
        )

    @property
    def birth_date(self) -> date:
        return parse_birth_date(self.dob)

    def age_label(self, as_of: date) -> str:
        """Age as of a date, e.g. '1y 3mo', '5mo' or '12d'."""
        age = relativedelta(as_of, self.birth_date)
        if age.years > 0:
            return f"{age.years}y {age.months}mo"
        if age.months > 0:
            return f"{age.months}mo"
        return f"{max(age.days, 0)}d"

    def get_event(self, index: int) -> ScheduledEvent:
        """Get a scheduled event by its position in the schedule."""
        if index < 0 or index >= len(self.schedule):
            raise IndexError(
                f"Event index {index} out of range (0..{len(self.schedule) - 1})"
            )
        return self.schedule[index]

    def calculate_event_status(
        self, index: int, as_of: date, due_soon_days: int = 7
    ) -> EventDue:
        event = self.get_event(index)
        return EventDue(
            index=index,
            event=event,
            status=check_status(as_of, event.due_date, due_soon_days, event.completed),
            days_remaining=days_remaining(as_of, event.due_date),
        )

    def get_all_event_status(
        self, as_of: date, due_soon_days: int = 7
    ) -> List[EventDue]:
        """Status for every event, in schedule order."""
        return [
            self.calculate_event_status(i, as_of, due_soon_days)
            for i in range(len(self.schedule))
        ]

    def next_due(self, as_of: date, due_soon_days: int = 7) -> Optional[EventDue]:
        """
        The earliest dose not yet given.

        Ties on due date keep schedule order.
        """
        pending = [
            s
            for s in self.get_all_event_status(as_of, due_soon_days)
            if s.status != Status.COMPLETED
        ]
        if not pending:
            return None
        return min(pending, key=lambda s: (s.event.due_date, s.index))

    @property
    def completed_count(self) -> int:
        return sum(1 for e in self.schedule if e.completed)
