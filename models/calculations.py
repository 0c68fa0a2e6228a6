"""Helper functions for vaccine due date calculations."""

from datetime import date, datetime, timedelta
from typing import List, Sequence, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from .errors import InvalidDate
from .schedule_table import VACCINE_SCHEDULE
from .scheduled_event import ScheduledEvent
from .status import Status
from .unit import OffsetUnit
from .vaccine import VaccineDefinition

DateInput = Union[str, date]


def parse_birth_date(value: DateInput) -> date:
    """
    Parse a birth date from an ISO-8601 string or a date/datetime value.

    Any time-of-day component is dropped. Raises InvalidDate when the value
    is not a real calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDate(f"Unsupported birth date value: {value!r}")
    text = value.strip()
    if not text:
        raise InvalidDate("Birth date is required")
    try:
        return isoparse(text).date()
    except (ValueError, OverflowError) as e:
        raise InvalidDate(f"Invalid birth date '{value}': {e}") from e


def add_months(start: date, months: int) -> date:
    """
    Add calendar months without clamping the day of month.

    When the target month is too short, the surplus days roll into the
    following month: Aug 31 + 1 month = Oct 1, Feb 29 + 12 months = Mar 1.
    """
    first = start.replace(day=1) + relativedelta(months=months)
    return first + timedelta(days=start.day - 1)


def calc_due_date(birth_date: date, offset: int, unit: OffsetUnit) -> date:
    """Calculate a due date: birth date + offset in the given unit."""
    if unit == OffsetUnit.DAYS:
        return birth_date + timedelta(days=offset)
    if unit == OffsetUnit.WEEKS:
        return birth_date + timedelta(weeks=offset)
    if unit == OffsetUnit.MONTHS:
        return add_months(birth_date, offset)
    if unit == OffsetUnit.YEARS:
        return add_months(birth_date, offset * 12)
    raise ValueError(f"Unknown offset unit: {unit!r}")


def calculate_vaccine_schedule(
    birth_date: DateInput,
    schedule: Sequence[VaccineDefinition] = VACCINE_SCHEDULE,
) -> List[ScheduledEvent]:
    """
    Build the immunization schedule for a child born on birth_date.

    Returns one fresh ScheduledEvent per definition, in table order,
    with completed and reminder_sent both False.
    """
    dob = parse_birth_date(birth_date)
    try:
        return [
            ScheduledEvent(
                name=vaccine.name,
                due_date=calc_due_date(dob, vaccine.offset, vaccine.unit),
            )
            for vaccine in schedule
        ]
    except (ValueError, OverflowError) as e:
        raise InvalidDate(f"Birth date {dob} is out of range: {e}") from e


def check_status(
    as_of: date, due_date: date, soon_days: int, completed: bool = False
) -> Status:
    """Determine status by comparing the as-of date to the due date."""
    if completed:
        return Status.COMPLETED
    if as_of > due_date:
        return Status.OVERDUE
    if as_of >= due_date - timedelta(days=soon_days):
        return Status.DUE_SOON
    return Status.UPCOMING


def days_remaining(as_of: date, due_date: date) -> int:
    """Days from as_of until due_date (negative when past due)."""
    return (due_date - as_of).days
