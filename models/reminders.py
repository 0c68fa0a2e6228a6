"""Reminder scheduling for upcoming vaccine doses.

Reminders are only computed and logged here; nothing is delivered.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional

from .scheduled_event import ScheduledEvent

LOG = logging.getLogger(__name__)

DEFAULT_REMINDER_DAYS = 7


@dataclass
class Reminder:
    """A reminder to send ahead of a dose's due date."""

    index: int
    vaccine: str
    due_date: date
    remind_on: date
    child_name: Optional[str] = None


def _reminder_for(
    index: int, event: ScheduledEvent, lead_days: int, child_name: Optional[str]
) -> Reminder:
    return Reminder(
        index=index,
        vaccine=event.name,
        due_date=event.due_date,
        remind_on=event.due_date - timedelta(days=lead_days),
        child_name=child_name,
    )


def schedule_reminders(
    events: Iterable[ScheduledEvent],
    today: date,
    lead_days: int = DEFAULT_REMINDER_DAYS,
    child_name: Optional[str] = None,
) -> List[Reminder]:
    """
    Register a reminder for each dose whose reminder date is still ahead.

    A dose due on D gets a reminder on D - lead_days, but only when that
    date is strictly after today. Completed doses and doses already
    reminded about are skipped.
    """
    reminders = []
    for index, event in enumerate(events):
        if event.completed or event.reminder_sent:
            continue
        reminder = _reminder_for(index, event, lead_days, child_name)
        if reminder.remind_on > today:
            LOG.info(
                "Scheduling reminder for %s on %s",
                event.name,
                reminder.remind_on.isoformat(),
            )
            reminders.append(reminder)
    return reminders


def pending_reminders(
    events: Iterable[ScheduledEvent],
    today: date,
    lead_days: int = DEFAULT_REMINDER_DAYS,
    child_name: Optional[str] = None,
) -> List[Reminder]:
    """Reminders that should go out today: inside the lead window, not yet sent."""
    reminders = []
    for index, event in enumerate(events):
        if event.completed or event.reminder_sent:
            continue
        reminder = _reminder_for(index, event, lead_days, child_name)
        if reminder.remind_on <= today <= event.due_date:
            reminders.append(reminder)
    return reminders
