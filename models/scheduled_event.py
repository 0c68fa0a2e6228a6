"""ScheduledEvent dataclass for a computed vaccine due date."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict


@dataclass
class ScheduledEvent:
    """A vaccine dose due on a specific date for one child."""

    name: str
    due_date: date
    completed: bool = False
    reminder_sent: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stored/JSON format (camelCase keys)."""
        return {
            "name": self.name,
            "dueDate": self.due_date.isoformat(),
            "completed": self.completed,
            "reminderSent": self.reminder_sent,
        }
