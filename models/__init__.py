"""
Child vaccination tracking models.

This package provides data models for tracking childhood immunizations:
- VaccineDefinition / VACCINE_SCHEDULE: The fixed dose table
- ScheduledEvent: A dose due on a computed date
- Status / EventDue: Urgency of a dose as of a date
- ChildProfile: Child details with their schedule
- User / Session: Accounts and per-client login state
- Store: The local YAML data file
"""

from .errors import InvalidDate, AuthError, FormError
from .unit import OffsetUnit
from .status import Status
from .vaccine import VaccineDefinition
from .schedule_table import VACCINE_SCHEDULE
from .scheduled_event import ScheduledEvent
from .event_due import EventDue
from .calculations import (
    parse_birth_date,
    add_months,
    calc_due_date,
    calculate_vaccine_schedule,
    check_status,
    days_remaining,
)
from .child import ChildProfile
from .user import User
from .reminders import Reminder, schedule_reminders, pending_reminders
from .validation import validate_email, validate_password, validate_birth_date
from .loader import (
    Store,
    load_store,
    create_store,
    save_user,
    save_child_profile,
    set_event_completed,
    mark_reminders_sent,
    delete_child,
    save_session_user,
    clear_session_user,
)
from .auth import AuthService, LocalAuthService, Session, PendingSignup

__all__ = [
    "InvalidDate",
    "AuthError",
    "FormError",
    "OffsetUnit",
    "Status",
    "VaccineDefinition",
    "VACCINE_SCHEDULE",
    "ScheduledEvent",
    "EventDue",
    "parse_birth_date",
    "add_months",
    "calc_due_date",
    "calculate_vaccine_schedule",
    "check_status",
    "days_remaining",
    "ChildProfile",
    "User",
    "Reminder",
    "schedule_reminders",
    "pending_reminders",
    "validate_email",
    "validate_password",
    "validate_birth_date",
    "Store",
    "load_store",
    "create_store",
    "save_user",
    "save_child_profile",
    "set_event_completed",
    "mark_reminders_sent",
    "delete_child",
    "save_session_user",
    "clear_session_user",
    "AuthService",
    "LocalAuthService",
    "Session",
    "PendingSignup",
]
