"""Form validation rules for accounts and child profiles."""

import re
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from .calculations import DateInput, parse_birth_date
from .errors import InvalidDate

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Lowercase, uppercase, digit and special, 8+ chars from that alphabet only
PASSWORD_RE = re.compile(
    r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}",
    re.ASCII,
)

MAX_CHILD_AGE_YEARS = 18


def validate_email(email: str) -> bool:
    return bool(email) and EMAIL_RE.fullmatch(email) is not None


def validate_password(password: str) -> bool:
    return bool(password) and PASSWORD_RE.fullmatch(password) is not None


def validate_birth_date(
    value: DateInput,
    today: Optional[date] = None,
    max_age_years: int = MAX_CHILD_AGE_YEARS,
) -> date:
    """
    Parse and check a child's date of birth.

    Rejects dates in the future and dates more than max_age_years ago.
    The schedule calculator itself accepts any calendar date; this policy
    applies only when a child profile is created.
    """
    dob = parse_birth_date(value)
    today = today or date.today()
    if dob > today:
        raise InvalidDate("Date of birth cannot be in the future")
    if dob < today - relativedelta(years=max_age_years):
        raise InvalidDate(
            f"Date of birth must be within the last {max_age_years} years"
        )
    return dob
