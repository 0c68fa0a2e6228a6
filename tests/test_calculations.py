#!/usr/bin/env python3
"""Tests for calculation helper functions."""
import pytest
from datetime import date, datetime
from models import (
    VACCINE_SCHEDULE,
    InvalidDate,
    OffsetUnit,
    Status,
    VaccineDefinition,
    add_months,
    calc_due_date,
    calculate_vaccine_schedule,
    check_status,
    days_remaining,
    parse_birth_date,
)


class TestParseBirthDate:
    """Tests for parse_birth_date."""

    def test_iso_string(self):
        assert parse_birth_date("2024-01-01") == date(2024, 1, 1)

    def test_surrounding_whitespace(self):
        assert parse_birth_date(" 2024-01-01 ") == date(2024, 1, 1)

    def test_date_passthrough(self):
        assert parse_birth_date(date(2024, 3, 5)) == date(2024, 3, 5)

    def test_datetime_drops_time(self):
        assert parse_birth_date(datetime(2024, 3, 5, 23, 59)) == date(2024, 3, 5)

    def test_datetime_string_drops_time(self):
        assert parse_birth_date("2024-03-05T15:30:00") == date(2024, 3, 5)

    @pytest.mark.parametrize(
        "value", ["", "   ", "not-a-date", "2024-02-30", "2023-02-29", "2024-13-01"]
    )
    def test_invalid_strings(self, value):
        with pytest.raises(InvalidDate):
            parse_birth_date(value)

    @pytest.mark.parametrize("value", [None, 20240101, ["2024-01-01"]])
    def test_invalid_types(self, value):
        with pytest.raises(InvalidDate):
            parse_birth_date(value)

    def test_invalid_date_is_value_error(self):
        """Callers catching ValueError also catch InvalidDate."""
        with pytest.raises(ValueError):
            parse_birth_date("garbage")


class TestAddMonths:
    """Tests for add_months calendar arithmetic."""

    def test_day_preserved(self):
        assert add_months(date(2024, 1, 15), 1) == date(2024, 2, 15)

    def test_across_year_boundary(self):
        assert add_months(date(2024, 12, 25), 1) == date(2025, 1, 25)

    def test_target_month_has_day(self):
        """Jan 31 + 9 months = Oct 31, October has 31 days."""
        assert add_months(date(2024, 1, 31), 9) == date(2024, 10, 31)

    def test_overflow_rolls_into_next_month(self):
        """Aug 31 + 1 month rolls over to Oct 1, never clamped to Sep 30."""
        assert add_months(date(2024, 8, 31), 1) == date(2024, 10, 1)

    def test_overflow_past_february_leap_year(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 3, 2)

    def test_overflow_past_february_common_year(self):
        assert add_months(date(2023, 1, 31), 1) == date(2023, 3, 3)

    def test_overflow_across_year_boundary(self):
        assert add_months(date(2024, 11, 30), 3) == date(2025, 3, 2)

    def test_zero_months(self):
        assert add_months(date(2024, 2, 29), 0) == date(2024, 2, 29)


class TestCalcDueDate:
    """Tests for calc_due_date."""

    def test_zero_days(self):
        assert calc_due_date(date(2024, 1, 1), 0, OffsetUnit.DAYS) == date(2024, 1, 1)

    def test_days(self):
        assert calc_due_date(date(2024, 1, 30), 3, OffsetUnit.DAYS) == date(2024, 2, 2)

    def test_weeks(self):
        """6 weeks = 42 days after Jan 1."""
        assert calc_due_date(date(2024, 1, 1), 6, OffsetUnit.WEEKS) == date(2024, 2, 12)

    def test_months(self):
        assert calc_due_date(date(2024, 1, 1), 9, OffsetUnit.MONTHS) == date(2024, 10, 1)

    def test_years_leap_to_leap(self):
        assert calc_due_date(date(2024, 2, 29), 4, OffsetUnit.YEARS) == date(2028, 2, 29)

    def test_years_leap_day_rolls_over(self):
        """Feb 29 + 1 year lands on Mar 1 in a common year."""
        assert calc_due_date(date(2024, 2, 29), 1, OffsetUnit.YEARS) == date(2025, 3, 1)

    def test_years_feb_28_unaffected(self):
        assert calc_due_date(date(2023, 2, 28), 1, OffsetUnit.YEARS) == date(2024, 2, 28)

    def test_years(self):
        assert calc_due_date(date(2024, 12, 25), 10, OffsetUnit.YEARS) == date(2034, 12, 25)


def _due(schedule, name):
    """Due date of the first event with the given name."""
    return next(e.due_date for e in schedule if e.name == name)


class TestCalculateVaccineSchedule:
    """Tests for calculate_vaccine_schedule."""

    def test_one_event_per_definition(self):
        assert len(calculate_vaccine_schedule("2024-01-01")) == 32
        assert len(calculate_vaccine_schedule("1999-07-31")) == len(VACCINE_SCHEDULE)

    def test_table_order(self):
        schedule = calculate_vaccine_schedule("2024-01-01")
        assert [e.name for e in schedule] == [v.name for v in VACCINE_SCHEDULE]

    def test_flags_default_false(self):
        for event in calculate_vaccine_schedule("2024-01-01"):
            assert event.completed is False
            assert event.reminder_sent is False

    def test_idempotent(self):
        first = calculate_vaccine_schedule("2024-05-17")
        second = calculate_vaccine_schedule("2024-05-17")
        assert first == second

    def test_fresh_list_each_call(self):
        first = calculate_vaccine_schedule("2024-05-17")
        first[0].completed = True
        second = calculate_vaccine_schedule("2024-05-17")
        assert second[0].completed is False
        assert first[0] is not second[0]

    def test_birth_doses_share_date(self):
        schedule = calculate_vaccine_schedule("2024-01-01")
        assert [e.due_date for e in schedule[:3]] == [date(2024, 1, 1)] * 3

    def test_known_dates_for_jan_first(self):
        schedule = calculate_vaccine_schedule("2024-01-01")
        assert _due(schedule, "BCG") == date(2024, 1, 1)
        assert _due(schedule, "DPT (1st dose)") == date(2024, 2, 12)
        assert _due(schedule, "DPT (2nd dose)") == date(2024, 3, 11)
        assert _due(schedule, "DPT (3rd dose)") == date(2024, 4, 8)
        assert _due(schedule, "MMR (1st dose)") == date(2024, 10, 1)
        assert _due(schedule, "Hepatitis A (1st dose)") == date(2025, 1, 1)
        assert _due(schedule, "MMR (2nd dose)") == date(2025, 4, 1)
        assert _due(schedule, "OPV Booster") == date(2028, 1, 1)
        assert _due(schedule, "Meningococcal") == date(2034, 1, 1)

    def test_repeated_name_keeps_both_doses(self):
        schedule = calculate_vaccine_schedule("2024-01-01")
        boosters = [e.due_date for e in schedule if e.name == "DPT Booster"]
        assert boosters == [date(2025, 7, 1), date(2028, 1, 1)]

    def test_month_end_birth_date(self):
        schedule = calculate_vaccine_schedule("2024-01-31")
        assert _due(schedule, "MMR (1st dose)") == date(2024, 10, 31)

    def test_leap_day_birth_date(self):
        schedule = calculate_vaccine_schedule("2024-02-29")
        assert _due(schedule, "MMR Booster") == date(2028, 2, 29)

    def test_year_boundary(self):
        schedule = calculate_vaccine_schedule("2024-12-25")
        assert _due(schedule, "Tdap Booster") == date(2034, 12, 25)

    def test_accepts_date_value(self):
        assert calculate_vaccine_schedule(date(2024, 1, 1)) == calculate_vaccine_schedule(
            "2024-01-01"
        )

    def test_order_is_not_due_date_order(self):
        """A later table entry with an earlier due date is not moved up."""
        table = (
            VaccineDefinition("Later", 1, OffsetUnit.YEARS),
            VaccineDefinition("Sooner", 0, OffsetUnit.DAYS),
        )
        schedule = calculate_vaccine_schedule("2024-01-01", schedule=table)
        assert [e.name for e in schedule] == ["Later", "Sooner"]
        assert schedule[0].due_date > schedule[1].due_date

    def test_invalid_date_raises(self):
        with pytest.raises(InvalidDate):
            calculate_vaccine_schedule("2024-02-30")


class TestCheckStatus:
    """Tests for check_status."""

    def test_overdue(self):
        assert check_status(date(2024, 2, 13), date(2024, 2, 12), 7) == Status.OVERDUE

    def test_due_on_the_day(self):
        assert check_status(date(2024, 2, 12), date(2024, 2, 12), 7) == Status.DUE_SOON

    def test_due_soon_window_edge(self):
        assert check_status(date(2024, 2, 5), date(2024, 2, 12), 7) == Status.DUE_SOON

    def test_upcoming(self):
        assert check_status(date(2024, 2, 4), date(2024, 2, 12), 7) == Status.UPCOMING

    def test_completed_wins(self):
        assert (
            check_status(date(2025, 1, 1), date(2024, 2, 12), 7, completed=True)
            == Status.COMPLETED
        )


class TestDaysRemaining:
    """Tests for days_remaining."""

    def test_future(self):
        assert days_remaining(date(2024, 2, 1), date(2024, 2, 12)) == 11

    def test_past(self):
        assert days_remaining(date(2024, 2, 14), date(2024, 2, 12)) == -2

    @pytest.mark.parametrize("value", ["9995-06-01", "9999-12-31"])
    def test_due_date_past_max_year_raises(self, value):
        with pytest.raises(InvalidDate, match="out of range"):
            calculate_vaccine_schedule(value)
