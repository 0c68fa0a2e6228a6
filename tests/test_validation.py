#!/usr/bin/env python3
"""Tests for form validation rules."""

from datetime import date

import pytest
from models import InvalidDate, validate_birth_date, validate_email, validate_password


class TestValidateEmail:
    """Tests for validate_email."""

    @pytest.mark.parametrize("email", ["a@b.co", "asha.rao@example.com", "x+y@mail.example.org"])
    def test_valid(self, email):
        assert validate_email(email) is True

    @pytest.mark.parametrize(
        "email",
        [
            "",
            "plain",
            "no@dot",
            "@example.com",
            "a b@example.com",
            "a@b.co\n",
            "a\u00a0b@example.com",  # non-breaking space
        ],
    )
    def test_invalid(self, email):
        assert validate_email(email) is False


class TestValidatePassword:
    """Tests for validate_password."""

    def test_valid(self):
        assert validate_password("Passw0rd!") is True
        assert validate_password("aB3$aB3$") is True

    @pytest.mark.parametrize(
        "password",
        [
            "",
            "Pa0!",  # too short
            "password1!",  # no uppercase
            "PASSWORD1!",  # no lowercase
            "Password!",  # no digit
            "Password1",  # no special
            "Passw0rd!#",  # '#' not allowed
            "Abcdefg\u0661!",  # non-ASCII digit
            "Pässw0rd!",  # non-ASCII letter
        ],
    )
    def test_invalid(self, password):
        assert validate_password(password) is False


class TestValidateBirthDate:
    """Tests for validate_birth_date."""

    def test_today_allowed(self):
        assert validate_birth_date("2024-06-01", today=date(2024, 6, 1)) == date(2024, 6, 1)

    def test_future_rejected(self):
        with pytest.raises(InvalidDate, match="future"):
            validate_birth_date("2024-06-02", today=date(2024, 6, 1))

    def test_too_old_rejected(self):
        with pytest.raises(InvalidDate, match="18 years"):
            validate_birth_date("2006-05-31", today=date(2024, 6, 1))

    def test_oldest_allowed(self):
        assert validate_birth_date("2006-06-01", today=date(2024, 6, 1)) == date(2006, 6, 1)

    def test_unparseable(self):
        with pytest.raises(InvalidDate):
            validate_birth_date("soon", today=date(2024, 6, 1))
