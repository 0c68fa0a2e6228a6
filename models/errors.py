"""Exceptions raised by the vaccination models."""


class InvalidDate(ValueError):
    """A birth date could not be parsed as a calendar date."""


class AuthError(Exception):
    """Login, signup or OTP verification failed."""


class FormError(ValueError):
    """A form field failed validation."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message
