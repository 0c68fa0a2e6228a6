"""Account signup, OTP verification and login.

Network calls of a real deployment sit behind the AuthService interface.
LocalAuthService answers them from the local data file, optionally after an
artificial delay, and "sends" OTP emails by logging them.
"""

import hmac
import logging
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from werkzeug.security import generate_password_hash

from .errors import AuthError, FormError
from .loader import load_store, save_user
from .user import User
from .validation import validate_email, validate_password

LOG = logging.getLogger(__name__)

OTP_LENGTH = 6


class AuthService(ABC):
    """Backend capability used by the signup and login flows."""

    @abstractmethod
    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Return the user summary, or raise AuthError."""

    @abstractmethod
    def signup(self, name: str, email: str, password_hash: str) -> Dict[str, Any]:
        """Create an account and return its summary, or raise AuthError."""

    @abstractmethod
    def send_otp(self, email: str, code: str) -> None:
        """Deliver a one-time passcode."""


class LocalAuthService(AuthService):
    """AuthService backed by the local YAML data file."""

    def __init__(self, store_path: Union[str, Path], delay: float = 0.0):
        self.store_path = Path(store_path)
        self.delay = delay
        self.outbox: List[Tuple[str, str]] = []

    def _simulate_latency(self) -> None:
        if self.delay > 0:
            time.sleep(self.delay)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        self._simulate_latency()
        user = load_store(self.store_path).get_user_by_email(email)
        if user is None or not user.check_password(password):
            raise AuthError("Invalid email or password")
        return user.summary()

    def signup(self, name: str, email: str, password_hash: str) -> Dict[str, Any]:
        self._simulate_latency()
        if load_store(self.store_path).get_user_by_email(email) is not None:
            raise AuthError("User already exists")
        try:
            user = save_user(self.store_path, User(None, name, email, password_hash))
        except ValueError as e:
            raise AuthError("User already exists") from e
        LOG.info("Created account %s for %s", user.id, user.email)
        return user.summary()

    def send_otp(self, email: str, code: str) -> None:
        self._simulate_latency()
        LOG.info("Sending OTP %s to %s (simulated)", code, email)
        self.outbox.append((email, code))


@dataclass
class PendingSignup:
    """Signup details waiting on OTP confirmation."""

    name: str
    email: str
    password_hash: str


@dataclass
class Session:
    """Per-client authentication state, passed explicitly to each handler."""

    user: Optional[Dict[str, Any]] = None
    otp_code: str = ""
    pending_signup: Optional[PendingSignup] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user": self.user,
            "otpCode": self.otp_code,
            "pendingSignup": (
                vars(self.pending_signup) if self.pending_signup else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Session":
        data = data or {}
        pending = data.get("pendingSignup")
        return cls(
            user=data.get("user"),
            otp_code=data.get("otpCode") or "",
            pending_signup=PendingSignup(**pending) if pending else None,
        )


def generate_otp() -> str:
    """Six random digits, never starting with 0."""
    return str(100000 + secrets.randbelow(900000))


def begin_signup(
    session: Session,
    service: AuthService,
    name: str,
    email: str,
    password: str,
    confirm_password: str,
) -> None:
    """Validate a signup form, then send an OTP and hold the details in session."""
    if not name or not name.strip():
        raise FormError("name", "Name is required")
    if not validate_email(email):
        raise FormError("email", "Please enter a valid email address")
    if not validate_password(password):
        raise FormError("password", "Password does not meet requirements")
    if password != confirm_password:
        raise FormError("confirm_password", "Passwords do not match")

    session.pending_signup = PendingSignup(
        name.strip(), email, generate_password_hash(password)
    )
    session.otp_code = generate_otp()
    service.send_otp(email, session.otp_code)


def resend_otp(session: Session, service: AuthService) -> bool:
    """Send a fresh OTP for the pending signup. False when none is pending."""
    if session.pending_signup is None:
        return False
    session.otp_code = generate_otp()
    service.send_otp(session.pending_signup.email, session.otp_code)
    return True


def verify_otp(session: Session, service: AuthService, code: str) -> Dict[str, Any]:
    """
    Check the entered OTP and create the pending account.

    On success the new user is logged in and the pending state cleared.
    """
    code = (code or "").strip()
    if len(code) != OTP_LENGTH or not code.isdigit():
        raise FormError("otp", f"Please enter all {OTP_LENGTH} digits")
    if session.pending_signup is None or not session.otp_code:
        raise AuthError("No signup in progress")
    if not hmac.compare_digest(code, session.otp_code):
        raise FormError("otp", "Invalid OTP. Please try again.")

    pending = session.pending_signup
    user = service.signup(pending.name, pending.email, pending.password_hash)
    session.user = user
    session.pending_signup = None
    session.otp_code = ""
    return user


def login(
    session: Session, service: AuthService, email: str, password: str
) -> Dict[str, Any]:
    """Validate the login form and authenticate."""
    if not validate_email(email):
        raise FormError("email", "Please enter a valid email address")
    if not password:
        raise FormError("password", "Password is required")
    user = service.login(email, password)
    session.user = user
    return user


def logout(session: Session) -> None:
    session.user = None
    session.pending_signup = None
    session.otp_code = ""
