"""YAML loading and saving utilities for the tracker data file."""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from .child import ChildProfile
from .scheduled_event import ScheduledEvent
from .user import User


class Store:
    """Everything held in one data file: accounts, children and the session."""

    def __init__(
        self,
        users: Optional[List[User]] = None,
        children: Optional[List[ChildProfile]] = None,
        session_user_id: Optional[int] = None,
    ):
        self.users = users or []
        self.children = children or []
        self.session_user_id = session_user_id

    def get_user(self, user_id: int) -> Optional[User]:
        for user in self.users:
            if user.id == user_id:
                return user
        return None

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Find an account by email (case-insensitive)."""
        for user in self.users:
            if user.email.lower() == email.lower():
                return user
        return None

    @property
    def current_user(self) -> Optional[User]:
        """The logged-in user, if the session points at one that exists."""
        if self.session_user_id is None:
            return None
        return self.get_user(self.session_user_id)

    def get_child(self, child_id: int) -> Optional[ChildProfile]:
        for child in self.children:
            if child.id == child_id:
                return child
        return None

    def children_for(self, user_id: int) -> List[ChildProfile]:
        return [c for c in self.children if c.user_id == user_id]


def _parse_object(
    dct: Dict[str, Any]
) -> Union[ScheduledEvent, ChildProfile, User, Store, dict]:
    """Parse dictionary into appropriate object type."""
    # Scheduled event (inside a child's vaccineSchedule)
    if "dueDate" in dct and "name" in dct:
        return ScheduledEvent(
            dct["name"],
            date.fromisoformat(dct["dueDate"]),
            bool(dct.get("completed", False)),
            bool(dct.get("reminderSent", False)),
        )
    # Child profile
    elif "dob" in dct and "name" in dct:
        return ChildProfile(
            dct.get("id"),
            dct.get("userId"),
            dct["name"],
            dct["dob"],
            dct.get("gender"),
            dct.get("bloodGroup"),
            dct.get("vaccineSchedule"),
            dct.get("createdAt"),
        )
    # User account
    elif "email" in dct and "passwordHash" in dct:
        return User(
            dct.get("id"),
            dct["name"],
            dct["email"],
            dct["passwordHash"],
            dct.get("createdAt"),
        )
    # Top-level store object
    elif "users" in dct or "children" in dct:
        session = dct.get("session") or {}
        return Store(
            dct.get("users"),
            dct.get("children"),
            session.get("userId"),
        )
    else:
        # Return dict as-is for unknown structures (like 'session')
        return dct


def load_store(filename: Union[str, Path]) -> Store:
    """Load the data file. A missing or empty file is an empty store."""
    path = Path(filename)
    if not path.exists():
        return Store()
    with open(path, "rb") as fp:
        raw = yaml.load(fp, Loader=yaml.SafeLoader)
    if not raw:
        return Store()
    # Unquoted YAML dates load as date objects; default=str turns them back
    json_data = json.dumps(raw, indent=4, default=str)
    store = json.loads(json_data, object_hook=_parse_object)
    if not isinstance(store, Store):
        return Store(session_user_id=(raw.get("session") or {}).get("userId"))
    return store


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _read_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    """Load the raw YAML (not parsed into objects), with all sections present."""
    path = Path(filename)
    data: Dict[str, Any] = {}
    if path.exists():
        with open(path, "r") as fp:
            data = yaml.load(fp, Loader=yaml.SafeLoader) or {}
    for key in ("users", "children"):
        if data.get(key) is None:
            data[key] = []
    if data.get("session") is None:
        data["session"] = {}
    return data


def _write_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _next_id(entries: Iterable[Dict[str, Any]]) -> int:
    return max((e.get("id") or 0 for e in entries), default=0) + 1


def _user_to_dict(user: User) -> Dict[str, Any]:
    """Serialize a User to the YAML dict format (camelCase keys)."""
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "passwordHash": user.password_hash,
        "createdAt": user.created_at,
    }


def _child_to_dict(child: ChildProfile) -> Dict[str, Any]:
    """Serialize a ChildProfile to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": child.id,
        "userId": child.user_id,
        "name": child.name,
        "dob": child.dob,
    }
    if child.gender is not None:
        d["gender"] = child.gender
    if child.blood_group is not None:
        d["bloodGroup"] = child.blood_group
    d["createdAt"] = child.created_at
    d["vaccineSchedule"] = [event.to_dict() for event in child.schedule]
    return d


def create_store(filename: Union[str, Path]) -> None:
    """Create an empty data file."""
    _write_raw(filename, {"users": [], "children": [], "session": {}})


def save_user(filename: Union[str, Path], user: User) -> User:
    """
    Append a new account to the data file.

    Assigns the next free id and a creation timestamp. Raises ValueError
    if the email is already registered.
    """
    data = _read_raw(filename)

    email = user.email.lower()
    if any(u.get("email", "").lower() == email for u in data["users"]):
        raise ValueError(f"User already exists: {user.email}")

    user.id = _next_id(data["users"])
    user.created_at = user.created_at or _now()
    data["users"].append(_user_to_dict(user))

    _write_raw(filename, data)
    return user


def save_child_profile(filename: Union[str, Path], child: ChildProfile) -> ChildProfile:
    """
    Append a child profile, with its schedule, to the data file.

    Assigns the next free id and a creation timestamp.
    """
    data = _read_raw(filename)

    child.id = _next_id(data["children"])
    child.created_at = child.created_at or _now()
    data["children"].append(_child_to_dict(child))

    _write_raw(filename, data)
    return child


def _find_child(data: Dict[str, Any], child_id: int) -> Dict[str, Any]:
    for child in data["children"]:
        if child.get("id") == child_id:
            return child
    raise KeyError(f"Child {child_id} not found")


def set_event_completed(
    filename: Union[str, Path], child_id: int, index: int, completed: bool = True
) -> None:
    """
    Mark the event at vaccineSchedule[index] of a child as given (or not).
    """
    data = _read_raw(filename)

    schedule = _find_child(data, child_id).get("vaccineSchedule") or []
    if index < 0 or index >= len(schedule):
        raise IndexError(f"Event index {index} out of range (0..{len(schedule) - 1})")

    schedule[index]["completed"] = completed

    _write_raw(filename, data)


def mark_reminders_sent(
    filename: Union[str, Path], child_id: int, indices: Iterable[int]
) -> None:
    """Set reminderSent on the given events of a child."""
    data = _read_raw(filename)

    schedule = _find_child(data, child_id).get("vaccineSchedule") or []
    for index in indices:
        if index < 0 or index >= len(schedule):
            raise IndexError(
                f"Event index {index} out of range (0..{len(schedule) - 1})"
            )
        schedule[index]["reminderSent"] = True

    _write_raw(filename, data)


def delete_child(filename: Union[str, Path], child_id: int) -> None:
    """Remove a child profile from the data file."""
    data = _read_raw(filename)

    child = _find_child(data, child_id)
    data["children"].remove(child)

    _write_raw(filename, data)


def save_session_user(filename: Union[str, Path], user_id: int) -> None:
    """Record the logged-in user in the session section."""
    data = _read_raw(filename)
    data["session"]["userId"] = user_id
    _write_raw(filename, data)


def clear_session_user(filename: Union[str, Path]) -> None:
    """Log out: drop the user from the session section."""
    data = _read_raw(filename)
    data["session"].pop("userId", None)
    _write_raw(filename, data)
