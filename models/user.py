"""User class for tracker accounts."""

from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash


class User:
    """A parent account. Only a password hash is ever kept."""

    def __init__(
        self,
        id: Optional[int],
        name: str,
        email: str,
        password_hash: str,
        created_at: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.email = email
        self.password_hash = password_hash
        self.created_at = created_at

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def summary(self) -> Dict[str, Any]:
        """Public view of the account, as held in a session."""
        return {"id": self.id, "name": self.name, "email": self.email}
