"""Signed-in user, kept in a session file between application runs."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ValidationError
from .models import User
from .storage import ReportStorage

logger = logging.getLogger(__name__)

REQUIRED_PROFILE_FIELDS = {
    "name": "Name",
    "employeeId": "Employee ID",
    "teamName": "Team Name",
    "email": "Email",
}


class SessionContext:
    """Explicit replacement for an ambient "current user".

    Call :meth:`load` once at startup and :meth:`logout` to clear the session.
    """

    def __init__(self, storage: ReportStorage, session_file: Path) -> None:
        self.storage = storage
        self.session_file = Path(session_file)
        self.user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def require_user(self) -> User:
        if self.user is None:
            raise RuntimeError("No user signed in")
        return self.user

    def load(self) -> Optional[User]:
        if not self.session_file.exists():
            self.user = None
            return None
        try:
            data = json.loads(self.session_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.session_file, exc)
            self.user = None
            return None
        self.user = User.from_dict(data)
        return self.user

    def signup(self, profile: Dict[str, Any]) -> User:
        missing = [label for key, label in REQUIRED_PROFILE_FIELDS.items() if not str(profile.get(key) or "").strip()]
        if missing:
            raise ValidationError(f"Please fill in: {', '.join(missing)}")
        if "@" not in str(profile["email"]):
            raise ValidationError("Please enter a valid email address")
        user = self.storage.create_user(profile)
        self._remember(user)
        return user

    def login(self, email: str) -> Optional[User]:
        if not email.strip():
            raise ValidationError("Please enter your email")
        user = self.storage.find_user_by_email(email.strip())
        if user is not None:
            self._remember(user)
        return user

    def update_user(self, user: User) -> User:
        """Persist changed preferences and keep the session copy current."""
        saved = self.storage.update_user(user)
        self._remember(saved)
        return saved

    def logout(self) -> None:
        self.user = None
        try:
            self.session_file.unlink()
        except FileNotFoundError:
            pass

    def _remember(self, user: User) -> None:
        self.user = user
        try:
            self.session_file.parent.mkdir(parents=True, exist_ok=True)
            self.session_file.write_text(json.dumps(user.to_dict()), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write session file %s: %s", self.session_file, exc)


__all__ = ["SessionContext"]
