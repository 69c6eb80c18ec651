"""Identity store for the logged-in user.

Persists the single ``User`` record that identifies the session. The session
reads it once at start and never mutates it; logout clears it.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from .config import DEFAULT_AVATAR_URL, DEFAULT_SESSION_USER_ID
from .models import User

logger = logging.getLogger("nightchat.chat.identity")


def login_user(email: str, password: str) -> User | None:
    """Demo login: any non-empty email and password pair is accepted.

    Returns:
        The session user, or None if either credential is empty
    """
    email = email.strip()
    if not email or not password:
        return None
    return User(
        id=DEFAULT_SESSION_USER_ID,
        name=email.split("@")[0],
        email=email,
        avatar=DEFAULT_AVATAR_URL,
    )


class IdentityStore:
    """JSON file holding the session user."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> User | None:
        """Read the stored user.

        A missing file means nobody is logged in. A corrupt record is
        removed and treated the same way.
        """
        if not self._path.exists():
            return None
        try:
            return User.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (ValidationError, UnicodeDecodeError):
            logger.warning("Discarding unreadable identity record at %s", self._path)
            self.clear()
            return None

    def save(self, user: User) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(user.model_dump_json(), encoding="utf-8")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
