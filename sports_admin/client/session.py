"""Process-wide login state of the API client, persisted between runs."""

import json
import logging
from pathlib import Path
from typing import Any

from sports_admin.core.config import get_settings

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.token: str | None = None
        self.profile: dict[str, Any] | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def init(self) -> "Session":
        """Load the persisted token, if any. A corrupt file counts as logged out."""
        self.token = None
        self.profile = None
        if not self.path.exists():
            return self

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return self

        if isinstance(data, dict) and data.get("token"):
            self.token = data["token"]
            self.profile = data.get("profile")
        return self

    def set(self, token: str, profile: dict[str, Any] | None = None) -> None:
        self.token = token
        self.profile = profile
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token, "profile": profile}), encoding="utf-8")

    def clear(self) -> None:
        self.token = None
        self.profile = None
        self.path.unlink(missing_ok=True)


_session: Session | None = None


def get_session() -> Session:
    global _session
    if _session is None:
        _session = Session(get_settings().session_path).init()
    return _session


def reset_session() -> None:
    global _session
    _session = None
