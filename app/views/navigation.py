"""Navigation and notification sinks used by the views."""

from collections.abc import Callable

from app.core.config import settings
from app.schemas.league import Notification

Notify = Callable[[Notification], None]


def league_path(league_id: str) -> str:
    return f"/leagues/{league_id}"


class Navigator:
    """Records where a view sent the user; the HTTP layer turns it into a redirect."""

    def __init__(self) -> None:
        self.history: list[str] = []

    @property
    def location(self) -> str | None:
        return self.history[-1] if self.history else None

    @property
    def sent_to_auth(self) -> bool:
        return self.location == settings.AUTH_ENTRY_PATH

    def navigate(self, path: str) -> None:
        self.history.append(path)


def error_notification(message: str) -> Notification:
    return Notification(title="Error", description=message, variant="destructive")
