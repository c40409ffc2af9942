"""User-facing notifications for analysis runs and wallet lookups.

Each dispatch is logged and kept so the API layer can return the
notifications produced by a call alongside its data.
"""

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime

from loguru import logger

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = DEFAULT  # "default" or "destructive"
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        return data


class NotificationDispatcher:
    """Logs notifications and keeps a bounded history."""

    def __init__(self, max_history: int = 100) -> None:
        self._history: list[Notification] = []
        self._max_history = max_history

    def dispatch(self, notification: Notification) -> Notification:
        if notification.variant == DESTRUCTIVE:
            logger.warning(f"[NOTIFY] {notification.title}: {notification.description}")
        else:
            logger.info(f"[NOTIFY] {notification.title}: {notification.description}")

        self._history.append(notification)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]
        return notification

    def success(self, title: str, description: str) -> Notification:
        return self.dispatch(Notification(title, description, DEFAULT))

    def error(self, title: str, description: str) -> Notification:
        return self.dispatch(Notification(title, description, DESTRUCTIVE))

    @property
    def history(self) -> list[Notification]:
        return list(self._history)
