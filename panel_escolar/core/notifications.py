import itertools
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Notification:
    id: int
    level: NotificationLevel
    message: str
    dismissed: bool = False


class Notifier:
    """Avisos descartables (los toasts del panel)"""

    def __init__(self):
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._items: List[Notification] = []

    def push(self, level: NotificationLevel, message: str) -> Notification:
        with self._lock:
            notification = Notification(next(self._ids), level, message)
            self._items.append(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.push(NotificationLevel.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.push(NotificationLevel.ERROR, message)

    def info(self, message: str) -> Notification:
        return self.push(NotificationLevel.INFO, message)

    def dismiss(self, notification_id: int) -> bool:
        with self._lock:
            for item in self._items:
                if item.id == notification_id and not item.dismissed:
                    item.dismissed = True
                    return True
        return False

    @property
    def active(self) -> List[Notification]:
        return [n for n in self._items if not n.dismissed]

    def clear(self):
        with self._lock:
            self._items.clear()
