"""User-facing failure notices."""

import logging
from collections import deque
from typing import Protocol


logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Writes notices to the log. Used when nobody is watching."""

    def notify(self, message: str) -> None:
        logger.warning("Notice: %s", message)


class NoticeBoard:
    """Collects notices until the UI picks them up."""

    def __init__(self):
        self._pending: deque[str] = deque()

    def notify(self, message: str) -> None:
        logger.warning("Notice: %s", message)
        self._pending.append(message)

    def drain(self) -> list[str]:
        """Return and clear all pending notices, oldest first."""
        messages = list(self._pending)
        self._pending.clear()
        return messages

    def __len__(self) -> int:
        return len(self._pending)
