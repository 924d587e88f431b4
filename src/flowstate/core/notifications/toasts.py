"""Dashboard-scoped notification queue.

Panels dismiss themselves before their submissions settle, so outcomes are
published here instead of onto the (already gone) panel. The dashboard
drains the queue for display and listens for errors to raise its banner.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Literal

logger = logging.getLogger(__name__)

ToastLevel = Literal["info", "error"]


@dataclass(frozen=True)
class Toast:
    """A transient, non-blocking notification."""

    level: ToastLevel
    message: str
    panel: str | None = None
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @property
    def is_error(self) -> bool:
        return self.level == "error"


class ToastQueue:
    """Bounded FIFO of toasts with synchronous subscribers."""

    def __init__(self, maxlen: int = 50) -> None:
        self._items: deque[Toast] = deque(maxlen=maxlen)
        self._subscribers: list[Callable[[Toast], None]] = []

    def publish(self, toast: Toast) -> None:
        """Enqueue a toast and notify subscribers."""
        self._items.append(toast)
        if toast.is_error:
            logger.warning("Toast [%s]: %s", toast.panel or "-", toast.message)
        else:
            logger.info("Toast [%s]: %s", toast.panel or "-", toast.message)
        for callback in list(self._subscribers):
            callback(toast)

    def info(self, message: str, panel: str | None = None) -> None:
        self.publish(Toast(level="info", message=message, panel=panel))

    def error(self, message: str, panel: str | None = None) -> None:
        self.publish(Toast(level="error", message=message, panel=panel))

    def subscribe(self, callback: Callable[[Toast], None]) -> Callable[[], None]:
        """Register ``callback`` for every future toast; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def peek(self) -> list[Toast]:
        return list(self._items)

    def drain(self) -> list[Toast]:
        """Return and remove every queued toast, oldest first."""
        items = list(self._items)
        self._items.clear()
        return items

    def __len__(self) -> int:
        return len(self._items)
