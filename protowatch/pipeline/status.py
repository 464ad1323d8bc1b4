"""Thread-safe status string shared with the display."""

from __future__ import annotations

import threading
from typing import Callable, List

INITIAL_STATUS = "Watching for changes..."


class StatusBoard:
    """Holds the latest status line; every read and write takes the lock.

    Writers are serialized through ``_publish_lock`` so listeners observe
    updates in the same order they were stored, and the last notification
    always matches ``get()``.
    """

    def __init__(self, initial: str = INITIAL_STATUS) -> None:
        self._lock = threading.Lock()
        self._publish_lock = threading.RLock()
        self._status = initial
        self._listeners: List[Callable[[str], None]] = []

    def get(self) -> str:
        with self._lock:
            return self._status

    def set(self, status: str) -> None:
        with self._publish_lock:
            with self._lock:
                self._status = status
                listeners = list(self._listeners)
            for listener in listeners:
                listener(status)

    def subscribe(self, listener: Callable[[str], None]) -> None:
        with self._lock:
            self._listeners.append(listener)


__all__ = ["INITIAL_STATUS", "StatusBoard"]
