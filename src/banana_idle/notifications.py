from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, List


@dataclass(frozen=True)
class Notice:
    """A toast-style notification for the presentation layer.

    posted_at is in the owning clock's time base (scheduler seconds in the
    engine); the notice expires once duration has elapsed.
    """

    text: str
    kind: str  # achievement | save | prestige
    posted_at: float
    duration: float

    def expired(self, now: float) -> bool:
        return now >= self.posted_at + self.duration


class NotificationQueue:
    """Thread-safe, timestamped queue of notices.

    The UI layer can poll active() each frame, or drain() to take ownership
    of everything pending. expire() drops notices whose time has passed.
    """

    def __init__(self, clock: Callable[[], float]) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._queue: List[Notice] = []

    def post(self, text: str, kind: str = "info", duration: float = 2.0) -> Notice:
        notice = Notice(text=text, kind=kind, posted_at=self._clock(), duration=duration)
        with self._lock:
            self._queue.append(notice)
        return notice

    def active(self) -> List[Notice]:
        now = self._clock()
        with self._lock:
            return [n for n in self._queue if not n.expired(now)]

    def expire(self) -> int:
        now = self._clock()
        with self._lock:
            before = len(self._queue)
            self._queue = [n for n in self._queue if not n.expired(now)]
            return before - len(self._queue)

    def drain(self) -> List[Notice]:
        with self._lock:
            items = list(self._queue)
            self._queue.clear()
            return items

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return bool(self._queue)
