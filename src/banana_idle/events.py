import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventBus:
    """Simple thread-safe in-process event bus for game events.

    Subscribers are keyed by event class; events are emitted by instance.
    Delivery is synchronous so tests stay deterministic.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._subscribers: Dict[Type[Any], List[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        with self._lock:
            self._subscribers.setdefault(event_type, []).append(handler)  # type: ignore[arg-type]

    def unsubscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                if not handlers:
                    self._subscribers.pop(event_type, None)

    def emit(self, event: Any) -> None:
        with self._lock:
            targets = [
                h
                for event_type, handlers in self._subscribers.items()
                if isinstance(event, event_type)
                for h in handlers
            ]
        logger.debug("Emitting %s to %d handlers", type(event).__name__, len(targets))
        for h in targets:
            h(event)


@dataclass(frozen=True)
class AchievementUnlocked:
    achievement_id: str
    name: str


@dataclass(frozen=True)
class ProducerPurchased:
    producer_id: str
    quantity: int
    cost: float
    owned: int


@dataclass(frozen=True)
class UpgradePurchased:
    upgrade_id: str
    cost: float


@dataclass(frozen=True)
class CapstonePurchased:
    """The capstone was bought; rebirth is now pending confirmation."""

    producer_id: str
    cost: float
    prestige_level: int


@dataclass(frozen=True)
class PrestigeCompleted:
    new_level: int


@dataclass(frozen=True)
class SnapshotSaved:
    """Emitted from the background writer thread, not the thread that called save()."""

    path: str
    reason: str  # e.g., "autosave", "prestige", "manual"
