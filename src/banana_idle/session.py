from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from . import economy
from .catalog import Catalog, ProducerDef
from .config import EngineConfig
from .errors import PreconditionError
from .events import (
    AchievementUnlocked,
    EventBus,
    PrestigeCompleted,
    ProducerPurchased,
    SnapshotSaved,
    UpgradePurchased,
)
from .notifications import NotificationQueue
from .persistence import SnapshotStore, encode_snapshot, serialize
from .prestige import PrestigeController
from .progress import ProgressTracker
from .scheduler import Scheduler
from .state import GameState, Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Totals after a successful command. A no-op command returns None instead."""

    current_resource: float
    cumulative_resource: float
    prestige_level: int
    cost: float = 0.0
    gained: float = 0.0


class GameSession:
    """Owns the live GameState and applies every command as one transaction.

    Commands, accrual ticks and the rebirth all take the same lock, so none of
    them can interleave. While a capstone purchase awaits rebirth, ticks,
    clicks and purchases are no-ops: nothing can be earned or spent between
    the capstone deduction and the reset.
    """

    def __init__(
        self,
        catalog: Catalog,
        config: Optional[EngineConfig] = None,
        state: Optional[GameState] = None,
        store: Optional[SnapshotStore] = None,
        event_bus: Optional[EventBus] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or EngineConfig()
        self.state = state or GameState.fresh(catalog)
        self.bus = event_bus or EventBus()
        self.scheduler = scheduler or Scheduler()
        self.notifications = NotificationQueue(self.scheduler.clock)
        self.tracker = ProgressTracker(catalog, self.bus)
        self.prestige = PrestigeController(self.bus)
        self._store = store
        self._lock = threading.RLock()
        self._writer: Optional[ThreadPoolExecutor] = None
        self._pending_saves: List[Future] = []

        self.bus.subscribe(AchievementUnlocked, self._on_achievement)
        self.bus.subscribe(PrestigeCompleted, self._on_prestige)
        self.bus.subscribe(SnapshotSaved, self._on_saved)

    @classmethod
    def start(
        cls,
        catalog: Catalog,
        config: Optional[EngineConfig] = None,
        store: Optional[SnapshotStore] = None,
        event_bus: Optional[EventBus] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> "GameSession":
        """Load the saved game (once, before play) and schedule the recurring jobs."""
        state = store.load(catalog) if store is not None else None
        session = cls(catalog, config, state, store, event_bus, scheduler)
        session.schedule_jobs()
        return session

    def schedule_jobs(self) -> None:
        cfg = self.config
        self.scheduler.every(cfg.tick_interval, "accrual", self.tick)
        self.scheduler.every(cfg.achievement_check_interval, "achievements", lambda _dt: self.check_achievements())
        self.scheduler.every(1.0, "notifications", lambda _dt: self.notifications.expire())
        if self._store is not None:
            self.scheduler.every(cfg.autosave_interval, "autosave", lambda _dt: self.save("autosave"))

    @property
    def lock(self):
        """The session transaction lock (re-entrant)."""
        return self._lock

    # Derived values

    def achievement_bonus(self) -> float:
        with self._lock:
            return economy.achievement_bonus(len(self.state.achievements), self.config)

    def production_rate(self) -> float:
        with self._lock:
            return economy.production_rate(self.catalog.producers, self.state.producers, self.achievement_bonus())

    def effective_rate(self) -> float:
        with self._lock:
            return economy.effective_rate(self.production_rate(), self.state.run.prestige_level)

    def click_power(self) -> float:
        with self._lock:
            multipliers = [u.multiplier for u in self.catalog.upgrades if self.state.has_upgrade(u.id)]
            return economy.click_yield(
                multipliers,
                self.production_rate(),
                self.state.run.prestige_level,
                self.achievement_bonus(),
                self.config,
            )

    def cost_of(self, producer_id: str, quantity: int = 1) -> float:
        producer = self.catalog.producer(producer_id)
        with self._lock:
            return economy.bulk_cost(
                producer,
                self.state.owned(producer_id),
                quantity,
                self.state.run.prestige_level,
                self.config,
            )

    def max_affordable(self, producer_id: str) -> int:
        producer = self.catalog.producer(producer_id)
        with self._lock:
            return economy.max_affordable(
                producer,
                self.state.owned(producer_id),
                self.state.run.current_resource,
                self.state.run.prestige_level,
                self.config,
            )

    # Commands

    def purchase_producer(self, producer_id: str, quantity: int = 1) -> Optional[CommandResult]:
        producer = self.catalog.producer(producer_id)
        if quantity < 1:
            raise PreconditionError(f"quantity must be >= 1, got {quantity}")
        with self._lock:
            if self.prestige.pending:
                logger.debug("Purchase of %s ignored: rebirth pending", producer_id)
                return None
            run = self.state.run
            if run.prestige_level < producer.unlock_prestige_level:
                logger.debug("Producer %s locked until prestige %s", producer_id, producer.unlock_prestige_level)
                return None
            if producer.capstone:
                return self._purchase_capstone(producer)

            owned = self.state.owned(producer_id)
            cost = economy.bulk_cost(producer, owned, quantity, run.prestige_level, self.config)
            if not run.can_afford(cost):
                logger.debug("Cannot afford %d x %s: cost=%s have=%s", quantity, producer_id, cost, run.current_resource)
                return None
            run.spend(cost)
            self.state.producers[producer_id] = owned + quantity
            logger.debug("Bought %d x %s for %s (owned=%d)", quantity, producer_id, cost, owned + quantity)
            self.bus.emit(
                ProducerPurchased(producer_id=producer_id, quantity=quantity, cost=cost, owned=owned + quantity)
            )
            self.tracker.evaluate(self.state)
            return self._result(cost=cost)

    def _purchase_capstone(self, producer: ProducerDef) -> Optional[CommandResult]:
        run = self.state.run
        cost = economy.bulk_cost(producer, 0, 1, run.prestige_level, self.config)
        if not run.can_afford(cost):
            logger.debug("Cannot afford capstone %s: cost=%s have=%s", producer.id, cost, run.current_resource)
            return None
        run.spend(cost)
        self.prestige.capstone_purchased(producer.id, cost, self.state)
        return self._result(cost=cost)

    def purchase_upgrade(self, upgrade_id: str) -> Optional[CommandResult]:
        upgrade = self.catalog.upgrade(upgrade_id)
        with self._lock:
            if self.prestige.pending:
                logger.debug("Upgrade %s ignored: rebirth pending", upgrade_id)
                return None
            run = self.state.run
            if self.state.has_upgrade(upgrade_id):
                return None
            if run.cumulative_resource < upgrade.unlock_total_threshold or run.prestige_level < upgrade.unlock_prestige_level:
                logger.debug("Upgrade %s not yet revealed", upgrade_id)
                return None
            if not run.can_afford(upgrade.cost):
                logger.debug("Cannot afford upgrade %s: cost=%s have=%s", upgrade_id, upgrade.cost, run.current_resource)
                return None
            run.spend(upgrade.cost)
            self.state.upgrades.add(upgrade_id)
            logger.debug("Bought upgrade %s for %s", upgrade_id, upgrade.cost)
            self.bus.emit(UpgradePurchased(upgrade_id=upgrade_id, cost=upgrade.cost))
            self.tracker.evaluate(self.state)
            return self._result(cost=upgrade.cost)

    def perform_click(self) -> Optional[CommandResult]:
        with self._lock:
            if self.prestige.pending:
                return None
            amount = self.click_power()
            self.state.run.earn(amount)
            self.tracker.evaluate(self.state)
            return self._result(gained=amount)

    def rebirth(self) -> Optional[CommandResult]:
        with self._lock:
            if not self.prestige.rebirth(self.state):
                return None
            self.tracker.evaluate(self.state)
            self.save("prestige")
            return self._result()

    def tick(self, dt: float) -> float:
        """Credit dt seconds of passive production; returns the amount earned."""
        with self._lock:
            if self.prestige.pending:
                return 0.0
            delta = economy.accrual_delta(self.production_rate(), self.state.run.prestige_level, dt)
            if delta > 0:
                self.state.run.earn(delta)
            return delta

    def check_achievements(self) -> List[str]:
        with self._lock:
            return self.tracker.evaluate(self.state)

    def update_settings(self, music_volume: Optional[float] = None, sfx_volume: Optional[float] = None) -> Settings:
        with self._lock:
            current = self.state.settings
            self.state.settings = Settings(
                music_volume=current.music_volume if music_volume is None else music_volume,
                sfx_volume=current.sfx_volume if sfx_volume is None else sfx_volume,
            )
            return self.state.settings

    def _result(self, cost: float = 0.0, gained: float = 0.0) -> CommandResult:
        run = self.state.run
        return CommandResult(
            current_resource=run.current_resource,
            cumulative_resource=run.cumulative_resource,
            prestige_level=run.prestige_level,
            cost=cost,
            gained=gained,
        )

    # Persistence

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return serialize(self.state)

    def save(self, reason: str = "manual") -> Optional[Future]:
        """Queue a snapshot write without blocking the caller.

        The projection is taken and queued under the session lock, so the
        single background writer receives snapshots in the order they were
        taken and a stale one can never land after a newer one. Returns the
        write's Future, or None when there is no store or the save was skipped.
        """
        if self._store is None:
            return None
        with self._lock:
            if self.prestige.pending:
                logger.debug("Save (%s) skipped: rebirth pending", reason)
                return None
            text = encode_snapshot(self.state)
            if self._writer is None:
                self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="banana-save")
            future = self._writer.submit(self._write, text, reason)
            self._pending_saves = [f for f in self._pending_saves if not f.done()] + [future]
        return future

    def _write(self, text: str, reason: str) -> Optional[str]:
        """Runs on the writer thread, as do SnapshotSaved handlers.

        The session lock is not taken here: a caller may flush() while holding it.
        """
        assert self._store is not None
        try:
            path = self._store.write_text(text)
        except OSError as exc:
            logger.error("I/O error while writing snapshot (%s): %s", reason, exc)
            return None
        logger.info("Game saved (%s) to %s", reason, path)
        self.bus.emit(SnapshotSaved(path=str(path), reason=reason))
        return str(path)

    def flush(self) -> None:
        """Block until every queued save has been written."""
        with self._lock:
            pending, self._pending_saves = self._pending_saves, []
        wait(pending)

    def close(self) -> None:
        self.flush()
        with self._lock:
            writer, self._writer = self._writer, None
        if writer is not None:
            writer.shutdown(wait=True)

    def __enter__(self) -> "GameSession":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # Notifications

    def _on_achievement(self, event: AchievementUnlocked) -> None:
        self.notifications.post(
            f"Achievement unlocked: {event.name}",
            kind="achievement",
            duration=self.config.achievement_notice_seconds,
        )

    def _on_prestige(self, event: PrestigeCompleted) -> None:
        self.notifications.post(
            f"Reborn! Prestige level {event.new_level}",
            kind="prestige",
            duration=self.config.achievement_notice_seconds,
        )

    def _on_saved(self, event: SnapshotSaved) -> None:
        self.notifications.post("Game saved", kind="save", duration=self.config.save_notice_seconds)
