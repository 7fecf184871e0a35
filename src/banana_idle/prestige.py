from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from .events import CapstonePurchased, EventBus, PrestigeCompleted
from .state import GameState

logger = logging.getLogger(__name__)


class PrestigePhase(str, Enum):
    ACTIVE = "active"
    RESET_PENDING = "reset_pending"


class PrestigeController:
    """Two-phase rebirth lifecycle.

    ACTIVE is normal play. Buying the capstone moves to RESET_PENDING, where
    the caller must not apply ticks, clicks or purchases until rebirth() runs.
    The controller never triggers a rebirth by itself; confirmation comes from
    the presentation layer.
    """

    def __init__(self, event_bus: Optional[EventBus] = None) -> None:
        self._bus = event_bus
        self._phase = PrestigePhase.ACTIVE

    @property
    def phase(self) -> PrestigePhase:
        return self._phase

    @property
    def pending(self) -> bool:
        return self._phase is PrestigePhase.RESET_PENDING

    @staticmethod
    def multiplier(prestige_level: int) -> int:
        return 1 + prestige_level

    def next_multiplier(self, state: GameState) -> int:
        return self.multiplier(state.run.prestige_level + 1)

    def capstone_purchased(self, producer_id: str, cost: float, state: GameState) -> None:
        """Record a completed capstone purchase (cost already deducted)."""
        self._phase = PrestigePhase.RESET_PENDING
        logger.info(
            "Capstone '%s' purchased for %s at prestige %s; rebirth pending",
            producer_id,
            cost,
            state.run.prestige_level,
        )
        if self._bus is not None:
            self._bus.emit(
                CapstonePurchased(producer_id=producer_id, cost=cost, prestige_level=state.run.prestige_level)
            )

    def rebirth(self, state: GameState) -> bool:
        """Wipe the run and bump the prestige level by one.

        Returns False (no-op) unless a capstone purchase is pending. Unlocked
        achievements and settings are preserved.
        """
        if not self.pending:
            logger.debug("rebirth() ignored: no capstone purchase pending")
            return False
        state.reset_run()
        state.run.prestige_level += 1
        self._phase = PrestigePhase.ACTIVE
        logger.info("Rebirth complete: prestige level %s", state.run.prestige_level)
        if self._bus is not None:
            self._bus.emit(PrestigeCompleted(new_level=state.run.prestige_level))
        return True
