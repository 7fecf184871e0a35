from __future__ import annotations

import logging
from typing import List, Optional

from .catalog import AchievementDef, Catalog, ConditionType
from .events import AchievementUnlocked, EventBus
from .state import GameState

logger = logging.getLogger(__name__)


def condition_met(achievement: AchievementDef, state: GameState) -> bool:
    if achievement.condition is ConditionType.TOTAL_BANANAS:
        return state.run.cumulative_resource >= achievement.threshold
    if achievement.condition is ConditionType.PRESTIGE:
        return state.run.prestige_level >= achievement.threshold
    if achievement.condition is ConditionType.PRODUCER and achievement.target:
        return state.owned(achievement.target) >= achievement.threshold
    return False


class ProgressTracker:
    """Unlocks achievements whose conditions hold for the current state.

    Each achievement moves locked -> unlocked exactly once and never back.
    Every newly satisfied achievement in a pass is recorded and announced,
    in catalog order.
    """

    def __init__(self, catalog: Catalog, event_bus: Optional[EventBus] = None) -> None:
        self._catalog = catalog
        self._bus = event_bus

    def locked(self, state: GameState) -> List[AchievementDef]:
        return [a for a in self._catalog.achievements if not state.has_achievement(a.id)]

    def evaluate(self, state: GameState) -> List[str]:
        """Run one evaluation pass; returns the ids unlocked by this pass."""
        newly: List[AchievementDef] = [a for a in self.locked(state) if condition_met(a, state)]
        for achievement in newly:
            state.unlock(achievement.id)
            logger.info("Achievement unlocked: %s", achievement.id)
        if self._bus is not None:
            for achievement in newly:
                self._bus.emit(AchievementUnlocked(achievement_id=achievement.id, name=achievement.name))
        return [a.id for a in newly]
