from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set

from .catalog import Catalog
from .errors import PreconditionError

logger = logging.getLogger(__name__)

DEFAULT_VOLUME = 0.5


def _clamp(val: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(val)))


@dataclass
class Settings:
    music_volume: float = DEFAULT_VOLUME  # 0..1
    sfx_volume: float = DEFAULT_VOLUME  # 0..1

    def __post_init__(self) -> None:
        self.music_volume = _clamp(self.music_volume, 0.0, 1.0)
        self.sfx_volume = _clamp(self.sfx_volume, 0.0, 1.0)


@dataclass
class RunState:
    """Spendable and lifetime banana totals plus the prestige tier.

    cumulative_resource only ever grows during a run; spending never touches
    it. Both totals return to zero on rebirth.
    """

    current_resource: float = 0.0
    cumulative_resource: float = 0.0
    prestige_level: int = 0

    def earn(self, amount: float) -> None:
        if amount < 0:
            raise PreconditionError("Cannot earn a negative amount; use spend() for deduction")
        self.current_resource += amount
        self.cumulative_resource += amount

    def can_afford(self, cost: float) -> bool:
        return cost >= 0 and self.current_resource >= cost

    def spend(self, cost: float) -> None:
        if cost < 0:
            raise PreconditionError("Cannot spend a negative amount")
        if cost > self.current_resource:
            raise PreconditionError(
                f"Insufficient bananas: have {self.current_resource}, need {cost}"
            )
        self.current_resource -= cost


@dataclass
class GameState:
    """The full mutable game aggregate.

    There is exactly one live instance per session; it is passed explicitly
    to every component that reads or mutates it.
    """

    run: RunState = field(default_factory=RunState)
    producers: Dict[str, int] = field(default_factory=dict)  # ordinary producer id -> owned
    upgrades: Set[str] = field(default_factory=set)  # owned upgrade ids
    achievements: List[str] = field(default_factory=list)  # unlock order
    settings: Settings = field(default_factory=Settings)

    @classmethod
    def fresh(cls, catalog: Catalog) -> "GameState":
        return cls(producers={p.id: 0 for p in catalog.ordinary_producers})

    def owned(self, producer_id: str) -> int:
        return self.producers.get(producer_id, 0)

    def has_upgrade(self, upgrade_id: str) -> bool:
        return upgrade_id in self.upgrades

    def has_achievement(self, achievement_id: str) -> bool:
        return achievement_id in self.achievements

    def unlock(self, achievement_id: str) -> bool:
        """Record an unlock; returns False if it was already unlocked."""
        if achievement_id in self.achievements:
            return False
        self.achievements.append(achievement_id)
        return True

    def reset_run(self) -> None:
        """Wipe spendable progress for a rebirth, keeping achievements and settings."""
        self.run.current_resource = 0.0
        self.run.cumulative_resource = 0.0
        self.producers = {pid: 0 for pid in self.producers}
        self.upgrades = set()
        logger.debug("Run state wiped (prestige_level=%s)", self.run.prestige_level)
