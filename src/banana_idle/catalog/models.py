from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from ..errors import CatalogError, UnknownIdError


class ConditionType(str, Enum):
    TOTAL_BANANAS = "total_bananas"
    PRODUCER = "producer"
    PRESTIGE = "prestige"


@dataclass(frozen=True)
class ProducerDef:
    """Immutable definition of a producer.

    Attributes:
        id: Unique key, e.g. 'monkey'.
        base_cost: Price of the first unit.
        base_rate: Bananas per second produced by each owned unit.
        unlock_prestige_level: Minimum prestige level at which it appears.
        capstone: The unique, non-repeatable purchase that triggers rebirth.
    """

    id: str
    name: str
    base_cost: float
    base_rate: float
    description: str = ""
    unlock_prestige_level: int = 0
    capstone: bool = False


@dataclass(frozen=True)
class UpgradeDef:
    """Immutable definition of a one-shot click upgrade."""

    id: str
    name: str
    cost: float
    multiplier: float
    unlock_total_threshold: float = 0.0
    unlock_prestige_level: int = 0
    description: str = ""
    effect: str = "none"  # none | purple | galaxy


@dataclass(frozen=True)
class AchievementDef:
    id: str
    name: str
    condition: ConditionType
    threshold: float
    target: Optional[str] = None  # producer id for PRODUCER conditions
    description: str = ""


class Catalog:
    """Read-only collection of producers, upgrades and achievements.

    Order of definition is preserved; it is the display order and the order in
    which simultaneous achievement unlocks are reported.
    """

    def __init__(
        self,
        producers: Iterable[ProducerDef],
        upgrades: Iterable[UpgradeDef],
        achievements: Iterable[AchievementDef],
    ) -> None:
        self._producers: Tuple[ProducerDef, ...] = tuple(producers)
        self._upgrades: Tuple[UpgradeDef, ...] = tuple(upgrades)
        self._achievements: Tuple[AchievementDef, ...] = tuple(achievements)
        self._validate()
        self._producers_by_id: Dict[str, ProducerDef] = {p.id: p for p in self._producers}
        self._upgrades_by_id: Dict[str, UpgradeDef] = {u.id: u for u in self._upgrades}
        self._achievements_by_id: Dict[str, AchievementDef] = {a.id: a for a in self._achievements}
        self._capstone: ProducerDef = next(p for p in self._producers if p.capstone)

    def _validate(self) -> None:
        for kind, items in (
            ("producer", self._producers),
            ("upgrade", self._upgrades),
            ("achievement", self._achievements),
        ):
            ids = [i.id for i in items]
            if len(ids) != len(set(ids)):
                raise CatalogError(f"Duplicate {kind} ids found in catalog")

        capstones = [p for p in self._producers if p.capstone]
        if len(capstones) != 1:
            raise CatalogError(f"Expected exactly 1 capstone producer, found {len(capstones)}")

        for p in self._producers:
            if p.base_cost <= 0 or p.base_rate < 0:
                raise CatalogError(f"Producer '{p.id}' needs a positive cost and a non-negative rate")
            if p.unlock_prestige_level < 0:
                raise CatalogError(f"Producer '{p.id}' has a negative prestige requirement")
        for u in self._upgrades:
            if u.cost < 0:
                raise CatalogError(f"Upgrade '{u.id}' has a negative cost")
            if u.multiplier <= 1:
                raise CatalogError(f"Upgrade '{u.id}' multiplier must be > 1, got {u.multiplier}")

        ordinary = {p.id for p in self._producers if not p.capstone}
        for a in self._achievements:
            if a.condition is ConditionType.PRODUCER and a.target not in ordinary:
                raise CatalogError(
                    f"Achievement '{a.id}' targets unknown or capstone producer '{a.target}'"
                )

    # Collections

    @property
    def producers(self) -> Tuple[ProducerDef, ...]:
        return self._producers

    @property
    def ordinary_producers(self) -> List[ProducerDef]:
        return [p for p in self._producers if not p.capstone]

    @property
    def upgrades(self) -> Tuple[UpgradeDef, ...]:
        return self._upgrades

    @property
    def achievements(self) -> Tuple[AchievementDef, ...]:
        return self._achievements

    @property
    def capstone(self) -> ProducerDef:
        return self._capstone

    # Lookups

    def producer(self, producer_id: str) -> ProducerDef:
        try:
            return self._producers_by_id[producer_id]
        except KeyError:
            raise UnknownIdError(f"Unknown producer id: {producer_id}") from None

    def upgrade(self, upgrade_id: str) -> UpgradeDef:
        try:
            return self._upgrades_by_id[upgrade_id]
        except KeyError:
            raise UnknownIdError(f"Unknown upgrade id: {upgrade_id}") from None

    def achievement(self, achievement_id: str) -> AchievementDef:
        try:
            return self._achievements_by_id[achievement_id]
        except KeyError:
            raise UnknownIdError(f"Unknown achievement id: {achievement_id}") from None

    def has_producer(self, producer_id: str) -> bool:
        return producer_id in self._producers_by_id

    def has_upgrade(self, upgrade_id: str) -> bool:
        return upgrade_id in self._upgrades_by_id

    def has_achievement(self, achievement_id: str) -> bool:
        return achievement_id in self._achievements_by_id
