from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from . import economy
from .catalog import Catalog, ProducerDef, UpgradeDef
from .config import EngineConfig
from .state import GameState


class BuyMode(str, Enum):
    ONE = "1"
    TEN = "10"
    HUNDRED = "100"
    MAX = "max"

    @property
    def quantity(self) -> Optional[int]:
        return None if self is BuyMode.MAX else int(self.value)


@dataclass(frozen=True)
class Quote:
    producer_id: str
    quantity: int
    cost: float
    affordable: bool


def visible_producers(catalog: Catalog, prestige_level: int) -> List[ProducerDef]:
    return [p for p in catalog.producers if prestige_level >= p.unlock_prestige_level]


def visible_upgrades(catalog: Catalog, state: GameState) -> List[UpgradeDef]:
    """Upgrades on offer: not yet owned, revealed by lifetime bananas and prestige tier."""
    return [
        u
        for u in catalog.upgrades
        if not state.has_upgrade(u.id)
        and state.run.cumulative_resource >= u.unlock_total_threshold
        and state.run.prestige_level >= u.unlock_prestige_level
    ]


def quote(
    producer: ProducerDef,
    state: GameState,
    mode: BuyMode = BuyMode.ONE,
    config: Optional[EngineConfig] = None,
) -> Quote:
    """Quantity and price the store would offer for a producer in the given mode.

    The capstone always quotes one unit. MAX quotes everything affordable, or a
    single (unaffordable) unit when nothing is.
    """
    owned = state.owned(producer.id)
    level = state.run.prestige_level
    bananas = state.run.current_resource
    if producer.capstone:
        quantity = 1
    elif mode is BuyMode.MAX:
        max_n = economy.max_affordable(producer, owned, bananas, level, config)
        if max_n == 0:
            cost = economy.bulk_cost(producer, owned, 1, level, config)
            return Quote(producer_id=producer.id, quantity=1, cost=cost, affordable=False)
        quantity = max_n
    else:
        quantity = mode.quantity or 1
    cost = economy.bulk_cost(producer, owned, quantity, level, config)
    return Quote(producer_id=producer.id, quantity=quantity, cost=cost, affordable=bananas >= cost)
