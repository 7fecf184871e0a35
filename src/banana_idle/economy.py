"""Pure economy functions: production rate, purchase costs and click yield.

Nothing here mutates state. Growth constants come from EngineConfig so the
balance can be tuned without touching the formulas.

Cost model for ordinary producers is a geometric series: the unit price of
the k-th unit (0-based) is base * r**k, so buying q units with n owned costs

    base * r**n * (r**q - 1) / (r - 1)

floored to a whole number of bananas. The capstone producer ignores quantity
and scales with prestige level instead.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Optional

from .catalog import ProducerDef
from .config import EngineConfig
from .errors import PreconditionError

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = EngineConfig()
# Costs are rounded to this many decimals before flooring, so float error on
# a whole-number price cannot drop it by one.
_COST_DECIMALS = 6


def _cfg(config: Optional[EngineConfig]) -> EngineConfig:
    return config or _DEFAULT_CONFIG


def _require_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise PreconditionError(f"{name} must be >= 0, got {value}")


def _floor_cost(value: float) -> float:
    if not math.isfinite(value):
        return value
    return float(math.floor(round(value, _COST_DECIMALS)))


def _grow(rate: float, exponent: int) -> float:
    """rate ** exponent, or inf once the result no longer fits in a float."""
    try:
        return rate ** exponent
    except OverflowError:
        return math.inf


def achievement_bonus(unlock_count: int, config: Optional[EngineConfig] = None) -> float:
    """+10% per unlocked achievement, additive: 3 unlocks -> 1.3."""
    _require_non_negative("unlock_count", unlock_count)
    # Rounded so 0.1 * n sums land on the decimal value (3 unlocks == 1.3).
    return round(1.0 + _cfg(config).achievement_bonus_per_unlock * unlock_count, 12)


def prestige_multiplier(prestige_level: int) -> int:
    _require_non_negative("prestige_level", prestige_level)
    return 1 + prestige_level


def production_rate(
    producers: Iterable[ProducerDef],
    owned: Mapping[str, int],
    achievement_bonus: float = 1.0,
) -> float:
    """Bananas per second before the prestige multiplier."""
    raw = 0.0
    for producer in producers:
        if producer.capstone:
            continue
        count = owned.get(producer.id, 0)
        _require_non_negative(f"owned[{producer.id}]", count)
        raw += count * producer.base_rate
    return raw * achievement_bonus


def effective_rate(rate: float, prestige_level: int) -> float:
    """Rate actually credited per second, including the prestige multiplier."""
    return rate * prestige_multiplier(prestige_level)


def accrual_delta(rate: float, prestige_level: int, dt: float) -> float:
    _require_non_negative("dt", dt)
    return effective_rate(rate, prestige_level) * dt


def raw_bulk_cost(
    producer: ProducerDef,
    owned: int,
    quantity: int,
    config: Optional[EngineConfig] = None,
) -> float:
    """Unfloored geometric-series cost of ``quantity`` more units."""
    _require_non_negative("owned", owned)
    _require_non_negative("quantity", quantity)
    if quantity == 0:
        return 0.0
    r = _cfg(config).cost_growth
    series = (_grow(r, quantity) - 1) / (r - 1)  # exactly 1.0 for a single unit
    return producer.base_cost * _grow(r, owned) * series


def capstone_cost(
    producer: ProducerDef,
    prestige_level: int,
    config: Optional[EngineConfig] = None,
) -> float:
    """Price of the capstone at a prestige level; inf when it overflows a float."""
    _require_non_negative("prestige_level", prestige_level)
    return producer.base_cost * _grow(_cfg(config).capstone_growth, prestige_level)


def bulk_cost(
    producer: ProducerDef,
    owned: int,
    quantity: int,
    prestige_level: int = 0,
    config: Optional[EngineConfig] = None,
) -> float:
    """Price of buying ``quantity`` units with ``owned`` already held."""
    if producer.capstone:
        _require_non_negative("quantity", quantity)
        return capstone_cost(producer, prestige_level, config)
    return _floor_cost(raw_bulk_cost(producer, owned, quantity, config))


def unit_cost(
    producer: ProducerDef,
    owned: int,
    prestige_level: int = 0,
    config: Optional[EngineConfig] = None,
) -> float:
    return bulk_cost(producer, owned, 1, prestige_level, config)


def max_affordable(
    producer: ProducerDef,
    owned: int,
    resource: float,
    prestige_level: int = 0,
    config: Optional[EngineConfig] = None,
) -> int:
    """Largest n with bulk_cost(n) <= resource.

    Solved with the closed-form log inverse of the series; the result is then
    nudged so it agrees exactly with the floored bulk_cost, which the float
    logarithm alone can miss by one at boundaries.
    """
    _require_non_negative("owned", owned)
    if producer.capstone:
        return 1 if resource >= capstone_cost(producer, prestige_level, config) else 0
    if resource <= 0:
        return 0

    r = _cfg(config).cost_growth
    price_now = producer.base_cost * _grow(r, owned)
    n = int(math.floor(math.log(resource * (r - 1) / price_now + 1) / math.log(r)))
    n = max(0, n)

    def cost(q: int) -> float:
        return bulk_cost(producer, owned, q, prestige_level, config)

    while cost(n + 1) <= resource:
        n += 1
    while n > 0 and cost(n) > resource:
        n -= 1
    return n


def click_yield(
    upgrade_multipliers: Iterable[float],
    production_rate: float,
    prestige_level: int,
    achievement_bonus: float,
    config: Optional[EngineConfig] = None,
) -> float:
    """Bananas earned by one manual click.

    (base * product(upgrades) * achievement_bonus + 5% of rate) * (1 + prestige).
    The achievement bonus is already part of production_rate and is applied a
    second time on the base click value.
    """
    cfg = _cfg(config)
    multiplier = 1.0
    for m in upgrade_multipliers:
        multiplier *= m
    base = cfg.base_click_value * multiplier * achievement_bonus
    return (base + production_rate * cfg.click_rate_share) * prestige_multiplier(prestige_level)
