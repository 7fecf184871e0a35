from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Tunable knobs for the progression engine.

    Defaults reproduce the shipped game balance; external YAML may override
    any of them.
    """

    cost_growth: float = 1.15  # per unit already owned
    capstone_growth: float = 14.0  # per prestige level
    achievement_bonus_per_unlock: float = 0.10  # additive, not compounding
    click_rate_share: float = 0.05  # fraction of production rate added to a click
    base_click_value: float = 1.0
    tick_rate: float = 10.0  # accrual ticks per second
    achievement_check_interval: float = 1.0  # seconds
    autosave_interval: float = 10.0  # seconds
    achievement_notice_seconds: float = 4.0
    save_notice_seconds: float = 2.0
    infinite_mode_level: int = 10  # prestige level shown as "infinite"

    @property
    def tick_interval(self) -> float:
        return 1.0 / self.tick_rate

    def validate(self) -> None:
        if self.cost_growth <= 1.0:
            raise ConfigError(f"cost_growth must be > 1, got {self.cost_growth}")
        if self.capstone_growth <= 0:
            raise ConfigError(f"capstone_growth must be > 0, got {self.capstone_growth}")
        if self.achievement_bonus_per_unlock < 0 or self.click_rate_share < 0:
            raise ConfigError("Bonus and click share values must be non-negative")
        for name in ("tick_rate", "achievement_check_interval", "autosave_interval"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be > 0, got {getattr(self, name)}")


def config_from_dict(data: Dict[str, Any]) -> EngineConfig:
    """Build an EngineConfig from a mapping, ignoring unknown keys."""
    known = {f.name: f for f in fields(EngineConfig)}
    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        spec = known.get(key)
        if spec is None:
            logger.debug("Ignoring unknown engine config key: %s", key)
            continue
        caster = int if spec.type in ("int", int) else float
        try:
            kwargs[key] = caster(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value for {key}: {value!r}") from e
    cfg = EngineConfig(**kwargs)
    cfg.validate()
    return cfg


def load_engine_config(path: Optional[Path] = None) -> EngineConfig:
    """Load engine configuration from YAML; defaults are used if the file is absent."""
    if path is None:
        return EngineConfig()
    path = Path(path)
    if not path.exists():
        logger.warning("Engine config not found at %s; using defaults", path)
        return EngineConfig()
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.exception("Failed to load engine config: %s", e)
        return EngineConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Engine config at {path} must be a mapping")
    cfg = config_from_dict(data)
    logger.info("Loaded engine config from %s", path)
    return cfg
