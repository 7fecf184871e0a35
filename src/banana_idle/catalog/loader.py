from __future__ import annotations

import logging
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..errors import CatalogError
from .models import AchievementDef, Catalog, ConditionType, ProducerDef, UpgradeDef
from .schema import validate_catalog_dict

logger = logging.getLogger(__name__)


def load_catalog(path: Optional[Path | str] = None) -> Catalog:
    """Load the game catalog from YAML.

    If path is None, loads the embedded default resource at
    banana_idle/catalog/data/catalog.yaml.
    """
    if path is None:
        resource = resource_files("banana_idle.catalog").joinpath("data").joinpath("catalog.yaml")
        text = resource.read_text(encoding="utf-8")
        logger.debug("Loaded embedded catalog resource")
    else:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        logger.debug("Loaded catalog from path: %s", path)
    return catalog_from_yaml(text)


def catalog_from_yaml(text: str) -> Catalog:
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid catalog YAML: {e}") from e
    if not isinstance(raw, dict):
        raise CatalogError("Catalog root must be a mapping")
    return catalog_from_dict(raw)


def catalog_from_dict(raw: Dict[str, Any]) -> Catalog:
    validate_catalog_dict(raw)
    try:
        producers = [_producer(entry) for entry in raw.get("producers", [])]
        upgrades = [_upgrade(entry) for entry in raw.get("upgrades", [])]
        achievements = [_achievement(entry) for entry in raw.get("achievements", [])]
    except KeyError as e:
        raise CatalogError(f"Catalog entry missing required field {e}") from e
    except (TypeError, ValueError) as e:
        raise CatalogError(f"Malformed catalog entry: {e}") from e
    catalog = Catalog(producers, upgrades, achievements)
    logger.info(
        "Catalog: %d producers, %d upgrades, %d achievements",
        len(producers),
        len(upgrades),
        len(achievements),
    )
    return catalog


def _producer(entry: Dict[str, Any]) -> ProducerDef:
    return ProducerDef(
        id=str(entry["id"]),
        name=str(entry.get("name", entry["id"])),
        description=str(entry.get("description", "")),
        base_cost=float(entry["base_cost"]),
        base_rate=float(entry.get("base_rate", 0.0)),
        unlock_prestige_level=int(entry.get("unlock_prestige_level", 0)),
        capstone=bool(entry.get("capstone", False)),
    )


def _upgrade(entry: Dict[str, Any]) -> UpgradeDef:
    return UpgradeDef(
        id=str(entry["id"]),
        name=str(entry.get("name", entry["id"])),
        description=str(entry.get("description", "")),
        cost=float(entry["cost"]),
        multiplier=float(entry["multiplier"]),
        unlock_total_threshold=float(entry.get("unlock_total_threshold", 0.0)),
        unlock_prestige_level=int(entry.get("unlock_prestige_level", 0)),
        effect=str(entry.get("effect", "none")),
    )


def _achievement(entry: Dict[str, Any]) -> AchievementDef:
    target = entry.get("target")
    return AchievementDef(
        id=str(entry["id"]),
        name=str(entry.get("name", entry["id"])),
        description=str(entry.get("description", "")),
        condition=ConditionType(entry["condition"]),
        threshold=float(entry["threshold"]),
        target=str(target) if target is not None else None,
    )


def catalog_summary(catalog: Catalog) -> List[str]:
    """Human readable one-line descriptions, used by the CLI."""
    lines = []
    for p in catalog.producers:
        tag = " [capstone]" if p.capstone else ""
        lines.append(f"producer {p.id}: cost={p.base_cost:g} rate={p.base_rate:g}/s{tag}")
    for u in catalog.upgrades:
        lines.append(f"upgrade {u.id}: cost={u.cost:g} x{u.multiplier:g}")
    for a in catalog.achievements:
        lines.append(f"achievement {a.id}: {a.condition.value} >= {a.threshold:g}")
    return lines
