"""Static game data: producers, upgrades and achievements."""
from .models import AchievementDef, Catalog, ConditionType, ProducerDef, UpgradeDef
from .loader import catalog_from_dict, catalog_from_yaml, load_catalog

__all__ = [
    "AchievementDef",
    "Catalog",
    "ConditionType",
    "ProducerDef",
    "UpgradeDef",
    "catalog_from_dict",
    "catalog_from_yaml",
    "load_catalog",
]
