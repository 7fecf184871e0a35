import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from banana_idle.catalog import catalog_from_dict, load_catalog  # noqa: E402


TINY_CATALOG = {
    "producers": [
        {"id": "picker", "name": "Picker", "base_cost": 10, "base_rate": 1},
        {"id": "farm", "name": "Farm", "base_cost": 100, "base_rate": 10, "unlock_prestige_level": 1},
        {"id": "rocket", "name": "Rocket", "base_cost": 1000, "base_rate": 0, "capstone": True},
    ],
    "upgrades": [
        {"id": "gloves", "name": "Gloves", "cost": 50, "multiplier": 2},
        {
            "id": "serum",
            "name": "Serum",
            "cost": 500,
            "multiplier": 5,
            "unlock_total_threshold": 1000,
            "effect": "purple",
        },
    ],
    "achievements": [
        {"id": "hundred", "name": "Hundred", "condition": "total_bananas", "threshold": 100},
        {"id": "picker_five", "name": "Five Pickers", "condition": "producer", "target": "picker", "threshold": 5},
        {"id": "reborn", "name": "Reborn", "condition": "prestige", "threshold": 1},
    ],
}


@pytest.fixture
def tiny_catalog():
    """Small hand-balanced catalog with round numbers."""
    return catalog_from_dict(TINY_CATALOG)


@pytest.fixture(scope="session")
def catalog():
    return load_catalog()
