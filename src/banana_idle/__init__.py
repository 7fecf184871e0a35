"""
Banana Idle progression engine.

Headless domain logic for an idle clicker:
- Catalog of producers, upgrades and achievements
- Economy functions for rates, bulk costs and click yield
- Progress tracking (achievements) and prestige ("rebirth")
- Snapshot persistence tolerant of older save formats
- A virtual-clock scheduler driving accrual, achievement polling and autosave

UI layers should import and compose these services; nothing here renders.
"""
from importlib.metadata import version, PackageNotFoundError

__all__ = ["__version__"]

try:
    __version__ = version("banana-idle")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"
