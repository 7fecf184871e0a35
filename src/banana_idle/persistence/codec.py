from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from ..catalog import Catalog
from ..state import DEFAULT_VOLUME, GameState, RunState, Settings
from .errors import CorruptSnapshotError

logger = logging.getLogger(__name__)

# Key names used by saves written before the current schema.
LEGACY_KEYS: Dict[str, str] = {
    "currentResource": "bananas",
    "cumulativeResource": "totalBananas",
    "prestigeLevel": "prestigeCount",
    "producers": "buildings",
}


def serialize(state: GameState) -> Dict[str, Any]:
    """Project the live state to a JSON-friendly snapshot. Never mutates state."""
    return {
        "currentResource": state.run.current_resource,
        "cumulativeResource": state.run.cumulative_resource,
        "prestigeLevel": state.run.prestige_level,
        "producers": dict(state.producers),
        "upgrades": sorted(state.upgrades),
        "achievements": list(state.achievements),
        "settings": {
            "musicVolume": state.settings.music_volume,
            "sfxVolume": state.settings.sfx_volume,
        },
        "savedAt": datetime.now(timezone.utc).isoformat(timespec="seconds"),
    }


def deserialize(data: Mapping[str, Any], catalog: Catalog) -> GameState:
    """Rebuild a GameState from a snapshot mapping.

    Every field is optional: anything absent or of the wrong shape falls back
    to its zero/empty default, unknown catalog ids are dropped, and negative
    numbers are clamped to zero.
    """
    state = GameState.fresh(catalog)
    state.run = RunState(
        current_resource=_amount(_field(data, "currentResource")),
        cumulative_resource=_amount(_field(data, "cumulativeResource")),
        prestige_level=_count(_field(data, "prestigeLevel")),
    )

    producers = _field(data, "producers")
    if isinstance(producers, Mapping):
        for pid in state.producers:
            state.producers[pid] = _count(producers.get(pid))

    upgrades = data.get("upgrades")
    if isinstance(upgrades, list):
        state.upgrades = {u for u in upgrades if isinstance(u, str) and catalog.has_upgrade(u)}

    achievements = data.get("achievements")
    if isinstance(achievements, list):
        for aid in achievements:
            if isinstance(aid, str) and catalog.has_achievement(aid):
                state.unlock(aid)

    state.settings = _settings(data.get("settings"))
    return state


def encode_snapshot(state: GameState) -> str:
    """Encode a GameState to a pretty-printed JSON string."""
    return json.dumps(serialize(state), ensure_ascii=False, sort_keys=True, indent=2)


def decode_snapshot(text: str, catalog: Catalog) -> GameState:
    """Decode JSON text into a GameState.

    Raises CorruptSnapshotError if the text is not a JSON object; individual
    bad fields never fail the load.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise CorruptSnapshotError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise CorruptSnapshotError(f"Snapshot root must be an object, got {type(data).__name__}")
    return deserialize(data, catalog)


def _field(data: Mapping[str, Any], key: str) -> Any:
    if key in data:
        return data[key]
    return data.get(LEGACY_KEYS.get(key, key))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _amount(value: Any) -> float:
    return max(0.0, float(value)) if _is_number(value) else 0.0


def _count(value: Any) -> int:
    return max(0, int(value)) if _is_number(value) else 0


def _settings(value: Any) -> Settings:
    if not isinstance(value, Mapping):
        return Settings()
    music = value.get("musicVolume")
    sfx = value.get("sfxVolume")
    return Settings(
        music_volume=music if _is_number(music) else DEFAULT_VOLUME,
        sfx_volume=sfx if _is_number(sfx) else DEFAULT_VOLUME,
    )
