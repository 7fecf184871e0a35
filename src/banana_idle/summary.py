from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from .session import GameSession


@dataclass(frozen=True)
class GameSummary:
    """Values the presentation layer shows in its header and status bar."""

    bananas: float
    total_bananas: float
    prestige_level: int
    rate_per_second: float
    click_power: float
    achievement_bonus_pct: int
    achievements_unlocked: int
    achievements_total: int
    skin: str  # default | purple | galaxy
    infinite_mode: bool
    prestige_multiplier: int
    next_prestige_multiplier: int
    rebirth_pending: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def minion_skin(session: GameSession) -> str:
    """Galaxy from the infinite-mode prestige level, else purple if a purple upgrade is owned."""
    state = session.state
    if state.run.prestige_level >= session.config.infinite_mode_level:
        return "galaxy"
    for upgrade in session.catalog.upgrades:
        if upgrade.effect == "purple" and state.has_upgrade(upgrade.id):
            return "purple"
    return "default"


def summarize(session: GameSession) -> GameSummary:
    with session.lock:
        state = session.state
        level = state.run.prestige_level
        return GameSummary(
            bananas=state.run.current_resource,
            total_bananas=state.run.cumulative_resource,
            prestige_level=level,
            rate_per_second=session.effective_rate(),
            click_power=session.click_power(),
            achievement_bonus_pct=round((session.achievement_bonus() - 1) * 100),
            achievements_unlocked=len(state.achievements),
            achievements_total=len(session.catalog.achievements),
            skin=minion_skin(session),
            infinite_mode=level >= session.config.infinite_mode_level,
            prestige_multiplier=session.prestige.multiplier(level),
            next_prestige_multiplier=session.prestige.next_multiplier(state),
            rebirth_pending=session.prestige.pending,
        )
