from banana_idle.events import AchievementUnlocked, EventBus
from banana_idle.progress import ProgressTracker, condition_met
from banana_idle.state import GameState, RunState


def test_condition_types(tiny_catalog):
    state = GameState.fresh(tiny_catalog)
    hundred = tiny_catalog.achievement("hundred")
    five = tiny_catalog.achievement("picker_five")
    reborn = tiny_catalog.achievement("reborn")
    assert not any(condition_met(a, state) for a in (hundred, five, reborn))

    state.run.earn(100)
    state.producers["picker"] = 5
    state.run.prestige_level = 1
    assert all(condition_met(a, state) for a in (hundred, five, reborn))


def test_spending_does_not_affect_total_condition(tiny_catalog):
    state = GameState.fresh(tiny_catalog)
    state.run.earn(120)
    state.run.spend(100)
    assert state.run.current_resource == 20
    assert condition_met(tiny_catalog.achievement("hundred"), state)


def test_all_satisfied_achievements_unlock_in_one_pass(tiny_catalog):
    bus = EventBus()
    seen = []
    bus.subscribe(AchievementUnlocked, seen.append)
    tracker = ProgressTracker(tiny_catalog, bus)

    state = GameState.fresh(tiny_catalog)
    state.run = RunState(current_resource=0, cumulative_resource=500, prestige_level=2)
    state.producers["picker"] = 9

    unlocked = tracker.evaluate(state)
    assert unlocked == ["hundred", "picker_five", "reborn"]
    assert state.achievements == ["hundred", "picker_five", "reborn"]
    assert [e.achievement_id for e in seen] == unlocked
    assert seen[0].name == "Hundred"


def test_unlocks_are_one_way(tiny_catalog):
    tracker = ProgressTracker(tiny_catalog)
    state = GameState.fresh(tiny_catalog)
    state.run.earn(150)
    assert tracker.evaluate(state) == ["hundred"]

    # Condition no longer holds, unlock stays and is not reported again
    state.reset_run()
    assert tracker.evaluate(state) == []
    assert state.achievements == ["hundred"]
    assert [a.id for a in tracker.locked(state)] == ["picker_five", "reborn"]


def test_unlock_is_idempotent(tiny_catalog):
    state = GameState.fresh(tiny_catalog)
    assert state.unlock("hundred") is True
    assert state.unlock("hundred") is False
    assert state.achievements == ["hundred"]
