from banana_idle.events import CapstonePurchased, EventBus, PrestigeCompleted
from banana_idle.prestige import PrestigeController, PrestigePhase
from banana_idle.state import GameState, RunState


def test_rebirth_requires_capstone_purchase(tiny_catalog):
    controller = PrestigeController()
    state = GameState.fresh(tiny_catalog)
    state.run = RunState(current_resource=50, cumulative_resource=50)

    assert controller.phase is PrestigePhase.ACTIVE
    assert controller.rebirth(state) is False
    assert state.run.prestige_level == 0
    assert state.run.current_resource == 50


def test_capstone_then_rebirth_cycle(tiny_catalog):
    bus = EventBus()
    events = []
    bus.subscribe(CapstonePurchased, events.append)
    bus.subscribe(PrestigeCompleted, events.append)
    controller = PrestigeController(bus)

    state = GameState.fresh(tiny_catalog)
    state.run = RunState(current_resource=5, cumulative_resource=5000, prestige_level=1)
    state.producers["picker"] = 4
    state.upgrades.add("gloves")
    state.unlock("hundred")

    controller.capstone_purchased("rocket", 14000, state)
    assert controller.pending
    assert controller.phase is PrestigePhase.RESET_PENDING

    assert controller.rebirth(state) is True
    assert not controller.pending
    assert state.run.prestige_level == 2
    assert state.run.current_resource == 0
    assert state.run.cumulative_resource == 0
    assert state.producers["picker"] == 0
    assert state.upgrades == set()
    assert state.achievements == ["hundred"]

    assert events == [
        CapstonePurchased(producer_id="rocket", cost=14000, prestige_level=1),
        PrestigeCompleted(new_level=2),
    ]
    # Second confirmation does nothing
    assert controller.rebirth(state) is False
    assert state.run.prestige_level == 2


def test_multipliers(tiny_catalog):
    controller = PrestigeController()
    state = GameState.fresh(tiny_catalog)
    state.run.prestige_level = 3
    assert controller.multiplier(0) == 1
    assert controller.multiplier(3) == 4
    assert controller.next_multiplier(state) == 5
