from banana_idle.state import GameState, RunState
from banana_idle.storefront import BuyMode, Quote, quote, visible_producers, visible_upgrades


def _state(catalog, bananas=0.0, total=0.0, level=0) -> GameState:
    state = GameState.fresh(catalog)
    state.run = RunState(current_resource=bananas, cumulative_resource=total, prestige_level=level)
    return state


def test_buy_mode_quantities():
    assert BuyMode.ONE.quantity == 1
    assert BuyMode.TEN.quantity == 10
    assert BuyMode.HUNDRED.quantity == 100
    assert BuyMode.MAX.quantity is None
    assert BuyMode("max") is BuyMode.MAX


def test_fixed_quantity_quotes(tiny_catalog):
    picker = tiny_catalog.producer("picker")
    state = _state(tiny_catalog, bananas=100)
    assert quote(picker, state) == Quote("picker", 1, 10, True)
    assert quote(picker, state, BuyMode.TEN) == Quote("picker", 10, 203, False)


def test_max_quote(tiny_catalog):
    picker = tiny_catalog.producer("picker")
    assert quote(picker, _state(tiny_catalog, bananas=100), BuyMode.MAX) == Quote("picker", 6, 87, True)
    # Nothing affordable: quote a single unit so the price can still be shown
    assert quote(picker, _state(tiny_catalog, bananas=3), BuyMode.MAX) == Quote("picker", 1, 10, False)


def test_capstone_always_quotes_one_unit(tiny_catalog):
    rocket = tiny_catalog.capstone
    assert quote(rocket, _state(tiny_catalog, bananas=20000), BuyMode.HUNDRED) == Quote("rocket", 1, 1000, True)
    assert quote(rocket, _state(tiny_catalog, bananas=5000, level=1), BuyMode.MAX) == Quote("rocket", 1, 14000, False)


def test_visibility(tiny_catalog):
    assert [p.id for p in visible_producers(tiny_catalog, 0)] == ["picker", "rocket"]
    assert [p.id for p in visible_producers(tiny_catalog, 1)] == ["picker", "farm", "rocket"]

    state = _state(tiny_catalog, total=999)
    assert [u.id for u in visible_upgrades(tiny_catalog, state)] == ["gloves"]
    state.run.cumulative_resource = 1000
    state.upgrades.add("gloves")
    assert [u.id for u in visible_upgrades(tiny_catalog, state)] == ["serum"]
