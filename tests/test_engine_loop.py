from __future__ import annotations

import pytest

from banana_idle.loop import GameLoop, LoopConfig
from banana_idle.scheduler import Scheduler


def test_loop_runs_exact_steps():
    loop = GameLoop(Scheduler(), LoopConfig(tick_rate=0, max_steps=5))
    loop.run()
    assert loop.step == 5
    assert loop.running is False


def test_loop_update_and_stop():
    sched = Scheduler()
    loop = GameLoop(sched, LoopConfig(tick_rate=0, max_steps=2))
    loop.start()
    loop.update(0.016)
    loop.update(0.016)
    assert loop.step == 2
    assert loop.running is False
    assert sched.now == 0.032


def test_update_clamps_large_gaps_and_ignores_when_stopped():
    sched = Scheduler()
    ticks = []
    sched.every(1.0, "tick", ticks.append)
    loop = GameLoop(sched, LoopConfig(tick_rate=0, max_catch_up=5.0))

    loop.update(1.0)
    assert sched.now == 0.0

    loop.start()
    loop.update(3600.0)
    assert sched.now == 5.0
    assert len(ticks) == 5
    loop.update(-2.0)
    assert sched.now == 5.0
    loop.stop()
    assert loop.running is False


def test_run_paces_steps_with_the_given_clock():
    now = [0.0]
    slept = []

    def fake_sleep(seconds):
        slept.append(seconds)
        now[0] += seconds

    sched = Scheduler()
    loop = GameLoop(sched, LoopConfig(tick_rate=10, max_steps=3), clock=lambda: now[0], sleep=fake_sleep)
    loop.run()

    assert loop.step == 3
    assert slept == [0.1, 0.1]
    assert sched.now == pytest.approx(0.2)


def test_pump_feeds_elapsed_time():
    now = [10.0]
    sched = Scheduler()
    loop = GameLoop(sched, LoopConfig(tick_rate=0), clock=lambda: now[0])
    loop.start()
    now[0] = 10.5
    loop.pump()
    now[0] = 100.0
    loop.pump()
    assert sched.now == pytest.approx(5.5)
    assert loop.step == 2
