import pytest

from banana_idle.scheduler import Scheduler


def test_jobs_fire_in_time_order_with_registration_tiebreak():
    sched = Scheduler()
    calls = []
    sched.every(0.5, "half", lambda dt: calls.append(("half", sched.clock(), dt)))
    sched.every(1.0, "whole", lambda dt: calls.append(("whole", sched.clock(), dt)))

    fired = sched.advance(1.0)

    assert fired == 3
    assert calls == [("half", 0.5, 0.5), ("half", 1.0, 0.5), ("whole", 1.0, 1.0)]
    assert sched.now == 1.0


def test_ten_accrual_ticks_per_second_in_small_steps():
    sched = Scheduler()
    ticks = []
    sched.every(0.1, "accrual", ticks.append)
    for _ in range(20):
        sched.advance(0.05)
    assert len(ticks) == 10
    assert sched.job("accrual").runs == 10


def test_partial_intervals_accumulate():
    sched = Scheduler()
    fired = []
    sched.every(10.0, "autosave", fired.append)
    sched.advance(9.9)
    assert fired == []
    sched.advance(0.1)
    assert fired == [10.0]
    sched.advance(25.0)
    assert len(fired) == 3


def test_disabled_and_cancelled_jobs():
    sched = Scheduler()
    a, b = [], []
    sched.every(1.0, "a", a.append)
    job_b = sched.every(1.0, "b", b.append)
    job_b.enabled = False
    sched.advance(2.0)
    assert len(a) == 2 and b == []
    # Disabled jobs keep their cadence
    assert job_b.runs == 2

    sched.cancel("a")
    sched.advance(5.0)
    assert len(a) == 2
    assert [j.name for j in sched.jobs] == ["b"]
    with pytest.raises(KeyError):
        sched.job("a")


def test_job_registered_later_starts_from_current_time():
    sched = Scheduler()
    sched.advance(3.0)
    fired = []
    sched.every(2.0, "late", lambda dt: fired.append(sched.clock()))
    sched.advance(4.0)
    assert fired == [5.0, 7.0]


def test_invalid_schedules_raise():
    sched = Scheduler()
    with pytest.raises(ValueError):
        sched.every(0, "zero", lambda dt: None)
    sched.every(1.0, "dup", lambda dt: None)
    with pytest.raises(ValueError):
        sched.every(2.0, "dup", lambda dt: None)
    with pytest.raises(ValueError):
        sched.advance(-1.0)
