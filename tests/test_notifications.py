from banana_idle.notifications import NotificationQueue


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_post_and_expire():
    clock = FakeClock()
    q = NotificationQueue(clock)
    first = q.post("Game saved", kind="save", duration=2.0)
    clock.now = 1.0
    q.post("Achievement unlocked: Hundred", kind="achievement", duration=4.0)

    assert first.posted_at == 0.0
    assert [n.kind for n in q.active()] == ["save", "achievement"]

    clock.now = 2.0
    assert [n.kind for n in q.active()] == ["achievement"]
    assert q.expire() == 1
    assert q.has_pending

    clock.now = 5.0
    assert q.expire() == 1
    assert not q.has_pending


def test_drain_takes_everything():
    q = NotificationQueue(FakeClock())
    q.post("a")
    q.post("b", duration=0.0)
    drained = q.drain()
    assert [n.text for n in drained] == ["a", "b"]
    assert drained[0].kind == "info"
    assert q.drain() == []
