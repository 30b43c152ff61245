def test_schedule_fires_after_delay(rig):
    fired = []
    rig.slot.schedule(0.1, lambda: fired.append(rig.clock.time()))
    assert rig.slot.pending

    rig.scheduler.run(blocking=False)
    assert fired == []

    rig.clock.sleep(0.1)
    rig.scheduler.run(blocking=False)
    assert fired == [0.1]
    assert not rig.slot.pending


def test_schedule_replaces_pending(rig):
    fired = []
    rig.slot.schedule(0.1, lambda: fired.append("a"))
    rig.slot.schedule(0.1, lambda: fired.append("b"))
    assert len(rig.scheduler.queue) == 1

    rig.clock.sleep(1)
    rig.scheduler.run(blocking=False)
    assert fired == ["b"]


def test_cancel(rig):
    fired = []
    rig.slot.cancel()
    rig.slot.schedule(0.1, lambda: fired.append(1))
    rig.slot.cancel()
    assert not rig.slot.pending
    assert rig.scheduler.empty()

    rig.clock.sleep(1)
    rig.scheduler.run(blocking=False)
    assert fired == []


def test_callback_may_reschedule(rig):
    fired = []

    def again():
        fired.append(rig.clock.time())
        if len(fired) < 3:
            rig.slot.schedule(0.5, again)

    rig.slot.schedule(0.5, again)
    for _ in range(5):
        rig.clock.sleep(0.5)
        rig.scheduler.run(blocking=False)
    assert fired == [0.5, 1.0, 1.5]
    assert not rig.slot.pending
