"""
Cooperative scheduler driven by a fake clock.
"""

import pytest

from engine import FakeClock, Scheduler


def test_callback_fires_only_inside_tick():
    clock = FakeClock()
    sched = Scheduler(clock)
    calls = []
    sched.every(100, lambda: calls.append(clock()))
    clock.advance(250)
    assert calls == []
    assert sched.tick() == 2
    assert calls == [250, 250]


def test_cancel_stops_further_firings():
    clock = FakeClock()
    sched = Scheduler(clock)
    calls = []
    handle = sched.every(50, lambda: calls.append(1))
    clock.advance(50)
    sched.tick()
    handle.cancel()
    handle.cancel()
    clock.advance(500)
    assert sched.tick() == 0
    assert calls == [1]
    assert sched.pending() == []


def test_callback_may_cancel_its_own_handle():
    clock = FakeClock()
    sched = Scheduler(clock)
    calls = []

    def once():
        calls.append(1)
        handle.cancel()

    handle = sched.every(10, once)
    clock.advance(100)
    sched.tick()
    assert calls == [1]


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        Scheduler(FakeClock()).every(0, lambda: None)
