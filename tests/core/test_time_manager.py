import time

import pytest

from goap_world.core.time_manager import TimeManager


def test_advance_moves_simulation_clock():
    tm = TimeManager(tick_rate=10.0)
    assert tm.now == 0.0

    tm.advance()
    tm.advance(4)

    assert tm.tick_counter == 5
    assert tm.now == pytest.approx(0.5)


def test_sleep_increments_counter():
    tm = TimeManager(tick_rate=50.0)
    start = time.perf_counter()
    tm.sleep_until_next_tick()
    elapsed = time.perf_counter() - start

    assert tm.tick_counter == 1
    # roughly 20ms; generous upper bound for slow CI
    assert elapsed < 0.5


def test_invalid_tick_rate():
    with pytest.raises(ValueError):
        TimeManager(tick_rate=0)
