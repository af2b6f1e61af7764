import pytest

from BackEnd.core.ticker import Ticker


def test_start_stop(qapp):
    ticker = Ticker(1000, lambda: None)
    assert ticker.interval_ms == 1000
    assert not ticker.is_active
    ticker.start()
    assert ticker.is_active
    ticker.stop()
    assert not ticker.is_active


def test_context_manager_always_stops(qapp):
    ticker = Ticker(60000, lambda: None)
    with pytest.raises(RuntimeError):
        with ticker:
            assert ticker.is_active
            raise RuntimeError("view torn down")
    assert not ticker.is_active
