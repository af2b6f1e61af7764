from datetime import date, datetime

import pytest

from BackEnd.core.clock import DAY_MS, to_ms
from BackEnd.core.models import ActivityLog, SleepPayload, ToolKind
from BackEnd.services.timeline import (
    CALENDAR_DAY, TimeEvent, TimelineMapper, events_from_logs,
)

NOW = to_ms(datetime(2025, 6, 10, 12, 0))
HOUR = 3600_000


@pytest.fixture
def mapper():
    return TimelineMapper(now=NOW)


def test_rolling_window_keeps_forward_buffer(mapper):
    assert mapper.window_end - mapper.window_start == DAY_MS
    assert mapper.window_end == NOW + DAY_MS // 10
    assert mapper.position(NOW) == pytest.approx(90.0)


def test_position_is_clamped_and_monotonic(mapper):
    stamps = [NOW - 100 * DAY_MS, mapper.window_start - 1, mapper.window_start,
              NOW - 5 * HOUR, NOW, mapper.window_end, NOW + 100 * DAY_MS]
    positions = [mapper.position(ts) for ts in stamps]
    assert positions == sorted(positions)
    assert all(0 <= p <= 100 for p in positions)
    assert positions[0] == 0
    assert positions[-1] == 100


def test_width_is_linear_with_minimum(mapper):
    assert mapper.width(0) == 1.5
    assert mapper.width(None) == 1.5
    assert mapper.width(60) == 1.5  # one minute is below the floor
    assert mapper.width(6 * 3600) == pytest.approx(25.0)


def test_events_before_window_are_dropped(mapper):
    events = [
        TimeEvent(timestamp=mapper.window_start - 1, duration_seconds=7200),
        TimeEvent(timestamp=NOW - HOUR, duration_seconds=600, label="L"),
    ]
    bars = mapper.layout(events)
    assert len(bars) == 1
    assert bars[0].label == "L"


def test_layout_keeps_insertion_order_without_lanes(mapper):
    events = [
        TimeEvent(timestamp=NOW - 2 * HOUR, duration_seconds=3600, label="a"),
        TimeEvent(timestamp=NOW - 3 * HOUR, duration_seconds=3 * 3600, label="b"),
    ]
    bars = mapper.layout(events)
    assert [b.label for b in bars] == ["a", "b"]
    assert bars[1].left < bars[0].left < bars[1].left + bars[1].width


def test_in_progress_event_grows_with_each_tick(mapper):
    live = [TimeEvent(timestamp=NOW - HOUR, in_progress=True)]
    first = mapper.layout(live)[0]
    later = mapper.at(NOW + 2 * HOUR).layout(live)[0]
    assert first.live
    assert first.width == pytest.approx(100 / 24)
    assert later.width == pytest.approx(3 * 100 / 24)


def test_end_time_used_when_duration_missing(mapper):
    [bar] = mapper.layout([TimeEvent(timestamp=NOW - 4 * HOUR, end_time=NOW - HOUR)])
    assert bar.width == pytest.approx(12.5)


def test_calendar_day_mode():
    day_mapper = TimelineMapper(now=NOW, mode=CALENDAR_DAY, reference_date=date(2025, 6, 10))
    assert day_mapper.window_start == to_ms(date(2025, 6, 10))
    assert day_mapper.position(to_ms(datetime(2025, 6, 10, 6, 0))) == pytest.approx(25.0)
    assert day_mapper.position(to_ms(datetime(2025, 6, 11, 6, 0))) == 100


def test_ticks_go_back_from_now(mapper):
    ticks = mapper.ticks(4)
    assert [h for _, h in ticks] == [0, 4, 8, 12, 16, 20]
    assert ticks[0][0] == pytest.approx(90.0)


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        TimelineMapper(now=NOW, mode="week")


def test_events_from_logs_marks_open_sleep():
    logs = [
        ActivityLog(tool=ToolKind.SLEEP, payload=SleepPayload(), timestamp=NOW - HOUR),
        ActivityLog(tool=ToolKind.SLEEP, payload=SleepPayload(), timestamp=NOW - 5 * HOUR,
                    end_time=NOW - 4 * HOUR, duration_seconds=3600),
    ]
    events = events_from_logs(logs, color_fn=lambda l: "open" if l.is_open else "done", label_fn=lambda l: "z")
    assert [(e.in_progress, e.color, e.label) for e in events] == [(True, "open", "z"), (False, "done", "z")]
