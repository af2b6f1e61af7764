"""Time-to-percentage layout for the 24h timeline strip."""
from dataclasses import dataclass
from typing import Optional
from BackEnd.core.clock import DAY_MS, now_ms, start_of_day_ms, to_ms

ROLLING = '24h'
CALENDAR_DAY = 'day'


@dataclass
class TimeEvent:
	timestamp: int
	duration_seconds: Optional[float] = None
	end_time: Optional[int] = None
	in_progress: bool = False
	label: str = ""
	color: Optional[str] = None


@dataclass(frozen=True)
class TimelineBar:
	left: float
	width: float
	label: str
	color: Optional[str]
	live: bool
	timestamp: int


def events_from_logs(logs, color_fn=None, label_fn=None):
	"""Turn ActivityLogs into TimeEvents, keeping their order."""
	events = []
	for log in logs:
		events.append(TimeEvent(
			timestamp=log.timestamp,
			duration_seconds=log.duration_seconds,
			end_time=log.end_time,
			in_progress=log.is_open,
			label=label_fn(log) if label_fn else "",
			color=color_fn(log) if color_fn else None,
		))
	return events


class TimelineMapper:
	"""Maps event times onto [0, 100] within a bounded window.

	In '24h' mode the window spans `span_ms` and ends `forward_buffer` of the
	span after `now`, so the newest event is not pinned to the right edge. In
	'day' mode the window is the local calendar day of `reference_date`.
	"""

	def __init__(self, now=None, mode=ROLLING, span_ms=DAY_MS, forward_buffer=0.1,
			min_width=1.5, reference_date=None):
		if mode not in (ROLLING, CALENDAR_DAY):
			raise ValueError(f"unknown timeline mode {mode!r}")
		if span_ms <= 0:
			raise ValueError("span must be positive")
		self.now = now_ms() if now is None else to_ms(now)
		self.mode = mode
		self.forward_buffer = forward_buffer
		self.min_width = min_width
		self.reference_date = reference_date
		if mode == CALENDAR_DAY:
			self.span_ms = DAY_MS
			self.window_start = start_of_day_ms(reference_date if reference_date is not None else self.now)
		else:
			self.span_ms = span_ms
			self.window_start = self.now + int(span_ms * forward_buffer) - span_ms
		self.window_end = self.window_start + self.span_ms

	def at(self, now):
		"""Same configuration, recomputed for a new tick."""
		return TimelineMapper(now=now, mode=self.mode, span_ms=self.span_ms,
			forward_buffer=self.forward_buffer, min_width=self.min_width,
			reference_date=self.reference_date)

	def position(self, timestamp):
		p = (to_ms(timestamp) - self.window_start) / self.span_ms * 100
		return max(0.0, min(100.0, p))

	def width(self, duration_seconds):
		w = (duration_seconds or 0) * 1000 / self.span_ms * 100
		return max(self.min_width, w)

	def effective_seconds(self, event):
		if event.in_progress:
			return max(0, (self.now - event.timestamp) / 1000)
		if event.duration_seconds is not None:
			return event.duration_seconds
		if event.end_time is not None:
			return (event.end_time - event.timestamp) / 1000
		return 0

	def visible(self, events):
		return [e for e in events if e.timestamp >= self.window_start]

	def layout(self, events):
		"""Bars in input order; overlapping bars simply stack."""
		return [
			TimelineBar(
				left=self.position(e.timestamp),
				width=self.width(self.effective_seconds(e)),
				label=e.label,
				color=e.color,
				live=e.in_progress,
				timestamp=e.timestamp,
			)
			for e in self.visible(events)
		]

	def ticks(self, step_hours=4):
		"""[(position, hour)]: hours before now in 24h mode, hour of day in day mode."""
		step_ms = step_hours * 3600 * 1000
		marks = []
		if self.mode == CALENDAR_DAY:
			t = self.window_start
			while t <= self.window_end:
				marks.append((self.position(t), (t - self.window_start) // 3600000))
				t += step_ms
			return marks
		hours = 0
		t = self.now
		while t >= self.window_start:
			marks.append((self.position(t), hours))
			hours += step_hours
			t -= step_ms
		return marks
