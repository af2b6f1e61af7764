from BackEnd.core.clock import now_ms
from BackEnd.core.errors import ValidationError
from BackEnd.core.models import ActivityLog, BreastfeedingPayload, ToolKind, SIDES
from BackEnd.core.ticker import Ticker
from BackEnd.services.aggregator import next_side
from BackEnd.services.feedback import pulse_safely
from BackEnd.services.manual_entry import manual_interval
from BackEnd.services.timer_service import TimerService


def _side_payload(side, manual=False):
	return BreastfeedingPayload(side=side, manual=manual)


class BreastfeedingService:
	"""Breastfeeding tool: a live side timer plus quick and manual logs."""

	def __init__(self, store, clock=now_ms, ticker_factory=Ticker, pulse=None):
		if store.tool is not ToolKind.BREASTFEEDING:
			raise ValueError("BreastfeedingService needs a breastfeeding LogStore")
		self.store = store
		self._clock = clock
		self._pulse = pulse
		self.timer = TimerService(store, _side_payload, clock=clock, ticker_factory=ticker_factory, pulse=pulse)

	def next_side(self):
		return next_side(self.store.all())

	def start(self, side=None):
		if side is not None and side not in SIDES:
			raise ValidationError(f"unknown side {side!r}")
		self.timer.start(side)

	def pause(self):
		self.timer.pause()

	def stop(self):
		return self.timer.stop()

	def quick_log(self, side):
		"""Instant log, independent of the timer state."""
		if side not in SIDES:
			raise ValidationError(f"unknown side {side!r}")
		entry = ActivityLog(
			tool=ToolKind.BREASTFEEDING,
			payload=_side_payload(side, manual=True),
			timestamp=self._clock(),
			duration_seconds=0,
			duration_minutes=0,
		)
		self.store.append(entry)
		pulse_safely(self._pulse)
		return entry

	def add_manual(self, start, end, side):
		if side not in SIDES:
			raise ValidationError(f"unknown side {side!r}")
		start_ms, end_ms, seconds, minutes = manual_interval(start, end)
		entry = ActivityLog(
			tool=ToolKind.BREASTFEEDING,
			payload=_side_payload(side, manual=True),
			timestamp=start_ms,
			end_time=end_ms,
			duration_seconds=seconds,
			duration_minutes=minutes,
		)
		self.store.append(entry)
		pulse_safely(self._pulse)
		return entry

	def teardown(self):
		self.timer.teardown()
