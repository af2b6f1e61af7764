import logging
from PySide6.QtCore import QObject, Signal
from BackEnd.core.clock import now_ms
from BackEnd.core.errors import InvalidTransitionError
from BackEnd.core.models import ActivityLog, SleepPayload, ToolKind
from BackEnd.core.ticker import Ticker
from BackEnd.services.feedback import pulse_safely
from BackEnd.services.manual_entry import manual_interval

logger = logging.getLogger(__name__)

AWAKE = 'awake'
ASLEEP = 'asleep'


class SleepService(QObject):
	"""Sleep tool: awake -> asleep -> awake, no pause.

	The open (no end time) entry in the store is the session state, so a
	sleep started before a restart keeps running afterwards.
	"""
	tick = Signal(int)  # emits seconds asleep
	state_changed = Signal(str)  # emits 'awake' or 'asleep'

	def __init__(self, store, clock=now_ms, ticker_factory=Ticker, pulse=None):
		super().__init__()
		if store.tool is not ToolKind.SLEEP:
			raise ValueError("SleepService needs a sleep LogStore")
		self.store = store
		self._clock = clock
		self._pulse = pulse
		self._ticker = ticker_factory(1000, self._on_tick)
		if self.is_sleeping:
			self._ticker.start()

	@property
	def is_sleeping(self):
		return self.store.open_entry() is not None

	@property
	def state(self):
		return ASLEEP if self.is_sleeping else AWAKE

	def elapsed_seconds(self):
		current = self.store.open_entry()
		if current is None:
			return 0
		return max(0, (self._clock() - current.timestamp) // 1000)

	def start_sleep(self):
		if self.store.open_entry() is not None:
			raise InvalidTransitionError("already sleeping")
		entry = ActivityLog(
			tool=ToolKind.SLEEP,
			payload=SleepPayload(type='nap'),
			timestamp=self._clock(),
		)
		try:
			self.store.append(entry)
		finally:
			# a failed save still leaves the entry in memory
			self.sync()
		pulse_safely(self._pulse)
		return entry

	def wake(self):
		current = self.store.open_entry()
		if current is None:
			raise InvalidTransitionError("no sleep in progress")
		# end_time must stay strictly after the start
		end = max(self._clock(), current.timestamp + 1)
		span = end - current.timestamp
		try:
			self.store.update_matching(lambda l: l is current, {
				'end_time': end,
				'duration_seconds': span // 1000,
				'duration_minutes': span // 60000,
			})
		finally:
			self.sync()
		logger.info("Sleep closed after %s min", span // 60000)
		pulse_safely(self._pulse)
		return current

	def toggle(self):
		return self.wake() if self.is_sleeping else self.start_sleep()

	def add_manual(self, start, end):
		start_ms, end_ms, seconds, minutes = manual_interval(start, end)
		entry = ActivityLog(
			tool=ToolKind.SLEEP,
			payload=SleepPayload(type='nap', manual=True),
			timestamp=start_ms,
			end_time=end_ms,
			duration_seconds=seconds,
			duration_minutes=minutes,
		)
		self.store.append(entry)
		pulse_safely(self._pulse)
		return entry

	def sync(self):
		"""Re-align the ticker and listeners with the store, e.g. after switching baby."""
		if self.is_sleeping:
			self._ticker.start()
		else:
			self._ticker.stop()
		self.state_changed.emit(self.state)

	def teardown(self):
		self._ticker.stop()

	def _on_tick(self):
		if not self.is_sleeping:
			self._ticker.stop()
			return
		self.tick.emit(self.elapsed_seconds())
