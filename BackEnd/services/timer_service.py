import logging
from PySide6.QtCore import QObject, Signal
from BackEnd.core.clock import now_ms
from BackEnd.core.errors import InvalidTransitionError, PersistenceError, ValidationError
from BackEnd.core.models import ActivityLog
from BackEnd.core.ticker import Ticker
from BackEnd.services.feedback import pulse_safely

logger = logging.getLogger(__name__)

IDLE = 'idle'
RUNNING = 'running'
PAUSED = 'paused'


class TimerService(QObject):
	"""Live, pausable session committed to a LogStore on stop.

	Elapsed time is always derived from the clock (start reference minus
	accumulated pause), so late or missed ticks never skew the result.
	"""
	tick = Signal(int)  # emits elapsed seconds
	state_changed = Signal(str)  # emits 'idle', 'running', 'paused'
	committed = Signal(object)  # emits the appended ActivityLog

	def __init__(self, store, payload_factory, clock=now_ms, ticker_factory=Ticker, pulse=None):
		super().__init__()
		self.store = store
		self._payload_factory = payload_factory
		self._clock = clock
		self._pulse = pulse
		self._ticker = ticker_factory(1000, self._on_tick)
		self.state = IDLE
		self.variant = None
		self.start_ref = None
		self._paused_ms = 0
		self._paused_at = None

	@property
	def running(self):
		return self.state != IDLE

	@property
	def paused(self):
		return self.state == PAUSED

	def start(self, variant=None):
		"""Start a new session from idle, or resume a paused one."""
		if self.state == RUNNING:
			raise InvalidTransitionError("session already running")
		if self.state == PAUSED:
			if variant is not None and variant != self.variant:
				logger.debug("Ignoring variant %r on resume, session keeps %r", variant, self.variant)
			self._paused_ms += self._clock() - self._paused_at
			self._paused_at = None
		else:
			if variant is None:
				raise ValidationError("choose a variant before starting")
			self.variant = variant
			self.start_ref = self._clock()
			self._paused_ms = 0
			self._paused_at = None
		self.state = RUNNING
		self._ticker.start()
		self.state_changed.emit(RUNNING)

	def pause(self):
		if self.state != RUNNING:
			raise InvalidTransitionError(f"cannot pause while {self.state}")
		self._paused_at = self._clock()
		self._ticker.stop()
		self.state = PAUSED
		self.state_changed.emit(PAUSED)

	def pause_resume(self):
		if self.state == RUNNING:
			self.pause()
		elif self.state == PAUSED:
			self.start()
		else:
			raise InvalidTransitionError("no session to pause")

	def elapsed_seconds(self):
		if self.state == IDLE:
			return 0
		now = self._paused_at if self.state == PAUSED else self._clock()
		return (now - self.start_ref - self._paused_ms) // 1000

	def stop(self):
		"""Commit the session and go back to idle. Returns the committed log or None."""
		if self.state == IDLE:
			raise InvalidTransitionError("no session to stop")
		self._ticker.stop()
		elapsed = self.elapsed_seconds()
		entry = None
		try:
			if elapsed >= 0:
				entry = ActivityLog(
					tool=self.store.tool,
					payload=self._payload_factory(self.variant, manual=False),
					timestamp=self.start_ref,
					duration_seconds=elapsed,
					duration_minutes=elapsed // 60,
				)
				self.store.append(entry)
		except PersistenceError:
			# the store kept the entry in memory, so listeners still get it
			self._reset()
			self.committed.emit(entry)
			raise
		finally:
			if self.state != IDLE:
				self._reset()
		if entry is not None:
			logger.info("Session committed: %s %ss", entry.tool.value, elapsed)
			pulse_safely(self._pulse)
			self.committed.emit(entry)
		return entry

	def teardown(self):
		self._ticker.stop()

	def _reset(self):
		self.state = IDLE
		self.variant = None
		self.start_ref = None
		self._paused_ms = 0
		self._paused_at = None
		self.state_changed.emit(IDLE)

	def _on_tick(self):
		self.tick.emit(self.elapsed_seconds())
