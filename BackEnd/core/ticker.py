from PySide6.QtCore import QTimer


class Ticker:
	"""Cancellable periodic callback backed by a QTimer.

	Owners stop it on teardown; used as a context manager it is stopped on exit
	no matter how the block ends.
	"""

	def __init__(self, interval_ms, callback):
		self._timer = QTimer()
		self._timer.setInterval(int(interval_ms))
		self._timer.timeout.connect(callback)

	@property
	def interval_ms(self):
		return self._timer.interval()

	@property
	def is_active(self):
		return self._timer.isActive()

	def start(self):
		if not self._timer.isActive():
			self._timer.start()

	def stop(self):
		self._timer.stop()

	def __enter__(self):
		self.start()
		return self

	def __exit__(self, exc_type, exc, tb):
		self.stop()
		return False
