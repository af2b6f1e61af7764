from BackEnd.core.clock import now_ms, from_ms
from BackEnd.core.errors import ValidationError
from BackEnd.core.models import ActivityLog, FeedingPayload, ToolKind, FEEDING_TYPES
from BackEnd.services.aggregator import daily_total, is_milk
from BackEnd.services.feedback import pulse_safely


class FeedingService:
	"""Bottle feedings: volume entries with a milk type."""

	def __init__(self, store, clock=now_ms, pulse=None):
		if store.tool is not ToolKind.BOTTLE:
			raise ValueError("FeedingService needs a bottle LogStore")
		self.store = store
		self._clock = clock
		self._pulse = pulse

	def log_feeding(self, amount, type="formula", unit="ml", timestamp=None):
		if type not in FEEDING_TYPES:
			raise ValidationError(f"unknown feeding type {type!r}")
		if amount is None or amount <= 0:
			raise ValidationError("amount must be positive")
		entry = ActivityLog(
			tool=ToolKind.BOTTLE,
			payload=FeedingPayload(amount=amount, type=type, unit=unit),
			timestamp=timestamp if timestamp is not None else self._clock(),
		)
		self.store.append(entry)
		pulse_safely(self._pulse)
		return entry

	def milk_total_today(self):
		"""Milk volume logged today, water excluded."""
		return daily_total(self.store.all(), from_ms(self._clock()), predicate=is_milk)
