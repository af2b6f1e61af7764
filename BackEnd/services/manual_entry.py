from BackEnd.core.clock import to_ms
from BackEnd.core.errors import ValidationError

def manual_interval(start, end):
	"""Validate a manually entered interval.

	`start` and `end` may be datetimes or epoch ms. Returns
	(start_ms, end_ms, duration_seconds, duration_minutes); raises
	ValidationError when end <= start.
	"""
	start_ms = to_ms(start)
	end_ms = to_ms(end)
	if end_ms <= start_ms:
		raise ValidationError("end time must be after start time")
	span = end_ms - start_ms
	return start_ms, end_ms, span // 1000, span // 60000
