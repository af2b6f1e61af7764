import time
from datetime import datetime, date, timedelta

DAY_MS = 24 * 60 * 60 * 1000


def now_ms():
	"""Return current time as epoch milliseconds."""
	return int(time.time() * 1000)

def to_ms(value):
	"""Accept a datetime, a date or epoch ms and return epoch ms."""
	if isinstance(value, datetime):
		return int(value.timestamp() * 1000)
	if isinstance(value, date):
		return int(datetime(value.year, value.month, value.day).timestamp() * 1000)
	return int(value)

def from_ms(ms):
	"""Return local naive datetime for epoch ms."""
	return datetime.fromtimestamp(ms / 1000)

def start_of_day_ms(value):
	"""Epoch ms of local midnight for the day containing `value`."""
	if isinstance(value, datetime):
		d = value.date()
	elif isinstance(value, date):
		d = value
	else:
		d = from_ms(value).date()
	return to_ms(d)

def day_bounds(value):
	"""Return (start_ms, end_ms) of the local calendar day, end exclusive."""
	start = start_of_day_ms(value)
	# next local midnight, so DST days keep their real length
	d = from_ms(start).date() + timedelta(days=1)
	return start, to_ms(d)

def fmt_hms(seconds: int) -> str:
	"""Format seconds as HH:MM:SS."""
	h = seconds // 3600
	m = (seconds % 3600) // 60
	s = seconds % 60
	return f"{h:02}:{m:02}:{s:02}"

def fmt_mmss(seconds: int) -> str:
	"""Format seconds as M:SS, minutes unbounded."""
	return f"{seconds // 60}:{seconds % 60:02}"

def fmt_since(elapsed_ms: int) -> str:
	"""Short "time since" text: '2h 5m' or '12 min'."""
	mins = max(0, int(elapsed_ms)) // 60000
	hours = mins // 60
	if hours > 0:
		return f"{hours}h {mins % 60}m"
	return f"{mins} min"
