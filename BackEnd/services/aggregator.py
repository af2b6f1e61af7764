"""Pure read-side aggregates over activity logs.

Nothing here touches a store; every function takes a list of ActivityLog
snapshots and returns plain values. Day boundaries are local calendar days.
"""
import datetime
from dataclasses import dataclass
from BackEnd.core.clock import day_bounds, from_ms, now_ms, to_ms


@dataclass(frozen=True)
class TrendBucket:
	label: str
	value: float
	day: datetime.date


def is_milk(log):
	return getattr(log.payload, "type", None) != "water"


def daily_total(logs, day, field="amount", predicate=None):
	"""Sum `field` of the payload (or the log) over entries starting within `day`."""
	start, end = day_bounds(day)
	total = 0
	for log in logs:
		if not (start <= log.timestamp < end):
			continue
		if predicate is not None and not predicate(log):
			continue
		value = getattr(log.payload, field, None)
		if value is None:
			value = getattr(log, field, None)
		total += value or 0
	return total


def sleep_minutes(logs, start, end):
	"""Minutes of sleep for entries both starting and ending inside [start, end)."""
	total = 0
	for log in logs:
		if log.end_time is None:
			continue
		if start <= log.timestamp < end and start <= log.end_time < end:
			if log.duration_minutes is not None:
				total += log.duration_minutes
			else:
				total += (log.end_time - log.timestamp) // 60000
	return total


def feeding_volume(logs, start, end):
	return sum(
		log.payload.amount for log in logs
		if start <= log.timestamp < end and is_milk(log)
	)


def session_count(logs, start, end):
	return sum(1 for log in logs if start <= log.timestamp < end)


def _last_days(n_days, now):
	today = from_ms(now).date()
	return [today - datetime.timedelta(days=i) for i in range(n_days - 1, -1, -1)]


def trend(logs, n_days, bucket_fn, now=None):
	"""One bucket per calendar day for the last `n_days`, oldest first."""
	now = now_ms() if now is None else to_ms(now)
	buckets = []
	for d in _last_days(n_days, now):
		start, end = day_bounds(d)
		buckets.append(TrendBucket(label=d.strftime("%a"), value=bucket_fn(logs, start, end), day=d))
	return buckets


def trend_scale(buckets, floor):
	"""Axis maximum for a trend chart, never below `floor`."""
	return max([b.value for b in buckets] + [floor])


def day_statuses(logs, n_days=7, now=None):
	"""[(date, 'completed' | 'none')] for the last `n_days`, oldest first."""
	now = now_ms() if now is None else to_ms(now)
	result = []
	for d in _last_days(n_days, now):
		start, end = day_bounds(d)
		hit = any(start <= log.timestamp < end for log in logs)
		result.append((d, 'completed' if hit else 'none'))
	return result


def daily_streak(logs, now=None):
	"""Consecutive days with at least one entry, ending today; 0 if today has none."""
	now = now_ms() if now is None else to_ms(now)
	logged = {from_ms(log.timestamp).date() for log in logs}
	day = from_ms(now).date()
	streak = 0
	while day in logged:
		streak += 1
		day -= datetime.timedelta(days=1)
	return streak


def next_side(logs):
	"""Suggested breastfeeding side: the opposite of the most recent one, 'L' if none."""
	latest = max(logs, key=lambda l: l.timestamp, default=None)
	if latest is None:
		return 'L'
	return 'R' if latest.payload.side == 'L' else 'L'
