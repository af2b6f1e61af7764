import logging
import sqlite3
from BackEnd.core.clock import now_ms, day_bounds
from BackEnd.core.errors import PersistenceError, ValidationError
from BackEnd.core.models import ToolKind, PATCHABLE_FIELDS
from BackEnd.repos import log_repo

logger = logging.getLogger(__name__)

_WRITE_ERRORS = (sqlite3.Error, OSError, TypeError, ValueError)


class LogStore:
	"""Per-tool collection of activity logs, scoped to the active subject.

	The full collection for the tool is held in memory in insertion order and
	mirrored to SQLite. Reads are filtered to the active subject and sorted
	newest first; writes update memory first so they are visible immediately,
	then persist. A failed write raises PersistenceError but keeps the
	in-memory change.
	"""

	def __init__(self, tool, subject=None, db_file=None, clock=now_ms):
		self.tool = ToolKind(tool)
		self.subject = subject
		self.db_file = db_file
		self._clock = clock
		self._entries = []
		self.reload()

	@property
	def subject_id(self):
		return self.subject.id if self.subject is not None else None

	def set_subject(self, subject):
		self.subject = subject

	def reload(self):
		"""Re-read the persisted collection, dropping unsaved entries."""
		try:
			self._entries = log_repo.load_logs(self.tool, self.db_file)
		except (sqlite3.Error, OSError, ValueError) as e:
			logger.exception("Could not load %s logs", self.tool.value)
			raise PersistenceError(f"could not load {self.tool.value} logs: {e}") from e

	def append(self, entry):
		if entry.tool is not self.tool:
			raise ValidationError(f"{entry.tool.value} entry appended to {self.tool.value} store")
		if entry.timestamp is None:
			entry.timestamp = self._clock()
		if entry.subject_id is None:
			entry.subject_id = self.subject_id
		if entry.end_time is not None and entry.end_time <= entry.timestamp:
			raise ValidationError("end time must be after start time")
		self._entries.append(entry)
		self._persist(entry)
		logger.info("Logged %s at %s for baby %s", self.tool.value, entry.timestamp, entry.subject_id or "-")

	def update_matching(self, predicate, patch):
		"""Merge `patch` into the newest entry satisfying `predicate`; return it or None."""
		unknown = set(patch) - set(PATCHABLE_FIELDS)
		if unknown:
			raise ValidationError(f"cannot patch fields: {', '.join(sorted(unknown))}")
		target = next((e for e in self.all() if predicate(e)), None)
		if target is None:
			return None
		start = patch.get("timestamp", target.timestamp)
		end = patch.get("end_time", target.end_time)
		if end is not None and end <= start:
			raise ValidationError("end time must be after start time")
		for key, value in patch.items():
			setattr(target, key, value)
		self._persist(target)
		return target

	def all(self):
		"""Entries for the active subject, newest first; ties keep newest insertion first."""
		sid = self.subject_id
		visible = [e for e in reversed(self._entries) if e.visible_to(sid)]
		return sorted(visible, key=lambda e: e.timestamp, reverse=True)

	def latest(self):
		logs = self.all()
		return logs[0] if logs else None

	def open_entry(self):
		"""The subject's in-progress entry (no end time), if any."""
		return next((e for e in self.all() if e.is_open), None)

	def by_date(self, day):
		start, end = day_bounds(day)
		return [e for e in self.all() if start <= e.timestamp < end]

	def _persist(self, entry):
		try:
			if entry.log_id is None:
				entry.log_id = log_repo.insert_log(entry, self.db_file)
			else:
				log_repo.update_log(entry, self.db_file)
		except _WRITE_ERRORS as e:
			logger.exception("Failed to persist %s log", self.tool.value)
			raise PersistenceError(f"could not save {self.tool.value} log: {e}") from e
