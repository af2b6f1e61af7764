class TrackerError(Exception):
	"""Base for recoverable tracker conditions surfaced to the UI."""


class ValidationError(TrackerError):
	"""Input rejected before touching the store (e.g. end <= start)."""


class InvalidTransitionError(TrackerError):
	"""Timer or sleep action not valid in the current state."""


class PersistenceError(TrackerError):
	"""Write to the local database failed; in-memory state was kept."""
