from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from typing import Optional, Union


class ToolKind(str, Enum):
	BREASTFEEDING = "breastfeeding"
	BOTTLE = "bottle"
	SLEEP = "sleep"


SIDES = ("L", "R")
FEEDING_TYPES = ("formula", "breastmilk", "cow", "water")


@dataclass
class FeedingPayload:
	amount: float
	type: str = "formula"
	unit: str = "ml"

	def __post_init__(self):
		if self.type not in FEEDING_TYPES:
			raise ValueError(f"unknown feeding type: {self.type!r}")


@dataclass
class BreastfeedingPayload:
	side: str
	manual: bool = False

	def __post_init__(self):
		if self.side not in SIDES:
			raise ValueError(f"side must be one of {SIDES}, got {self.side!r}")


@dataclass
class SleepPayload:
	type: str = "nap"
	manual: bool = False


Payload = Union[FeedingPayload, BreastfeedingPayload, SleepPayload]

PAYLOAD_TYPES = {
	ToolKind.BOTTLE: FeedingPayload,
	ToolKind.BREASTFEEDING: BreastfeedingPayload,
	ToolKind.SLEEP: SleepPayload,
}


def payload_to_dict(payload):
	return asdict(payload)

def payload_from_dict(tool, data):
	"""Rebuild the payload variant for `tool`, ignoring unknown keys from older rows."""
	cls = PAYLOAD_TYPES[ToolKind(tool)]
	known = {f.name for f in fields(cls)}
	return cls(**{k: v for k, v in (data or {}).items() if k in known})


@dataclass
class Subject:
	"""The tracked baby. Only the id matters to the log engine."""
	id: str
	name: str = ""


@dataclass(eq=False)
class ActivityLog:
	"""One recorded occurrence. Compared by identity, since timestamps may repeat."""
	tool: ToolKind
	payload: Payload
	timestamp: Optional[int] = None
	end_time: Optional[int] = None
	duration_seconds: Optional[int] = None
	duration_minutes: Optional[int] = None
	subject_id: Optional[str] = None
	log_id: Optional[int] = field(default=None, repr=False)

	def __post_init__(self):
		self.tool = ToolKind(self.tool)
		expected = PAYLOAD_TYPES[self.tool]
		if not isinstance(self.payload, expected):
			raise TypeError(f"{self.tool.value} log needs {expected.__name__}, got {type(self.payload).__name__}")

	@property
	def is_open(self):
		return self.tool is ToolKind.SLEEP and self.end_time is None

	@property
	def manual(self):
		return bool(getattr(self.payload, "manual", False))

	def visible_to(self, subject_id):
		"""Unscoped (legacy) entries are visible to every subject."""
		return subject_id is None or self.subject_id is None or self.subject_id == subject_id

	def effective_seconds(self, now=None):
		"""Duration in seconds; open entries run until `now`."""
		if self.duration_seconds is not None:
			return self.duration_seconds
		if self.end_time is not None:
			return (self.end_time - self.timestamp) // 1000
		if now is not None and self.is_open:
			return max(0, (now - self.timestamp) // 1000)
		return 0


PATCHABLE_FIELDS = ("end_time", "duration_seconds", "duration_minutes", "timestamp", "payload")
