import json
import logging
from BackEnd.core.paths import settings_path
from BackEnd.core.models import Subject

logger = logging.getLogger(__name__)

DEFAULTS = {
	"active_baby": None,
	"language": "es",
	"timeline_mode": "24h",
	"forward_buffer": 0.1,
	"min_bar_width": 1.5,
	"trend_days": 7,
	"trend_floor_minutes": 60,
}

def load_settings(path=None):
	"""Read settings.json merged over DEFAULTS. A broken file falls back to defaults."""
	path = path or settings_path()
	settings = dict(DEFAULTS)
	if not path.exists():
		return settings
	try:
		with open(path, "r", encoding="utf-8") as f:
			data = json.load(f)
	except (OSError, ValueError) as e:
		logger.warning("Ignoring unreadable settings file %s: %s", path, e)
		return settings
	if isinstance(data, dict):
		settings.update({k: v for k, v in data.items() if k in DEFAULTS})
	return settings

def save_settings(settings, path=None):
	path = path or settings_path()
	with open(path, "w", encoding="utf-8") as f:
		json.dump({k: settings.get(k, v) for k, v in DEFAULTS.items()}, f, indent=2)

def active_subject(settings):
	"""Subject for the active baby, or None when no baby is selected."""
	baby = settings.get("active_baby")
	if not baby or not baby.get("id"):
		return None
	return Subject(id=str(baby["id"]), name=baby.get("name", ""))
