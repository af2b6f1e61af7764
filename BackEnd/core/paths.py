import os
from pathlib import Path

def user_data_dir(app_name="NanApp"):
	"""Return per-user data dir (Windows/macOS/Linux). NANAPP_DATA_DIR overrides."""
	override = os.environ.get("NANAPP_DATA_DIR")
	if override:
		path = Path(override)
	else:
		if os.name == "nt":
			base = os.environ.get("LOCALAPPDATA", os.path.expanduser("~\\AppData\\Local"))
		elif os.name == "posix":
			base = os.environ.get("XDG_DATA_HOME", os.path.expanduser("~/.local/share"))
		else:
			base = os.path.expanduser("~")
		path = Path(base) / app_name
	path.mkdir(parents=True, exist_ok=True)
	return path

def db_path():
	"""Return Path to tracker.db inside user data dir."""
	return user_data_dir() / "tracker.db"

def settings_path():
	"""Return Path to settings.json inside user data dir."""
	return user_data_dir() / "settings.json"
