import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from BackEnd.core.paths import db_path
from BackEnd.core.models import ActivityLog, ToolKind, payload_from_dict, payload_to_dict

SCHEMA_PATH = Path(__file__).parent.parent.parent / "SQL" / "schema.sql"

def _utc_now_iso():
	return datetime.now(timezone.utc).replace(microsecond=0).isoformat()

def connect(dbfile=None):
	"""Open SQLite connection and ensure schema is applied."""
	dbfile = dbfile or db_path()
	conn = sqlite3.connect(dbfile)
	conn.row_factory = sqlite3.Row
	with open(SCHEMA_PATH, encoding="utf-8") as f:
		conn.executescript(f.read())

	# Migration: databases from the single-baby version have no baby_id column
	cur = conn.execute("PRAGMA table_info(activity_logs)")
	cols = {r['name'] for r in cur.fetchall()}
	if 'baby_id' not in cols:
		conn.execute("ALTER TABLE activity_logs ADD COLUMN baby_id TEXT")
	return conn

def _row_to_log(row):
	return ActivityLog(
		tool=row["tool"],
		payload=payload_from_dict(row["tool"], json.loads(row["payload"] or "{}")),
		timestamp=row["timestamp"],
		end_time=row["end_time"],
		duration_seconds=row["duration_sec"],
		duration_minutes=row["duration_min"],
		subject_id=row["baby_id"],
		log_id=row["id"],
	)

def load_logs(tool, dbfile=None):
	"""All rows for a tool kind in insertion order."""
	with connect(dbfile) as conn:
		cur = conn.execute(
			"SELECT * FROM activity_logs WHERE tool=? ORDER BY id ASC", (ToolKind(tool).value,)
		)
		return [_row_to_log(row) for row in cur.fetchall()]

def insert_log(log, dbfile=None):
	"""Insert a log row and return its id."""
	payload = json.dumps(payload_to_dict(log.payload))
	with connect(dbfile) as conn:
		cur = conn.execute(
			"""
			INSERT INTO activity_logs (tool, baby_id, timestamp, end_time, duration_sec, duration_min, payload, updated_at)
			VALUES (?, ?, ?, ?, ?, ?, ?, ?)
			""",
			(log.tool.value, log.subject_id, int(log.timestamp), log.end_time,
			 log.duration_seconds, log.duration_minutes, payload, _utc_now_iso())
		)
		return cur.lastrowid

def update_log(log, dbfile=None):
	"""Write back completion fields of an existing row."""
	payload = json.dumps(payload_to_dict(log.payload))
	with connect(dbfile) as conn:
		conn.execute(
			"""
			UPDATE activity_logs SET timestamp=?, end_time=?, duration_sec=?, duration_min=?, payload=?, updated_at=?
			WHERE id=?
			""",
			(int(log.timestamp), log.end_time, log.duration_seconds, log.duration_minutes,
			 payload, _utc_now_iso(), log.log_id)
		)
