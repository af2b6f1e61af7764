import sqlite3

import pytest

from BackEnd.core.clock import from_ms
from BackEnd.core.errors import PersistenceError, ValidationError
from BackEnd.core.models import (
    ActivityLog, BreastfeedingPayload, FeedingPayload, SleepPayload, Subject, ToolKind,
)
from BackEnd.repos import log_repo
from BackEnd.services.log_store import LogStore


def bottle(amount, ts=None, kind="formula", subject_id=None):
    return ActivityLog(tool=ToolKind.BOTTLE, payload=FeedingPayload(amount=amount, type=kind),
                       timestamp=ts, subject_id=subject_id)


def test_append_defaults_timestamp_and_is_visible_immediately(make_store, clock):
    store = make_store("bottle")
    store.append(bottle(120))
    logs = store.all()
    assert len(logs) == 1
    assert logs[0].timestamp == clock.now
    assert logs[0].log_id is not None


def test_all_is_newest_first_even_for_backdated_entries(make_store, clock):
    store = make_store("bottle")
    store.append(bottle(100, ts=clock.now))
    store.append(bottle(50, ts=clock.now - 3600_000))  # back-dated manual entry
    store.append(bottle(70, ts=clock.now + 60_000))
    assert [l.payload.amount for l in store.all()] == [70, 100, 50]
    assert store.latest().payload.amount == 70


def test_equal_timestamps_keep_newest_insertion_first(make_store, clock):
    store = make_store("bottle")
    store.append(bottle(1, ts=clock.now))
    store.append(bottle(2, ts=clock.now))
    assert [l.payload.amount for l in store.all()] == [2, 1]


def test_subject_filter_includes_unscoped_legacy_entries(db_file, clock):
    unscoped = LogStore(ToolKind.BOTTLE, subject=None, db_file=db_file, clock=clock)
    unscoped.append(bottle(10, ts=clock.now - 3000))
    a = LogStore(ToolKind.BOTTLE, subject=Subject("a"), db_file=db_file, clock=clock)
    a.append(bottle(20, ts=clock.now - 2000))
    b = LogStore(ToolKind.BOTTLE, subject=Subject("b"), db_file=db_file, clock=clock)
    b.append(bottle(30, ts=clock.now - 1000))

    a.reload()
    assert [l.payload.amount for l in a.all()] == [20, 10]
    assert [l.payload.amount for l in b.all()] == [30, 10]
    unscoped.reload()
    assert [l.payload.amount for l in unscoped.all()] == [30, 20, 10]


def test_append_stamps_active_subject(make_store, baby):
    store = make_store("bottle", subject=baby)
    store.append(bottle(90))
    assert store.all()[0].subject_id == "baby-1"


def test_set_subject_rescopes_reads(make_store, clock):
    store = make_store("bottle", subject=Subject("a"))
    store.append(bottle(20))
    store.set_subject(Subject("b"))
    assert store.all() == []


def test_round_trip_through_sqlite(db_file, clock, baby):
    store = LogStore(ToolKind.BREASTFEEDING, subject=baby, db_file=db_file, clock=clock)
    ts = 1741593600123
    store.append(ActivityLog(tool=ToolKind.BREASTFEEDING, payload=BreastfeedingPayload(side="R", manual=True),
                             timestamp=ts, duration_seconds=0, duration_minutes=0))
    fresh = LogStore(ToolKind.BREASTFEEDING, subject=baby, db_file=db_file, clock=clock)
    [log] = fresh.all()
    assert log.timestamp == ts
    assert log.payload == BreastfeedingPayload(side="R", manual=True)
    assert log.subject_id == "baby-1"


def test_stores_are_separated_by_tool(db_file, clock):
    LogStore(ToolKind.BOTTLE, db_file=db_file, clock=clock).append(bottle(100))
    assert LogStore(ToolKind.SLEEP, db_file=db_file, clock=clock).all() == []


def test_update_matching_patches_only_identified_entry(make_store, clock):
    store = make_store("sleep")
    first = ActivityLog(tool=ToolKind.SLEEP, payload=SleepPayload(), timestamp=clock.now)
    twin = ActivityLog(tool=ToolKind.SLEEP, payload=SleepPayload(), timestamp=clock.now)
    store.append(first)
    store.append(twin)

    updated = store.update_matching(lambda l: l is first, {"end_time": clock.now + 60_000, "duration_minutes": 1})

    assert updated is first
    assert first.end_time == clock.now + 60_000
    assert twin.end_time is None
    reloaded = make_store("sleep").all()
    assert sorted(l.end_time is None for l in reloaded) == [False, True]


def test_update_matching_without_match_returns_none(make_store):
    store = make_store("sleep")
    assert store.update_matching(lambda l: True, {"end_time": 1}) is None


def test_update_matching_rejects_end_before_start(make_store, clock):
    store = make_store("sleep")
    entry = ActivityLog(tool=ToolKind.SLEEP, payload=SleepPayload(), timestamp=clock.now)
    store.append(entry)
    with pytest.raises(ValidationError):
        store.update_matching(lambda l: l is entry, {"end_time": clock.now})
    assert entry.end_time is None


def test_update_matching_rejects_unknown_fields(make_store, clock):
    store = make_store("sleep")
    store.append(ActivityLog(tool=ToolKind.SLEEP, payload=SleepPayload(), timestamp=clock.now))
    with pytest.raises(ValidationError):
        store.update_matching(lambda l: True, {"subject_id": "other"})


def test_append_rejects_wrong_tool(make_store):
    store = make_store("sleep")
    with pytest.raises(ValidationError):
        store.append(bottle(100))


def test_by_date_returns_only_that_day(make_store, clock):
    store = make_store("bottle")
    store.append(bottle(1, ts=clock.now))
    store.append(bottle(2, ts=clock.now - 24 * 3600_000))
    assert [l.payload.amount for l in store.by_date(from_ms(clock.now).date())] == [1]


def test_persistence_failure_keeps_memory_and_raises(make_store, monkeypatch):
    store = make_store("bottle")

    def broken(*args, **kwargs):
        raise sqlite3.OperationalError("database or disk is full")

    monkeypatch.setattr(log_repo, "insert_log", broken)
    entry = bottle(100)
    with pytest.raises(PersistenceError):
        store.append(entry)
    assert store.all() == [entry]
    assert entry.log_id is None


def test_failed_insert_is_retried_on_next_update(make_store, clock, monkeypatch):
    store = make_store("sleep")
    real_insert = log_repo.insert_log
    def locked(*args, **kwargs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(log_repo, "insert_log", locked)
    entry = ActivityLog(tool=ToolKind.SLEEP, payload=SleepPayload(), timestamp=clock.now)
    with pytest.raises(PersistenceError):
        store.append(entry)

    monkeypatch.setattr(log_repo, "insert_log", real_insert)
    store.update_matching(lambda l: l is entry, {"end_time": clock.now + 1000})
    assert entry.log_id is not None
    [saved] = make_store("sleep").all()
    assert saved.end_time == clock.now + 1000


def test_connect_migrates_legacy_table_without_baby_column(db_file):
    conn = sqlite3.connect(db_file)
    conn.execute(
        "CREATE TABLE activity_logs (id INTEGER PRIMARY KEY AUTOINCREMENT, tool TEXT NOT NULL, "
        "timestamp INTEGER NOT NULL, end_time INTEGER, duration_sec INTEGER, duration_min INTEGER, "
        "payload TEXT NOT NULL DEFAULT '{}', updated_at TEXT)"
    )
    conn.execute("INSERT INTO activity_logs (tool, timestamp, payload) VALUES ('bottle', 1000, '{\"amount\": 60}')")
    conn.commit()
    conn.close()

    store = LogStore(ToolKind.BOTTLE, subject=Subject("x"), db_file=db_file)
    [log] = store.all()
    assert log.subject_id is None
    assert log.payload.amount == 60
