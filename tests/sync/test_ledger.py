from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from src.payroll_sync.payroll_sync.sync.identity import GroupKey
from src.payroll_sync.payroll_sync.sync.ledger import ChangeLedger
from tests.fakes import InMemoryRemoteStore

KEY = GroupKey("EMP001", 2024, 1)
CHANGE = {"day": 1, "field": "timeIn", "oldValue": "09:00", "newValue": "08:55"}


class Clock:
    def __init__(self):
        self.now = datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


def test_no_changes_means_no_write():
    store = InMemoryRemoteStore()

    assert ChangeLedger(store).append_backup("attendance_backups", KEY, []) is False
    assert store.writes == []


def test_first_change_creates_ledger_document():
    store = InMemoryRemoteStore()
    ledger = ChangeLedger(store, clock=Clock())

    ledger.append_backup("attendance_backups", KEY, [CHANGE])

    doc = store.docs[("attendance_backups", "EMP001_2024_1")]
    assert doc["subjectId"] == "EMP001" and doc["year"] == 2024 and doc["month"] == 1
    assert len(doc["backups"]) == 1
    assert doc["backups"][0]["changes"] == [CHANGE]


def test_appends_without_touching_prior_entries():
    store = InMemoryRemoteStore()
    ledger = ChangeLedger(store, clock=Clock())
    ledger.append_backup("attendance_backups", KEY, [CHANGE])
    first = store.docs[("attendance_backups", "EMP001_2024_1")]["backups"][0]

    second = {"day": 2, "field": "timeOut", "oldValue": None, "newValue": "17:00"}
    ledger.append_backup("attendance_backups", KEY, [second])

    backups = store.docs[("attendance_backups", "EMP001_2024_1")]["backups"]
    assert backups[0] == first
    assert backups[1]["changes"] == [second]
    assert backups[1]["timestamp"] > backups[0]["timestamp"]


def test_retention_keeps_newest_entries():
    store = InMemoryRemoteStore()
    ledger = ChangeLedger(store, clock=Clock(), max_entries=2)

    for value in ("08:01", "08:02", "08:03"):
        ledger.append_backup("attendance_backups", KEY, [{**CHANGE, "newValue": value}])

    backups = store.docs[("attendance_backups", "EMP001_2024_1")]["backups"]
    assert [b["changes"][0]["newValue"] for b in backups] == ["08:02", "08:03"]


def test_zero_max_entries_keeps_everything():
    store = InMemoryRemoteStore()
    ledger = ChangeLedger(store, clock=Clock(), max_entries=0)

    for _ in range(5):
        ledger.append_backup("attendance_backups", KEY, [CHANGE])

    assert len(store.docs[("attendance_backups", "EMP001_2024_1")]["backups"]) == 5


def test_store_failure_is_logged_and_swallowed(caplog):
    store = InMemoryRemoteStore(fail_on={"set": "attendance_backups"})

    with caplog.at_level(logging.WARNING):
        ok = ChangeLedger(store).append_backup("attendance_backups", KEY, [CHANGE])

    assert ok is False
    assert "Backup operation failed" in caplog.text
