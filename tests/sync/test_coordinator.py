from __future__ import annotations

import pytest

from src.payroll_sync.payroll_sync.core.enums import SyncDirection, SyncStatus
from src.payroll_sync.payroll_sync.core.exceptions import SyncError, SyncInProgressError, ValidationError
from src.payroll_sync.payroll_sync.sync.activity_log import SyncActivityLog
from src.payroll_sync.payroll_sync.sync.coordinator import SyncCoordinator


class FakeAdapter:
    def __init__(self, *, fail: bool = False, during=None):
        self.fail = fail
        self.during = during
        self.calls = []

    def _run(self, direction, on_progress):
        self.calls.append(direction)
        if self.during:
            self.during()
        if on_progress:
            on_progress(f"{direction} step")
        if self.fail:
            raise SyncError(f"Failed to sync fake {direction} Firestore")

    def sync_to_firestore(self, on_progress=None):
        self._run("to", on_progress)

    def sync_from_firestore(self, on_progress=None):
        self._run("from", on_progress)


def test_states_start_idle():
    coord = SyncCoordinator({"loan": FakeAdapter()})

    assert coord.state("loan", SyncDirection.UPLOAD).status == SyncStatus.IDLE
    assert coord.snapshot()["loan"]["download"]["status"] == "idle"


def test_successful_run(tmp_path):
    log = SyncActivityLog(tmp_path / "log.json")
    coord = SyncCoordinator({"loan": FakeAdapter()}, activity_log=log)
    seen = []

    st = coord.run("loan", SyncDirection.UPLOAD, seen.append)

    assert st.status == SyncStatus.SUCCESS
    assert st.progress == ["to step"] == seen
    assert st.started_at is not None and st.finished_at is not None
    assert [e["status"] for e in log.entries()] == ["success", "running"]


def test_failed_run_records_error_and_reraises(tmp_path):
    log = SyncActivityLog(tmp_path / "log.json")
    coord = SyncCoordinator({"loan": FakeAdapter(fail=True)}, activity_log=log)

    with pytest.raises(SyncError):
        coord.run("loan", SyncDirection.DOWNLOAD)

    st = coord.state("loan", SyncDirection.DOWNLOAD)
    assert st.status == SyncStatus.ERROR
    assert "Failed to sync fake from" in st.error
    assert log.entries()[0]["status"] == "error"


def test_same_run_cannot_overlap():
    holder = {}

    def reenter():
        with pytest.raises(SyncInProgressError):
            holder["coord"].run("loan", SyncDirection.UPLOAD)
        # the other direction is independent
        holder["coord"].run("loan", SyncDirection.DOWNLOAD)

    adapter = FakeAdapter()
    holder["coord"] = SyncCoordinator({"loan": adapter})
    adapter.during = lambda: (setattr(adapter, "during", None), reenter())

    holder["coord"].run("loan", SyncDirection.UPLOAD)

    assert adapter.calls == ["to", "from"]
    assert holder["coord"].state("loan", SyncDirection.UPLOAD).status == SyncStatus.SUCCESS


def test_unknown_entity():
    with pytest.raises(ValidationError):
        SyncCoordinator({}).run("nope", SyncDirection.UPLOAD)


def test_run_all_continues_past_failures():
    ok, bad, ok2 = FakeAdapter(), FakeAdapter(fail=True), FakeAdapter()
    coord = SyncCoordinator({"a": ok, "b": bad, "c": ok2})

    results = coord.run_all(SyncDirection.UPLOAD)

    assert {k: v.status for k, v in results.items()} == {
        "a": SyncStatus.SUCCESS,
        "b": SyncStatus.ERROR,
        "c": SyncStatus.SUCCESS,
    }
    assert ok2.calls == ["to"]


def test_a_run_can_be_repeated_after_it_finishes():
    adapter = FakeAdapter()
    coord = SyncCoordinator({"loan": adapter})

    coord.run("loan", SyncDirection.UPLOAD)
    coord.run("loan", SyncDirection.UPLOAD)

    assert adapter.calls == ["to", "to"]
