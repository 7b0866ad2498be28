from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from src.payroll_sync.payroll_sync.core.exceptions import MigrationError
from src.payroll_sync.payroll_sync.entities import attendance, leave, loan
from src.payroll_sync.payroll_sync.local.json_repository import JsonFileRepository
from src.payroll_sync.payroll_sync.local.layouts import MonthlyLayout
from src.payroll_sync.payroll_sync.migration.migrator import CsvToJsonMigrator, migrate_csv_to_json


def _clock():
    return datetime(2024, 5, 1, tzinfo=timezone.utc)


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _attendance_migrator(db):
    return CsvToJsonMigrator(attendance.CODEC, MonthlyLayout(db, "attendances", "attendance"), clock=_clock)


def test_header_csv_becomes_monthly_document(tmp_path):
    db = tmp_path / "SweldoDB"
    _write(
        db / "attendances" / "EMP001" / "2024_1_attendance.csv",
        "day,timeIn,timeOut,scheduleTimeIn,scheduleTimeOut,scheduleDayOfWeek\n"
        "1,09:00,17:00,08:00,17:00,1\n"
        "2,09:10,,,,\n",
    )
    progress = []

    summary = _attendance_migrator(db).migrate_csv_to_json(progress.append)

    doc = json.loads((db / "attendances" / "EMP001" / "2024_1_attendance.json").read_text(encoding="utf-8"))
    assert doc["meta"]["subjectId"] == "EMP001"
    assert doc["meta"]["year"] == 2024 and doc["meta"]["month"] == 1
    assert doc["days"]["1"] == {
        "timeIn": "09:00",
        "timeOut": "17:00",
        "schedule": {"timeIn": "08:00", "timeOut": "17:00", "dayOfWeek": 1},
    }
    assert doc["days"]["2"] == {"timeIn": "09:10", "timeOut": None, "schedule": None}
    assert len(summary.created) == 1
    assert progress[-1] == "Attendance migration finished."
    # legacy file untouched
    assert (db / "attendances" / "EMP001" / "2024_1_attendance.csv").is_file()


def test_migrated_files_load_through_the_repository(tmp_path):
    db = tmp_path / "SweldoDB"
    _write(db / "attendances" / "EMP001" / "2024_2_attendance.csv", "day,timeIn,timeOut\n7,08:00,16:00\n")

    _attendance_migrator(db).migrate_csv_to_json()

    repo = JsonFileRepository(attendance.CODEC, MonthlyLayout(db, "attendances", "attendance"))
    assert repo.load_all() == [attendance.AttendanceDay("EMP001", 2024, 2, 7, "08:00", "16:00")]


def test_second_run_writes_nothing(tmp_path):
    db = tmp_path / "SweldoDB"
    _write(db / "attendances" / "EMP001" / "2024_1_attendance.csv", "day,timeIn,timeOut\n1,09:00,17:00\n")
    migrator = _attendance_migrator(db)
    migrator.migrate_csv_to_json()
    target = db / "attendances" / "EMP001" / "2024_1_attendance.json"
    before = target.read_text(encoding="utf-8")
    progress = []

    summary = migrator.migrate_csv_to_json(progress.append)

    assert summary.created == []
    assert len(summary.skipped) == 1
    assert target.read_text(encoding="utf-8") == before
    assert any("JSON file already exists" in m for m in progress)


def test_empty_file_is_skipped_without_output(tmp_path):
    db = tmp_path / "SweldoDB"
    _write(db / "attendances" / "EMP001" / "2024_3_attendance.csv", "   \n\n")
    progress = []

    summary = _attendance_migrator(db).migrate_csv_to_json(progress.append)

    assert not (db / "attendances" / "EMP001" / "2024_3_attendance.json").exists()
    assert summary.failed == []
    assert any("File is empty" in m for m in progress)


def test_unparseable_names_and_backups_are_not_migrated_as_data(tmp_path):
    db = tmp_path / "SweldoDB"
    folder = db / "attendances" / "EMP001"
    _write(folder / "latest_attendance.csv", "day,timeIn,timeOut\n1,09:00,17:00\n")
    _write(folder / "2024_1_attendance_backup.csv", "timestamp,day,timeIn\n")
    _write(folder / "readme.txt", "hello")
    progress = []

    summary = _attendance_migrator(db).migrate_csv_to_json(progress.append)

    assert summary.created == []
    assert summary.skipped == [str(folder / "latest_attendance.csv")]
    assert sorted(p.name for p in folder.iterdir()) == [
        "2024_1_attendance_backup.csv", "latest_attendance.csv", "readme.txt",
    ]


def test_broken_file_is_reported_and_run_continues(tmp_path):
    db = tmp_path / "SweldoDB"
    good = _write(db / "attendances" / "EMP002" / "2024_1_attendance.csv", "day,timeIn,timeOut\n1,09:00,17:00\n")
    bad = _write(db / "attendances" / "EMP001" / "2024_1_attendance.csv", "day,timeIn,timeOut\n1,09:00,17:00\n")
    bad.write_bytes(b"\xff\xfe\x00bad")
    progress = []

    summary = _attendance_migrator(db).migrate_csv_to_json(progress.append)

    assert summary.failed == [str(bad)]
    assert summary.created == [str(good)]
    assert any(m.startswith("  - Error processing 2024_1_attendance.csv") for m in progress)


def test_missing_area_folder_is_not_an_error(tmp_path):
    progress = []

    summary = _attendance_migrator(tmp_path / "SweldoDB").migrate_csv_to_json(progress.append)

    assert summary.created == [] and summary.failed == []
    assert any("nothing to migrate" in m for m in progress)


def test_positional_rows_and_short_lines(tmp_path):
    db = tmp_path / "SweldoDB"
    _write(
        db / "leaves" / "EMP001" / "2024_4_leaves.csv",
        "LV1,EMP001,2024-04-01,2024-04-03,Vacation,Approved,Family trip\n"
        "LV2,EMP001,2024-04-10\n",
    )
    progress = []

    CsvToJsonMigrator(leave.CODEC, MonthlyLayout(db, "leaves", "leaves"), clock=_clock).migrate_csv_to_json(progress.append)

    doc = json.loads((db / "leaves" / "EMP001" / "2024_4_leaves.json").read_text(encoding="utf-8"))
    assert list(doc["leaves"]) == ["LV1"]
    assert doc["leaves"]["LV1"]["startDate"] == "2024-04-01"
    assert doc["leaves"]["LV1"]["reason"] == "Family trip"
    assert any("Skipping line 2" in m for m in progress)


def test_bad_value_skips_only_that_line(tmp_path):
    db = tmp_path / "SweldoDB"
    _write(
        db / "loans" / "EMP001" / "2024_1_loans.csv",
        "L1,EMP001,2024-01-05,5000,Personal,Active,0.05,12,450,5000,2024-02-05,Tuition\n"
        "L2,EMP001,2024-01-06,lots,Personal,Active,,,,,,\n",
    )

    summary = CsvToJsonMigrator(loan.CODEC, MonthlyLayout(db, "loans", "loans"), clock=_clock).migrate_csv_to_json()

    doc = json.loads((db / "loans" / "EMP001" / "2024_1_loans.json").read_text(encoding="utf-8"))
    assert list(doc["loans"]) == ["L1"]
    assert doc["loans"]["L1"]["term"] == 12
    assert doc["loans"]["L1"]["interestRate"] == 0.05
    assert summary.failed == []


def test_backup_csv_becomes_ledger_json(tmp_path):
    db = tmp_path / "SweldoDB"
    folder = db / "attendances" / "EMP001"
    _write(folder / "2024_1_attendance.csv", "day,timeIn,timeOut\n1,09:00,17:00\n")
    _write(
        folder / "2024_1_attendance_backup.csv",
        "timestamp,day,timeIn,timeOut\n"
        "2024-01-02T10:00:00.000Z,1,08:50,\n"
        "2024-01-02T10:00:00.000Z,2,,17:05\n"
        "2024-01-03T09:00:00.000Z,1,08:55,\n",
    )

    summary = _attendance_migrator(db).migrate_csv_to_json()

    doc = json.loads((folder / "2024_1_attendance_backup.json").read_text(encoding="utf-8"))
    assert doc["subjectId"] == "EMP001" and doc["year"] == 2024 and doc["month"] == 1
    assert [b["timestamp"] for b in doc["backups"]] == ["2024-01-02T10:00:00.000Z", "2024-01-03T09:00:00.000Z"]
    assert doc["backups"][0]["changes"] == [
        {"day": 1, "field": "timeIn", "oldValue": None, "newValue": "08:50"},
        {"day": 2, "field": "timeOut", "oldValue": None, "newValue": "17:05"},
    ]
    assert summary.backups == [str(folder / "2024_1_attendance_backup.csv")]


def test_migrate_every_entity(tmp_path):
    db = tmp_path / "SweldoDB"
    _write(db / "attendances" / "EMP001" / "2024_1_attendance.csv", "day,timeIn,timeOut\n1,09:00,17:00\n")
    _write(db / "holidays" / "2024_12_holidays.csv", "H1,2024-12-25,2024-12-25,Christmas Day,Regular,2\n")
    _write(db / "employees.csv", "id,name,position,dailyRate,status\nEMP001,Ana,Cashier,650,active\n")
    _write(db / "roles.csv", "id,name,pinCode,description,accessCodes,createdAt,updatedAt\nR1,Admin,enc,All,a;b,,\n")
    _write(db / "cashAdvances" / "EMP001" / "2024_1_cashAdvances.csv", "CA1,EMP001,2024-01-10,1500,Medical,Approved,One-time,Unpaid,1500\n")
    progress = []

    results = migrate_csv_to_json(tmp_path, progress.append)

    assert (db / "holidays" / "2024_12_holidays.json").is_file()
    employees = json.loads((db / "employees.json").read_text(encoding="utf-8"))
    assert employees["employees"]["EMP001"]["dailyRate"] == 650.0
    roles = json.loads((db / "roles.json").read_text(encoding="utf-8"))
    assert roles["roles"]["R1"]["accessCodes"] == ["a", "b"]
    advances = json.loads((db / "cashAdvances" / "EMP001" / "2024_1_cashAdvances.json").read_text(encoding="utf-8"))
    assert advances["advances"]["CA1"]["remainingUnpaid"] == 1500.0
    assert "settings" not in results
    assert sum(len(s.created) for s in results.values()) == 5
    assert progress[-1] == "Migration completed."

    again = migrate_csv_to_json(tmp_path)
    assert sum(len(s.created) for s in again.values()) == 0


def _deny_listing(monkeypatch, folder_name):
    real_iterdir = Path.iterdir

    def iterdir(self):
        if self.name == folder_name:
            raise PermissionError(13, "Permission denied", str(self))
        return real_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", iterdir)


def test_unreadable_subject_folder_is_reported_and_others_migrate(tmp_path, monkeypatch):
    db = tmp_path / "SweldoDB"
    _write(db / "attendances" / "EMP001" / "2024_1_attendance.csv", "day,timeIn,timeOut\n1,09:00,17:00\n")
    _write(db / "attendances" / "EMP002" / "2024_1_attendance.csv", "day,timeIn,timeOut\n1,08:00,16:00\n")
    _write(db / "holidays" / "2024_12_holidays.csv", "H1,2024-12-25,2024-12-25,Christmas Day,Regular,2\n")
    _deny_listing(monkeypatch, "EMP001")
    progress = []

    results = migrate_csv_to_json(tmp_path, progress.append)

    assert (db / "attendances" / "EMP002" / "2024_1_attendance.json").is_file()
    assert not (db / "attendances" / "EMP001" / "2024_1_attendance.json").exists()
    assert (db / "holidays" / "2024_12_holidays.json").is_file()
    assert results["attendance"].failed == [str(db / "attendances" / "EMP001")]
    assert any(m.startswith("  - Error reading folder EMP001") for m in progress)
    assert progress[-1] == "Migration completed."


def test_unlistable_area_fails_that_entity_only(tmp_path, monkeypatch):
    db = tmp_path / "SweldoDB"
    _write(db / "attendances" / "EMP001" / "2024_1_attendance.csv", "day,timeIn,timeOut\n1,09:00,17:00\n")
    _write(db / "holidays" / "2024_12_holidays.csv", "H1,2024-12-25,2024-12-25,Christmas Day,Regular,2\n")
    _deny_listing(monkeypatch, "attendances")
    progress = []

    with pytest.raises(MigrationError, match="attendance"):
        migrate_csv_to_json(tmp_path, progress.append)

    assert (db / "holidays" / "2024_12_holidays.json").is_file()
    assert any(m.startswith("Migration failed for attendance") for m in progress)
    assert progress[-1].startswith("Migration failed: attendance")
