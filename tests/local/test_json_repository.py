from __future__ import annotations

import json
from datetime import date, datetime, timezone

import pytest

from src.payroll_sync.payroll_sync.core.exceptions import LocalStoreError
from src.payroll_sync.payroll_sync.entities import attendance, employee, holiday, loan, settings
from src.payroll_sync.payroll_sync.entities.attendance import AttendanceDay
from src.payroll_sync.payroll_sync.entities.employee import Employee
from src.payroll_sync.payroll_sync.entities.holiday import Holiday
from src.payroll_sync.payroll_sync.entities.loan import Loan
from src.payroll_sync.payroll_sync.entities.settings import SettingsSection
from src.payroll_sync.payroll_sync.local.json_repository import JsonFileRepository
from src.payroll_sync.payroll_sync.local.layouts import MonthlyLayout, PeriodLayout, SingleFileLayout
from src.payroll_sync.payroll_sync.sync.identity import GroupKey


def _clock():
    return datetime(2024, 2, 1, 8, 0, tzinfo=timezone.utc)


def _attendance_repo(db):
    return JsonFileRepository(attendance.CODEC, MonthlyLayout(db, "attendances", "attendance"), clock=_clock)


def test_missing_store_loads_as_empty(tmp_path):
    assert _attendance_repo(tmp_path / "SweldoDB").load_all() == []


def test_save_writes_monthly_document(tmp_path):
    db = tmp_path / "SweldoDB"
    repo = _attendance_repo(db)

    repo.save_or_update([AttendanceDay("EMP001", 2024, 1, 1, "09:00", "17:00")], GroupKey("EMP001", 2024, 1))

    path = db / "attendances" / "EMP001" / "2024_1_attendance.json"
    doc = json.loads(path.read_text(encoding="utf-8"))
    assert doc["meta"] == {"subjectId": "EMP001", "year": 2024, "month": 1, "lastModified": "2024-02-01T08:00:00.000Z"}
    assert doc["days"] == {"1": {"timeIn": "09:00", "timeOut": "17:00", "schedule": None}}
    assert not list(path.parent.glob("*.tmp"))


def test_save_or_update_replaces_by_key_and_keeps_others(tmp_path):
    repo = _attendance_repo(tmp_path)
    key = GroupKey("EMP001", 2024, 1)
    repo.save_or_update(
        [AttendanceDay("EMP001", 2024, 1, 1, "09:00", "17:00"), AttendanceDay("EMP001", 2024, 1, 2, "09:00", "17:00")],
        key,
    )

    repo.save_or_update([AttendanceDay("EMP001", 2024, 1, 2, "10:00", "17:00")], key)

    days = {r.day: r for r in repo.load_group(key)}
    assert days[1].time_in == "09:00"
    assert days[2].time_in == "10:00"


def test_load_all_walks_subjects_and_months(tmp_path):
    repo = _attendance_repo(tmp_path)
    repo.save_or_update([AttendanceDay("EMP001", 2024, 1, 1, "09:00", "17:00")], GroupKey("EMP001", 2024, 1))
    repo.save_or_update([AttendanceDay("EMP002", 2024, 2, 4, "08:00", None)], GroupKey("EMP002", 2024, 2))

    records = sorted(repo.load_all(), key=lambda r: r.employee_id)

    assert records == [
        AttendanceDay("EMP001", 2024, 1, 1, "09:00", "17:00"),
        AttendanceDay("EMP002", 2024, 2, 4, "08:00", None),
    ]


def test_backup_and_foreign_files_are_ignored(tmp_path):
    folder = tmp_path / "attendances" / "EMP001"
    folder.mkdir(parents=True)
    (folder / "2024_1_attendance_backup.json").write_text('{"backups": []}', encoding="utf-8")
    (folder / "notes.json").write_text("{}", encoding="utf-8")

    assert _attendance_repo(tmp_path).load_all() == []


def test_malformed_json_raises(tmp_path):
    folder = tmp_path / "attendances" / "EMP001"
    folder.mkdir(parents=True)
    (folder / "2024_1_attendance.json").write_text("{broken", encoding="utf-8")

    with pytest.raises(LocalStoreError):
        _attendance_repo(tmp_path).load_all()


def test_legacy_meta_with_employee_id_is_understood(tmp_path):
    folder = tmp_path / "attendances" / "EMP009"
    folder.mkdir(parents=True)
    doc = {
        "meta": {"employeeId": "EMP009", "year": 2023, "month": 12, "lastModified": "2023-12-31T00:00:00.000Z"},
        "days": {"31": {"timeIn": "07:58", "timeOut": "16:00"}},
    }
    (folder / "2023_12_attendance.json").write_text(json.dumps(doc), encoding="utf-8")

    assert _attendance_repo(tmp_path).load_all() == [AttendanceDay("EMP009", 2023, 12, 31, "07:58", "16:00")]


def test_dates_are_iso_strings_on_disk(tmp_path):
    repo = JsonFileRepository(loan.CODEC, MonthlyLayout(tmp_path, "loans", "loans"), clock=_clock)
    record = Loan(id="L1", employee_id="EMP001", date=date(2024, 1, 15), amount=100.0)

    repo.save_or_update([record], GroupKey("EMP001", 2024, 1))

    doc = json.loads((tmp_path / "loans" / "EMP001" / "2024_1_loans.json").read_text(encoding="utf-8"))
    assert doc["loans"]["L1"]["date"] == "2024-01-15"
    assert repo.load_all() == [record]


def test_period_layout_without_subject(tmp_path):
    repo = JsonFileRepository(holiday.CODEC, PeriodLayout(tmp_path, "holidays", "holidays"), clock=_clock)
    record = Holiday("H1", date(2024, 6, 12), date(2024, 6, 12), "Independence Day", "Regular", 2.0)

    repo.save_or_update([record], GroupKey(None, 2024, 6))

    assert (tmp_path / "holidays" / "2024_6_holidays.json").is_file()
    assert repo.load_all() == [record]


def test_single_file_layout_collects_every_group(tmp_path):
    repo = JsonFileRepository(employee.CODEC, SingleFileLayout(tmp_path, "employees"), clock=_clock)
    a = Employee(id="EMP001", name="Ana", daily_rate=650.0)
    b = Employee(id="EMP002", name="Ben", status="inactive")

    repo.save_or_update([a], GroupKey("EMP001"))
    repo.save_or_update([b], GroupKey("EMP002"))

    doc = json.loads((tmp_path / "employees.json").read_text(encoding="utf-8"))
    assert set(doc["employees"]) == {"EMP001", "EMP002"}
    assert "subjectId" not in doc["meta"]
    assert sorted(repo.load_all(), key=lambda e: e.id) == [a, b]


def test_settings_sections_share_one_file(tmp_path):
    repo = JsonFileRepository(settings.CODEC, SingleFileLayout(tmp_path, "settings"), clock=_clock)

    repo.save_or_update([SettingsSection("app_settings", {"theme": "dark"})], GroupKey("app_settings"))
    repo.save_or_update([SettingsSection("employment_types", {"types": ["regular"]})], GroupKey("employment_types"))

    sections = {s.section: s.values for s in repo.load_all()}
    assert sections == {"app_settings": {"theme": "dark"}, "employment_types": {"types": ["regular"]}}


def test_delete_records(tmp_path):
    repo = _attendance_repo(tmp_path)
    key = GroupKey("EMP001", 2024, 1)
    repo.save_or_update(
        [AttendanceDay("EMP001", 2024, 1, 1, "09:00", "17:00"), AttendanceDay("EMP001", 2024, 1, 2, "09:00", "17:00")],
        key,
    )

    assert repo.delete_records(key, ["2", "7"]) == 1
    assert [r.day for r in repo.load_group(key)] == [1]
    assert repo.delete_records(GroupKey("EMP404", 2024, 1), ["1"]) == 0
