from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import FieldKind as K
from .codec import CONTEXT_MONTH, CONTEXT_RECORD_KEY, CONTEXT_SUBJECT, CONTEXT_YEAR, EntityCodec, FieldSpec, period_key


@dataclass(frozen=True)
class Compensation:
    employee_id: str
    year: int
    month: int
    day: int
    day_type: Optional[str] = None
    daily_rate: Optional[float] = None
    hours_worked: Optional[float] = None
    overtime_minutes: Optional[float] = None
    overtime_pay: Optional[float] = None
    undertime_minutes: Optional[float] = None
    undertime_deduction: Optional[float] = None
    late_minutes: Optional[float] = None
    late_deduction: Optional[float] = None
    holiday_bonus: Optional[float] = None
    leave_type: Optional[str] = None
    leave_pay: Optional[float] = None
    gross_pay: Optional[float] = None
    deductions: Optional[float] = None
    net_pay: Optional[float] = None
    manual_override: bool = False
    notes: Optional[str] = None


CODEC = EntityCodec(
    name="compensation",
    label="compensations",
    record_type=Compensation,
    fields=(
        FieldSpec("employee_id", "employeeId", context=CONTEXT_SUBJECT),
        FieldSpec("month", "month", K.INT, context=CONTEXT_MONTH),
        FieldSpec("year", "year", K.INT, context=CONTEXT_YEAR),
        FieldSpec("day", "day", K.INT, context=CONTEXT_RECORD_KEY),
        FieldSpec("day_type", "dayType"),
        FieldSpec("daily_rate", "dailyRate", K.FLOAT),
        FieldSpec("hours_worked", "hoursWorked", K.FLOAT),
        FieldSpec("overtime_minutes", "overtimeMinutes", K.FLOAT),
        FieldSpec("overtime_pay", "overtimePay", K.FLOAT),
        FieldSpec("undertime_minutes", "undertimeMinutes", K.FLOAT),
        FieldSpec("undertime_deduction", "undertimeDeduction", K.FLOAT),
        FieldSpec("late_minutes", "lateMinutes", K.FLOAT),
        FieldSpec("late_deduction", "lateDeduction", K.FLOAT),
        FieldSpec("holiday_bonus", "holidayBonus", K.FLOAT),
        FieldSpec("leave_type", "leaveType"),
        FieldSpec("leave_pay", "leavePay", K.FLOAT),
        FieldSpec("gross_pay", "grossPay", K.FLOAT),
        FieldSpec("deductions", "deductions", K.FLOAT),
        FieldSpec("net_pay", "netPay", K.FLOAT),
        FieldSpec("manual_override", "manualOverride", K.BOOL, default=False),
        FieldSpec("notes", "notes"),
    ),
    collection="compensations",
    records_field="days",
    key_attr="day",
    group_key=period_key("employee_id"),
    legacy_columns=(
        "employeeId", "month", "year", "day", "dayType", "dailyRate", "hoursWorked",
        "overtimeMinutes", "overtimePay", "undertimeMinutes", "undertimeDeduction",
        "lateMinutes", "lateDeduction", "holidayBonus", "leaveType", "leavePay",
        "grossPay", "deductions", "netPay", "manualOverride", "notes",
    ),
)
