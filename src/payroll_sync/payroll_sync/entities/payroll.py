from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import FieldKind as K
from .codec import CONTEXT_SUBJECT, EntityCodec, FieldSpec, monthly_key


@dataclass(frozen=True)
class PayrollSummary:
    id: str
    employee_id: str
    employee_name: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    daily_rate: float = 0.0
    basic_pay: float = 0.0
    overtime: float = 0.0
    gross_pay: float = 0.0
    allowances: float = 0.0
    deductions: Optional[dict] = None
    net_pay: float = 0.0
    payment_date: Optional[date] = None
    days_worked: Optional[float] = None
    absences: Optional[float] = None
    late_minutes: Optional[float] = None
    undertime_minutes: Optional[float] = None
    late_deduction: Optional[float] = None
    undertime_deduction: Optional[float] = None


CODEC = EntityCodec(
    name="payroll",
    label="payrolls",
    record_type=PayrollSummary,
    fields=(
        FieldSpec("id", "id"),
        FieldSpec("employee_name", "employeeName", default=""),
        FieldSpec("employee_id", "employeeId", context=CONTEXT_SUBJECT),
        FieldSpec("start_date", "startDate", K.DATE),
        FieldSpec("end_date", "endDate", K.DATE),
        FieldSpec("daily_rate", "dailyRate", K.FLOAT, default=0.0),
        FieldSpec("basic_pay", "basicPay", K.FLOAT, default=0.0),
        FieldSpec("overtime", "overtime", K.FLOAT, default=0.0),
        FieldSpec("gross_pay", "grossPay", K.FLOAT, default=0.0),
        FieldSpec("allowances", "allowances", K.FLOAT, default=0.0),
        FieldSpec("deductions", "deductions", K.JSON),
        FieldSpec("net_pay", "netPay", K.FLOAT, default=0.0),
        FieldSpec("payment_date", "paymentDate", K.DATE),
        FieldSpec("days_worked", "daysWorked", K.FLOAT),
        FieldSpec("absences", "absences", K.FLOAT),
        FieldSpec("late_minutes", "lateMinutes", K.FLOAT),
        FieldSpec("undertime_minutes", "undertimeMinutes", K.FLOAT),
        FieldSpec("late_deduction", "lateDeduction", K.FLOAT),
        FieldSpec("undertime_deduction", "undertimeDeduction", K.FLOAT),
    ),
    collection="payrolls",
    records_field="payrolls",
    key_attr="id",
    group_key=monthly_key("employee_id", "end_date"),
    legacy_columns=(
        "id", "employeeName", "employeeId", "startDate", "endDate", "dailyRate",
        "basicPay", "overtime", "grossPay", "allowances", "deductions", "netPay",
        "paymentDate", "daysWorked", "absences",
    ),
)
