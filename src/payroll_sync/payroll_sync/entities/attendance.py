from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import FieldKind as K
from .codec import CONTEXT_MONTH, CONTEXT_RECORD_KEY, CONTEXT_SUBJECT, CONTEXT_YEAR, EntityCodec, FieldSpec, period_key


@dataclass(frozen=True)
class AttendanceDay:
    employee_id: str
    year: int
    month: int
    day: int
    time_in: Optional[str] = None
    time_out: Optional[str] = None
    schedule: Optional[dict] = None


def _schedule_from_row(row: dict[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {
        "day": row.get("day"),
        "timeIn": row.get("timeIn") or None,
        "timeOut": row.get("timeOut") or None,
    }
    s_in, s_out, dow = row.get("scheduleTimeIn"), row.get("scheduleTimeOut"), row.get("scheduleDayOfWeek")
    if s_in and s_out and dow:
        values["schedule"] = {"timeIn": s_in, "timeOut": s_out, "dayOfWeek": int(dow)}
    return values


CODEC = EntityCodec(
    name="attendance",
    label="attendance",
    record_type=AttendanceDay,
    fields=(
        FieldSpec("employee_id", "employeeId", context=CONTEXT_SUBJECT, in_payload=False),
        FieldSpec("year", "year", K.INT, context=CONTEXT_YEAR, in_payload=False),
        FieldSpec("month", "month", K.INT, context=CONTEXT_MONTH, in_payload=False),
        FieldSpec("day", "day", K.INT, context=CONTEXT_RECORD_KEY, in_payload=False),
        FieldSpec("time_in", "timeIn"),
        FieldSpec("time_out", "timeOut"),
        FieldSpec("schedule", "schedule", K.JSON),
    ),
    collection="attendances",
    records_field="days",
    key_attr="day",
    group_key=period_key("employee_id"),
    legacy_columns=("day", "timeIn", "timeOut"),
    tracked_fields=("timeIn", "timeOut"),
    row_hook=_schedule_from_row,
    extra_columns=frozenset({"scheduleTimeIn", "scheduleTimeOut", "scheduleDayOfWeek"}),
)
