from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import FieldKind as K
from .codec import CONTEXT_MONTH, CONTEXT_YEAR, EntityCodec, FieldSpec, period_key


@dataclass(frozen=True)
class MissingTimeLog:
    id: str
    employee_id: str
    employee_name: str
    day: int
    month: int
    year: int
    missing_type: str = "timeIn"
    employment_type: Optional[str] = None
    created_at: Optional[datetime] = None


CODEC = EntityCodec(
    name="missing_time",
    label="missing time logs",
    record_type=MissingTimeLog,
    fields=(
        FieldSpec("id", "id"),
        FieldSpec("employee_id", "employeeId"),
        FieldSpec("employee_name", "employeeName", default=""),
        FieldSpec("day", "day", K.INT),
        FieldSpec("month", "month", K.INT, context=CONTEXT_MONTH),
        FieldSpec("year", "year", K.INT, context=CONTEXT_YEAR),
        FieldSpec("missing_type", "missingType", default="timeIn"),
        FieldSpec("employment_type", "employmentType"),
        FieldSpec("created_at", "createdAt", K.DATETIME),
    ),
    collection="missing_time_logs",
    records_field="logs",
    key_attr="id",
    group_key=period_key(None),
    legacy_columns=(
        "id", "employeeId", "employeeName", "day", "month", "year",
        "missingType", "employmentType", "createdAt",
    ),
    has_subject=False,
)
