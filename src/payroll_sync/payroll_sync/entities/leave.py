from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import FieldKind as K
from .codec import CONTEXT_SUBJECT, EntityCodec, FieldSpec, monthly_key


@dataclass(frozen=True)
class Leave:
    id: str
    employee_id: str
    start_date: Optional[date]
    end_date: Optional[date] = None
    type: str = "Vacation"
    status: str = "Pending"
    reason: str = ""


CODEC = EntityCodec(
    name="leave",
    label="leaves",
    record_type=Leave,
    fields=(
        FieldSpec("id", "id"),
        FieldSpec("employee_id", "employeeId", context=CONTEXT_SUBJECT),
        FieldSpec("start_date", "startDate", K.DATE),
        FieldSpec("end_date", "endDate", K.DATE),
        FieldSpec("type", "type", default="Vacation"),
        FieldSpec("status", "status", default="Pending"),
        FieldSpec("reason", "reason", default=""),
    ),
    collection="leaves",
    records_field="leaves",
    key_attr="id",
    group_key=monthly_key("employee_id", "start_date"),
    legacy_columns=("id", "employeeId", "startDate", "endDate", "type", "status", "reason"),
    min_columns=7,
)
