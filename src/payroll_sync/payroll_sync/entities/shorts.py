from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import FieldKind as K
from .codec import CONTEXT_SUBJECT, EntityCodec, FieldSpec, monthly_key


@dataclass(frozen=True)
class Short:
    id: str
    employee_id: str
    date: Optional[date]
    amount: float = 0.0
    remaining_unpaid: float = 0.0
    reason: str = ""
    status: str = "Unpaid"
    type: str = "Short"


CODEC = EntityCodec(
    name="shorts",
    label="shorts",
    record_type=Short,
    fields=(
        FieldSpec("id", "id"),
        FieldSpec("employee_id", "employeeId", context=CONTEXT_SUBJECT),
        FieldSpec("date", "date", K.DATE),
        FieldSpec("amount", "amount", K.FLOAT, default=0.0),
        FieldSpec("remaining_unpaid", "remainingUnpaid", K.FLOAT, default=0.0),
        FieldSpec("reason", "reason", default=""),
        FieldSpec("status", "status", default="Unpaid"),
        FieldSpec("type", "type", default="Short"),
    ),
    collection="shorts",
    records_field="shorts",
    key_attr="id",
    group_key=monthly_key("employee_id", "date"),
    legacy_columns=("id", "employeeId", "date", "amount", "remainingUnpaid", "reason", "status", "type"),
)
