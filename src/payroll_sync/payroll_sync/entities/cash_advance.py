from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import FieldKind as K
from .codec import CONTEXT_SUBJECT, EntityCodec, FieldSpec, monthly_key


@dataclass(frozen=True)
class CashAdvance:
    id: str
    employee_id: str
    date: Optional[date]
    amount: float = 0.0
    remaining_unpaid: float = 0.0
    reason: str = ""
    approval_status: str = "Pending"
    status: str = "Unpaid"
    payment_schedule: str = "One-time"
    installment_details: Optional[dict] = None


CODEC = EntityCodec(
    name="cash_advance",
    label="cash advances",
    record_type=CashAdvance,
    fields=(
        FieldSpec("id", "id"),
        FieldSpec("employee_id", "employeeId", context=CONTEXT_SUBJECT),
        FieldSpec("date", "date", K.DATE),
        FieldSpec("amount", "amount", K.FLOAT, default=0.0),
        FieldSpec("remaining_unpaid", "remainingUnpaid", K.FLOAT, default=0.0),
        FieldSpec("reason", "reason", default=""),
        FieldSpec("approval_status", "approvalStatus", default="Pending"),
        FieldSpec("status", "status", default="Unpaid"),
        FieldSpec("payment_schedule", "paymentSchedule", default="One-time"),
        FieldSpec("installment_details", "installmentDetails", K.JSON),
    ),
    collection="cash_advances",
    records_field="advances",
    key_attr="id",
    group_key=monthly_key("employee_id", "date"),
    # Legacy rows put approval/schedule before status and the balance last.
    legacy_columns=(
        "id", "employeeId", "date", "amount", "reason", "approvalStatus",
        "paymentSchedule", "status", "remainingUnpaid",
    ),
)
