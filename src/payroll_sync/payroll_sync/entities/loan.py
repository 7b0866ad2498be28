from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import FieldKind as K
from .codec import CONTEXT_SUBJECT, EntityCodec, FieldSpec, monthly_key


@dataclass(frozen=True)
class Loan:
    id: str
    employee_id: str
    date: Optional[date]
    amount: float = 0.0
    type: str = "Personal"
    status: str = "Pending"
    interest_rate: Optional[float] = None
    term: Optional[int] = None
    monthly_payment: Optional[float] = None
    remaining_balance: Optional[float] = None
    next_payment_date: Optional[date] = None
    reason: str = ""


CODEC = EntityCodec(
    name="loan",
    label="loans",
    record_type=Loan,
    fields=(
        FieldSpec("id", "id"),
        FieldSpec("employee_id", "employeeId", context=CONTEXT_SUBJECT),
        FieldSpec("date", "date", K.DATE),
        FieldSpec("amount", "amount", K.FLOAT, default=0.0),
        FieldSpec("type", "type", default="Personal"),
        FieldSpec("status", "status", default="Pending"),
        FieldSpec("interest_rate", "interestRate", K.FLOAT),
        FieldSpec("term", "term", K.INT),
        FieldSpec("monthly_payment", "monthlyPayment", K.FLOAT),
        FieldSpec("remaining_balance", "remainingBalance", K.FLOAT),
        FieldSpec("next_payment_date", "nextPaymentDate", K.DATE),
        FieldSpec("reason", "reason", default=""),
    ),
    collection="loans",
    records_field="loans",
    key_attr="id",
    group_key=monthly_key("employee_id", "date"),
    legacy_columns=(
        "id", "employeeId", "date", "amount", "type", "status", "interestRate",
        "term", "monthlyPayment", "remainingBalance", "nextPaymentDate", "reason",
    ),
)
