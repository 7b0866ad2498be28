from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import FieldKind as K
from .codec import EntityCodec, FieldSpec, subject_key


@dataclass(frozen=True)
class Employee:
    id: str
    name: str
    position: Optional[str] = None
    daily_rate: Optional[float] = None
    sss: Optional[float] = None
    phil_health: Optional[float] = None
    pag_ibig: Optional[float] = None
    status: str = "active"
    employment_type: Optional[str] = None
    last_payment_period: Optional[dict] = None


CODEC = EntityCodec(
    name="employee",
    label="employees",
    record_type=Employee,
    fields=(
        FieldSpec("id", "id"),
        FieldSpec("name", "name", default=""),
        FieldSpec("position", "position"),
        FieldSpec("daily_rate", "dailyRate", K.FLOAT),
        FieldSpec("sss", "sss", K.FLOAT),
        FieldSpec("phil_health", "philHealth", K.FLOAT),
        FieldSpec("pag_ibig", "pagIbig", K.FLOAT),
        FieldSpec("status", "status", default="active"),
        FieldSpec("employment_type", "employmentType"),
        FieldSpec("last_payment_period", "lastPaymentPeriod", K.JSON),
    ),
    collection="employees",
    records_field="employees",
    key_attr="id",
    group_key=subject_key("id"),
    legacy_columns=(
        "id", "name", "position", "dailyRate", "sss", "philHealth", "pagIbig",
        "status", "employmentType", "lastPaymentPeriod",
    ),
    has_period=False,
)
