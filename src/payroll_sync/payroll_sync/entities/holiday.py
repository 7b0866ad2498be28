from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import FieldKind as K
from .codec import EntityCodec, FieldSpec, monthly_key


@dataclass(frozen=True)
class Holiday:
    id: str
    start_date: Optional[date]
    end_date: Optional[date] = None
    name: str = ""
    type: str = "Regular"
    multiplier: float = 1.0


CODEC = EntityCodec(
    name="holiday",
    label="holidays",
    record_type=Holiday,
    fields=(
        FieldSpec("id", "id"),
        FieldSpec("start_date", "startDate", K.DATE),
        FieldSpec("end_date", "endDate", K.DATE),
        FieldSpec("name", "name", default=""),
        FieldSpec("type", "type", default="Regular"),
        FieldSpec("multiplier", "multiplier", K.FLOAT, default=1.0),
    ),
    collection="holidays",
    records_field="holidays",
    key_attr="id",
    group_key=monthly_key(None, "start_date"),
    legacy_columns=("id", "startDate", "endDate", "name", "type", "multiplier"),
    has_subject=False,
)
