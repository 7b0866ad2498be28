from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.exceptions import ValidationError
from ..local.layouts import DocumentLayout, MonthlyLayout, PeriodLayout, SingleFileLayout
from . import attendance, cash_advance, compensation, employee, holiday, leave, loan, missing_time, payroll, role, settings, shorts
from .codec import EntityCodec


@dataclass(frozen=True)
class EntityDefinition:
    codec: EntityCodec
    layout: DocumentLayout
    # Legacy CSV migration applies only where a legacy store existed.
    migrate: bool = True

    @property
    def name(self) -> str:
        return self.codec.name


def build_definitions(db_path: Path) -> dict[str, EntityDefinition]:
    """Entity definitions rooted at `{db_root}/SweldoDB`."""
    defs = [
        EntityDefinition(attendance.CODEC, MonthlyLayout(db_path, "attendances", "attendance")),
        EntityDefinition(compensation.CODEC, MonthlyLayout(db_path, "compensations", "compensation")),
        EntityDefinition(employee.CODEC, SingleFileLayout(db_path, "employees")),
        EntityDefinition(holiday.CODEC, PeriodLayout(db_path, "holidays", "holidays")),
        EntityDefinition(leave.CODEC, MonthlyLayout(db_path, "leaves", "leaves")),
        EntityDefinition(loan.CODEC, MonthlyLayout(db_path, "loans", "loans")),
        EntityDefinition(missing_time.CODEC, PeriodLayout(db_path, "missing_time_logs", "missing_times")),
        EntityDefinition(cash_advance.CODEC, MonthlyLayout(db_path, "cashAdvances", "cashAdvances")),
        EntityDefinition(payroll.CODEC, MonthlyLayout(db_path, "payrolls", "payroll")),
        EntityDefinition(role.CODEC, SingleFileLayout(db_path, "roles")),
        EntityDefinition(settings.CODEC, SingleFileLayout(db_path, "settings"), migrate=False),
        EntityDefinition(shorts.CODEC, MonthlyLayout(db_path, "shorts", "shorts")),
    ]
    return {d.name: d for d in defs}


def get_definition(definitions: dict[str, EntityDefinition], name: Optional[str]) -> EntityDefinition:
    d = definitions.get((name or "").strip())
    if d is None:
        raise ValidationError(f"Unknown entity: {name}")
    return d
