from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import FieldKind as K
from .codec import EntityCodec, FieldSpec, singleton_key


@dataclass(frozen=True)
class Role:
    id: str
    name: str
    pin_code: str = ""
    description: str = ""
    access_codes: Optional[list] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


CODEC = EntityCodec(
    name="role",
    label="roles",
    record_type=Role,
    fields=(
        FieldSpec("id", "id"),
        FieldSpec("name", "name", default=""),
        # Stored already encrypted; never decoded here.
        FieldSpec("pin_code", "pinCode", default=""),
        FieldSpec("description", "description", default=""),
        FieldSpec("access_codes", "accessCodes", K.LIST),
        FieldSpec("created_at", "createdAt", K.DATETIME),
        FieldSpec("updated_at", "updatedAt", K.DATETIME),
    ),
    collection="roles",
    records_field="roles",
    key_attr="id",
    group_key=singleton_key,
    legacy_columns=("id", "name", "pinCode", "description", "accessCodes", "createdAt", "updatedAt"),
    singleton_doc_id="roles_data",
    has_subject=False,
    has_period=False,
)
