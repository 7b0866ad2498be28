from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import FieldKind as K
from .codec import CONTEXT_RECORD_KEY, EntityCodec, FieldSpec, subject_key


@dataclass(frozen=True)
class SettingsSection:
    section: str
    values: Optional[dict] = None


# One remote document per section (doc id = section name); locally every
# section shares settings.json.
CODEC = EntityCodec(
    name="settings",
    label="settings",
    record_type=SettingsSection,
    fields=(
        FieldSpec("section", "section", context=CONTEXT_RECORD_KEY, in_payload=False),
        FieldSpec("values", "values", K.JSON),
    ),
    collection="settings",
    records_field="settings",
    key_attr="section",
    group_key=subject_key("section"),
    has_period=False,
    keep_history=False,
)
