"""Entity codecs: one description per record type.

A codec carries everything the generic sync adapter and migrator need to
know about an entity: the record dataclass, how each field is named and
coerced, where records live locally and remotely, and how they are grouped
into documents.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso, to_iso, to_utc
from ..core.enums import FieldKind
from ..core.exceptions import ValidationError
from ..sync.identity import GroupKey, parse_doc_id
from ..sync.transform import to_remote

TRUE_STRINGS = {"true", "1", "yes", "y"}

# Where a field falls back to when a payload omits it.
CONTEXT_SUBJECT = "subject"
CONTEXT_YEAR = "year"
CONTEXT_MONTH = "month"
CONTEXT_RECORD_KEY = "record_key"


@dataclass(frozen=True)
class FieldSpec:
    attr: str
    wire: str
    kind: FieldKind = FieldKind.STR
    context: Optional[str] = None
    in_payload: bool = True
    default: Any = None


def coerce(kind: FieldKind, value: Any, *, wire: str = "value") -> Any:
    """Coerce a payload/CSV value into the record's Python type."""
    if value is None:
        return None
    try:
        if kind == FieldKind.STR:
            return value if isinstance(value, str) else str(value)
        if kind == FieldKind.INT:
            if isinstance(value, str):
                v = value.strip()
                return int(float(v)) if v else None
            return int(value)
        if kind == FieldKind.FLOAT:
            if isinstance(value, str):
                v = value.strip()
                return float(v) if v else None
            return float(value)
        if kind == FieldKind.BOOL:
            if isinstance(value, bool):
                return value
            return str(value).strip().lower() in TRUE_STRINGS
        if kind == FieldKind.DATE:
            if isinstance(value, datetime):
                return value.date()
            if isinstance(value, date):
                return value
            v = str(value).strip()
            return parse_iso(v).date() if v else None
        if kind == FieldKind.DATETIME:
            # Stored as instants; comparing needs one offset.
            if isinstance(value, datetime):
                return to_utc(value)
            if isinstance(value, date):
                return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
            v = str(value).strip()
            return to_utc(parse_iso(v)) if v else None
        if kind == FieldKind.LIST:
            if isinstance(value, (list, tuple)):
                return list(value)
            v = str(value).strip()
            if not v:
                return []
            if v.startswith("["):
                return list(json.loads(v))
            return [p.strip() for p in v.replace("|", ";").split(";") if p.strip()]
        if kind == FieldKind.JSON:
            if isinstance(value, str):
                v = value.strip()
                return json.loads(v) if v else None
            return value
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{wire}: invalid {kind.value} value {value!r}") from exc
    return value


def dump(kind: FieldKind, value: Any) -> Any:
    """Record value -> local (JSON file) payload value."""
    if value is None:
        return None
    if kind == FieldKind.DATETIME and isinstance(value, datetime):
        return to_iso(to_utc(value))
    if kind in (FieldKind.DATE, FieldKind.DATETIME):
        return to_iso(value)
    if kind == FieldKind.LIST:
        return list(value)
    return value


def dump_remote(kind: FieldKind, value: Any) -> Any:
    """Local payload value -> remote value. Only date-tagged fields become timestamps."""
    if value is None:
        return None
    if kind in (FieldKind.DATE, FieldKind.DATETIME):
        return to_remote(coerce(kind, value))
    return to_remote(value, parse_strings=False)


def monthly_key(subject_attr: Optional[str], date_attr: str) -> Callable[[Any], GroupKey]:
    """Group by subject and the month of a date field."""

    def _key(record: Any) -> GroupKey:
        d = getattr(record, date_attr)
        if d is None:
            raise ValidationError(f"{type(record).__name__} {date_attr} is required for grouping")
        subject = str(getattr(record, subject_attr)) if subject_attr else None
        return GroupKey(subject_id=subject, year=d.year, month=d.month)

    return _key


def period_key(subject_attr: Optional[str], year_attr: str = "year", month_attr: str = "month") -> Callable[[Any], GroupKey]:
    """Group by subject and explicit year/month fields."""

    def _key(record: Any) -> GroupKey:
        subject = str(getattr(record, subject_attr)) if subject_attr else None
        return GroupKey(subject_id=subject, year=int(getattr(record, year_attr)), month=int(getattr(record, month_attr)))

    return _key


def subject_key(subject_attr: str) -> Callable[[Any], GroupKey]:
    def _key(record: Any) -> GroupKey:
        return GroupKey(subject_id=str(getattr(record, subject_attr)))

    return _key


def singleton_key(record: Any) -> GroupKey:
    return GroupKey()


@dataclass(frozen=True)
class EntityCodec:
    name: str
    label: str
    record_type: type
    fields: tuple[FieldSpec, ...]
    collection: str
    records_field: str
    key_attr: str
    group_key: Callable[[Any], GroupKey]
    legacy_columns: tuple[str, ...] = ()
    tracked_fields: tuple[str, ...] = ()
    singleton_doc_id: str = "data"
    has_subject: bool = True
    has_period: bool = True
    keep_history: bool = True
    # Positional legacy rows shorter than this are skipped.
    min_columns: int = 1
    # Turns a header-keyed legacy row into wire-named values.
    row_hook: Optional[Callable[[dict[str, str]], dict[str, Any]]] = None
    extra_columns: frozenset[str] = field(default_factory=frozenset)

    @property
    def backup_collection(self) -> str:
        return f"{self.name}_backups"

    @property
    def payload_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.in_payload)

    @property
    def known_columns(self) -> frozenset[str]:
        return frozenset(f.wire for f in self.fields) | self.extra_columns

    def record_key(self, record: Any) -> str:
        return str(getattr(record, self.key_attr))

    def doc_id(self, key: GroupKey) -> str:
        return key.doc_id(self.singleton_doc_id)

    def key_from_document(self, doc_id: str, doc: Mapping[str, Any]) -> GroupKey:
        meta = doc.get("meta") if isinstance(doc, Mapping) else None
        if meta:
            key = GroupKey.from_meta(meta)
            if not key.is_empty or (not self.has_subject and not self.has_period):
                return key
        if doc_id == self.singleton_doc_id:
            return GroupKey()
        try:
            return parse_doc_id(doc_id, has_subject=self.has_subject, has_period=self.has_period)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

    def encode(self, record: Any) -> dict[str, Any]:
        return {f.wire: dump(f.kind, getattr(record, f.attr)) for f in self.payload_fields}

    def decode(self, payload: Mapping[str, Any], *, key: GroupKey = GroupKey(), record_key: Optional[str] = None) -> Any:
        context = {
            CONTEXT_SUBJECT: key.subject_id,
            CONTEXT_YEAR: key.year,
            CONTEXT_MONTH: key.month,
            CONTEXT_RECORD_KEY: record_key,
        }
        values: dict[str, Any] = {}
        for f in self.fields:
            raw = payload.get(f.wire) if f.in_payload else None
            if raw is None and f.context:
                raw = context.get(f.context)
            value = coerce(f.kind, raw, wire=f.wire)
            values[f.attr] = f.default if value is None else value
        return self.record_type(**values)

    def to_remote_payload(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        kinds = {f.wire: f.kind for f in self.payload_fields}
        return {k: dump_remote(kinds.get(k, FieldKind.RAW), v) for k, v in payload.items()}

    def normalize(self, payload: Mapping[str, Any], *, key: GroupKey, record_key: str) -> dict[str, Any]:
        """Local payload form of whatever shape a stored payload arrived in."""
        try:
            return self.encode(self.decode(payload, key=key, record_key=record_key))
        except ValidationError:
            return dict(payload)

    def from_row(self, row: Sequence[str] | Mapping[str, str], *, key: GroupKey = GroupKey()) -> Any:
        """Decode one legacy CSV row, header-keyed (mapping) or positional (sequence)."""
        if isinstance(row, Mapping):
            cleaned = {str(k).strip(): (v.strip() if isinstance(v, str) else v) for k, v in row.items() if k is not None}
            values: dict[str, Any] = self.row_hook(cleaned) if self.row_hook else cleaned
        else:
            values = {col: (cell.strip() if isinstance(cell, str) else cell) for col, cell in zip(self.legacy_columns, row)}
        values = {k: (None if v == "" else v) for k, v in values.items()}
        record_key = None
        key_field = next((f for f in self.fields if f.attr == self.key_attr), None)
        if key_field is not None:
            record_key = values.get(key_field.wire)
        return self.decode(values, key=key, record_key=record_key)

    def looks_like_header(self, row: Sequence[str]) -> bool:
        return bool(row) and row[0].strip() in self.known_columns

    def diff(self, record_key: str, old: Mapping[str, Any], new: Mapping[str, Any]) -> list[dict[str, Any]]:
        fields = self.tracked_fields or tuple(f.wire for f in self.payload_fields)
        return [
            {"day": int(record_key) if str(record_key).isdigit() else record_key, "field": name, "oldValue": old.get(name), "newValue": new.get(name)}
            for name in fields
            if old.get(name) != new.get(name)
        ]
