from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


def doc_id(subject_id: str, year: int, month: int) -> str:
    """Remote document id for one subject's month, e.g. `EMP001_2024_1`."""
    return f"{subject_id}_{int(year)}_{int(month)}"


@dataclass(frozen=True)
class GroupKey:
    """Grouping of records into one remote document / one local file.

    Any component may be absent: holidays have no subject, employees have no
    month, roles have nothing at all and live in a named singleton document.
    """

    subject_id: Optional[str] = None
    year: Optional[int] = None
    month: Optional[int] = None

    def __post_init__(self) -> None:
        if self.month is not None and not 1 <= int(self.month) <= 12:
            raise ValueError(f"month out of range: {self.month}")

    @property
    def is_empty(self) -> bool:
        return self.subject_id is None and self.year is None and self.month is None

    def doc_id(self, singleton_id: str = "data") -> str:
        parts = [str(p) for p in (self.subject_id, self.year, self.month) if p is not None]
        if not parts:
            return singleton_id
        return "_".join(parts)

    def to_meta(self) -> dict[str, Any]:
        meta: dict[str, Any] = {}
        if self.subject_id is not None:
            meta["subjectId"] = self.subject_id
        if self.year is not None:
            meta["year"] = int(self.year)
        if self.month is not None:
            meta["month"] = int(self.month)
        return meta

    @classmethod
    def from_meta(cls, meta: dict[str, Any] | None) -> "GroupKey":
        meta = meta or {}
        year = meta.get("year")
        month = meta.get("month")
        return cls(
            subject_id=meta.get("subjectId") or meta.get("employeeId"),
            year=int(year) if year is not None else None,
            month=int(month) if month is not None else None,
        )

    def describe(self) -> str:
        """Short label used in progress messages."""
        period = ""
        if self.year is not None and self.month is not None:
            period = f"{self.year}-{self.month}"
        elif self.year is not None:
            period = str(self.year)
        label = " ".join(p for p in (self.subject_id or "", period) if p)
        return label or "all"


def parse_doc_id(value: str, *, has_subject: bool = True, has_period: bool = True) -> GroupKey:
    """Recover a key from a document id built by `GroupKey.doc_id`.

    Subject ids may themselves contain `_`, so the period is taken from the
    right.
    """
    if has_period:
        head, sep, tail = value.rpartition("_")
        head2, sep2, year = head.rpartition("_") if has_subject else ("", "", head)
        try:
            y, m = int(year), int(tail)
        except ValueError:
            raise ValueError(f"Unrecognised document id: {value!r}")
        if not sep or (has_subject and (not sep2 or not head2)):
            raise ValueError(f"Unrecognised document id: {value!r}")
        return GroupKey(subject_id=head2 if has_subject else None, year=y, month=m)
    if has_subject:
        return GroupKey(subject_id=value)
    return GroupKey()
