"""Where each entity's documents live under `{db_root}/SweldoDB`.

Three shapes exist: per-subject monthly files
(`<area>/<subject>/{year}_{month}_<suffix>.json`), monthly files without a
subject (`<area>/{year}_{month}_<suffix>.json`) and one file for the whole
collection (`<stem>.json`). Legacy `.csv` files sit next to their JSON
counterparts; backup variants carry a `_backup` suffix.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from ..core.constants import BACKUP_MARKER
from ..sync.identity import GroupKey

FolderErrorCallback = Callable[[Path, OSError], None]


@dataclass(frozen=True)
class LegacyFile:
    path: Path
    # None when the filename does not carry a parseable year/month.
    key: Optional[GroupKey]


class DocumentLayout:
    area_name: str = ""

    def area_path(self) -> Path:
        raise NotImplementedError

    def path_for(self, key: GroupKey) -> Path:
        raise NotImplementedError

    def backup_path_for(self, key: GroupKey) -> Path:
        raise NotImplementedError

    def meta_for(self, key: GroupKey) -> dict[str, Any]:
        return key.to_meta()

    def iter_documents(self) -> Iterator[tuple[GroupKey, Path]]:
        raise NotImplementedError

    def iter_legacy_files(self, on_error: Optional[FolderErrorCallback] = None) -> Iterator[LegacyFile]:
        raise NotImplementedError

    @staticmethod
    def legacy_backup_path(path: Path) -> Path:
        return path.with_name(f"{path.stem}{BACKUP_MARKER}{path.suffix}")


class _PeriodFiles(DocumentLayout):
    def __init__(self, db_path: Path, area: str, suffix: str):
        self._db_path = Path(db_path)
        self.area_name = area
        self._suffix = suffix
        self._name_re = re.compile(rf"^(\d+)_(\d+)_{re.escape(suffix)}\.(csv|json)$")

    def area_path(self) -> Path:
        return self._db_path / self.area_name

    def _folder(self, key: GroupKey) -> Path:
        raise NotImplementedError

    def _file_name(self, key: GroupKey, *, backup: bool = False, ext: str = "json") -> str:
        marker = BACKUP_MARKER if backup else ""
        return f"{int(key.year)}_{int(key.month)}_{self._suffix}{marker}.{ext}"

    def path_for(self, key: GroupKey) -> Path:
        return self._folder(key) / self._file_name(key)

    def backup_path_for(self, key: GroupKey) -> Path:
        return self._folder(key) / self._file_name(key, backup=True)

    def _parse_name(self, name: str, subject_id: Optional[str]) -> Optional[GroupKey]:
        m = self._name_re.match(name)
        if not m:
            return None
        month = int(m.group(2))
        if not 1 <= month <= 12:
            return None
        return GroupKey(subject_id=subject_id, year=int(m.group(1)), month=month)

    def _scan(self, folder: Path, subject_id: Optional[str], ext: str) -> Iterator[tuple[Path, Optional[GroupKey]]]:
        tail = f"_{self._suffix}.{ext}"
        for path in sorted(folder.iterdir()):
            if not path.is_file() or BACKUP_MARKER in path.name or not path.name.endswith(tail):
                continue
            yield path, self._parse_name(path.name, subject_id)

    def _folders(self) -> Iterator[tuple[Path, Optional[str]]]:
        raise NotImplementedError

    def iter_documents(self) -> Iterator[tuple[GroupKey, Path]]:
        if not self.area_path().is_dir():
            return
        for folder, subject_id in self._folders():
            for path, key in self._scan(folder, subject_id, "json"):
                if key is not None:
                    yield key, path

    def iter_legacy_files(self, on_error: Optional[FolderErrorCallback] = None) -> Iterator[LegacyFile]:
        """Legacy files per folder. An unreadable subject folder goes to `on_error` and is skipped."""
        if not self.area_path().is_dir():
            return
        for folder, subject_id in self._folders():
            try:
                found = list(self._scan(folder, subject_id, "csv"))
            except OSError as exc:
                if on_error is None:
                    raise
                on_error(folder, exc)
                continue
            for path, key in found:
                yield LegacyFile(path=path, key=key)


class MonthlyLayout(_PeriodFiles):
    """`<area>/<subject>/{year}_{month}_<suffix>.json`"""

    def _folder(self, key: GroupKey) -> Path:
        return self.area_path() / str(key.subject_id)

    def _folders(self) -> Iterator[tuple[Path, Optional[str]]]:
        for sub in sorted(self.area_path().iterdir()):
            if sub.is_dir():
                yield sub, sub.name


class PeriodLayout(_PeriodFiles):
    """`<area>/{year}_{month}_<suffix>.json`"""

    def _folder(self, key: GroupKey) -> Path:
        return self.area_path()

    def _folders(self) -> Iterator[tuple[Path, Optional[str]]]:
        yield self.area_path(), None


class SingleFileLayout(DocumentLayout):
    """`<stem>.json` holding the whole collection."""

    def __init__(self, db_path: Path, stem: str):
        self._db_path = Path(db_path)
        self._stem = stem
        self.area_name = stem

    def area_path(self) -> Path:
        return self._db_path

    def path_for(self, key: GroupKey) -> Path:
        return self._db_path / f"{self._stem}.json"

    def backup_path_for(self, key: GroupKey) -> Path:
        return self._db_path / f"{self._stem}{BACKUP_MARKER}.json"

    def meta_for(self, key: GroupKey) -> dict[str, Any]:
        return {}

    def iter_documents(self) -> Iterator[tuple[GroupKey, Path]]:
        path = self.path_for(GroupKey())
        if path.is_file():
            yield GroupKey(), path

    def iter_legacy_files(self, on_error: Optional[FolderErrorCallback] = None) -> Iterator[LegacyFile]:
        path = self._db_path / f"{self._stem}.csv"
        if path.is_file():
            yield LegacyFile(path=path, key=GroupKey())
