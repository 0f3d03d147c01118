"""Pomocnicze klasy testowe: sztuczna sonda i odbiorcy rekordów."""

from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import Callable, Dict, List, Set

import pytest

from fs_metadata.core.models import FileRecord
from fs_metadata.metadata.probe import PosixProbe


class CollectingSink:
    """Odbiorca rekordów zapamiętujący wszystko w pamięci."""

    def __init__(self, on_add: Callable[[FileRecord], None] | None = None) -> None:
        self.records: List[FileRecord] = []
        self.commits = 0
        self.closed = False
        self._on_add = on_add

    def add(self, record: FileRecord) -> None:
        self.records.append(record)
        if self._on_add is not None:
            self._on_add(record)

    def commit(self) -> int:
        self.commits += 1
        return len(self.records)

    def close(self) -> None:
        self.closed = True

    def names(self) -> List[str]:
        return [record.name for record in self.records]

    def by_name(self, name: str) -> FileRecord:
        return next(record for record in self.records if record.name == name)


class ListErrorSink:
    """Odbiorca diagnostyk zbierający komunikaty bez znaczników czasu."""

    def __init__(self) -> None:
        self.messages: List[str] = []
        self.closed_with: List[bool] = []

    def log_error(self, message: str) -> None:
        self.messages.append(message)

    def close(self, *, interrupted: bool = False) -> None:
        self.closed_with.append(interrupted)


class FakeProbe(PosixProbe):
    """Sonda POSIX z możliwością wstrzykiwania błędów i podmiany urządzeń."""

    name = "fake"

    def __init__(self) -> None:
        self.fail_lstat: Set[Path] = set()
        self.fail_stat: Set[Path] = set()
        self.fail_list: Set[Path] = set()
        self.devices: Dict[Path, int] = {}
        self.owners: Dict[Path, str | None] = {}

    def lstat(self, path: Path) -> os.stat_result:
        if path in self.fail_lstat:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        return self._override_device(path, super().lstat(path))

    def stat(self, path: Path) -> os.stat_result:
        if path in self.fail_stat:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        return self._override_device(path, super().stat(path))

    def list_directory(self, path: Path) -> List[Path]:
        if path in self.fail_list:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        return super().list_directory(path)

    def owner(self, path: Path, st: os.stat_result) -> str | None:
        if path in self.owners:
            return self.owners[path]
        return super().owner(path, st)

    def store_description(self, path: Path) -> str | None:
        if path in self.devices:
            return f"/dev/fake{self.devices[path]} (fakefs)"
        return super().store_description(path)

    def _override_device(self, path: Path, st: os.stat_result) -> os.stat_result:
        if path not in self.devices:
            return st
        values = list(st[:10])
        values[2] = self.devices[path]
        return os.stat_result(values)


requires_symlinks = pytest.mark.skipif(os.name == "nt", reason="dowiązania symboliczne wymagają uprawnień na Windows")
posix_only = pytest.mark.skipif(os.name == "nt", reason="test zależny od semantyki POSIX")
