"""Odczyt atrybutów węzła i budowa rekordu `FileRecord`."""

from __future__ import annotations

from datetime import datetime, timezone
import os
from pathlib import Path
from typing import Optional

from fs_metadata.core.models import Classification, FileRecord, LinkType
from .probe import PlatformProbe, default_probe


UNKNOWN_TARGET = "Unknown target"
UNKNOWN_JUNCTION_TARGET = "Unknown junction target"
UNKNOWN_MOUNT_POINT = "Unknown mount point"


def file_extension(name: str) -> str:
    """Rozszerzenie po ostatniej kropce; puste dla plików ukrytych i nazw kończących się kropką."""

    index = name.rfind(".")
    if index <= 0 or index == len(name) - 1:
        return ""
    return name[index + 1 :]


def to_datetime(value: float | None) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


class AttributeExtractor:
    """Zbiera metadane węzła w trybie "best effort".

    Błąd odczytu atrybutów podstawowych (`lstat`, rozmiar) jest przekazywany
    wywołującemu. Brak właściciela, identyfikatora lub znacznika czasu nie
    unieważnia rekordu.
    """

    def __init__(self, probe: PlatformProbe | None = None) -> None:
        self._probe = probe or default_probe()

    def extract(
        self,
        path: Path,
        *,
        depth: int,
        classification: Classification,
        st: os.stat_result | None = None,
    ) -> FileRecord:
        if st is None:
            st = self._probe.lstat(path)
        attributes = self._current_attributes(path, st, classification)

        name = path.name or str(path)
        parent = path.parent
        parent_path = str(parent) if parent != path else ""
        is_directory = classification.is_directory

        return FileRecord(
            name=name,
            parent_path=parent_path,
            full_path=str(path),
            size=0 if is_directory else int(attributes.st_size),
            owner=self._probe.owner(path, attributes),
            extension="" if is_directory else file_extension(name),
            is_directory=is_directory,
            is_hidden=classification.is_hidden,
            depth=depth,
            file_id=self._probe.file_id(attributes),
            link_type=classification.link_type,
            link_target=self.link_target(path, classification.link_type),
            creation_time=to_datetime(self._probe.creation_timestamp(attributes)),
            last_access_time=to_datetime(attributes.st_atime),
            last_modified_time=to_datetime(attributes.st_mtime),
        )

    def link_target(self, path: Path, link_type: LinkType) -> Optional[str]:
        """Cel dowiązania; None wyłącznie dla `LinkType.NONE`."""

        if link_type is LinkType.NONE:
            return None
        try:
            if link_type is LinkType.SYMLINK:
                return self._probe.read_link(path)
            if link_type is LinkType.JUNCTION:
                return self._junction_target(path)
            return self._probe.store_description(path) or UNKNOWN_MOUNT_POINT
        except OSError:
            return UNKNOWN_TARGET

    def _junction_target(self, path: Path) -> str:
        try:
            resolved = self._probe.real_path(path)
        except OSError:
            resolved = None
        if resolved and resolved != str(path):
            return resolved
        return self._probe.store_description(path) or UNKNOWN_JUNCTION_TARGET

    def _current_attributes(
        self,
        path: Path,
        st: os.stat_result,
        classification: Classification,
    ) -> os.stat_result:
        # Świeży odczyt celu; dowiązanie, którego cel jest nieosiągalny, opisuje samo siebie.
        try:
            return self._probe.stat(path)
        except OSError:
            if classification.is_link:
                return st
            raise


__all__ = [
    "AttributeExtractor",
    "UNKNOWN_JUNCTION_TARGET",
    "UNKNOWN_MOUNT_POINT",
    "UNKNOWN_TARGET",
    "file_extension",
    "to_datetime",
]
