"""Dostęp do atrybutów systemu plików zależny od platformy.

Cały odczyt systemu plików wykonywany przez klasyfikator, ekstraktor i silnik
przechodzi przez `PlatformProbe`. Implementacja jest wybierana raz, przy
starcie (`default_probe`), a testy mogą podstawić własną.
"""

from __future__ import annotations

import os
from pathlib import Path
import stat
from typing import List, Optional, Protocol

import psutil

from fs_metadata.core.models import LinkType


_HIDDEN_ATTRIBUTES = stat.FILE_ATTRIBUTE_HIDDEN | stat.FILE_ATTRIBUTE_SYSTEM


class PlatformProbe(Protocol):
    """Minimalny interfejs odczytu atrybutów węzłów."""

    name: str
    boundary_link_type: LinkType

    def lstat(self, path: Path) -> os.stat_result:
        """Atrybuty węzła bez podążania za dowiązaniem."""

    def stat(self, path: Path) -> os.stat_result:
        """Atrybuty celu dowiązania (lub samego węzła)."""

    def list_directory(self, path: Path) -> List[Path]:
        """Zawartość katalogu posortowana po nazwie."""

    def read_link(self, path: Path) -> str:
        """Dosłowny cel dowiązania symbolicznego."""

    def real_path(self, path: Path) -> str:
        """Ścieżka kanoniczna; zgłasza OSError, gdy nie da się jej ustalić."""

    def owner(self, path: Path, st: os.stat_result) -> Optional[str]:
        """Nazwa właściciela albo None."""

    def file_id(self, st: os.stat_result) -> Optional[str]:
        """Unikalny identyfikator pliku albo None."""

    def has_hidden_attribute(self, st: os.stat_result) -> bool:
        """Czy platforma oznacza węzeł jako ukryty lub systemowy."""

    def is_reparse_boundary(self, path: Path, st: os.stat_result) -> bool:
        """Czy katalog jest punktem reparse zachowującym się jak dowiązanie."""

    def creation_timestamp(self, st: os.stat_result) -> Optional[float]:
        """Czas utworzenia w sekundach epoki albo None."""

    def store_description(self, path: Path) -> Optional[str]:
        """Opis magazynu danych (urządzenie i typ FS) dla punktu montowania."""


class _BaseProbe:
    name = "base"
    boundary_link_type = LinkType.MOUNTPOINT

    def lstat(self, path: Path) -> os.stat_result:
        return os.lstat(path)

    def stat(self, path: Path) -> os.stat_result:
        return os.stat(path)

    def list_directory(self, path: Path) -> List[Path]:
        with os.scandir(path) as entries:
            names = sorted(entry.name for entry in entries)
        return [path / name for name in names]

    def read_link(self, path: Path) -> str:
        return os.readlink(path)

    def real_path(self, path: Path) -> str:
        return str(path.resolve(strict=True))

    def store_description(self, path: Path) -> Optional[str]:
        try:
            target = os.path.normcase(self.real_path(path))
            partitions = psutil.disk_partitions(all=True)
        except (OSError, psutil.Error):
            return None

        for partition in partitions:
            if os.path.normcase(partition.mountpoint) == target:
                return f"{partition.device} ({partition.fstype})"
        return None


class PosixProbe(_BaseProbe):
    """Linux, macOS i pozostałe systemy POSIX."""

    name = "posix"
    boundary_link_type = LinkType.MOUNTPOINT

    def owner(self, path: Path, st: os.stat_result) -> Optional[str]:
        try:
            import pwd

            return pwd.getpwuid(st.st_uid).pw_name
        except (ImportError, KeyError):
            pass
        try:
            return path.owner()
        except (OSError, KeyError, NotImplementedError):
            return None

    def file_id(self, st: os.stat_result) -> Optional[str]:
        if not st.st_ino:
            return None
        return f"(dev={st.st_dev:x},ino={st.st_ino})"

    def has_hidden_attribute(self, st: os.stat_result) -> bool:
        # macOS: flaga chflags "hidden".
        flags = getattr(st, "st_flags", 0) or 0
        return bool(flags & stat.UF_HIDDEN)

    def is_reparse_boundary(self, path: Path, st: os.stat_result) -> bool:
        return False

    def creation_timestamp(self, st: os.stat_result) -> Optional[float]:
        return getattr(st, "st_birthtime", None)


class WindowsProbe(_BaseProbe):
    """Windows: atrybuty DOS, punkty reparse i junctions."""

    name = "windows"
    boundary_link_type = LinkType.JUNCTION

    def owner(self, path: Path, st: os.stat_result) -> Optional[str]:
        try:
            return path.owner()
        except (OSError, NotImplementedError):
            return None

    def file_id(self, st: os.stat_result) -> Optional[str]:
        if not st.st_ino:
            return None
        return f"{st.st_dev:x}:{st.st_ino:x}"

    def has_hidden_attribute(self, st: os.stat_result) -> bool:
        attributes = getattr(st, "st_file_attributes", 0)
        return bool(attributes & _HIDDEN_ATTRIBUTES)

    def is_reparse_boundary(self, path: Path, st: os.stat_result) -> bool:
        if stat.S_ISLNK(st.st_mode):
            try:
                return stat.S_ISDIR(self.stat(path).st_mode)
            except OSError:
                return False

        attributes = getattr(st, "st_file_attributes", 0)
        if not attributes & stat.FILE_ATTRIBUTE_REPARSE_POINT:
            return False
        return getattr(st, "st_reparse_tag", 0) != stat.IO_REPARSE_TAG_SYMLINK

    def creation_timestamp(self, st: os.stat_result) -> Optional[float]:
        birthtime = getattr(st, "st_birthtime", None)
        if birthtime is not None:
            return birthtime
        return st.st_ctime


def default_probe() -> PlatformProbe:
    """Wybiera implementację dla bieżącej platformy."""

    if os.name == "nt":
        return WindowsProbe()
    return PosixProbe()


__all__ = ["PlatformProbe", "PosixProbe", "WindowsProbe", "default_probe"]
