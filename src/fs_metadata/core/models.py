"""Modele danych używane w rdzeniu skanera."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from threading import Lock
from typing import Dict, Optional


UNKNOWN_OWNER = "Unknown"


class LinkType(str, Enum):
    """Rodzaj dowiązania reprezentowanego przez węzeł."""

    NONE = "NONE"
    SYMLINK = "SYMLINK"
    MOUNTPOINT = "MOUNTPOINT"
    JUNCTION = "JUNCTION"


@dataclass(frozen=True, slots=True)
class Classification:
    """Wynik klasyfikacji węzła: rodzaj, dowiązanie i ukrycie."""

    is_directory: bool
    link_type: LinkType
    is_hidden: bool

    @property
    def is_link(self) -> bool:
        return self.link_type is not LinkType.NONE

    @property
    def traversable(self) -> bool:
        """Czy do katalogu wolno zejść (zwykły katalog, nie dowiązanie)."""

        return self.is_directory and not self.is_link


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Znormalizowane metadane pojedynczego węzła systemu plików.

    Pola opcjonalne (`owner`, `file_id`, `link_target`, znaczniki czasu) mają
    wartość ``None``, gdy platforma nie potrafi ich dostarczyć. Wartości
    zastępcze ("Unknown", pusty napis) pojawiają się dopiero w `to_row()`.
    """

    name: str
    parent_path: str
    full_path: str
    size: int
    owner: Optional[str]
    extension: str
    is_directory: bool
    is_hidden: bool
    depth: int
    file_id: Optional[str]
    link_type: LinkType
    link_target: Optional[str]
    creation_time: Optional[datetime]
    last_access_time: Optional[datetime]
    last_modified_time: Optional[datetime]

    def __post_init__(self) -> None:
        if self.depth < 0:
            raise ValueError(f"Głębokość nie może być ujemna: {self.depth}")
        if (self.link_type is LinkType.NONE) != (self.link_target is None):
            raise ValueError(
                f"Niespójne dowiązanie dla {self.full_path}: {self.link_type.value} -> {self.link_target!r}"
            )
        if self.is_directory and self.size != 0:
            raise ValueError(f"Katalog {self.full_path} musi mieć rozmiar 0")

    def to_row(self) -> Dict[str, object]:
        """Zwraca rekord w kształcie kolumn magazynu (15 pól, stała kolejność)."""

        return {
            "File Name": self.name,
            "Path": self.parent_path,
            "Full Path": self.full_path,
            "File Size": self.size,
            "File Owner": self.owner if self.owner is not None else UNKNOWN_OWNER,
            "File Extension": self.extension,
            "Is Directory": self.is_directory,
            "Is Hidden": self.is_hidden,
            "Depth": self.depth,
            "File ID": self.file_id or "",
            "Link Type": self.link_type.value,
            "Link Target": self.link_target or "",
            "Creation Time": _format_timestamp(self.creation_time),
            "Last Access Time": _format_timestamp(self.last_access_time),
            "Last Modified Time": _format_timestamp(self.last_modified_time),
        }


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class ScanStats:
    """Liczniki skanowania współdzielone z wątkiem raportującym postęp.

    Zapis wykonuje wyłącznie wątek przechodzenia; odczyt (`snapshot`) jest
    dozwolony z dowolnego wątku.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._files = 0
        self._directories = 0

    def add_file(self) -> None:
        with self._lock:
            self._files += 1

    def add_directory(self) -> None:
        with self._lock:
            self._directories += 1

    def snapshot(self) -> tuple[int, int]:
        """Zwraca parę (pliki, katalogi)."""

        with self._lock:
            return self._files, self._directories

    @property
    def files(self) -> int:
        return self.snapshot()[0]

    @property
    def directories(self) -> int:
        return self.snapshot()[1]

    @property
    def total(self) -> int:
        files, directories = self.snapshot()
        return files + directories


@dataclass(slots=True)
class ScanOutcome:
    """Podsumowanie pojedynczego skanowania."""

    root: str
    total_files: int
    total_directories: int
    committed: int
    cancelled: bool
    scan_seconds: float
    commit_seconds: float

    @property
    def total_items(self) -> int:
        return self.total_files + self.total_directories

    @property
    def items_per_second(self) -> float:
        if self.scan_seconds <= 0:
            return float(self.total_items)
        return self.total_items / self.scan_seconds
