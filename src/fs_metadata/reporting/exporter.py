"""Interfejsy zapisu rekordów metadanych."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Protocol, Sequence

from fs_metadata.core.models import FileRecord


TABLE_NAME = "FilesystemMetadata"

COLUMNS: tuple[str, ...] = (
    "File Name",
    "Path",
    "Full Path",
    "File Size",
    "File Owner",
    "File Extension",
    "Is Directory",
    "Is Hidden",
    "Depth",
    "File ID",
    "Link Type",
    "Link Target",
    "Creation Time",
    "Last Access Time",
    "Last Modified Time",
)

NULLABLE_COLUMNS = frozenset(
    {
        "File Owner",
        "File Extension",
        "File ID",
        "Link Target",
        "Creation Time",
        "Last Access Time",
        "Last Modified Time",
    }
)


class ExportFormat(str, Enum):
    """Formaty zapisu rekordów."""

    CSV = "csv"
    JSON = "json"


class SinkCommitError(RuntimeError):
    """Zbiorczy zapis rekordów do magazynu nie powiódł się."""


class RecordSink(Protocol):
    """Odbiorca strumienia rekordów z jednym zatwierdzeniem na końcu skanu."""

    def add(self, record: FileRecord) -> None:
        """Dopisuje rekord do bufora."""

    def commit(self) -> int:
        """Zapisuje wszystkie zgromadzone rekordy; zwraca ich liczbę."""

    def close(self) -> None:
        """Zwalnia zasoby odbiorcy."""


class RecordExporter(Protocol):
    """Interfejs dla mechanizmów zapisu rekordów do pliku."""

    def export(self, records: Sequence[FileRecord], destination: Path, fmt: ExportFormat) -> Path:
        """Zapisuje rekordy w wybranym formacie i zwraca ścieżkę docelową."""
