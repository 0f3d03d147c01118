"""Interfejs skanera metadanych."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from fs_metadata.core.cancellation import CancellationToken
from fs_metadata.core.models import ScanStats
from fs_metadata.reporting.exporter import RecordSink


class VisitResult(Enum):
    """Decyzja silnika po obsłużeniu węzła."""

    CONTINUE = "continue"
    SKIP_SUBTREE = "skip_subtree"
    TERMINATE = "terminate"


@dataclass(slots=True)
class WalkResult:
    """Wynik przejścia drzewa."""

    total_files: int
    total_directories: int
    cancelled: bool


class MetadataScanner(Protocol):
    """Interfejs dla komponentów przechodzących drzewo katalogów."""

    def scan(
        self,
        root: Path,
        sink: RecordSink,
        *,
        token: CancellationToken,
        stats: ScanStats | None = None,
    ) -> WalkResult:
        """Przekazuje rekordy kolejnych węzłów do `sink` w porządku pre-order."""
