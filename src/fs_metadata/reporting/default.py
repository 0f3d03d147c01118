"""Domyślny odbiorca rekordów i eksport (CSV/JSON)."""

from __future__ import annotations

import csv
import json
import os
from pathlib import Path
import tempfile
from typing import Dict, List, Sequence

import structlog

from fs_metadata.core.models import FileRecord
from .exporter import COLUMNS, NULLABLE_COLUMNS, TABLE_NAME, ExportFormat, RecordExporter, SinkCommitError


class DefaultRecordExporter(RecordExporter):
    """Eksporter zapisujący rekordy do plików CSV lub JSON.

    Plik docelowy jest podmieniany atomowo: dane trafiają najpierw do pliku
    tymczasowego w tym samym katalogu.
    """

    def export(self, records: Sequence[FileRecord], destination: Path, fmt: ExportFormat) -> Path:
        destination.parent.mkdir(parents=True, exist_ok=True)
        rows = [record.to_row() for record in records]

        fd, temp_name = tempfile.mkstemp(prefix=f".{destination.name}.", dir=destination.parent)
        try:
            # Nazwy spoza UTF-8 (surogaty): CSV dostaje oryginalne bajty, JSON ucieczki \udcXX.
            with os.fdopen(fd, "w", newline="", encoding="utf-8", errors="surrogateescape") as handle:
                if fmt is ExportFormat.JSON:
                    json.dump(self._build_json_payload(rows), handle, indent=2, ensure_ascii=True)
                elif fmt is ExportFormat.CSV:
                    writer = csv.DictWriter(handle, fieldnames=list(COLUMNS))
                    writer.writeheader()
                    writer.writerows(rows)
                else:  # pragma: no cover - obsługa przyszłych formatów
                    raise ValueError(f"Nieobsługiwany format eksportu: {fmt}")
            os.replace(temp_name, destination)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise

        return destination

    @staticmethod
    def _build_json_payload(rows: List[Dict[str, object]]) -> Dict[str, object]:
        return {
            "table": TABLE_NAME,
            "columns": [{"name": name, "nullable": name in NULLABLE_COLUMNS} for name in COLUMNS],
            "total": len(rows),
            "records": rows,
        }


class BufferedRecordSink:
    """Gromadzi rekordy w pamięci i zapisuje je jednym wywołaniem `commit()`."""

    def __init__(
        self,
        destination: Path,
        fmt: ExportFormat = ExportFormat.JSON,
        *,
        exporter: RecordExporter | None = None,
    ) -> None:
        self._destination = destination
        self._format = fmt
        self._exporter = exporter or DefaultRecordExporter()
        self._records: List[FileRecord] = []
        self._committed = False
        self._closed = False
        self._logger = structlog.get_logger(__name__)

    @property
    def destination(self) -> Path:
        return self._destination

    @property
    def records(self) -> Sequence[FileRecord]:
        return tuple(self._records)

    @property
    def committed(self) -> bool:
        return self._committed

    def add(self, record: FileRecord) -> None:
        if self._committed or self._closed:
            raise SinkCommitError("Nie można dodać rekordu po zatwierdzeniu lub zamknięciu odbiorcy")
        self._records.append(record)

    def commit(self) -> int:
        if self._committed:
            raise SinkCommitError("Rekordy zostały już zatwierdzone")
        if self._closed:
            raise SinkCommitError("Odbiorca rekordów został zamknięty")

        # Drugiej próby nie ma, także po błędzie zapisu.
        self._committed = True
        try:
            self._exporter.export(self._records, self._destination, self._format)
        except (OSError, ValueError) as exc:
            raise SinkCommitError(f"Nie udało się zapisać rekordów do {self._destination}: {exc}") from exc

        self._logger.info(
            "records-committed",
            count=len(self._records),
            destination=str(self._destination),
            format=self._format.value,
        )
        return len(self._records)

    def close(self) -> None:
        self._closed = True
        self._records.clear()


__all__ = ["BufferedRecordSink", "DefaultRecordExporter"]
