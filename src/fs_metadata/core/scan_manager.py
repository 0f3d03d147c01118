"""Zarządzanie pełnym cyklem pojedynczego skanowania."""

from __future__ import annotations

from pathlib import Path
from threading import Event
import time
from typing import Callable

import structlog

from fs_metadata.metadata.scanner import MetadataScanner
from fs_metadata.reporting.access_log import AccessLogWriter
from fs_metadata.reporting.exporter import RecordSink, SinkCommitError
from .cancellation import DEFAULT_SHUTDOWN_TIMEOUT, CancellationController, CancellationToken
from .models import ScanOutcome, ScanStats
from .progress import DEFAULT_PROGRESS_INTERVAL, ProgressReporter


class ScanManager:
    """Orkiestrator skanu: anulowanie, postęp, przejście drzewa i zapis wyników.

    Odbiorca rekordów jest zatwierdzany dokładnie raz, także po przerwaniu
    i po wyjątku zgłoszonym w trakcie przechodzenia drzewa.
    Dziennik błędów, wątek postępu i obsługa sygnału są zwalniane na każdej
    ścieżce wyjścia; błąd zapisu wyników jest zgłaszany dopiero potem.
    """

    def __init__(
        self,
        *,
        scanner: MetadataScanner,
        record_sink: RecordSink,
        error_sink: AccessLogWriter,
        progress_interval: float = DEFAULT_PROGRESS_INTERVAL,
        shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT,
        progress_emitter: Callable[[str], None] | None = None,
        install_signal_handler: bool = True,
        token: CancellationToken | None = None,
    ) -> None:
        self._scanner = scanner
        self._record_sink = record_sink
        self._error_sink = error_sink
        self._progress_interval = progress_interval
        self._shutdown_timeout = shutdown_timeout
        self._progress_emitter = progress_emitter
        self._install_signal_handler = install_signal_handler
        self._token = token or CancellationToken()
        self._completion = Event()
        self._logger = structlog.get_logger(__name__)

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def completion(self) -> Event:
        """Zdarzenie ustawiane po zakończeniu przetwarzania (sukces, przerwanie lub błąd)."""

        return self._completion

    def cancel(self) -> None:
        self._token.cancel()

    def scan(self, root: Path) -> ScanOutcome:
        stats = ScanStats()
        controller = CancellationController(
            self._token,
            self._completion,
            shutdown_timeout=self._shutdown_timeout,
        )
        progress = ProgressReporter(
            stats,
            self._token,
            interval=self._progress_interval,
            emit=self._progress_emitter,
        )

        if self._install_signal_handler:
            controller.arm()
        scan_start = time.perf_counter()
        try:
            progress.start()
            try:
                walk = self._scanner.scan(root, self._record_sink, token=self._token, stats=stats)
            except BaseException as exc:
                if isinstance(exc, KeyboardInterrupt):
                    self._token.cancel()
                self._logger.error("walk-failed-saving-partial-data", root=str(root), error=repr(exc))
                self._commit_partial()
                raise
            finally:
                progress.stop()
            scan_seconds = time.perf_counter() - scan_start
            cancelled = walk.cancelled or self._token.cancelled

            if cancelled:
                self._logger.warning("scan-interrupted-saving-partial-data", root=str(root))
            else:
                self._logger.info("scan-finished-saving-data", root=str(root))

            commit_start = time.perf_counter()
            committed = self._record_sink.commit()
            commit_seconds = time.perf_counter() - commit_start
        finally:
            self._record_sink.close()
            self._error_sink.close(interrupted=self._token.cancelled)
            self._completion.set()
            controller.disarm()

        return ScanOutcome(
            root=str(root),
            total_files=walk.total_files,
            total_directories=walk.total_directories,
            committed=committed,
            cancelled=cancelled,
            scan_seconds=scan_seconds,
            commit_seconds=commit_seconds,
        )

    def _commit_partial(self) -> None:
        # Błąd zapisu nie może przesłonić pierwotnego wyjątku.
        try:
            count = self._record_sink.commit()
        except SinkCommitError as exc:
            self._logger.error("partial-commit-failed", error=str(exc))
        else:
            self._logger.warning("partial-data-saved", count=count)


__all__ = ["ScanManager"]
