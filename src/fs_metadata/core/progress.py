"""Okresowe raportowanie postępu skanowania w osobnym wątku."""

from __future__ import annotations

import threading
from threading import Event
from typing import Callable

import structlog

from .cancellation import CancellationToken
from .models import ScanStats


DEFAULT_PROGRESS_INTERVAL = 5.0

ProgressEmitter = Callable[[str], None]


def format_progress(files: int, directories: int) -> str:
    total = files + directories
    return f"{total} items processed ({directories} dirs, {files} files)"


class ProgressReporter:
    """Timer odczytujący liczniki i emitujący linię statusu co `interval` sekund.

    Zatrzymuje się sam po zauważeniu anulowania albo po `stop()`.
    """

    def __init__(
        self,
        stats: ScanStats,
        token: CancellationToken,
        *,
        interval: float = DEFAULT_PROGRESS_INTERVAL,
        emit: ProgressEmitter | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("Interwał raportowania musi być dodatni")
        self._stats = stats
        self._token = token
        self._interval = interval
        self._logger = structlog.get_logger(__name__)
        self._emit = emit or self._log_progress
        self._stopped = Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="fs-metadata-progress", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 1.0) -> None:
        self._stopped.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def __enter__(self) -> "ProgressReporter":
        self.start()
        return self

    def __exit__(self, *_exc: object) -> None:
        self.stop()

    def _run(self) -> None:
        while not self._stopped.wait(self._interval):
            if self._token.cancelled:
                break
            files, directories = self._stats.snapshot()
            self._emit(format_progress(files, directories))

    def _log_progress(self, message: str) -> None:
        self._logger.info("progress", message=message)


__all__ = ["DEFAULT_PROGRESS_INTERVAL", "ProgressReporter", "format_progress"]
