"""Dziennik błędów dostępu i pominiętych węzłów."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
import sys
from typing import Protocol, TextIO

import structlog


BANNER = "==============================================="


class ErrorSink(Protocol):
    """Odbiorca diagnostyk generowanych w trakcie przechodzenia drzewa."""

    def log_error(self, message: str) -> None:
        """Zapisuje pojedynczą linię z bieżącym znacznikiem czasu."""


class AccessLogWriter(ErrorSink):
    """Zapisuje diagnostyki do pliku, a gdy to niemożliwe, na stderr.

    Każda linia jest opatrzona znacznikiem czasu i od razu opróżniana z bufora.
    `close()` dopisuje baner końcowy i działa dokładnie raz.
    """

    def __init__(self, handle: TextIO | None = None, *, log_path: Path | None = None) -> None:
        self._handle = handle
        self._log_path = log_path
        self._closed = False
        self._logger = structlog.get_logger(__name__)

    @classmethod
    def open(
        cls,
        destination: Path,
        *,
        root: Path,
        max_depth: int,
        skip_hidden: bool,
    ) -> "AccessLogWriter":
        """Otwiera plik dziennika (nadpisując poprzedni) lub przełącza się na konsolę."""

        logger = structlog.get_logger(__name__)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            handle = destination.open("w", encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("access-log-unavailable", path=str(destination), error=str(exc))
            return cls.console()

        writer = cls(handle, log_path=destination)
        writer._write_line("Filesystem scan access errors and skipped files log")
        writer._write_line(f"Scan started at: {_now()}")
        writer._write_line(f"Directory: {root.absolute()}")
        writer._write_line(f"Max depth: {max_depth}")
        writer._write_line(f"Skip hidden: {skip_hidden}")
        writer._write_line(BANNER)
        logger.info("access-log-file", path=str(destination.absolute()))
        return writer

    @classmethod
    def console(cls) -> "AccessLogWriter":
        structlog.get_logger(__name__).info("access-log-console")
        return cls()

    @property
    def using_console(self) -> bool:
        return self._handle is None

    @property
    def log_path(self) -> Path | None:
        return self._log_path

    @property
    def closed(self) -> bool:
        return self._closed

    def log_error(self, message: str) -> None:
        if self._closed:
            self._logger.debug("access-log-closed", message=message)
            return
        self._write_line(f"{_now()} - {message}")

    def close(self, *, interrupted: bool = False) -> None:
        if self._closed:
            return
        self.log_error(BANNER)
        if interrupted:
            self.log_error(f"Scan interrupted by user (Ctrl-C) at: {_now()}")
        else:
            self.log_error(f"Scan completed at: {_now()}")
        self._closed = True
        if self._handle is not None:
            self._handle.close()

    def _write_line(self, line: str) -> None:
        stream = self._handle if self._handle is not None else sys.stderr
        stream.write(line + "\n")
        stream.flush()


def _now() -> str:
    return datetime.now().isoformat()


__all__ = ["AccessLogWriter", "BANNER", "ErrorSink"]
