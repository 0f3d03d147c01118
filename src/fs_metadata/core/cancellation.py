"""Kooperacyjne anulowanie skanowania i obsługa Ctrl-C."""

from __future__ import annotations

import os
import signal
import threading
from threading import Event
from typing import Callable

import structlog


EXIT_INTERRUPTED = 130
DEFAULT_SHUTDOWN_TIMEOUT = 15.0


class CancellationToken:
    """Sygnał zatrzymania sprawdzany przez silnik w punktach wejścia do węzłów."""

    def __init__(self) -> None:
        self._event = Event()

    def cancel(self) -> bool:
        """Ustawia flagę; zwraca True tylko przy pierwszym wywołaniu."""

        if self._event.is_set():
            return False
        self._event.set()
        return True

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)


class CancellationController:
    """Instaluje obsługę SIGINT i nadzoruje ograniczone czasowo zamykanie.

    Pierwszy sygnał ustawia token, wypisuje komunikat i uruchamia osobny wątek,
    który czeka na zdarzenie `completion` najwyżej `shutdown_timeout` sekund.
    Po przekroczeniu limitu wywoływany jest `on_timeout` (domyślnie kończy
    proces). Kolejne sygnały są ignorowane.
    """

    def __init__(
        self,
        token: CancellationToken,
        completion: Event,
        *,
        shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT,
        on_timeout: Callable[[], None] | None = None,
        announce: Callable[[str], None] | None = None,
    ) -> None:
        self._token = token
        self._completion = completion
        self._shutdown_timeout = shutdown_timeout
        self._on_timeout = on_timeout or _exit_interrupted
        self._announce = announce or _print_notice
        self._logger = structlog.get_logger(__name__)
        self._previous_handler: object = None
        self._armed = False
        self._watchdog: threading.Thread | None = None

    @property
    def watchdog(self) -> threading.Thread | None:
        return self._watchdog

    def arm(self) -> None:
        if self._armed:
            return
        if threading.current_thread() is not threading.main_thread():
            # signal.signal działa wyłącznie w wątku głównym.
            self._logger.debug("sigint-handler-not-installed", thread=threading.current_thread().name)
            return
        self._previous_handler = signal.signal(signal.SIGINT, self._handle_signal)
        self._armed = True

    def disarm(self) -> None:
        if not self._armed:
            return
        signal.signal(signal.SIGINT, self._previous_handler)  # type: ignore[arg-type]
        self._armed = False

    def __enter__(self) -> "CancellationController":
        self.arm()
        return self

    def __exit__(self, *_exc: object) -> None:
        self.disarm()

    def _handle_signal(self, _signum: int, _frame: object) -> None:
        self.trip()

    def trip(self) -> bool:
        """Obsługuje żądanie przerwania; zwraca False dla powtórnych wywołań."""

        if self._completion.is_set() or not self._token.cancel():
            return False

        self._announce(
            "\n=== INTERRUPTED BY USER (Ctrl-C) ===\n"
            "Stopping filesystem scan gracefully...\n"
            "Please wait for current operations to complete and results to be saved.\n"
        )
        self._logger.warning("scan-interrupted")
        self._watchdog = threading.Thread(
            target=self._await_completion,
            name="fs-metadata-shutdown",
            daemon=True,
        )
        self._watchdog.start()
        return True

    def _await_completion(self) -> None:
        if self._completion.wait(self._shutdown_timeout):
            return
        self._logger.warning("shutdown-timeout", timeout=self._shutdown_timeout)
        self._announce("Timeout waiting for graceful shutdown, partial results may be incomplete.\n")
        self._on_timeout()


def _print_notice(message: str) -> None:
    print(message, flush=True)


def _exit_interrupted() -> None:
    os._exit(EXIT_INTERRUPTED)


__all__ = [
    "CancellationController",
    "CancellationToken",
    "DEFAULT_SHUTDOWN_TIMEOUT",
    "EXIT_INTERRUPTED",
]
