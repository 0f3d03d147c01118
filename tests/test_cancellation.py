"""Testy anulowania i ograniczonego czasowo zamykania."""

from __future__ import annotations

import signal
import threading

from fs_metadata.core.cancellation import CancellationController, CancellationToken


def _controller(
    *,
    shutdown_timeout: float,
    completion: threading.Event | None = None,
) -> tuple[CancellationController, CancellationToken, threading.Event, list[str], threading.Event]:
    token = CancellationToken()
    completion = completion or threading.Event()
    notices: list[str] = []
    timed_out = threading.Event()
    controller = CancellationController(
        token,
        completion,
        shutdown_timeout=shutdown_timeout,
        on_timeout=timed_out.set,
        announce=notices.append,
    )
    return controller, token, completion, notices, timed_out


def test_token_cancel_reports_first_call_only() -> None:
    token = CancellationToken()

    assert token.cancelled is False
    assert token.cancel() is True
    assert token.cancel() is False
    assert token.cancelled is True
    assert token.wait(0) is True


def test_trip_is_idempotent() -> None:
    controller, token, completion, notices, _timed_out = _controller(shutdown_timeout=5.0)

    assert controller.trip() is True
    assert controller.trip() is False
    assert token.cancelled is True
    assert len(notices) == 1
    assert "=== INTERRUPTED BY USER (Ctrl-C) ===" in notices[0]

    completion.set()
    controller.watchdog.join(2.0)


def test_watchdog_fires_when_shutdown_exceeds_timeout() -> None:
    controller, _token, _completion, notices, timed_out = _controller(shutdown_timeout=0.05)

    controller.trip()

    assert timed_out.wait(2.0)
    assert notices[-1].startswith("Timeout waiting for graceful shutdown")


def test_completion_prevents_forced_exit() -> None:
    controller, _token, completion, notices, timed_out = _controller(shutdown_timeout=5.0)

    controller.trip()
    completion.set()
    controller.watchdog.join(2.0)

    assert not controller.watchdog.is_alive()
    assert not timed_out.is_set()
    assert len(notices) == 1


def test_trip_after_completion_is_ignored() -> None:
    completion = threading.Event()
    completion.set()
    controller, token, _completion, notices, _timed_out = _controller(shutdown_timeout=5.0, completion=completion)

    assert controller.trip() is False
    assert token.cancelled is False
    assert notices == []
    assert controller.watchdog is None


def test_sigint_handler_is_installed_and_restored() -> None:
    previous = signal.getsignal(signal.SIGINT)
    controller, token, completion, notices, _timed_out = _controller(shutdown_timeout=5.0)

    with controller:
        assert signal.getsignal(signal.SIGINT) != previous
        signal.raise_signal(signal.SIGINT)
        assert token.cancelled is True

    assert signal.getsignal(signal.SIGINT) == previous
    completion.set()
    controller.watchdog.join(2.0)
    assert len(notices) == 1
