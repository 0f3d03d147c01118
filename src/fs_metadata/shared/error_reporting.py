from __future__ import annotations

import faulthandler
import json
import os
import platform
import sys
import threading
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from importlib import metadata
from pathlib import Path
from typing import Any, TextIO
from uuid import uuid4


_ENV_PREFIX = "FSMETA_"
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class ErrorReport:
    path: Path
    created_at: datetime


_ORIGINAL_SYS_EXCEPTHOOK = None
_FAULTHANDLER_FILE: TextIO | None = None


def get_error_reports_dir() -> Path:
    """Returns a writable directory for error reports.

    Priority:
    1) `FSMETA_ERROR_DIR` env var
    2) Windows: `%LOCALAPPDATA%/FsMetadata/error_reports` (or `%APPDATA%/...`)
    3) Other OS: `~/.fs_metadata/error_reports`
    """

    override = (os.getenv("FSMETA_ERROR_DIR") or "").strip()
    if override:
        base = Path(override)
    elif os.name == "nt":
        root = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA") or str(Path.home())
        base = Path(root) / "FsMetadata" / "error_reports"
    else:
        base = Path.home() / ".fs_metadata" / "error_reports"

    base.mkdir(parents=True, exist_ok=True)
    return base


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in _TRUTHY


def _safe_app_version() -> str:
    try:
        return metadata.version("fs-metadata-scanner")
    except metadata.PackageNotFoundError:
        return "unknown"


def _scanner_environment() -> dict[str, str]:
    # Only our own settings; the rest of the environment may hold secrets.
    return {key: value for key, value in os.environ.items() if key.startswith(_ENV_PREFIX)}


def write_error_report(
    error: BaseException,
    *,
    where: str,
    context: dict[str, Any] | None = None,
) -> ErrorReport:
    """Writes a timestamped error report and returns its path."""

    reports_dir = get_error_reports_dir()
    created_at = datetime.now(timezone.utc)
    stamp = created_at.strftime("%Y%m%d_%H%M%S")
    path = reports_dir / f"error_{stamp}_{uuid4().hex[:8]}.txt"

    header = {
        "created_at": created_at.isoformat(),
        "where": where,
        "app_version": _safe_app_version(),
        "python": sys.version.replace("\n", " "),
        "platform": platform.platform(),
        "cwd": str(Path.cwd()),
        "environment": _scanner_environment(),
        "context": dict(context or {}),
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    tb = "".join(traceback.format_exception(type(error), error, error.__traceback__))

    content = (
        "Filesystem Metadata Scanner Error Report\n"
        "========================================\n\n"
        + json.dumps(header, ensure_ascii=False, indent=2, default=str)
        + "\n\nTraceback\n---------\n"
        + tb
    )

    path.write_text(content, encoding="utf-8", errors="replace")
    return ErrorReport(path=path, created_at=created_at)


def install_crash_reporting(*, enable_faulthandler: bool = True) -> bool:
    """Installs best-effort crash reporting; returns True when hooks were installed.

    Covers unhandled exceptions in the main thread (`sys.excepthook`), in
    background threads such as the progress reporter (`threading.excepthook`)
    and native crashes via `faulthandler`.

    Disabled with `FSMETA_DISABLE_CRASH_HOOKS=1`, and under pytest unless
    `FSMETA_ENABLE_CRASH_HOOKS=1`.
    """

    if _env_flag("FSMETA_DISABLE_CRASH_HOOKS"):
        return False
    if os.getenv("PYTEST_CURRENT_TEST") and not _env_flag("FSMETA_ENABLE_CRASH_HOOKS"):
        return False

    global _ORIGINAL_SYS_EXCEPTHOOK, _FAULTHANDLER_FILE
    if _ORIGINAL_SYS_EXCEPTHOOK is None:
        _ORIGINAL_SYS_EXCEPTHOOK = sys.excepthook
    original_sys_hook = _ORIGINAL_SYS_EXCEPTHOOK
    original_threading_hook = threading.excepthook

    def _sys_excepthook(exc_type, exc, tb):  # type: ignore[no-untyped-def]
        try:
            write_error_report(exc, where="sys.excepthook", context={"exc_type": exc_type.__name__})
        except OSError:
            pass
        original_sys_hook(exc_type, exc, tb)

    def _threading_excepthook(args):  # type: ignore[no-untyped-def]
        if args.exc_value is not None:
            try:
                write_error_report(
                    args.exc_value,
                    where="threading.excepthook",
                    context={"thread": getattr(args.thread, "name", None)},
                )
            except OSError:
                pass
        original_threading_hook(args)

    sys.excepthook = _sys_excepthook
    threading.excepthook = _threading_excepthook

    if enable_faulthandler and _FAULTHANDLER_FILE is None:
        try:
            reports_dir = get_error_reports_dir()
            stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            _FAULTHANDLER_FILE = open(
                reports_dir / f"fatal_{stamp}_{uuid4().hex[:8]}.log", "w", encoding="utf-8", errors="replace"
            )
            faulthandler.enable(file=_FAULTHANDLER_FILE, all_threads=True)
        except OSError:
            _FAULTHANDLER_FILE = None

    return True
