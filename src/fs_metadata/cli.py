"""Interfejs wiersza poleceń do uruchamiania skanowania."""

from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser, Namespace
from dataclasses import replace
from pathlib import Path

import structlog

from fs_metadata.core import ScanManager
from fs_metadata.core.cancellation import EXIT_INTERRUPTED
from fs_metadata.metadata import FilesystemWalker
from fs_metadata.reporting import AccessLogWriter, BufferedRecordSink, ExportFormat, SinkCommitError
from fs_metadata.shared import (
    ConfigurationError,
    ScanConfig,
    configure_logging,
    install_crash_reporting,
    normalize_max_depth,
    write_error_report,
)


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="fs-metadata-scan",
        description="Zbiera metadane plików i katalogów z wybranego drzewa katalogów.",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Katalog, od którego zaczyna się skanowanie (domyślnie: katalog domowy)",
    )
    parser.add_argument(
        "--depth",
        default=None,
        help="Maksymalna głębokość skanowania, 1-20 (domyślnie: 3)",
    )
    parser.add_argument(
        "--skip-hidden",
        action="store_true",
        help="Pomija pliki i katalogi ukryte oraz systemowe",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("filesystem_metadata.json"),
        help="Ścieżka do pliku wynikowego (domyślnie: filesystem_metadata.json)",
    )
    parser.add_argument(
        "--format",
        choices=[fmt.value for fmt in ExportFormat],
        default=ExportFormat.JSON.value,
        help="Format pliku wynikowego (domyślnie: json)",
    )
    parser.add_argument(
        "--access-log",
        type=Path,
        default=Path("access_errors.log"),
        help="Plik dziennika błędów dostępu (domyślnie: access_errors.log)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Wyświetla szczegółowe logi",
    )
    return parser


def _build_config(args: Namespace) -> ScanConfig:
    defaults = ScanConfig.default()
    return replace(
        defaults,
        root=args.root if args.root is not None else defaults.root,
        max_depth=normalize_max_depth(args.depth),
        skip_hidden=args.skip_hidden,
        output=args.output,
        export_format=args.format,
        access_log=args.access_log,
    )


def _run_scan(args: Namespace) -> int:
    logger = structlog.get_logger(__name__)
    config = _build_config(args)

    try:
        root = config.validate()
    except ConfigurationError as exc:
        logger.error("invalid-configuration", error=str(exc))
        return 1

    logger.info(
        "starting-scan",
        root=str(root),
        max_depth=config.max_depth,
        skip_hidden=config.skip_hidden,
        output=str(config.output),
    )

    error_sink = AccessLogWriter.open(
        config.access_log,
        root=root,
        max_depth=config.max_depth,
        skip_hidden=config.skip_hidden,
    )
    record_sink = BufferedRecordSink(config.output, ExportFormat(config.export_format))
    walker = FilesystemWalker(
        max_depth=config.max_depth,
        skip_hidden=config.skip_hidden,
        error_sink=error_sink,
    )
    manager = ScanManager(
        scanner=walker,
        record_sink=record_sink,
        error_sink=error_sink,
        progress_interval=config.progress_interval,
        shutdown_timeout=config.shutdown_timeout,
    )

    try:
        outcome = manager.scan(root)
    except SinkCommitError as exc:
        report = write_error_report(exc, where="cli.commit", context={"root": str(root), "output": str(config.output)})
        logger.error("database-insertion-failed", error=str(exc), report=str(report.path))
        return 1
    except Exception as exc:  # pragma: no cover - obsługa błędów środowiskowych
        report = write_error_report(exc, where="cli.scan", context={"root": str(root)})
        logger.exception("scan-failed", error=str(exc), report=str(report.path))
        return 1

    logger.info(
        "scan-complete",
        directories=outcome.total_directories,
        files=outcome.total_files,
        scan_seconds=round(outcome.scan_seconds, 2),
        items_per_second=round(outcome.items_per_second, 1),
        insert_seconds=round(outcome.commit_seconds, 2),
        output=str(config.output),
        access_log=str(error_sink.log_path) if error_sink.log_path else "stderr",
        partial=outcome.cancelled,
    )
    return EXIT_INTERRUPTED if outcome.cancelled else 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    install_crash_reporting()
    return _run_scan(args)


if __name__ == "__main__":
    sys.exit(main())
