"""Przechodzenie drzewa katalogów w głąb z limitem głębokości i anulowaniem."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import stat

from structlog import get_logger

from fs_metadata.core.cancellation import CancellationToken
from fs_metadata.core.models import FileRecord, LinkType, ScanStats
from fs_metadata.reporting.access_log import ErrorSink
from fs_metadata.reporting.exporter import RecordSink
from .classifier import PathClassifier
from .extractor import AttributeExtractor
from .probe import PlatformProbe, default_probe
from .scanner import MetadataScanner, VisitResult, WalkResult


@dataclass(slots=True)
class _WalkContext:
    sink: RecordSink
    token: CancellationToken
    stats: ScanStats


class FilesystemWalker(MetadataScanner):
    """Silnik przechodzenia drzewa.

    Węzeł na głębokości ``>= max_depth`` nie jest emitowany (katalog graniczny
    jest pomijany w całości, nie tylko jego zawartość). Dowiązania symboliczne,
    punkty montowania i junctions są zapisywane, ale nigdy nie są odwiedzane.
    """

    def __init__(
        self,
        *,
        max_depth: int,
        error_sink: ErrorSink,
        skip_hidden: bool = False,
        probe: PlatformProbe | None = None,
    ) -> None:
        if max_depth < 0:
            raise ValueError(f"Nieprawidłowa głębokość: {max_depth}")
        self._max_depth = max_depth
        self._skip_hidden = skip_hidden
        self._error_sink = error_sink
        self._probe = probe or default_probe()
        self._classifier = PathClassifier(self._probe)
        self._extractor = AttributeExtractor(self._probe)
        self._logger = get_logger(__name__)

    def scan(
        self,
        root: Path,
        sink: RecordSink,
        *,
        token: CancellationToken,
        stats: ScanStats | None = None,
    ) -> WalkResult:
        context = _WalkContext(sink=sink, token=token, stats=stats or ScanStats())
        root = root.absolute()
        self._logger.info(
            "walk-started",
            root=str(root),
            max_depth=self._max_depth,
            skip_hidden=self._skip_hidden,
            probe=self._probe.name,
        )

        result = self._visit_node(root, depth=0, parent_device=None, context=context)

        files, directories = context.stats.snapshot()
        cancelled = result is VisitResult.TERMINATE
        self._logger.info(
            "walk-finished",
            root=str(root),
            files=files,
            directories=directories,
            cancelled=cancelled,
        )
        return WalkResult(total_files=files, total_directories=directories, cancelled=cancelled)

    # ------------------------------------------------------------------
    # Obsługa węzłów
    # ------------------------------------------------------------------

    def _visit_node(
        self,
        path: Path,
        *,
        depth: int,
        parent_device: int | None,
        context: _WalkContext,
    ) -> VisitResult:
        if context.token.cancelled:
            return VisitResult.TERMINATE

        try:
            st = self._probe.lstat(path)
            is_directory = self._is_directory_entry(path, st)
        except OSError as exc:
            self._error_sink.log_error(f"Access denied to: {_display_name(path)} - {_error_text(exc)}")
            return VisitResult.CONTINUE

        if is_directory:
            return self._visit_directory(path, st, depth=depth, parent_device=parent_device, context=context)
        return self._visit_file(path, st, depth=depth, parent_device=parent_device, context=context)

    def _visit_directory(
        self,
        path: Path,
        st: os.stat_result,
        *,
        depth: int,
        parent_device: int | None,
        context: _WalkContext,
    ) -> VisitResult:
        if context.token.cancelled:
            return VisitResult.TERMINATE

        if depth >= self._max_depth:
            return VisitResult.SKIP_SUBTREE

        try:
            classification = self._classifier.classify(path, st, parent_device=parent_device)
            if self._skip_hidden and classification.is_hidden:
                return VisitResult.SKIP_SUBTREE
            record = self._extractor.extract(path, depth=depth, classification=classification, st=st)
        except OSError as exc:
            self._error_sink.log_error(
                f"Skipping directory due to access restrictions: {_display_name(path)} - {_error_text(exc)}"
            )
            return VisitResult.SKIP_SUBTREE

        if not classification.traversable:
            if classification.link_type is LinkType.SYMLINK:
                self._error_sink.log_error(f"Skipping symbolic link: {path}")
            elif classification.is_link:
                self._error_sink.log_error(f"Skipping mount point/junction: {path}")
            self._emit(record, context)
            return VisitResult.SKIP_SUBTREE

        # Katalog, którego nie da się otworzyć, nie trafia do wyników.
        try:
            children = self._probe.list_directory(path)
        except OSError as exc:
            self._error_sink.log_error(f"Access denied to: {_display_name(path)} - {_error_text(exc)}")
            return VisitResult.SKIP_SUBTREE

        self._emit(record, context)
        for child in children:
            result = self._visit_node(child, depth=depth + 1, parent_device=st.st_dev, context=context)
            if result is VisitResult.TERMINATE:
                return VisitResult.TERMINATE

        return VisitResult.CONTINUE

    def _visit_file(
        self,
        path: Path,
        st: os.stat_result,
        *,
        depth: int,
        parent_device: int | None,
        context: _WalkContext,
    ) -> VisitResult:
        if context.token.cancelled:
            return VisitResult.TERMINATE

        if depth >= self._max_depth:
            return VisitResult.CONTINUE

        try:
            classification = self._classifier.classify(path, st, parent_device=parent_device)
            if self._skip_hidden and classification.is_hidden:
                return VisitResult.CONTINUE
            record = self._extractor.extract(path, depth=depth, classification=classification, st=st)
        except OSError as exc:
            self._error_sink.log_error(
                f"Skipping file due to access restrictions: {_display_name(path)} - {_error_text(exc)}"
            )
            return VisitResult.CONTINUE

        if classification.link_type is LinkType.SYMLINK:
            self._error_sink.log_error(f"Skipping symbolic link file: {path}")

        self._emit(record, context)
        return VisitResult.CONTINUE

    # ------------------------------------------------------------------
    # Operacje pomocnicze
    # ------------------------------------------------------------------

    def _is_directory_entry(self, path: Path, st: os.stat_result) -> bool:
        if stat.S_ISDIR(st.st_mode):
            return True
        if not stat.S_ISLNK(st.st_mode):
            return False
        try:
            return stat.S_ISDIR(self._probe.stat(path).st_mode)
        except OSError:
            return False

    @staticmethod
    def _emit(record: FileRecord, context: _WalkContext) -> None:
        context.sink.add(record)
        if record.is_directory:
            context.stats.add_directory()
        else:
            context.stats.add_file()


def _display_name(path: Path) -> str:
    return path.name or str(path)


def _error_text(exc: OSError) -> str:
    return exc.strerror or str(exc)


__all__ = ["FilesystemWalker"]
