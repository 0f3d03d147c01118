"""Klasyfikacja węzłów: rodzaj, dowiązania, punkty montowania, ukrycie."""

from __future__ import annotations

import os
from pathlib import Path
import stat
from typing import Optional

from fs_metadata.core.models import Classification, LinkType
from .probe import PlatformProbe, default_probe


class PathClassifier:
    """Ustala rodzaj węzła i to, czy jest ukryty."""

    def __init__(self, probe: PlatformProbe | None = None) -> None:
        self._probe = probe or default_probe()

    @property
    def probe(self) -> PlatformProbe:
        return self._probe

    def classify(
        self,
        path: Path,
        st: os.stat_result | None = None,
        *,
        parent_device: int | None = None,
    ) -> Classification:
        """Klasyfikuje węzeł.

        `st` to wynik `lstat` (odczytywany, gdy nie podano). `parent_device`
        to identyfikator urządzenia katalogu nadrzędnego; dla korzenia skanu
        jest ustalany na podstawie `path.parent`.
        """

        if st is None:
            st = self._probe.lstat(path)

        is_symlink = stat.S_ISLNK(st.st_mode)
        is_directory = self._points_to_directory(path) if is_symlink else stat.S_ISDIR(st.st_mode)

        if is_symlink:
            link_type = LinkType.SYMLINK
        elif is_directory and self.is_mount_point_or_junction(path, st, parent_device=parent_device):
            link_type = self._probe.boundary_link_type
        else:
            link_type = LinkType.NONE

        return Classification(
            is_directory=is_directory,
            link_type=link_type,
            is_hidden=self.is_hidden(path, st),
        )

    def is_hidden(self, path: Path, st: os.stat_result | None = None) -> bool:
        name = path.name
        if not name:
            return False
        if name.startswith("."):
            return True
        try:
            if st is None:
                st = self._probe.lstat(path)
        except OSError:
            return False
        return self._probe.has_hidden_attribute(st)

    def is_mount_point_or_junction(
        self,
        path: Path,
        st: os.stat_result,
        *,
        parent_device: int | None = None,
    ) -> bool:
        """Granica urządzenia lub punkt reparse; błąd odczytu oznacza "nie"."""

        try:
            if self._probe.is_reparse_boundary(path, st):
                return True
            if parent_device is None:
                parent_device = self._parent_device(path)
            if parent_device is None:
                return False
            return st.st_dev != parent_device
        except OSError:
            return False

    def _parent_device(self, path: Path) -> Optional[int]:
        parent = path.parent
        if parent == path:
            return None
        return self._probe.stat(parent).st_dev

    def _points_to_directory(self, path: Path) -> bool:
        try:
            return stat.S_ISDIR(self._probe.stat(path).st_mode)
        except OSError:
            return False


__all__ = ["PathClassifier"]
