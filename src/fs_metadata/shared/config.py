"""Konfiguracja skanowania."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog


MIN_DEPTH = 1
MAX_DEPTH = 20
DEFAULT_DEPTH = 3


class ConfigurationError(ValueError):
    """Nieprawidłowe parametry skanowania wykryte przed rozpoczęciem przejścia."""


def normalize_max_depth(value: object) -> int:
    """Zwraca głębokość z zakresu 1-20; w pozostałych przypadkach 3 z ostrzeżeniem."""

    logger = structlog.get_logger(__name__)
    if value is None:
        return DEFAULT_DEPTH
    try:
        depth = int(str(value).strip())
    except ValueError:
        logger.warning("max-depth-invalid", value=value, default=DEFAULT_DEPTH)
        return DEFAULT_DEPTH
    if not MIN_DEPTH <= depth <= MAX_DEPTH:
        logger.warning(
            "max-depth-out-of-range",
            value=depth,
            minimum=MIN_DEPTH,
            maximum=MAX_DEPTH,
            default=DEFAULT_DEPTH,
        )
        return DEFAULT_DEPTH
    return depth


@dataclass(frozen=True, slots=True)
class ScanConfig:
    """Parametry pojedynczego skanu."""

    root: Path
    max_depth: int = DEFAULT_DEPTH
    skip_hidden: bool = False
    output: Path = field(default_factory=lambda: Path("filesystem_metadata.json"))
    export_format: str = "json"
    access_log: Path = field(default_factory=lambda: Path("access_errors.log"))
    progress_interval: float = 5.0
    shutdown_timeout: float = 15.0

    @classmethod
    def default(cls) -> "ScanConfig":
        """Tworzy domyślną konfigurację (katalog domowy użytkownika)."""

        return cls(root=Path.home())

    def validate(self) -> Path:
        """Sprawdza parametry i zwraca bezwzględną ścieżkę korzenia skanu."""

        if not MIN_DEPTH <= self.max_depth <= MAX_DEPTH:
            raise ConfigurationError(f"Głębokość musi mieścić się w zakresie {MIN_DEPTH}-{MAX_DEPTH}: {self.max_depth}")
        root = self.root.expanduser().absolute()
        if not root.exists():
            raise ConfigurationError(f"Directory '{self.root}' does not exist.")
        if not root.is_dir():
            raise ConfigurationError(f"'{self.root}' is not a directory.")
        if self.progress_interval <= 0 or self.shutdown_timeout <= 0:
            raise ConfigurationError("Interwał postępu i limit zamykania muszą być dodatnie")
        return root
