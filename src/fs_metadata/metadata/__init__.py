"""Przechodzenie drzewa katalogów i zbieranie metadanych węzłów."""

from .classifier import PathClassifier
from .extractor import AttributeExtractor, file_extension
from .probe import PlatformProbe, PosixProbe, WindowsProbe, default_probe
from .scanner import MetadataScanner, VisitResult, WalkResult
from .walker import FilesystemWalker

__all__ = [
    "AttributeExtractor",
    "FilesystemWalker",
    "MetadataScanner",
    "PathClassifier",
    "PlatformProbe",
    "PosixProbe",
    "VisitResult",
    "WalkResult",
    "WindowsProbe",
    "default_probe",
    "file_extension",
]
