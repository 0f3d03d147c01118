"""Warstwa logiki domenowej: modele, anulowanie, postęp i orkiestracja skanu."""

from . import models
from .cancellation import CancellationController, CancellationToken
from .progress import ProgressReporter
from .scan_manager import ScanManager

__all__ = [
	"models",
	"CancellationController",
	"CancellationToken",
	"ProgressReporter",
	"ScanManager",
]
