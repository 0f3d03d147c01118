"""Moduły współdzielone: konfiguracja, logowanie, raporty błędów."""

from .config import ConfigurationError, ScanConfig, normalize_max_depth
from .error_reporting import ErrorReport, get_error_reports_dir, install_crash_reporting, write_error_report
from .logging import configure_logging

__all__ = [
	"ConfigurationError",
	"ScanConfig",
	"normalize_max_depth",
	"configure_logging",
	"ErrorReport",
	"get_error_reports_dir",
	"install_crash_reporting",
	"write_error_report",
]
