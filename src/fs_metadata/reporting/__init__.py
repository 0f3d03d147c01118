"""Zapis rekordów metadanych i dziennik błędów dostępu."""

from .access_log import AccessLogWriter, ErrorSink
from .default import BufferedRecordSink, DefaultRecordExporter
from .exporter import COLUMNS, ExportFormat, RecordExporter, RecordSink, SinkCommitError

__all__ = [
    "AccessLogWriter",
    "BufferedRecordSink",
    "COLUMNS",
    "DefaultRecordExporter",
    "ErrorSink",
    "ExportFormat",
    "RecordExporter",
    "RecordSink",
    "SinkCommitError",
]
