"""Telemetry exporters for various backends."""

from .console_exporter import create_console_exporters
from .exporter_set import ExporterSet
from .file_exporter import (
    FileLogExporter,
    FileMetricExporter,
    FileSpanExporter,
    create_file_exporters,
)
from .otlp_exporter import (
    create_otlp_exporters,
    create_otlp_log_exporter,
    create_otlp_metric_exporter,
    create_otlp_trace_exporter,
)

__all__ = [
    "ExporterSet",
    "create_otlp_exporters",
    "create_otlp_trace_exporter",
    "create_otlp_metric_exporter",
    "create_otlp_log_exporter",
    "create_file_exporters",
    "FileSpanExporter",
    "FileMetricExporter",
    "FileLogExporter",
    "create_console_exporters",
]
