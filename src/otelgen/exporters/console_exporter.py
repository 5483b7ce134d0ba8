"""Console exporters: print every signal to stdout for quick verification."""

from opentelemetry.sdk._logs.export import ConsoleLogRecordExporter
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter
from opentelemetry.sdk.trace.export import ConsoleSpanExporter

from .exporter_set import ExporterSet


def create_console_exporters(metrics: bool = True, logs: bool = True) -> ExporterSet:
    """Console exporters for the enabled signals."""
    return ExporterSet(
        ConsoleSpanExporter(),
        ConsoleMetricExporter() if metrics else None,
        ConsoleLogRecordExporter() if logs else None,
    )
