"""Per-signal exporter bundle handed to the telemetry pipeline."""

from typing import NamedTuple

from opentelemetry.sdk._logs.export import LogRecordExporter
from opentelemetry.sdk.metrics.export import MetricExporter
from opentelemetry.sdk.trace.export import SpanExporter


class ExporterSet(NamedTuple):
    """One exporter per signal; metric/log entries are None when that signal is disabled."""

    trace: SpanExporter
    metric: MetricExporter | None
    log: LogRecordExporter | None
