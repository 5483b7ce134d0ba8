"""Shared fixtures: SDK pipeline backed by in-memory exporters, zero-length pauses."""

import pytest

# InMemoryLogExporter was renamed to InMemoryLogRecordExporter in newer SDKs.
try:
    from opentelemetry.sdk._logs.export import InMemoryLogRecordExporter
except ImportError:
    from opentelemetry.sdk._logs.export import (
        InMemoryLogExporter as InMemoryLogRecordExporter,
    )
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from otelgen.boundary import AgentBoundary, UnitOfWork
from otelgen.emission import Emission
from otelgen.exporters import ExporterSet
from otelgen.generators import LogGenerator, MetricGenerator, TraceGenerator
from otelgen.pacing import Pacer
from otelgen.pipeline import TelemetryPipeline, build_resource


class RecordingBoundary(AgentBoundary):
    """Boundary that remembers every enter/exit signal."""

    def __init__(self) -> None:
        super().__init__()
        self.signals: list[tuple[str, str]] = []

    def on_enter(self, unit: UnitOfWork) -> None:
        self.signals.append(("enter", unit.name))

    def on_exit(self, unit: UnitOfWork, error: BaseException | None) -> None:
        self.signals.append(("exit", unit.name))


@pytest.fixture(autouse=True)
def _no_otel_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's OTEL_* / OTELGEN_* env out of the tests."""
    for name in (
        "OTELGEN_ITERATIONS",
        "OTELGEN_INTERVAL_MS",
        "OTELGEN_PAUSE_SCALE",
        "OTELGEN_ROOT",
        "OTEL_SERVICE_NAME",
        "OTEL_EXPORTER_OTLP_ENDPOINT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def span_exporter():
    return InMemorySpanExporter()


@pytest.fixture
def log_exporter():
    return InMemoryLogRecordExporter()


@pytest.fixture
def metric_reader():
    return InMemoryMetricReader()


@pytest.fixture
def pipeline(span_exporter, log_exporter, metric_reader):
    pipeline = TelemetryPipeline(
        ExporterSet(span_exporter, None, log_exporter),
        resource=build_resource("otelgen-test"),
        batch=False,
        metric_reader=metric_reader,
    )
    yield pipeline
    pipeline.shutdown()


@pytest.fixture
def pacer():
    return Pacer(pause_scale=0)


@pytest.fixture
def boundary():
    return RecordingBoundary()


@pytest.fixture
def emissions() -> list[Emission]:
    return []


@pytest.fixture
def trace_generator(pipeline, pacer, boundary, emissions):
    return TraceGenerator(pipeline.tracer_provider, pacer, boundary, emissions.append)


@pytest.fixture
def log_generator(pipeline, pacer, boundary, emissions):
    return LogGenerator(pipeline.logger_provider, pacer, boundary, emissions.append)


@pytest.fixture
def metric_generator(pipeline, emissions):
    return MetricGenerator(pipeline.meter_provider, emissions.append)


def finished_log_records(log_exporter):
    """Unwrap exported items (LogData or ReadableLogRecord) to their log records."""
    return [item.log_record for item in log_exporter.get_finished_logs()]


def collect_data_points(metric_reader) -> dict:
    """Map metric name -> list of data points from one collection."""
    data = metric_reader.get_metrics_data()
    points: dict = {}
    if data is None:
        return points
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                points[metric.name] = list(metric.data.data_points)
    return points
